"""Shared validation and time helpers"""
