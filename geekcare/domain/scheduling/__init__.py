"""Scheduling domain - physician schedules and appointment slot availability"""
