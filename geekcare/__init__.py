"""GeekCare - telehealth API for members and physicians"""
