"""
Scheduling Domain

Availability resolution, booking, reprogramming and the appointment
lifecycle of practitioners' recurring schedules.
"""
