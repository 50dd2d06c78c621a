"""
Agenda de turnos: availability and booking engine for medical appointments.
"""

__version__ = "0.1.0"
