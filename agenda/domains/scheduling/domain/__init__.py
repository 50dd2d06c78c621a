"""
Scheduling Domain Layer
"""
