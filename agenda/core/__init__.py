"""
Core architecture components for the scheduling service
"""
