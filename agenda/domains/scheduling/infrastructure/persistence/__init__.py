"""
Scheduling persistence adapters.
"""
