"""
HTTP layer: router aggregation, middleware and exception handlers.
"""
