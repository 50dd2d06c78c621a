"""
Scheduling API

HTTP surface of the scheduling domain.
"""

from agenda.domains.scheduling.api.routes import router

__all__ = ["router"]
