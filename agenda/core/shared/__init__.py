"""
Shared utilities used across domains.
"""

from agenda.core.shared.logger import (
    ColoredFormatter,
    CorrelationIdFilter,
    JSONFormatter,
    correlation_id_var,
    setup_logging,
)

__all__ = [
    "ColoredFormatter",
    "CorrelationIdFilter",
    "JSONFormatter",
    "correlation_id_var",
    "setup_logging",
]
