"""
Observability module for WhereToChill.

Provides:
- Structured JSON logging (logging.py)
- Prometheus counters (metrics.py)
"""

from .logging import (
    setup_logging,
    get_logger,
    LogContext,
    set_trace_id,
    get_trace_id,
    clear_trace_id,
)

from .metrics import (
    record_moderation_action,
    record_place_search,
    record_resource_request,
    record_resource_settled,
    record_submission,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "LogContext",
    "set_trace_id",
    "get_trace_id",
    "clear_trace_id",
    # Metrics helpers
    "record_resource_request",
    "record_resource_settled",
    "record_submission",
    "record_moderation_action",
    "record_place_search",
]
