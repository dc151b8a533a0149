"""
Prometheus Metrics for WhereToChill

Centralized metric definitions for:
- Embed SDK loading (single-flight resource loader)
- Location submissions
- Moderation actions
- Place search

All components import metrics from this module to ensure consistency.
"""

import logging

from prometheus_client import Counter, Info

logger = logging.getLogger(__name__)

# =============================================================================
# SERVICE INFORMATION
# =============================================================================

service_info = Info("chill", "WhereToChill Service Information")
service_info.info(
    {
        "version": "0.1.0",
        "description": "Moderated map of user-submitted chill spots",
    }
)

# =============================================================================
# EMBED RESOURCE LOADER
# =============================================================================

embed_resource_requests_total = Counter(
    "chill_embed_resource_requests_total",
    "Resource requests by how they were served",
    ["path"],  # fetch, waiting, cached_ready, cached_failed, adopted
)

embed_resource_loads_total = Counter(
    "chill_embed_resource_loads_total",
    "Resource loads settled",
    ["outcome"],  # ready, failed
)

# =============================================================================
# SUBMISSIONS & MODERATION
# =============================================================================

submissions_total = Counter(
    "chill_submissions_total",
    "Location submissions by outcome",
    ["outcome"],  # created, invalid, upload_failed, insert_failed
)

moderation_actions_total = Counter(
    "chill_moderation_actions_total",
    "Moderation actions by outcome",
    ["action", "outcome"],
)

# =============================================================================
# PLACE SEARCH
# =============================================================================

place_search_total = Counter(
    "chill_place_search_total",
    "Place search calls by upstream status",
    ["status"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_resource_request(path: str) -> None:
    """Record how a resource request was served."""
    embed_resource_requests_total.labels(path=path).inc()


def record_resource_settled(outcome: str) -> None:
    """Record a resource load reaching a terminal state."""
    embed_resource_loads_total.labels(outcome=outcome).inc()


def record_submission(outcome: str) -> None:
    """Record a submission attempt."""
    submissions_total.labels(outcome=outcome).inc()


def record_moderation_action(action: str, success: bool) -> None:
    """Record a moderation action (approve, unapprove, remove, edit, list)."""
    moderation_actions_total.labels(
        action=action, outcome="success" if success else "error"
    ).inc()


def record_place_search(status: str) -> None:
    """Record a place-search call."""
    place_search_total.labels(status=status).inc()
