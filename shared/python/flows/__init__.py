"""
User-facing flows: submitting a spot, moderating submissions, browsing the map.

Flows never raise collaborator errors; they return result objects.
"""

from .results import ActionResult, SearchResult, SubmissionResult
from .submission import PhotoUpload, SubmissionFlow, SubmissionForm
from .moderation import EditSession, ModerationFlow
from .explore import ExploreFlow

__all__ = [
    "ActionResult",
    "SearchResult",
    "SubmissionResult",
    "PhotoUpload",
    "SubmissionFlow",
    "SubmissionForm",
    "EditSession",
    "ModerationFlow",
    "ExploreFlow",
]
