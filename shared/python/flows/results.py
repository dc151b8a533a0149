"""Outcome objects returned by the flows instead of raising collaborator errors."""

from typing import Optional

from pydantic import BaseModel, Field

from places.google import PlaceSuggestion


class ActionResult(BaseModel):
    """Success flag plus a user-facing error message on failure."""

    success: bool
    error: Optional[str] = None


class SubmissionResult(ActionResult):
    record_id: Optional[str] = None
    message: Optional[str] = None
    field_errors: dict[str, str] = Field(default_factory=dict)


class SearchResult(ActionResult):
    suggestions: list[PlaceSuggestion] = Field(default_factory=list)
