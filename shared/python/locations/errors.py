"""Exceptions raised by the location domain and its collaborators."""

from typing import Optional


class ChillSpotError(Exception):
    """Base class for all location domain errors."""


class InvalidRecordError(ChillSpotError, ValueError):
    """A location violates a field invariant (empty name, bad tag, ...)."""


class InvalidTransitionError(ChillSpotError):
    """A lifecycle transition is not allowed from the record's current state."""

    def __init__(self, transition: str, state: Optional[str]):
        self.transition = transition
        self.state = state
        super().__init__(f"Cannot {transition} a location in state {state!r}")


class CollaboratorError(ChillSpotError):
    """An external collaborator (datastore, photo storage) reported a failure."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class StoreError(CollaboratorError):
    """Datastore select/insert/update/delete failed."""


class UploadError(CollaboratorError):
    """Photo upload failed."""
