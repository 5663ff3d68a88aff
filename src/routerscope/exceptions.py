"""Exception hierarchy for RouterScope."""

from __future__ import annotations


class RouterScopeError(Exception):
    """Base exception for all RouterScope errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class InvalidArgumentError(RouterScopeError):
    """A required argument was missing or invalid."""


class TargetNotFoundError(RouterScopeError):
    """No target with the given identifier is registered."""


class BackendLoadError(RouterScopeError):
    """The collaborator backend could not be imported or built."""
