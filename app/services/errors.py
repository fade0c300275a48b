"""Workflow error taxonomy. Each error carries the HTTP status the API layer responds with."""
from typing import Any


class WorkflowError(Exception):
    """Base class for errors raised by promotion and moderation workflows."""

    status_code = 500

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)


class InvalidArgument(WorkflowError):
    """Missing or malformed input."""
    status_code = 400


class NotFound(WorkflowError):
    """Referenced record is absent, or not owned by the caller."""
    status_code = 404


class Conflict(WorkflowError):
    """State invariant violated (duplicate active promotion, re-review, terminal state)."""
    status_code = 400


class DependencyFailure(WorkflowError):
    """Database or storage call failed."""
    status_code = 500


class Unauthorized(WorkflowError):
    status_code = 401


class Forbidden(WorkflowError):
    status_code = 403
