"""
Domain exceptions for the service layer.

Enrichment failures never reach callers as exceptions; these cover the
places where a caller has to react (primary record persistence) or where a
failure is logged and dropped (aggregate updates).
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Entity not found."""

    def __init__(self, entity: str, identifier: str | None = None):
        self.entity = entity
        self.identifier = identifier
        message = f"{entity} not found"
        if identifier:
            message = f"{entity} with identifier '{identifier}' not found"
        super().__init__(message)


class PersistenceError(ServiceError):
    """The artwork or review document could not be written."""

    def __init__(self, entity: str, reason: str | None = None):
        self.entity = entity
        self.reason = reason
        message = f"Failed to save {entity}"
        if reason:
            message = f"Failed to save {entity}: {reason}"
        super().__init__(message)


class AggregateWriteError(ServiceError):
    """The artist aggregate transaction could not be committed."""

    def __init__(self, user_id: str, identity_url: str, reason: str | None = None):
        self.user_id = user_id
        self.identity_url = identity_url
        message = f"Could not update artist count for '{identity_url}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
