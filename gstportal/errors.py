from __future__ import annotations


class PortalError(Exception):
    """Base class for errors raised by gstportal services."""


class DocumentValidationError(PortalError, ValueError):
    """Input rejected before anything was written."""


class NotFoundError(PortalError, LookupError):
    pass


class StatusTransitionError(PortalError, ValueError):
    pass


class AuthenticationError(PortalError):
    pass


class StoreError(PortalError):
    """The persistence layer failed; the user only sees a generic message."""

    user_message = "Something went wrong while talking to the database. Please try again."
