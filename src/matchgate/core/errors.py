"""Exception types shared across matchgate services."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a required server secret is missing.

    This is fatal: services never fall back to an unkeyed construction.
    """


class IdentityNotFound(LookupError):
    """Raised when an opaque id does not resolve within the caller's scope."""


class AccessDenied(PermissionError):
    """Raised when the relationship between two identities is insufficient."""
