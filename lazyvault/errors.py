"""Error taxonomy shared by the store client, discovery, and CLI.

Configuration errors are fatal. Store errors are recovered per branch during
discovery and per selection in the interactive view.
"""

from __future__ import annotations


class LazyVaultError(Exception):
    """Base class for every error the CLI reports as a one-line message."""


class ConfigurationError(LazyVaultError):
    """A required configuration value is missing."""


class StoreError(LazyVaultError):
    """The secret store could not satisfy a request."""


class AccessDenied(StoreError):
    """The store refused to list or read a path (HTTP 403)."""


class RequestFailed(StoreError):
    """Transport failure or an unexpected HTTP status."""


class DecodeFailed(StoreError):
    """The store answered with a body that is not the expected JSON shape."""


__all__ = [
    "AccessDenied",
    "ConfigurationError",
    "DecodeFailed",
    "LazyVaultError",
    "RequestFailed",
    "StoreError",
]
