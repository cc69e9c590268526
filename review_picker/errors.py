"""
Error taxonomy for the review picker.

Remote store failures share RemoteStoreError so the HTTP layer can treat them
uniformly; MalformedDataError is kept separate because it gets its own message.
"""
from typing import Optional


class ReviewPickerError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(ReviewPickerError):
    """Required configuration is missing or invalid. Fatal at startup."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = missing or []


class MalformedDataError(ReviewPickerError):
    """The remote file is not valid JSON (or not a file at all)."""


class RemoteStoreError(ReviewPickerError):
    """The remote content store rejected or failed a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(RemoteStoreError):
    """Credential rejected (401/403)."""


class NotFoundError(RemoteStoreError):
    """Configured path or ref does not exist."""


class TransientError(RemoteStoreError):
    """Network failure, timeout, rate limit or 5xx from the store."""


class ConflictError(RemoteStoreError):
    """Write rejected because the version token is stale (lost race)."""
