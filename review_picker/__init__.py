"""
Review Picker - draw random reviews from a JSON list kept in a GitHub repo.

Each draw is a read-modify-write against the file's blob sha; concurrent
draws are serialized by the content API, not by this process.
"""
from review_picker.drawer import DrawResult, ReviewDrawer, parse_reviews, serialize_reviews
from review_picker.errors import (
    AuthError,
    ConfigError,
    ConflictError,
    MalformedDataError,
    NotFoundError,
    RemoteStoreError,
    ReviewPickerError,
    TransientError,
)
from review_picker.github_client import BlobStore, GitHubContentClient, RemoteBlob, VersionToken
from review_picker.selection import SelectionResult, select_and_remove
from review_picker.settings import Settings

__all__ = [
    "AuthError",
    "BlobStore",
    "ConfigError",
    "ConflictError",
    "DrawResult",
    "GitHubContentClient",
    "MalformedDataError",
    "NotFoundError",
    "RemoteBlob",
    "RemoteStoreError",
    "ReviewDrawer",
    "ReviewPickerError",
    "Settings",
    "SelectionResult",
    "TransientError",
    "VersionToken",
    "parse_reviews",
    "select_and_remove",
    "serialize_reviews",
]
