"""
Shared fixtures for review picker tests.

FakeBlobStore is an in-memory versioned store with the same conditional-write
rule as the content API: a put whose expected version is not the current one
raises ConflictError.
"""
import asyncio
import hashlib
import json
import os
import sys

import pytest

# Make the package importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from review_picker.errors import ConflictError, NotFoundError
from review_picker.github_client import RemoteBlob, VersionToken
from review_picker.settings import Settings


class FakeBlobStore:
    """Single-file versioned store. Version token = sha1 of content."""

    def __init__(self, content: str, path: str = "reviews.json", ref: str = "main"):
        self.path = path
        self.ref = ref
        self.content = content
        self.version = self._version_of(content)
        self.fetch_calls = 0
        self.put_calls = []
        self.history = [self.version]

    @staticmethod
    def _version_of(content: str) -> VersionToken:
        return VersionToken(hashlib.sha1(content.encode("utf-8")).hexdigest())

    def _check_target(self, path: str, ref: str) -> None:
        if path != self.path or ref != self.ref:
            raise NotFoundError(f"{path}@{ref} not found", status_code=404)

    async def fetch(self, path: str, ref: str) -> RemoteBlob:
        self._check_target(path, ref)
        self.fetch_calls += 1
        blob = RemoteBlob(content=self.content, version=self.version)
        # Yield so concurrent draws can interleave after reading the same version
        await asyncio.sleep(0)
        return blob

    async def put(self, path, content, expected_version, ref, message) -> VersionToken:
        self._check_target(path, ref)
        self.put_calls.append({"content": content, "expected": expected_version, "message": message})
        if expected_version != self.version:
            raise ConflictError(f"{path} is at {self.version}, expected {expected_version}", status_code=409)
        self.content = content
        # Distinct token per commit even if the content repeats
        self.version = VersionToken(f"{self._version_of(content).value}-{len(self.history)}")
        self.history.append(self.version)
        return self.version

    def reviews(self):
        return json.loads(self.content)["reviews"]


def reviews_document(reviews) -> str:
    return json.dumps({"reviews": reviews}, indent=2)


@pytest.fixture
def settings():
    return Settings(
        github_token="test-token-not-real",
        github_owner="octo",
        github_repo="reviews-repo",
    )


@pytest.fixture
def make_store():
    def _make(reviews=None, raw=None):
        return FakeBlobStore(raw if raw is not None else reviews_document(reviews or []))
    return _make


@pytest.fixture
def first_index():
    """Deterministic picker: always the first element."""
    return lambda length: 0


@pytest.fixture
def last_index():
    return lambda length: length - 1
