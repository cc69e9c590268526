"""
GitHub content API client - the remote blob store.

Wraps the two calls the drawer needs:
- fetch: GET /repos/{owner}/{repo}/contents/{path}?ref=...  -> content + blob sha
- put:   PUT /repos/{owner}/{repo}/contents/{path} with the expected sha

The blob sha is the version token. GitHub rejects a PUT whose sha does not
match the current blob with 409, which is how concurrent draws are detected.
No retries here: a failed call surfaces as one of the errors in errors.py.
"""
import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from review_picker.errors import (
    AuthError,
    ConflictError,
    MalformedDataError,
    NotFoundError,
    RemoteStoreError,
    TransientError,
)
from review_picker.http_config import create_async_client
from review_picker.settings import Settings

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = "review-picker/1.0"


@dataclass(frozen=True)
class VersionToken:
    """Opaque version of a remote blob. Only ever compared for equality."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RemoteBlob:
    content: str
    version: VersionToken


class BlobStore(Protocol):
    """What the drawer needs from a versioned remote store."""

    async def fetch(self, path: str, ref: str) -> RemoteBlob:
        ...

    async def put(
        self,
        path: str,
        content: str,
        expected_version: VersionToken,
        ref: str,
        message: str,
    ) -> VersionToken:
        ...


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return body.get("message") or response.text
    return response.text


def _raise_for_status(response: httpx.Response, path: str, action: str) -> None:
    """Map a non-2xx GitHub response onto the error taxonomy."""
    status = response.status_code
    if status < 300:
        return
    detail = _error_message(response)
    label = f"{action} {path} failed ({status}): {detail}"
    if status in (401, 403):
        # 403 with an exhausted quota is a rate limit, not a bad credential
        if status == 403 and response.headers.get("x-ratelimit-remaining") == "0":
            raise TransientError(label, status_code=status)
        raise AuthError(label, status_code=status)
    if status == 404:
        raise NotFoundError(label, status_code=status)
    if status == 409:
        raise ConflictError(label, status_code=status)
    if status == 429 or status >= 500:
        raise TransientError(label, status_code=status)
    raise RemoteStoreError(label, status_code=status)


class GitHubContentClient:
    """
    Versioned blob access backed by a GitHub repository.

    One pooled httpx.AsyncClient is created lazily and reused across requests;
    call aclose() on shutdown. Pass http_client to inject a preconfigured
    client (tests use httpx.MockTransport).
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = http_client
        self._client_lock = asyncio.Lock()

    @property
    def _contents_url(self) -> str:
        return f"/repos/{self.settings.github_owner}/{self.settings.github_repo}/contents"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.settings.github_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client."""
        if self._client is None or self._client.is_closed:
            async with self._client_lock:
                if self._client is None or self._client.is_closed:
                    self._client = create_async_client(
                        self.settings.github_api_url,
                        timeout=self.settings.request_timeout,
                    )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _request(self, method: str, path: str, action: str, **kwargs) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.request(
                method,
                f"{self._contents_url}/{path}",
                headers=self._headers(),
                **kwargs,
            )
        except httpx.RequestError as e:
            raise TransientError(f"{action} {path} failed: {e}") from e
        _raise_for_status(response, path, action)
        return response

    async def fetch(self, path: str, ref: str) -> RemoteBlob:
        """Read the file at path on ref. Returns decoded text and its blob sha."""
        response = await self._request("GET", path, "fetch", params={"ref": ref})
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedDataError(f"Content API returned non-JSON for {path}") from e

        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise MalformedDataError(f"{path} is not a file")
        if data.get("encoding") != "base64" or "sha" not in data:
            raise MalformedDataError(f"{path} has no inline base64 content")

        try:
            content = base64.b64decode(data.get("content") or "").decode("utf-8")
        except (ValueError, TypeError, UnicodeDecodeError) as e:
            raise MalformedDataError(f"{path} content could not be decoded") from e

        logger.debug("Fetched %s@%s sha=%s", path, ref, data["sha"])
        return RemoteBlob(content=content, version=VersionToken(data["sha"]))

    async def put(
        self,
        path: str,
        content: str,
        expected_version: VersionToken,
        ref: str,
        message: str,
    ) -> VersionToken:
        """Write content only if the blob is still at expected_version. Returns the new sha."""
        body = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "sha": expected_version.value,
            "branch": ref,
        }
        response = await self._request("PUT", path, "put", json=body)
        try:
            new_sha = response.json()["content"]["sha"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteStoreError(
                f"put {path} succeeded but the response had no content sha",
                status_code=response.status_code,
            ) from e
        logger.info(f"Committed {path}@{ref}: {expected_version} -> {new_sha}")
        return VersionToken(new_sha)
