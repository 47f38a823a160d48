"""Tag augmentation via an external image tagging service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .models import ScrapedPost, ScrapedTag, TagCategory, normalize_tag_name

logger = logging.getLogger(__name__)

# Suggested tags carry no kind, so they are all filed under one category
DEFAULT_CATEGORY = TagCategory.CHARACTER


def _extract_tags(data: Any) -> list[str]:
    """Pull the ``tags`` list out of a service response body."""
    if not isinstance(data, dict):
        return []
    tags = data.get("tags")
    if not isinstance(tags, list):
        return []
    return [t for t in tags if isinstance(t, str)]


class TaggingClient:
    """Client for a tagging server exposing ``POST /upload-from-url/``.

    Failures never propagate: any transport error, non-2xx status or
    malformed body is logged and treated as "no suggestions".
    """

    def __init__(
        self,
        server_url: str,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._server_url = server_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def upload_url(self) -> str:
        return f"{self._server_url}/upload-from-url/"

    async def _post(self, client: httpx.AsyncClient, image_url: str) -> httpx.Response:
        return await client.post(
            self.upload_url,
            data={"url": image_url},
            timeout=self._timeout,
        )

    async def get_tags(self, image_url: str) -> list[str]:
        """Ask the tagging server for tag suggestions for ``image_url``."""
        try:
            if self._client is not None:
                resp = await self._post(self._client, image_url)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    resp = await self._post(client, image_url)
        except (httpx.HTTPError, httpx.InvalidURL):
            logger.warning("tagging request failed", extra={"image_url": image_url}, exc_info=True)
            return []

        if not resp.is_success:
            logger.warning(
                "tagging server returned an error",
                extra={"image_url": image_url, "status_code": resp.status_code, "body": resp.text[:500]},
            )
            return []

        try:
            data = resp.json()
        except ValueError:
            logger.warning("tagging server returned invalid json", extra={"image_url": image_url})
            return []

        tags = _extract_tags(data)
        logger.debug("tag predictions received", extra={"image_url": image_url, "tag_count": len(tags)})
        return tags

    async def add_unique_tags(self, post: ScrapedPost) -> ScrapedPost:
        """Append suggested tags the post does not have yet and return the post."""
        suggestions = await self.get_tags(post.content_url)
        existing = post.tag_names()
        added = 0
        for name in suggestions:
            normalized = normalize_tag_name(name)
            if normalized in existing:
                continue
            post.tags.append(ScrapedTag(normalized, DEFAULT_CATEGORY))
            existing.add(normalized)
            added += 1

        if added:
            logger.debug("post augmented", extra={"content_url": post.content_url, "added": added})
        return post


async def add_unique_tags(server_url: str, post: ScrapedPost) -> ScrapedPost:
    """One-shot form of :meth:`TaggingClient.add_unique_tags`."""
    return await TaggingClient(server_url).add_unique_tags(post)
