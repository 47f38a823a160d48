"""Data models for the scrape submodule."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable

from booru_importer.logging_config import ContextAdapter

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class ContentType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class SafetyRating(str, Enum):
    SAFE = "safe"
    SKETCHY = "sketchy"
    UNSAFE = "unsafe"


class TagCategory(str, Enum):
    GENERAL = "general"
    ARTIST = "artist"
    CHARACTER = "character"
    COPYRIGHT = "copyright"
    META = "meta"


class EngineFeature(str, Enum):
    """What an engine is able to populate on the posts it produces."""

    CONTENT = "content"
    RATING = "rating"
    RESOLUTION = "resolution"
    TAGS = "tags"
    TAG_CATEGORY = "tag_category"
    SOURCE = "source"
    NOTES = "notes"


def normalize_tag_name(name: str) -> str:
    """Replace whitespace runs with a single underscore and lowercase."""
    return _WHITESPACE_RE.sub("_", name).lower()


@dataclass
class ScrapedTag:
    name: str
    category: TagCategory | None = None

    def __post_init__(self) -> None:
        self.name = normalize_tag_name(self.name)


@dataclass
class ScrapedNote:
    """A text annotation bound to a unit-space polygon (TL, TR, BR, BL)."""

    text: str
    polygon: list[list[float]]


@dataclass
class ScrapedPost:
    """A single media item discovered on a page.

    ``content_url`` stays empty until the engine resolves it; an empty value
    means the post must not be admitted into a result.
    """

    content_url: str = ""
    page_url: str = ""
    content_type: ContentType = ContentType.IMAGE
    resolution: tuple[int, int] | None = None
    rating: SafetyRating = SafetyRating.SAFE
    tags: list[ScrapedTag] = field(default_factory=list)
    notes: list[ScrapedNote] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    referrer: str | None = None

    def tag_names(self) -> set[str]:
        return {t.name for t in self.tags}

    def to_dict(self) -> dict[str, Any]:
        return {
            "content_url": self.content_url,
            "page_url": self.page_url,
            "content_type": self.content_type.value,
            "resolution": list(self.resolution) if self.resolution else None,
            "rating": self.rating.value,
            "tags": [
                {"name": t.name, "category": t.category.value if t.category else None}
                for t in self.tags
            ],
            "notes": [{"text": n.text, "polygon": n.polygon} for n in self.notes],
            "sources": list(self.sources),
            "referrer": self.referrer,
        }


class ScrapeResult:
    """One engine's output for one document.

    Posts only enter ``posts`` through :meth:`try_add_post`, either directly
    or once a deferred production registered with
    :meth:`try_add_deferred_post` settles.
    """

    def __init__(
        self,
        engine: str,
        description: str = "",
        *,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self.engine = engine
        self.description = description
        self.posts: list[ScrapedPost] = []
        self._pending: list[Awaitable[ScrapedPost]] = []
        self._log = log or ContextAdapter(logger, {"engine": engine})

    def try_add_post(self, post: ScrapedPost) -> bool:
        if not post.content_url:
            self._log.warning("not adding post because content_url is unset")
            return False
        self.posts.append(post)
        return True

    def try_add_deferred_post(self, pending: Awaitable[ScrapedPost]) -> None:
        """Admit the post produced by ``pending`` once it settles."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            # Start the work now so sibling productions overlap
            pending = asyncio.ensure_future(pending)
        self._pending.append(pending)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def settle(self) -> None:
        """Await deferred productions, admitting posts in completion order."""
        pending, self._pending = self._pending, []
        for next_done in asyncio.as_completed(pending):
            try:
                post = await next_done
            except Exception:
                self._log.warning("deferred post failed, dropping", exc_info=True)
                continue
            self.try_add_post(post)

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine": self.engine,
            "description": self.description,
            "posts": [p.to_dict() for p in self.posts],
        }


@dataclass
class ScrapeResults:
    """Results from several engines for the same document."""

    results: list[ScrapeResult] = field(default_factory=list)

    def add(self, result: ScrapeResult) -> None:
        self.results.append(result)

    @property
    def posts(self) -> list[ScrapedPost]:
        # Rebuilt on every read, never cached
        posts: list[ScrapedPost] = []
        for res in self.results:
            posts.extend(res.posts)
        return posts

    async def settle(self) -> None:
        await asyncio.gather(*(res.settle() for res in self.results))

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "posts": [p.to_dict() for p in self.posts],
        }
