"""Post scraping submodule with pluggable site engines."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .content import guess_content_type, parse_resolution_string
from .engine import PageDocument, ScrapeEngine, ScrapeEngineBase, TaggingScrapeEngineBase
from .engines import Twitter
from .models import (
    ContentType,
    EngineFeature,
    SafetyRating,
    ScrapedNote,
    ScrapedPost,
    ScrapedTag,
    ScrapeResult,
    ScrapeResults,
    TagCategory,
)
from .notes import validate_note, xywh_to_normalized_polygon
from .registry import EngineRegistry
from .tagging import TaggingClient

if TYPE_CHECKING:
    from booru_importer.config import Settings

__all__ = [
    "ContentType",
    "EngineFeature",
    "EngineRegistry",
    "PageDocument",
    "SafetyRating",
    "ScrapeEngine",
    "ScrapeEngineBase",
    "ScrapeResult",
    "ScrapeResults",
    "ScrapedNote",
    "ScrapedPost",
    "ScrapedTag",
    "TagCategory",
    "TaggingClient",
    "TaggingScrapeEngineBase",
    "Twitter",
    "build_default_registry",
    "guess_content_type",
    "parse_resolution_string",
    "scrape",
    "validate_note",
    "xywh_to_normalized_polygon",
]

logger = logging.getLogger(__name__)


def build_default_registry(settings: Settings) -> EngineRegistry:
    """Build the default engine registry, wiring in the tagging client if configured."""
    tagging_client = None
    if settings.tagging_server_url:
        tagging_client = TaggingClient(
            settings.tagging_server_url,
            timeout=settings.tagging_timeout,
        )

    registry = EngineRegistry()
    registry.register(Twitter(tagging_client))
    return registry


async def scrape(document: PageDocument, registry: EngineRegistry) -> ScrapeResults:
    """Run every engine that supports the document's host and merge their results."""
    results = ScrapeResults()
    engines = registry.get_engines(document)
    if not engines:
        logger.warning("no engine found, skipping", extra={"url": document.url})
        return results

    for engine in engines:
        logger.debug("engine selected", extra={"url": document.url, "engine": engine.name})
        try:
            result = engine.scrape_document(document)
        except Exception:
            logger.warning("engine failed", extra={"url": document.url, "engine": engine.name}, exc_info=True)
            continue
        results.add(result)

    await results.settle()
    logger.debug(
        "scrape complete",
        extra={"url": document.url, "engines": len(results.results), "posts": len(results.posts)},
    )
    return results
