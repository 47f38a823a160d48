"""Extraction engine contract shared by all site engines."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Protocol, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from booru_importer.logging_config import ContextAdapter

from .models import EngineFeature, ScrapedPost, ScrapeResult

if TYPE_CHECKING:
    from .tagging import TaggingClient

logger = logging.getLogger(__name__)


@dataclass
class PageDocument:
    """A parsed page together with the URL it was loaded from."""

    url: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, html: str, url: str) -> PageDocument:
        return cls(url=url, soup=BeautifulSoup(html, "html.parser"))

    @property
    def host(self) -> str:
        return urlparse(self.url).netloc


Location = Union[str, PageDocument]


def location_host(location: Location) -> str:
    """Host (with port, if any) of a URL string or document."""
    if isinstance(location, PageDocument):
        return location.host
    return urlparse(location).netloc


class ScrapeEngine(Protocol):
    """Protocol every site engine satisfies."""

    name: str
    features: list[EngineFeature]
    notes: list[str]
    supported_hosts: list[str]

    def can_import(self, location: Location) -> bool: ...

    def scrape_document(self, document: PageDocument) -> ScrapeResult: ...


class ScrapeEngineBase(ABC):
    """Common engine behaviour: exact host matching and an engine-scoped logger."""

    name: str
    features: list[EngineFeature]
    notes: list[str]
    supported_hosts: list[str]

    def __init__(self, *, log: logging.Logger | None = None) -> None:
        self.log = ContextAdapter(log or logger, {"engine": self.name})

    def can_import(self, location: Location) -> bool:
        return location_host(location) in self.supported_hosts

    @abstractmethod
    def scrape_document(self, document: PageDocument) -> ScrapeResult: ...

    def _new_result(self, description: str = "") -> ScrapeResult:
        return ScrapeResult(self.name, description, log=self.log)


class TaggingScrapeEngineBase(ScrapeEngineBase):
    """Engine whose posts can be sent through the tagging service."""

    def __init__(
        self,
        tagging_client: TaggingClient | None = None,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        super().__init__(log=log)
        self.tagging_client = tagging_client

    async def _augment(self, post: ScrapedPost) -> ScrapedPost:
        if self.tagging_client is None:
            return post
        try:
            return await self.tagging_client.add_unique_tags(post)
        except Exception:
            self.log.warning(
                "augmentation failed, keeping post as is",
                extra={"content_url": post.content_url},
                exc_info=True,
            )
            return post

    def _add_augmented(self, result: ScrapeResult, post: ScrapedPost) -> None:
        pending: Awaitable[ScrapedPost] = self._augment(post)
        result.try_add_deferred_post(pending)
