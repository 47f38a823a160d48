"""Twitter / X engine: picks up tweet photos at their original size."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from ..engine import PageDocument, TaggingScrapeEngineBase
from ..models import EngineFeature, ScrapedPost, ScrapeResult

FOCUSED_IMAGE_SELECTOR = "div[role=dialog] div[role=dialog] div[aria-label=Image] img"
TWEET_IMAGE_SELECTOR = "article a[role='link'] div[data-testid='tweetPhoto'] img"

# Only the first few tweet photos are sent for tagging
MAX_TAGGED_TWEET_IMAGES = 2


def get_original_image_url(src: str) -> str:
    """Rewrite a pbs.twimg.com URL to request the original size.

    https://pbs.twimg.com/media/x?format=jpg&name=900x900
    -> https://pbs.twimg.com/media/x?format=jpg&name=orig
    """
    parsed = urlparse(src)
    params = parse_qsl(parsed.query, keep_blank_values=True)
    if not any(key == "name" for key, _ in params):
        return src
    params = [(key, "orig" if key == "name" else value) for key, value in params]
    return urlunparse(parsed._replace(query=urlencode(params)))


class Twitter(TaggingScrapeEngineBase):
    name = "twitter"
    features = [EngineFeature.CONTENT]
    notes: list[str] = []
    supported_hosts = ["twitter.com", "mobile.twitter.com", "x.com"]

    def scrape_document(self, document: PageDocument) -> ScrapeResult:
        result = self._new_result()

        # A focused image on desktop
        focused = document.soup.select_one(FOCUSED_IMAGE_SELECTOR)
        if focused is not None:
            post = self._build_post(document, focused.get("src"))
            if post is not None:
                self._add_augmented(result, post)

        images = document.soup.select(TWEET_IMAGE_SELECTOR)
        if not images:
            self.log.debug("no tweet photos found", extra={"url": document.url})

        for i, img in enumerate(images):
            post = self._build_post(document, img.get("src"))
            if post is None:
                continue
            if i < MAX_TAGGED_TWEET_IMAGES:
                self._add_augmented(result, post)
            else:
                result.try_add_post(post)

        return result

    def _build_post(self, document: PageDocument, src) -> ScrapedPost | None:
        if not src:
            self.log.debug("image without src, skipping", extra={"url": document.url})
            return None
        post = ScrapedPost()
        post.page_url = document.url
        post.content_url = get_original_image_url(str(src))
        return post
