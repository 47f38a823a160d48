"""Post/tag model and result admission tests."""

import asyncio

import pytest

from booru_importer.scrape.models import (
    ContentType,
    SafetyRating,
    ScrapedPost,
    ScrapedTag,
    ScrapeResult,
    ScrapeResults,
    TagCategory,
    normalize_tag_name,
)


def _post(url: str = "https://example.com/a.png") -> ScrapedPost:
    return ScrapedPost(content_url=url)


# --- Tag normalization tests (sync) ---


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Hatsune Miku", "hatsune_miku"),
        ("long   hair", "long_hair"),
        ("tab\tand\nnewline", "tab_and_newline"),
        ("already_normal", "already_normal"),
        ("UPPER", "upper"),
    ],
)
def test_tag_name_normalized(raw, expected):
    assert ScrapedTag(raw).name == expected


@pytest.mark.parametrize("raw", ["Blue Sky", " leading", "a \t b", "x"])
def test_tag_normalization_idempotent(raw):
    once = ScrapedTag(raw).name
    assert not any(c.isspace() for c in once)
    assert normalize_tag_name(once) == once


def test_tag_category_optional():
    assert ScrapedTag("foo").category is None
    assert ScrapedTag("foo", TagCategory.ARTIST).category is TagCategory.ARTIST


def test_post_defaults():
    post = ScrapedPost()
    assert post.content_url == ""
    assert post.content_type is ContentType.IMAGE
    assert post.rating is SafetyRating.SAFE
    assert post.resolution is None
    assert post.tags == [] and post.notes == [] and post.sources == []


def test_post_lists_not_shared():
    a, b = ScrapedPost(), ScrapedPost()
    a.tags.append(ScrapedTag("x"))
    assert b.tags == []


# --- Admission tests (sync) ---


def test_try_add_post_accepts_content_url():
    result = ScrapeResult("test")
    assert result.try_add_post(_post()) is True
    assert len(result.posts) == 1


def test_try_add_post_rejects_empty_content_url():
    result = ScrapeResult("test")
    assert result.try_add_post(ScrapedPost(page_url="https://example.com")) is False
    assert result.posts == []


def test_scrape_results_flatten_in_order():
    first = ScrapeResult("one")
    first.try_add_post(_post("a"))
    first.try_add_post(_post("b"))
    second = ScrapeResult("two")
    second.try_add_post(_post("c"))

    results = ScrapeResults()
    results.add(first)
    results.add(second)

    assert [p.content_url for p in results.posts] == ["a", "b", "c"]
    assert len(results.posts) == len(first.posts) + len(second.posts)


def test_scrape_results_posts_recomputed_on_read():
    result = ScrapeResult("one")
    results = ScrapeResults([result])
    assert results.posts == []
    result.try_add_post(_post())
    assert len(results.posts) == 1


def test_to_dict_serializes_enums():
    post = _post()
    post.resolution = (10, 20)
    post.tags.append(ScrapedTag("Foo Bar", TagCategory.CHARACTER))
    result = ScrapeResult("one")
    result.try_add_post(post)

    data = ScrapeResults([result]).to_dict()
    out = data["posts"][0]
    assert out["content_type"] == "image"
    assert out["rating"] == "safe"
    assert out["resolution"] == [10, 20]
    assert out["tags"] == [{"name": "foo_bar", "category": "character"}]
    assert data["results"][0]["engine"] == "one"


# --- Deferred admission tests (async) ---


@pytest.mark.asyncio
async def test_deferred_posts_admitted_in_completion_order():
    slow_gate = asyncio.Event()

    async def slow() -> ScrapedPost:
        await slow_gate.wait()
        return _post("slow")

    async def fast() -> ScrapedPost:
        slow_gate.set()
        return _post("fast")

    result = ScrapeResult("test")
    result.try_add_deferred_post(slow())
    result.try_add_deferred_post(fast())
    assert result.pending == 2
    assert result.posts == []

    await result.settle()

    assert result.pending == 0
    assert [p.content_url for p in result.posts] == ["fast", "slow"]


@pytest.mark.asyncio
async def test_deferred_post_still_gated_on_content_url():
    async def produce() -> ScrapedPost:
        return ScrapedPost()

    result = ScrapeResult("test")
    result.try_add_deferred_post(produce())
    await result.settle()
    assert result.posts == []


@pytest.mark.asyncio
async def test_failing_deferred_post_does_not_block_others():
    async def boom() -> ScrapedPost:
        raise RuntimeError("nope")

    async def ok() -> ScrapedPost:
        return _post("ok")

    result = ScrapeResult("test")
    result.try_add_deferred_post(boom())
    result.try_add_deferred_post(ok())
    result.try_add_post(_post("direct"))
    await result.settle()

    assert sorted(p.content_url for p in result.posts) == ["direct", "ok"]


@pytest.mark.asyncio
async def test_settle_is_idempotent():
    async def ok() -> ScrapedPost:
        return _post()

    result = ScrapeResult("test")
    result.try_add_deferred_post(ok())
    await result.settle()
    await result.settle()
    assert len(result.posts) == 1


@pytest.mark.asyncio
async def test_scrape_results_settle_all():
    async def ok(url: str) -> ScrapedPost:
        return _post(url)

    a, b = ScrapeResult("a"), ScrapeResult("b")
    a.try_add_deferred_post(ok("1"))
    b.try_add_deferred_post(ok("2"))
    results = ScrapeResults([a, b])
    await results.settle()
    assert [p.content_url for p in results.posts] == ["1", "2"]
