"""Note geometry: pixel boxes to unit-space polygons, plus note validation."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from markdownify import markdownify

from .models import ScrapedNote, ScrapedPost

if TYPE_CHECKING:
    from bs4 import Tag

    from .engine import PageDocument

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def xywh_to_normalized_polygon(
    x: float,
    y: float,
    w: float,
    h: float,
    resolution: tuple[int, int],
) -> list[list[float]]:
    """Scale a pixel box by ``resolution`` and return its corners.

    Corners are ordered top left, top right, bottom right, bottom left. Both
    resolution components must be positive; nothing is checked here.
    """
    x = x / resolution[0]
    y = y / resolution[1]
    w = w / resolution[0]
    h = h / resolution[1]

    return [
        [x, y],
        [x + w, y],
        [x + w, y + h],
        [x, y + h],
    ]


def validate_note(
    note: ScrapedNote,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> bool:
    """Reject notes with empty text or any coordinate outside [0, 1]."""
    log = log or logger
    if not note.text:
        log.debug("note rejected: no text")
        return False

    for point in note.polygon:
        if any(c < 0 or c > 1 for c in point):
            log.debug("note rejected: polygon out of range", extra={"point": point})
            return False

    return True


def html_note_to_markdown(html: str) -> str:
    return markdownify(html).strip()


def _parse_int(value: str | None) -> int | None:
    """Parse a leading integer the way ``parseInt`` does ('12px' -> 12)."""
    if value is None:
        return None
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def create_note_from_danbooru_article(
    post: ScrapedPost,
    element: Tag,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> ScrapedNote | None:
    """Build a note from a Danbooru ``article`` carrying ``data-*`` geometry.

    Returns None, after logging why, when the post has no resolution, a field
    is missing or non-numeric, or the resulting note is invalid.
    """
    log = log or logger

    def fail(reason: str, **extra) -> None:
        log.debug("cannot create danbooru note: %s", reason, extra=extra)

    if not post.resolution:
        fail("post resolution is unset")
        return None

    body = element.get("data-body")
    if not body:
        fail("no note body")
        return None
    text = html_note_to_markdown(str(body))

    box: dict[str, int] = {}
    for key in ("x", "y", "width", "height"):
        raw = element.get(f"data-{key}")
        value = _parse_int(str(raw) if raw is not None else None)
        if value is None:
            fail("required data field missing or not an integer", field=key, value=raw)
            return None
        box[key] = value

    polygon = xywh_to_normalized_polygon(
        box["x"], box["y"], box["width"], box["height"], post.resolution
    )
    note = ScrapedNote(text, polygon)
    return note if validate_note(note, log) else None


def _parse_style(style: str) -> dict[str, str]:
    declarations: dict[str, str] = {}
    for decl in style.split(";"):
        prop, sep, value = decl.partition(":")
        if sep:
            declarations[prop.strip().lower()] = value.strip()
    return declarations


def create_notes_from_moebooru_boxes(
    document: PageDocument,
    box_size: tuple[int, int],
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> list[ScrapedNote]:
    """Pair ``.note-box`` and ``.note-body`` elements by index into notes.

    Box geometry comes from each box's inline ``left/top/width/height`` style
    and is relative to ``box_size``, the rendered size of the image.
    """
    log = log or logger
    notes: list[ScrapedNote] = []
    boxes = document.soup.select(".note-box")
    bodies = document.soup.select(".note-body")

    if len(boxes) != len(bodies):
        log.debug(
            "note box and body counts differ",
            extra={"boxes": len(boxes), "bodies": len(bodies)},
        )
        return notes

    for box, body in zip(boxes, bodies):
        style = _parse_style(str(box.get("style") or ""))
        x = _parse_int(style.get("left"))
        y = _parse_int(style.get("top"))
        w = _parse_int(style.get("width"))
        h = _parse_int(style.get("height"))
        if x is None or y is None or w is None or h is None:
            log.debug("note box without usable geometry", extra={"style": box.get("style")})
            continue

        text = html_note_to_markdown(body.decode_contents())
        note = ScrapedNote(text, xywh_to_normalized_polygon(x, y, w, h, box_size))
        if validate_note(note, log):
            notes.append(note)

    return notes
