"""Content-type and resolution heuristics shared by engines."""

from __future__ import annotations

import logging
import re

from .models import ContentType

logger = logging.getLogger(__name__)

# https://github.com/sindresorhus/video-extensions/blob/main/video-extensions.json
VIDEO_EXTENSIONS: frozenset[str] = frozenset({
    "3g2", "3gp", "aaf", "asf", "avchd", "avi", "drc", "flv", "m2v", "m4p",
    "m4v", "mkv", "mng", "mov", "mp2", "mp4", "mpe", "mpeg", "mpg", "mpv",
    "mxf", "nsv", "ogg", "ogv", "qt", "rm", "rmvb", "roq", "svi", "vob",
    "webm", "wmv", "yuv",
})

_QUERY_OR_FRAGMENT_RE = re.compile(r"[#?]")
_NON_DIGIT_RE = re.compile(r"\D")


def get_url_extension(url: str) -> str:
    """Return the text after the last '.' of the URL, ignoring query and fragment.

    Returns an empty string when the path has no dot.
    """
    path = _QUERY_OR_FRAGMENT_RE.split(url, maxsplit=1)[0]
    if "." not in path:
        return ""
    return path.rsplit(".", 1)[-1].strip()


def guess_content_type(url: str | None) -> ContentType:
    """Guess the content type from the file extension.

    Returns IMAGE whenever the URL is not a known video, including when the
    type could not be guessed at all.
    """
    if url is not None:
        ext = get_url_extension(url).lower()
        if ext in VIDEO_EXTENSIONS:
            return ContentType.VIDEO
    return ContentType.IMAGE


def parse_resolution_string(text: str | None) -> tuple[int, int] | None:
    """Parse strings like ``1600x2200`` or ``1600 x 2200 px`` into (width, height).

    Zero values are dropped along with unparsable parts, so ``0x100`` is
    treated the same as garbage.
    """
    if not text:
        return None

    values: list[int] = []
    for part in text.split("x"):
        digits = _NON_DIGIT_RE.sub("", part)
        if digits and int(digits) != 0:
            values.append(int(digits))

    if len(values) == 2:
        return values[0], values[1]

    logger.debug("could not parse resolution", extra={"text": text})
    return None
