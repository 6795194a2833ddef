# emprende/slugs.py
"""URL slugs derived from titles and names.

`slugify` normalizes a display string; `resolve_slug` applies one of the
collision strategies shared by every content type.
"""
import enum
import re
import unicodedata
from typing import Callable, Optional

from .utils import logger, now_ms, to_base36

_NOT_ALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


class CollisionStrategy(enum.Enum):
    NONE = "none"
    SUFFIX_ON_COLLISION = "suffix_on_collision"
    ALWAYS_SUFFIX = "always_suffix"


def slugify(text: str) -> str:
    value = unicodedata.normalize("NFD", (text or "").lower())
    value = "".join(c for c in value if not unicodedata.combining(c))
    value = _NOT_ALLOWED.sub("", value)
    value = _WHITESPACE.sub("-", value)
    value = _HYPHENS.sub("-", value)
    return value.strip("-")


def _with_suffix(base: str, suffix: str) -> str:
    return f"{base}-{suffix}" if base else suffix


def resolve_slug(
    text: str,
    strategy: CollisionStrategy,
    exists: Optional[Callable[[str], bool]] = None,
) -> str:
    """Build a slug for `text` following `strategy`.

    `exists` is only consulted by SUFFIX_ON_COLLISION and must answer whether
    a row already owns the candidate slug.
    """
    base = slugify(text)
    if strategy is CollisionStrategy.NONE:
        return base
    if strategy is CollisionStrategy.ALWAYS_SUFFIX:
        return _with_suffix(base, to_base36(now_ms()))
    if exists is None:
        raise ValueError("SUFFIX_ON_COLLISION needs an existence check")
    if base and not exists(base):
        return base
    slug = _with_suffix(base, str(now_ms()))
    logger.info("Slug %r taken, using %r", base, slug)
    return slug
