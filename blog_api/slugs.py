"""
Slug generation for articles.

A slug is the lowercase, hyphen-separated form of a title followed by a
short random base-36 suffix, e.g. ``hello-world-3kq9z``.  Non-Latin titles
are transliterated first (``"Привет мир"`` becomes ``privet-mir``).  The
suffix makes collisions between articles with similar titles very unlikely
(about one in 36**6 per call) but does not rule them out; the unique
constraint on ``articles.slug`` remains the source of truth.

The suffix comes from :mod:`random`, so slugs must never be used as
secrets.
"""
import random

from slugify import slugify as _transliterate_slug

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_SPACE = 36 ** 6


def slugify(text: str) -> str:
    """Return a URL-safe, lowercase, ASCII-only slug derived from *text*."""
    return _transliterate_slug(text, separator="-", lowercase=True)


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def random_suffix() -> str:
    """Return 1 to 6 base-36 characters drawn from a random float."""
    return to_base36(int(random.random() * SUFFIX_SPACE))


def generate_slug(title: str) -> str:
    """
    Build the slug for an article titled *title*.

    Titles that slugify to nothing (empty, whitespace or punctuation only)
    yield the bare suffix.
    """
    base = slugify(title)
    suffix = random_suffix()
    if not base:
        return suffix
    return f"{base}-{suffix}"
