"""
Slug generation tests: slugified and transliterated titles, the random
base-36 suffix and titles that slugify to nothing.
"""
import re

import pytest

from blog_api import slugs
from blog_api.slugs import generate_slug, random_suffix, slugify, to_base36

SLUG_RE = re.compile(r"^[a-z0-9-]+-[0-9a-z]{1,6}$")


# ---------------------------------------------------------------------------
# slugify
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "title, expected",
    [
        ("Hello World", "hello-world"),
        ("Hello World! This is a Test.", "hello-world-this-is-a-test"),
        ("  Multiple   spaces  ", "multiple-spaces"),
        ("snake_case_title", "snake-case-title"),
        ("Crème brûlée", "creme-brulee"),
        ("already--dashed---title", "already-dashed-title"),
        ("Python 3.12 release", "python-3-12-release"),
    ],
)
def test_slugify(title, expected):
    assert slugify(title) == expected


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Привет мир", "privet-mir"),
        ("Straße", "strasse"),
        ("Łódź", "lodz"),
    ],
)
def test_slugify_transliterates_non_latin_titles(title, expected):
    assert slugify(title) == expected


def test_slugify_transliterates_cjk():
    assert re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", slugify("日本語"))


# ---------------------------------------------------------------------------
# Suffix
# ---------------------------------------------------------------------------

def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    assert to_base36(36 ** 6 - 1) == "zzzzzz"


def test_to_base36_rejects_negative_numbers():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_random_suffix_scales_random_float(monkeypatch):
    monkeypatch.setattr(slugs.random, "random", lambda: 0.5)
    assert random_suffix() == to_base36(int(0.5 * 36 ** 6))


def test_random_suffix_bounds(monkeypatch):
    monkeypatch.setattr(slugs.random, "random", lambda: 0.0)
    assert random_suffix() == "0"
    monkeypatch.setattr(slugs.random, "random", lambda: 0.9999999999)
    assert random_suffix() == "zzzzzz"


# ---------------------------------------------------------------------------
# generate_slug
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "title",
    [
        "Hello World",
        "Über 9000!",
        "a",
        "What's new in FastAPI?",
        "tabs\tand\nnewlines",
        "Привет мир",
        "日本語",
    ],
)
def test_generate_slug_shape(title):
    assert SLUG_RE.match(generate_slug(title))


def test_generate_slug_keeps_title_prefix():
    assert generate_slug("Hello World").startswith("hello-world-")


def test_generate_slug_suffixes_differ():
    generated = {generate_slug("Same Title") for _ in range(20)}
    assert len(generated) > 1


@pytest.mark.parametrize("title", ["", "   ", "!!!"])
def test_generate_slug_without_slug_base_is_bare_suffix(title):
    assert re.fullmatch(r"[0-9a-z]{1,6}", generate_slug(title))
