"""URL slugs for quizzes."""

import random
import re
import string
import time

from brandquiz.storage.base import QuizStore

MAX_SLUG_LENGTH = 100
SUFFIX_LENGTH = 4
_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def slugify(text: str) -> str:
    """Lowercase, drop punctuation, hyphenate whitespace, trim to MAX_SLUG_LENGTH."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return slug[:MAX_SLUG_LENGTH]


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(random.choices(_BASE36, k=length))


def generate_unique_slug(title: str, store: QuizStore) -> str:
    """
    Slug for ``title`` not yet used by any quiz in ``store``.

    Titles with no usable characters fall back to ``quiz-<base36 millis>``.
    On collision a ``-xxxx`` suffix of random base36 characters is appended,
    drawing again until the result is free.
    """
    base_slug = slugify(title) or f"quiz-{_to_base36(int(time.time() * 1000))}"
    if not store.slug_exists(base_slug):
        return base_slug

    while True:
        candidate = f"{base_slug}-{random_suffix()}"
        if not store.slug_exists(candidate):
            return candidate
