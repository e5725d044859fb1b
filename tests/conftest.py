import sys
from pathlib import Path

import pytest

# Ensure the `places_search` package is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from places_search.core.config import Settings  # noqa: E402


@pytest.fixture
def settings():
    return Settings(serper_api_key="test-key", database_url="", page_delay=0)


def raw_place(n, **overrides):
    """Build a Serper-style place dict with a unique cid."""
    place = {
        "title": f"Place {n}",
        "address": f"Street {n}",
        "phoneNumber": f"(62) 3333-{n:04d}",
        "rating": 4.5,
        "ratingCount": 10 + n,
        "category": "Dentist",
        "website": f"https://place{n}.example.com",
        "cid": f"cid-{n}",
    }
    place.update(overrides)
    return place


class FakeProvider:
    """Provider returning canned pages keyed by (search_text, page)."""

    def __init__(self, pages=None, default=None, errors=None):
        self.pages = pages or {}
        self.default = default if default is not None else {"places": []}
        self.errors = errors or {}
        self.calls = []

    def __call__(self, search_text, page):
        self.calls.append((search_text, page))
        error = self.errors.get((search_text, page))
        if error is not None:
            raise error
        return self.pages.get((search_text, page), self.default)
