"""Page through provider results for one (city, query variant) pair."""

import logging
import time
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Set

import requests

from places_search.etl.transform import dedup_key, extract_items, to_place
from places_search.models import Place
from places_search.vendors.serper import SerperError

logger = logging.getLogger(__name__)

MAX_PAGES = 10
EMPTY_PAGE_LIMIT = 2
PAGE_DELAY_SECONDS = 0.05

# (search_text, page_number) -> raw provider payload
Provider = Callable[[str, int], Dict[str, Any]]


class WalkResult(NamedTuple):
    places: List[Place]
    found_count: int
    pages_fetched: int
    failed: bool


def walk(
    provider: Provider,
    query_variant: str,
    city: str,
    remaining_budget: int,
    seen: Set[str],
    *,
    max_pages: int = MAX_PAGES,
    empty_page_limit: int = EMPTY_PAGE_LIMIT,
    page_delay: float = PAGE_DELAY_SECONDS,
    on_found: Optional[Callable[[int], None]] = None,
) -> WalkResult:
    """Collect up to ``remaining_budget`` places not already in ``seen``.

    ``seen`` belongs to the calling job and is updated in place. Walking stops
    once the budget is met, after ``empty_page_limit`` consecutive pages
    without a new place, or at ``max_pages``. A provider error ends the walk
    early; the places found before it are kept.
    """
    search_text = f"{query_variant} in {city}"
    places: List[Place] = []
    found = 0
    page = 1
    empty_pages = 0
    failed = False

    while found < remaining_budget and page <= max_pages and empty_pages < empty_page_limit:
        if page > 1 and page_delay:
            time.sleep(page_delay)
        try:
            payload = provider(search_text, page)
        except (SerperError, requests.RequestException) as exc:
            logger.warning("Page %d of %r failed, skipping the rest of this search: %s", page, search_text, exc)
            failed = True
            break

        new_on_page = 0
        for raw in extract_items(payload):
            if found >= remaining_budget:
                break
            key = dedup_key(raw)
            if key is None or key in seen:
                continue
            seen.add(key)
            places.append(to_place(raw))
            found += 1
            new_on_page += 1
            if on_found is not None:
                on_found(found)

        empty_pages = 0 if new_on_page else empty_pages + 1
        page += 1

    pages_fetched = page - 1
    logger.info("Walked %r: pages=%d new=%d failed=%s", search_text, pages_fetched, found, failed)
    return WalkResult(places=places, found_count=found, pages_fetched=pages_fetched, failed=failed)
