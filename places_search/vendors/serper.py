"""Client utilities for the Serper Places API."""

import logging
from typing import Any, Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from places_search.core.config import SERPER_PLACES_URL

logger = logging.getLogger(__name__)


class SerperError(RuntimeError):
    """Raised when a Serper Places request fails or returns a non-2xx response."""


def _build_session() -> requests.Session:
    session = requests.Session()
    retries = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("POST",),
        raise_on_status=False,
    )
    session.mount("https://", HTTPAdapter(max_retries=retries))
    session.mount("http://", HTTPAdapter(max_retries=retries))
    return session


_SESSION = _build_session()


def search_places(
    query: str,
    api_key: str,
    page: int = 1,
    num: int = 100,
    url: str = SERPER_PLACES_URL,
) -> Dict[str, Any]:
    """Fetch one 1-indexed page of places for ``query``.

    An absent or empty ``places`` list in the payload means the page is empty.
    """
    body = {"q": query, "num": num, "page": page}
    headers = {"X-API-KEY": api_key, "Content-Type": "application/json"}
    logger.debug("Fetching places query=%s page=%s", query, page)
    try:
        response = _SESSION.post(url, json=body, headers=headers, timeout=15)
    except requests.RequestException as exc:
        raise SerperError(f"request failed for query={query!r} page={page}: {exc}") from exc

    if not 200 <= response.status_code < 300:
        logger.error("search_places failed: status=%s body=%s", response.status_code, response.text[:300])
        raise SerperError(f"Serper API error: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise SerperError(f"invalid JSON from Serper for query={query!r} page={page}") from exc
    return payload or {}
