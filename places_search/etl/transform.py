"""Utilities for transforming Serper Places responses into Place records."""

import logging
from typing import Any, Dict, List, Optional

from places_search.models import Place

logger = logging.getLogger(__name__)


def extract_items(payload: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the raw place dicts of a page; anything malformed counts as empty."""
    if not payload:
        return []
    items = payload.get("places")
    if not isinstance(items, list):
        if items is not None:
            logger.warning("Serper payload has non-list places: %s", str(items)[:200])
        return []
    return [item for item in items if isinstance(item, dict)]


def dedup_key(raw: Dict[str, Any]) -> Optional[str]:
    """Provider cid when present, else ``title-address``; None for nameless items."""
    cid = _strip_or_none(raw.get("cid"))
    if cid:
        return cid
    title = _strip_or_none(raw.get("title"))
    if not title:
        return None
    return f"{title}-{_strip_or_none(raw.get('address')) or ''}"


def to_place(raw: Dict[str, Any]) -> Place:
    return Place(
        name=_strip_or_none(raw.get("title")) or "",
        address=_strip_or_none(raw.get("address")) or "",
        phone=_strip_or_none(raw.get("phoneNumber")),
        rating=_safe_float(raw.get("rating")),
        review_count=_safe_int(raw.get("ratingCount")),
        category=_strip_or_none(raw.get("category")),
        website=_strip_or_none(raw.get("website")),
        external_id=_strip_or_none(raw.get("cid")),
    )


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None
