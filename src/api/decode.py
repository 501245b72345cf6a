"""
Normalizes listing responses at the network boundary.

The backend answers list/search calls either with a bare JSON array or with
an object carrying the array under `data` (plus optional `pagination` /
`total`). `decode_listing` tags which one arrived; the normalize functions
turn the tag into a `SweetPage` so nothing past this module ever sees the
raw shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from api.models import Pagination, Sweet, SweetPage
from utils.logger import get_logger
from utils.pure import page_count

_logger = get_logger(__name__)


@dataclass(frozen=True)
class BareList:
    items: List[Mapping[str, Any]]


@dataclass(frozen=True)
class Enveloped:
    items: List[Mapping[str, Any]]
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Unrecognized:
    body: Any = None


DecodedListing = Union[BareList, Enveloped, Unrecognized]


def decode_listing(body: Any) -> DecodedListing:
    if isinstance(body, list):
        return BareList(_objects(body))
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        meta = {k: v for k, v in body.items() if k != "data"}
        return Enveloped(_objects(body["data"]), meta)
    return Unrecognized(body)


def unwrap_one(body: Any) -> Any:
    """`{"data": {...}}` -> `{...}`; anything else is returned as is."""
    if isinstance(body, dict) and isinstance(body.get("data"), dict):
        return body["data"]
    return body


def _objects(items: List[Any]) -> List[Mapping[str, Any]]:
    return [item for item in items if isinstance(item, dict)]


def decode_sweet(item: Mapping[str, Any]) -> Optional[Sweet]:
    """One sweet object, or None (logged) when its fields cannot be read."""
    try:
        return Sweet.from_json(item)
    except (KeyError, TypeError, ValueError) as e:
        _logger.warning(f"Skipping malformed sweet {dict(item)!r}: {e!r}")
        return None


def _sweets(decoded: DecodedListing) -> tuple:
    if isinstance(decoded, Unrecognized):
        return ()
    sweets = (decode_sweet(item) for item in decoded.items)
    return tuple(s for s in sweets if s is not None)


def _as_int(val, default: int) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def normalize_browse(decoded: DecodedListing, default_limit: int) -> SweetPage:
    """
    Listing endpoint result. Without a pagination object, the whole result is
    treated as a single page sized to the number of items.
    """
    sweets = _sweets(decoded)
    meta: Optional[Dict[str, Any]] = None
    if isinstance(decoded, Enveloped) and isinstance(
        decoded.meta.get("pagination"), dict
    ):
        meta = decoded.meta["pagination"]

    if meta is None:
        count = len(sweets)
        return SweetPage(sweets, Pagination(1, count, count, 1))

    limit = _as_int(meta.get("limit"), default_limit)
    total = _as_int(meta.get("total"), len(sweets))
    total_pages = _as_int(meta.get("totalPages"), page_count(total, limit))
    return SweetPage(
        sweets,
        Pagination(_as_int(meta.get("page"), 1), limit, total, total_pages),
    )


def normalize_search(decoded: DecodedListing, page_size: int) -> SweetPage:
    """
    Search endpoint result. Search is not paginated server side, so the page
    is always 1 and the page count is derived from the default page size.
    """
    sweets = _sweets(decoded)
    total = len(sweets)
    if isinstance(decoded, Enveloped):
        total = _as_int(decoded.meta.get("total"), total)
    return SweetPage(
        sweets, Pagination(1, page_size, total, page_count(total, page_size))
    )
