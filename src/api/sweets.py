# sweets endpoints; listing calls come back already normalized to a SweetPage
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from api.decode import (
    decode_listing,
    decode_sweet,
    normalize_browse,
    normalize_search,
    unwrap_one,
)
from api.errors import ApiError
from api.models import FilterSet, Sweet, SweetPage
from api.transport import ApiClient
from utils.constants import MESSAGES

SWEETS_PATH = "/api/sweets"
SEARCH_PATH = "/api/sweets/search"


def _sweet_path(sweet_id: int, action: str = "") -> str:
    path = f"{SWEETS_PATH}/{sweet_id}"
    return f"{path}/{action}" if action else path


def _drop_empty(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _sweet_or_none(body: Any) -> Optional[Sweet]:
    body = unwrap_one(body)
    if isinstance(body, dict) and "id" in body:
        return decode_sweet(body)
    return None


def _require_sweet(body: Any, failure: str) -> Sweet:
    sweet = _sweet_or_none(body)
    if sweet is None:
        raise ApiError(failure)
    return sweet


# ---------------------------
# Listing
# ---------------------------


async def list_sweets(
    client: ApiClient,
    page: int,
    limit: int,
    filters: Optional[FilterSet] = None,
) -> SweetPage:
    """GET /api/sweets, paginated."""
    filters = filters or FilterSet()
    params = _drop_empty(
        {
            "page": page,
            "limit": limit,
            "category": filters.category,
            "minPrice": filters.min_price,
            "maxPrice": filters.max_price,
        }
    )
    body = await client.get(SWEETS_PATH, params, failure=MESSAGES["FETCH_ERROR"])
    return normalize_browse(decode_listing(body), limit)


async def search_sweets(
    client: ApiClient, filters: FilterSet, page_size: int
) -> SweetPage:
    """
    GET /api/sweets/search. The free-text query travels as `name`; results
    are not paginated by the backend.
    """
    params = _drop_empty(
        {
            "name": filters.query.strip(),
            "category": filters.category,
            "minPrice": filters.min_price,
            "maxPrice": filters.max_price,
        }
    )
    body = await client.get(SEARCH_PATH, params, failure=MESSAGES["SEARCH_ERROR"])
    return normalize_search(decode_listing(body), page_size)


async def get_sweet(client: ApiClient, sweet_id: int) -> Sweet:
    body = await client.get(_sweet_path(sweet_id), failure=MESSAGES["DETAIL_ERROR"])
    return _require_sweet(body, MESSAGES["DETAIL_ERROR"])


# ---------------------------
# Admin CRUD
# ---------------------------


async def create_sweet(client: ApiClient, fields: Mapping[str, Any]) -> Sweet:
    body = await client.post(
        SWEETS_PATH, dict(fields), failure=MESSAGES["SWEET_ADD_ERROR"]
    )
    return _require_sweet(body, MESSAGES["SWEET_ADD_ERROR"])


async def update_sweet(
    client: ApiClient, sweet_id: int, fields: Mapping[str, Any]
) -> Sweet:
    body = await client.put(
        _sweet_path(sweet_id), dict(fields), failure=MESSAGES["SWEET_UPDATE_ERROR"]
    )
    return _require_sweet(body, MESSAGES["SWEET_UPDATE_ERROR"])


async def delete_sweet(client: ApiClient, sweet_id: int) -> Any:
    return await client.delete(
        _sweet_path(sweet_id), failure=MESSAGES["SWEET_DELETE_ERROR"]
    )


# ---------------------------
# Stock
# ---------------------------


async def purchase_sweet(
    client: ApiClient, sweet_id: int, quantity: int
) -> Optional[Sweet]:
    """
    Returns the updated sweet when the backend echoes it, None when it only
    sends a confirmation.
    """
    body = await client.post(
        _sweet_path(sweet_id, "purchase"),
        {"quantity": quantity},
        failure=MESSAGES["PURCHASE_ERROR"],
    )
    return _sweet_or_none(body)


async def restock_sweet(
    client: ApiClient, sweet_id: int, quantity: int
) -> Optional[Sweet]:
    body = await client.post(
        _sweet_path(sweet_id, "restock"),
        {"quantity": quantity},
        failure=MESSAGES["RESTOCK_ERROR"],
    )
    return _sweet_or_none(body)
