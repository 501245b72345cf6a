"""
Listing controller: owns the published sweets collection.

Callers change `query` (filters, page, page size, clear) and then call
`fetch` once, which hits the browse or search endpoint depending on the
resulting mode. Mutations patch the published collection locally after a
successful response, except adding a sweet while searching, which refetches
because only the backend knows whether the new sweet matches the filters.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

import api.sweets as sweets_api
from api.errors import ApiError, AuthorizationError
from api.models import Pagination, Sweet, validate_quantity, validate_sweet_fields
from api.transport import ApiClient
from store.query import ListingMode, QueryState
from utils.logger import get_logger
from utils.state import Session

_logger = get_logger(__name__)


class UpdateStrategy(Enum):
    LOCAL_PATCH = "local-patch"
    REFETCH = "refetch"


class SweetsController:
    def __init__(self, client: ApiClient, session: Session, page_size: int = 12):
        self.client = client
        self.session = session
        self.default_page_size = page_size
        self.query = QueryState(page_size)

        # published state, read by the screens
        self.sweets: Tuple[Sweet, ...] = ()
        self.pagination = Pagination(limit=page_size)
        self.error: Optional[str] = None
        self.loading = False

        self._listeners: List[Callable[[], None]] = []
        # bumped on every fetch; a response carrying an older value is stale
        self._fetch_token = 0

    @property
    def mode(self) -> ListingMode:
        return self.query.mode

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call `callback` after every publish. Returns an unsubscribe function."""
        self._listeners.append(callback)
        return lambda: self._listeners.remove(callback)

    def _publish(self) -> None:
        for callback in list(self._listeners):
            callback()

    # ---------------------------
    # Fetch
    # ---------------------------

    async def fetch(self) -> bool:
        """
        Issue one request for the current query and publish the result.

        Returns False when the response was superseded by a later fetch and
        therefore discarded. On failure the collection is emptied, the error
        message published, and the ApiError re-raised.
        """
        self._fetch_token += 1
        token = self._fetch_token
        query = self.query

        self.loading = True
        self.error = None
        self._publish()

        try:
            if query.mode is ListingMode.SEARCH:
                result = await self._remote(
                    sweets_api.search_sweets, query.filters, self.default_page_size
                )
            else:
                result = await self._remote(
                    sweets_api.list_sweets, query.page, query.page_size, query.filters
                )
        except ApiError as e:
            if token != self._fetch_token:
                _logger.debug(f"Dropping stale failure of fetch #{token}: {e.message}")
                return False
            self.sweets = ()
            self.error = e.message
            self.loading = False
            self._publish()
            raise

        if token != self._fetch_token:
            _logger.debug(f"Dropping stale result of fetch #{token}.")
            return False

        self.sweets = result.sweets
        self.pagination = result.pagination
        self.loading = False
        self._publish()
        return True

    # ---------------------------
    # Mutations
    # ---------------------------

    async def purchase(self, sweet_id: int, quantity: int) -> None:
        qty = validate_quantity(quantity)
        await self._remote(sweets_api.purchase_sweet, sweet_id, qty)
        await self._apply(
            UpdateStrategy.LOCAL_PATCH, lambda: self._adjust_quantity(sweet_id, -qty)
        )

    async def restock(self, sweet_id: int, quantity: int) -> None:
        self.session.require_admin()
        qty = validate_quantity(quantity)
        await self._remote(sweets_api.restock_sweet, sweet_id, qty)
        await self._apply(
            UpdateStrategy.LOCAL_PATCH, lambda: self._adjust_quantity(sweet_id, qty)
        )

    async def add(self, fields: Mapping[str, Any]) -> Sweet:
        self.session.require_admin()
        payload = validate_sweet_fields(fields)
        created: Sweet = await self._remote(sweets_api.create_sweet, payload)

        if self.query.mode is ListingMode.BROWSE:
            strategy = UpdateStrategy.LOCAL_PATCH
        else:
            strategy = UpdateStrategy.REFETCH
        await self._apply(strategy, lambda: (created, *self.sweets))
        return created

    async def update(self, sweet_id: int, fields: Mapping[str, Any]) -> Sweet:
        self.session.require_admin()
        payload = validate_sweet_fields(fields)
        updated: Sweet = await self._remote(sweets_api.update_sweet, sweet_id, payload)
        await self._apply(
            UpdateStrategy.LOCAL_PATCH,
            lambda: tuple(updated if s.id == sweet_id else s for s in self.sweets),
        )
        return updated

    async def delete(self, sweet_id: int) -> None:
        self.session.require_admin()
        await self._remote(sweets_api.delete_sweet, sweet_id)
        await self._apply(
            UpdateStrategy.LOCAL_PATCH,
            lambda: tuple(s for s in self.sweets if s.id != sweet_id),
        )

    def find(self, sweet_id: int) -> Optional[Sweet]:
        return next((s for s in self.sweets if s.id == sweet_id), None)

    # ---------------------------
    # Helpers
    # ---------------------------

    async def _remote(self, call: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        """Run an endpoint call; a 401 tears the session down before re-raising."""
        try:
            return await call(self.client, *args)
        except AuthorizationError:
            self.session.end("expired")
            raise

    async def _apply(
        self, strategy: UpdateStrategy, patch: Callable[[], Tuple[Sweet, ...]]
    ) -> None:
        if strategy is UpdateStrategy.LOCAL_PATCH:
            self.sweets = tuple(patch())
            self._publish()
            return
        try:
            await self.fetch()
        except ApiError as e:
            # the mutation itself succeeded; the failed refetch is already published
            _logger.warning(f"Refetch after mutation failed: {e.message}")

    def _adjust_quantity(self, sweet_id: int, delta: int) -> Tuple[Sweet, ...]:
        return tuple(
            replace(s, quantity=s.quantity + delta) if s.id == sweet_id else s
            for s in self.sweets
        )
