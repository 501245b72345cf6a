from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping

from api.models import FilterSet


class ListingMode(Enum):
    BROWSE = "browse"  # paginated listing endpoint
    SEARCH = "search"  # filtered search endpoint


@dataclass
class QueryState:
    """
    What the listing should currently show. Pure state, no I/O; the
    controller issues the fetch after every transition.
    """

    page_size: int
    filters: FilterSet = field(default_factory=FilterSet)
    page: int = 1
    mode: ListingMode = ListingMode.BROWSE

    def set_filters(self, changes: Mapping[str, Any]) -> None:
        self.filters = replace(self.filters, **changes)
        self.page = 1
        self.mode = (
            ListingMode.SEARCH if self.filters.is_active() else ListingMode.BROWSE
        )

    def set_page(self, page: int) -> None:
        self.page = page

    def set_page_size(self, page_size: int) -> None:
        self.page_size = page_size
        self.page = 1

    def clear(self) -> None:
        self.filters = FilterSet()
        self.page = 1
        self.mode = ListingMode.BROWSE
