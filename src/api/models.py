# provide dataclass models for everything crossing the network boundary
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlparse

from api.errors import ValidationError
from utils.constants import MESSAGES, PRICE_RANGE, ROLE_ADMIN, ROLE_USER


@dataclass(frozen=True)
class Sweet:
    id: int
    name: str
    category: str
    price: float
    quantity: int
    description: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> Sweet:
        return cls(
            id=int(raw["id"]),
            name=str(raw.get("name") or ""),
            category=str(raw.get("category") or ""),
            price=float(raw.get("price") or 0.0),
            quantity=int(raw.get("quantity") or 0),
            description=raw.get("description") or None,
            image=raw.get("image") or None,
        )

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 12
    total: int = 0
    total_pages: int = 0


@dataclass(frozen=True)
class SweetPage:
    """Canonical listing result, whatever shape the backend answered with."""

    sweets: Tuple[Sweet, ...] = ()
    pagination: Pagination = field(default_factory=Pagination)


@dataclass(frozen=True)
class FilterSet:
    query: str = ""
    category: str = ""
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    def is_active(self) -> bool:
        """
        True when anything narrows the listing: some text, a category, or a
        price bound tighter than the full default range.
        """
        low, high = PRICE_RANGE
        return bool(
            self.query.strip()
            or self.category
            or (self.min_price is not None and self.min_price > low)
            or (self.max_price is not None and self.max_price < high)
        )


@dataclass(frozen=True)
class Identity:
    username: str
    email: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class LoginResult:
    token: str
    username: str
    email: str


# ---------------------------
# Form validation
# ---------------------------


def validate_quantity(qty) -> int:
    """Purchase/restock amount: a whole number of at least 1."""
    try:
        value = int(str(qty).strip())
    except ValueError:
        raise ValidationError(
            "Quantity must be a whole number.", {"quantity": "Must be a whole number"}
        ) from None
    if value < 1:
        raise ValidationError(
            "Quantity must be at least 1.", {"quantity": "Must be at least 1"}
        )
    return value


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_sweet_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check add/edit form input and return the payload to send.

    Values may arrive as raw strings from input widgets. Raises
    ValidationError with one message per offending field.
    """
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    name = str(data.get("name") or "").strip()
    if not name:
        errors["name"] = "Sweet name is required"
    elif len(name) < 2:
        errors["name"] = "Name must be at least 2 characters"
    cleaned["name"] = name

    category = str(data.get("category") or "").strip()
    if not category:
        errors["category"] = "Category is required"
    cleaned["category"] = category

    price = data.get("price")
    if price is None or str(price).strip() == "":
        errors["price"] = "Price is required"
    else:
        try:
            cleaned["price"] = round(float(price), 2)
            if cleaned["price"] < 0.01:
                errors["price"] = "Price must be greater than 0"
        except (TypeError, ValueError):
            errors["price"] = "Price must be a number"

    quantity = data.get("quantity")
    if quantity is None or str(quantity).strip() == "":
        errors["quantity"] = "Quantity is required"
    else:
        try:
            as_float = float(quantity)
            if not as_float.is_integer():
                errors["quantity"] = "Quantity must be a whole number"
            elif as_float < 0:
                errors["quantity"] = "Quantity cannot be negative"
            else:
                cleaned["quantity"] = int(as_float)
        except (TypeError, ValueError):
            errors["quantity"] = "Quantity must be a number"

    description = str(data.get("description") or "").strip()
    if len(description) > 500:
        errors["description"] = "Description must be less than 500 characters"
    elif description:
        cleaned["description"] = description

    image = str(data.get("image") or "").strip()
    if image and not _is_url(image):
        errors["image"] = "Please enter a valid URL"
    elif image:
        cleaned["image"] = image

    if errors:
        raise ValidationError(MESSAGES["VALIDATION_ERROR"], errors)
    return cleaned
