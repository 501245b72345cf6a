from typing import Dict, List, Tuple

SWEET_CATEGORIES: List[str] = [
    "Chocolate",
    "Gummy",
    "Hard Candy",
    "Lollipops",
    "Caramel",
    "Sour Candy",
    "Mints",
    "Toffee",
    "Marshmallow",
    "Cookies",
    "Cakes",
    "Other",
]

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"

# bounds of the price filter; a bound strictly inside this range is a filter
PRICE_RANGE: Tuple[float, float] = (0.0, 100.0)

LOW_STOCK_THRESHOLD = 5

MESSAGES: Dict[str, str] = {
    "LOGIN_SUCCESS": "Login successful! Welcome back!",
    "LOGIN_ERROR": "Invalid credentials. Please try again.",
    "REGISTER_SUCCESS": "Registration successful! Please log in.",
    "REGISTER_ERROR": "Registration failed. Please try again.",
    "LOGOUT_SUCCESS": "Logged out successfully!",
    "FETCH_ERROR": "Failed to fetch sweets",
    "SEARCH_ERROR": "Search failed",
    "DETAIL_ERROR": "Failed to fetch sweet details",
    "SWEET_ADDED": "Sweet added successfully!",
    "SWEET_ADD_ERROR": "Failed to add sweet",
    "SWEET_UPDATED": "Sweet updated successfully!",
    "SWEET_UPDATE_ERROR": "Failed to update sweet",
    "SWEET_DELETED": "Sweet deleted successfully!",
    "SWEET_DELETE_ERROR": "Failed to delete sweet",
    "PURCHASE_SUCCESS": "Purchase completed successfully!",
    "PURCHASE_ERROR": "Purchase failed. Please try again.",
    "RESTOCK_SUCCESS": "Inventory restocked successfully!",
    "RESTOCK_ERROR": "Restocking failed. Please try again.",
    "NETWORK_ERROR": "Network error. Please check your connection.",
    "UNAUTHORIZED": "Access denied. Please log in.",
    "ADMIN_ONLY": "Only administrators can do that.",
    "VALIDATION_ERROR": "Please fix the highlighted fields.",
}
