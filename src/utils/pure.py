from math import ceil
from typing import Dict, Iterable, List, Literal, Optional, Sequence

from api.models import Pagination, Sweet
from utils.constants import LOW_STOCK_THRESHOLD

_ALIGN_MARKERS = {"l": ":---", "c": ":---:", "r": "---:"}


def markdown_table(
    headers: Sequence[str],
    rows: Iterable[Sequence[object]],
    aligns: Optional[Sequence[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Render rows as a Markdown table. Pipes inside cells are escaped.

    Args:
        headers: column titles.
        rows: cell values, stringified.
        aligns: 'l', 'c' or 'r' per column; left aligned by default.
    """
    aligns = list(aligns) if aligns else ["l"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    def line(cells: Iterable[object]) -> str:
        return "| " + " | ".join(str(c).replace("|", "\\|") for c in cells) + " |"

    lines = [line(headers), line(_ALIGN_MARKERS[a] for a in aligns)]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines)


def page_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return ceil(total / page_size)


def format_price(price: float) -> str:
    return f"${price:,.2f}"


def stock_label(quantity: int) -> str:
    if quantity <= 0:
        return "Out of stock"
    if quantity <= LOW_STOCK_THRESHOLD:
        return f"Low ({quantity})"
    return str(quantity)


def showing_range(pagination: Pagination, shown: int) -> str:
    """'Showing 13-24 of 30' style summary for the pager."""
    if shown == 0:
        return "No sweets found"
    first = (pagination.page - 1) * pagination.limit + 1
    last = first + shown - 1
    return f"Showing {first}-{last} of {max(pagination.total, last)}"


def sweet_markdown(sweet: Sweet) -> str:
    rows: List[List[object]] = [
        ["ID", sweet.id],
        ["Category", sweet.category],
        ["Price", format_price(sweet.price)],
        ["In Stock", stock_label(sweet.quantity)],
    ]
    if sweet.image:
        rows.append(["Image", sweet.image])
    md = f"### {sweet.name}\n\n" + markdown_table(["Attribute", "Value"], rows)
    if sweet.description:
        md += f"\n\n{sweet.description}"
    return md


def inventory_stats(sweets: Iterable[Sweet]) -> Dict[str, float]:
    """Totals shown on the admin dashboard."""
    sweets = list(sweets)
    return {
        "total_products": len(sweets),
        "total_value": round(sum(s.price * s.quantity for s in sweets), 2),
        "out_of_stock": sum(1 for s in sweets if not s.in_stock),
        "low_stock": sum(
            1 for s in sweets if 0 < s.quantity <= LOW_STOCK_THRESHOLD
        ),
    }
