from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from pos_admin.models import BestSeller, Category, CategoryRevenue, Product, User


def format_currency(value: float | int | str | None, symbol: str = "Rp") -> str:
    """Format an amount as Indonesian Rupiah.

    Args:
        value: Amount; numeric strings and None are accepted.
        symbol: Currency symbol prefix.

    Returns:
        String like ``"Rp 1.234.567"`` (no decimals, dot thousands separator).
    """
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(round(amount)):,}".replace(",", ".")
    return f"{sign}{symbol} {grouped}"


def format_date(value: str | None) -> str:
    """Render an ISO timestamp as DD/MM/YYYY; unparseable input is returned as-is."""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%d/%m/%Y")


def week_start(day: date) -> date:
    """Return the Monday of ``day``'s week (Sunday closes the week)."""
    return day - timedelta(days=day.weekday())


def month_key(day: date) -> str:
    """Return ``YYYY-MM`` for ``day``."""
    return day.strftime("%Y-%m")


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of ``day``'s month."""
    last = monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def pdf_filename(kind: str, today: date) -> str:
    return f"laporan-{kind}-{today.isoformat()}.pdf"


# =============================================================================
# Search filters
# =============================================================================


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def filter_products(products: Iterable[Product], query: str) -> list[Product]:
    """Match on product name or category name, case-insensitively."""
    q = (query or "").strip().lower()
    items = list(products)
    if not q:
        return items
    return [p for p in items if _contains(p.name, q) or _contains(p.category_name, q)]


def filter_categories(categories: Iterable[Category], query: str) -> list[Category]:
    q = (query or "").strip().lower()
    items = list(categories)
    if not q:
        return items
    return [c for c in items if _contains(c.name, q)]


def filter_users(users: Iterable[User], query: str) -> list[User]:
    """Match on user name or email, case-insensitively."""
    q = (query or "").strip().lower()
    items = list(users)
    if not q:
        return items
    return [u for u in items if _contains(u.name, q) or _contains(u.email, q)]


# =============================================================================
# Report maths
# =============================================================================


def category_shares(rows: Sequence[CategoryRevenue]) -> list[tuple[CategoryRevenue, float]]:
    """Pair each category with its share of total revenue, in percent (1 decimal).

    A zero total gives every category a 0.0 share.
    """
    total = sum(r.revenue for r in rows)
    if total <= 0:
        return [(r, 0.0) for r in rows]
    return [(r, round(r.revenue / total * 100, 1)) for r in rows]


def best_seller_bars(rows: Sequence[BestSeller], limit: int = 5) -> list[tuple[BestSeller, float]]:
    """Top ``limit`` best sellers with a bar width relative to the first entry.

    Widths are percentages capped at 100; a leader with zero quantity is
    treated as 1 so the division is defined.
    """
    top = list(rows[:limit])
    if not top:
        return []
    leader = top[0].quantity_sold or 1
    return [(r, min(r.quantity_sold / leader * 100, 100.0)) for r in top]


def payment_breakdown(mapping: dict[str, float] | None) -> list[tuple[str, float]]:
    """Payment-method revenue as (method, amount) pairs, largest first."""
    pairs = [(str(k), float(v or 0)) for k, v in (mapping or {}).items()]
    pairs.sort(key=lambda kv: kv[1], reverse=True)
    return pairs


# =============================================================================
# Images
# =============================================================================


def resolve_image_url(url: Optional[str], api_base: str) -> str:
    """Point product image URLs at the configured backend.

    - data:/blob: URLs pass through.
    - Relative paths get the API base prepended.
    - Absolute URLs under ``/uploads`` are re-hosted onto the API base
      (images saved while the backend ran on another address).
    - Anything else is returned unchanged.
    """
    if not url:
        return ""
    if url.startswith(("data:", "blob:")):
        return url

    base = api_base.rstrip("/")
    if url.startswith("/"):
        return f"{base}{url}"

    if url.startswith("http"):
        try:
            parts = urlsplit(url)
            base_parts = urlsplit(base)
        except ValueError:
            return url
        if parts.path.startswith("/uploads") and base_parts.netloc:
            return urlunsplit((base_parts.scheme, base_parts.netloc, parts.path, parts.query, parts.fragment))

    return url
