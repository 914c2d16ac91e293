from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from django.utils.translation import gettext as _, ngettext

_CENTS = Decimal("0.01")


def format_price(amount, currency: str) -> str:
    value = Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{currency} {value}"


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def describe_results(
    filtered: int,
    total: int,
    *,
    search_term: str = "",
    category_name: Optional[str] = None,
) -> str:
    """Sentence shown above the grid, e.g. ``3 products of 10 for "denim" in Tops``."""
    text = ngettext("%(count)d product", "%(count)d products", filtered) % {
        "count": filtered
    }
    if filtered < total:
        text += " " + _("of %(total)d") % {"total": total}
    if search_term:
        text += " " + _('for "%(term)s"') % {"term": search_term}
    if category_name:
        text += " " + _("in %(category)s") % {"category": category_name}
    return text


def rating_stars(rating: float) -> Tuple[int, int, int]:
    """Return (full, half, empty) star counts out of five."""
    rating = max(0.0, min(float(rating), 5.0))
    full = int(rating)
    half = 1 if rating - full >= 0.5 else 0
    return full, half, 5 - full - half
