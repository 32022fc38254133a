from __future__ import annotations
from typing import Any, Dict

from printdesk.config.settings import Pricing
from printdesk.models.order import Order


def price_per_page(color_mode: str, pricing: Pricing) -> int:
    return pricing.price_color if color_mode == Order.COLOR_COLOR else pricing.price_bw


def quote(color_mode: str, pages: int, copies: int, pricing: Pricing) -> Dict[str, Any]:
    per_page = price_per_page(color_mode, pricing)
    total_pages = pages * copies
    return {
        'color_mode': color_mode,
        'pages': pages,
        'copies': copies,
        'price_per_page': per_page,
        'total_pages': total_pages,
        'total_price': per_page * total_pages,
        'estimated_time': Order.estimate_minutes(copies, color_mode),
    }


def format_amount(value: int) -> str:
    # Whole currency units with dot thousands separators, e.g. 1.234.567
    return f"{value:,}".replace(',', '.')


def summary_note(q: Dict[str, Any]) -> str:
    return (
        f"Pages: {q['pages']} per copy, Copies: {q['copies']}, "
        f"Total pages: {q['total_pages']}, Price: {format_amount(q['total_price'])}"
    )
