from __future__ import annotations
from math import ceil
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import Character

def normalize_choice(value: Optional[str], allowed: Sequence[str], fallback: str = "unknown") -> str:
    """Map value onto one of `allowed` (case-insensitive); anything else becomes `fallback`."""
    if not value:
        return fallback
    folded = value.casefold()
    for choice in allowed:
        if choice.casefold() == folded:
            return choice
    return fallback

def build_query_params(page: int, filters: Dict[str, str]) -> Dict[str, Any]:
    """Page number plus every non-empty filter; unset filters are omitted from the URL."""
    params: Dict[str, Any] = {"page": page}
    params.update({k: v for k, v in filters.items() if v})
    return params

def sort_records(records: Iterable[Character], sort_by: Optional[str], sort_order: str = "asc") -> List[Character]:
    """
    Stable sort over a copy of `records`.
        • name → case-insensitive
        • id   → numeric
        • None → arrival order
    Equal keys keep their relative order in both directions.
    """
    items = list(records)
    if not sort_by:
        return items
    if sort_by == "name":
        key = lambda c: c["name"].casefold()
    elif sort_by == "id":
        key = lambda c: int(c["id"])
    else:
        raise ValueError(f"unknown sort key: {sort_by!r}")
    # list.sort(reverse=True) preserves the order of equal elements
    items.sort(key=key, reverse=(sort_order == "desc"))
    return items

def total_pages(count: int, page_size: int) -> int:
    """At least one page, even for an empty result set."""
    if count <= 0:
        return 1
    return ceil(count / page_size)

def clamp_page(page: int, pages: int) -> int:
    return max(1, min(page, pages))

def paginate(items: List[Any], page: int, page_size: int) -> List[Any]:
    """Slice for a 1-based page; the page is clamped into range first."""
    page = clamp_page(page, total_pages(len(items), page_size))
    start = (page - 1) * page_size
    return items[start:start + page_size]
