from __future__ import annotations
import sys
from typing import Dict, List, NamedTuple, Optional, Protocol

from .models import Character, PageResult

class PageSource(Protocol):
    async def fetch_page(self, page: int, filters: Optional[Dict[str, str]] = None) -> PageResult: ...

class FetchOutcome(NamedTuple):
    records: List[Character]
    truncated: bool

async def fetch_all_pages(api: PageSource, filters: Dict[str, str], max_records: Optional[int] = None) -> FetchOutcome:
    """
    Walk every page of /character for `filters` and return the combined records.
    Starts with page 1 and keeps following while the API reports a next page,
    one request at a time. RemoteError from any page aborts the walk.

    With `max_records` set, stops once that many records are held and more
    pages remain, returning truncated=True.
    """
    records: List[Character] = []
    page = 1
    while True:
        result = await api.fetch_page(page, filters)
        records.extend(result["results"])
        has_next = result["next"] is not None

        if max_records is not None and len(records) >= max_records and (has_next or len(records) > max_records):
            print(f"[warn] Stopping at {max_records} records (API reports {result['count']}).", file=sys.stderr)
            return FetchOutcome(records[:max_records], True)
        if not has_next:
            return FetchOutcome(records, False)
        page += 1
