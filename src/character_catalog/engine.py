"""
Aggregation engine for the character catalog.

Owns every piece of mutable state: the aggregate (all records matching the
current filters), fetch status and error, and the QueryState (filters, sort,
page, page size). Presentation code reads `view()` and calls the intent
methods; it never touches the state directly.

Flow:
    filter intent → debounced task (last write wins) → fetch sequence tagged
    with a generation → aggregate replaced only if that generation is still
    current → view() = paginate(sort(aggregate))

Everything runs on one asyncio loop, so no locks are involved. Filter intents
must be called from inside a running loop since they schedule tasks.
"""
from __future__ import annotations
import asyncio, sys
from typing import List, Literal, Optional, Set

from .errors import RemoteError
from .models import DEFAULT_PAGE_SIZE, PAGE_SIZES, SORT_KEYS, SORT_ORDERS, CatalogView, Character, QueryState
from .pipeline import PageSource, fetch_all_pages
from .utils import clamp_page, paginate, sort_records, total_pages

DEBOUNCE_SECONDS = 0.5
FALLBACK_ERROR_MESSAGE = "Something went wrong while loading characters. Please try again later."

FetchStatus = Literal["idle", "loading", "success", "error"]

class CatalogEngine:

    def __init__(
        self,
        api: PageSource,
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        items_per_page: int = DEFAULT_PAGE_SIZE,
        max_records: Optional[int] = None,
    ):
        if items_per_page not in PAGE_SIZES:
            raise ValueError(f"items_per_page must be one of {PAGE_SIZES}, got {items_per_page}")
        self.api = api
        self.debounce_seconds = debounce_seconds
        self.max_records = max_records
        self.state = QueryState(items_per_page=items_per_page)
        self.fetch_status: FetchStatus = "idle"
        self.error: Optional[str] = None
        self.truncated = False
        self._aggregate: List[Character] = []
        self._generation = 0
        self._debounce: Optional[asyncio.Task] = None
        self._sequences: Set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self.fetch_status == "loading"

    @property
    def aggregate(self) -> List[Character]:
        return list(self._aggregate)

    # ---------------- fetching ----------------

    def start(self) -> None:
        """Initial load; goes through the same debounced path as a filter edit."""
        self._schedule_fetch()

    def _schedule_fetch(self) -> None:
        if self._debounce is not None and not self._debounce.done():
            self._debounce.cancel()
        self._debounce = asyncio.get_running_loop().create_task(self._debounced())

    async def _debounced(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self.refresh()

    def refresh(self) -> asyncio.Task:
        """Start a fetch sequence right now for the current filters."""
        self._generation += 1
        generation = self._generation
        filters = self.state.filters()

        self._aggregate = []
        self.error = None
        self.truncated = False
        self.fetch_status = "loading"
        self.state.page = 1

        task = asyncio.get_running_loop().create_task(self._run_sequence(generation, filters))
        self._sequences.add(task)
        task.add_done_callback(self._sequences.discard)
        return task

    async def _run_sequence(self, generation: int, filters: dict) -> None:
        print(f"[fetch#{generation}] fetching characters filters={filters}", file=sys.stderr)
        try:
            outcome = await fetch_all_pages(self.api, filters, self.max_records)
        except RemoteError as e:
            if generation != self._generation:
                print(f"[fetch#{generation}] stale failure discarded (current #{self._generation}): {e}", file=sys.stderr)
                return
            print(f"[fetch#{generation}] failed: {e}", file=sys.stderr)
            self._aggregate = []
            self.error = e.message or FALLBACK_ERROR_MESSAGE
            self.fetch_status = "error"
            return
        except Exception as e:
            if generation != self._generation:
                print(f"[fetch#{generation}] stale failure discarded (current #{self._generation}): {e!r}", file=sys.stderr)
                return
            print(f"[fetch#{generation}] failed: {e!r}", file=sys.stderr)
            self._aggregate = []
            self.error = FALLBACK_ERROR_MESSAGE
            self.fetch_status = "error"
            return

        if generation != self._generation:
            print(f"[fetch#{generation}] stale result discarded (current #{self._generation})", file=sys.stderr)
            return
        self._aggregate = outcome.records
        self.truncated = outcome.truncated
        self.fetch_status = "success"
        print(f"[fetch#{generation}] {len(outcome.records)} character(s) loaded", file=sys.stderr)

    async def settle(self) -> None:
        """Wait until no debounce is pending and no sequence is in flight."""
        while True:
            pending = [t for t in (self._debounce, *self._sequences) if t is not None and not t.done()]
            if not pending:
                return
            await asyncio.wait(pending)

    async def aclose(self) -> None:
        tasks = [t for t in (self._debounce, *self._sequences) if t is not None and not t.done()]
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ---------------- intents ----------------

    def _set_filter(self, field: str, value: Optional[str]) -> None:
        value = value or ""
        if getattr(self.state, field) == value:
            return
        setattr(self.state, field, value)
        self._schedule_fetch()

    def set_name_filter(self, value: Optional[str]) -> None:
        self._set_filter("name", value)

    def set_status_filter(self, value: Optional[str]) -> None:
        self._set_filter("status", value)

    def set_species_filter(self, value: Optional[str]) -> None:
        self._set_filter("species", value)

    def set_gender_filter(self, value: Optional[str]) -> None:
        self._set_filter("gender", value)

    def clear_filters(self) -> None:
        s = self.state
        if not (s.name or s.status or s.species or s.gender):
            return
        s.name = s.status = s.species = s.gender = ""
        self._schedule_fetch()

    def set_sort_by(self, key: Optional[str]) -> None:
        if not key:
            self.clear_sort()
            return
        if key not in SORT_KEYS:
            raise ValueError(f"sort key must be one of {SORT_KEYS}, got {key!r}")
        self.state.sort_by = key

    def set_sort_order(self, order: str) -> None:
        if order not in SORT_ORDERS:
            raise ValueError(f"sort order must be one of {SORT_ORDERS}, got {order!r}")
        if self.state.sort_by is None:
            print(f"[warn] ignoring sort order {order!r}: no sort key set", file=sys.stderr)
            return
        self.state.sort_order = order

    def clear_sort(self) -> None:
        self.state.sort_by = None
        self.state.sort_order = "asc"

    def set_page(self, page: int) -> None:
        self.state.page = clamp_page(int(page), total_pages(len(self._aggregate), self.state.items_per_page))

    def set_items_per_page(self, size: int) -> None:
        if size not in PAGE_SIZES:
            raise ValueError(f"items_per_page must be one of {PAGE_SIZES}, got {size}")
        self.state.items_per_page = size
        self.state.page = 1

    # ---------------- derived view ----------------

    def view(self) -> CatalogView:
        s = self.state
        ordered = sort_records(self._aggregate, s.sort_by, s.sort_order)
        pages = total_pages(len(ordered), s.items_per_page)
        page = clamp_page(s.page, pages)
        return CatalogView(
            items=paginate(ordered, page, s.items_per_page),
            loading=self.loading,
            error=self.error,
            page=page,
            total_pages=pages,
            total_items=len(ordered),
            truncated=self.truncated,
        )

    def find(self, record_id: int) -> Optional[Character]:
        """Detail lookup within the current aggregate; origin/location stay unresolved."""
        for c in self._aggregate:
            if c["id"] == record_id:
                return c
        return None
