"""
Command-line entrypoint for the character catalog.

- Parses CLI args and config
- Initializes HttpClient, CharactersAPI and CatalogEngine
- Applies the requested filters, waits for the debounced fetch to settle,
  then applies sort / page size / page
- Prints the current page, and optionally one character's details

Remote errors are shown the way a UI would show them; KeyboardInterrupt is handled cleanly.
"""
from __future__ import annotations
import asyncio, sys
from typing import Optional

from http_client import HttpClient

from .api import CharactersAPI
from .config import parse_args
from .engine import CatalogEngine
from .models import CatalogView, Character

def format_table(view: CatalogView) -> str:
    lines = [f"{'ID':>5}  {'Name':<32} {'Status':<8} {'Species':<16} Gender"]
    for c in view.items:
        lines.append(f"{c['id']:>5}  {c['name'][:32]:<32} {c['status']:<8} {c['species'][:16]:<16} {c['gender']}")
    return "\n".join(lines)

def format_detail(c: Character) -> str:
    return "\n".join([
        f"--- {c['name']} (#{c['id']}) ---",
        f"Status     : {c['status']}",
        f"Species    : {c['species']}",
        f"Type       : {c['type'] or '-'}",
        f"Gender     : {c['gender']}",
        f"Origin     : {c['origin']['name'] or '-'}",
        f"Location   : {c['location']['name'] or '-'}",
        f"Episodes   : {len(c['episode'])}",
        f"Created    : {c['created']}",
        f"Image      : {c['image']}",
    ])

def render(view: CatalogView, detail: Optional[Character] = None) -> str:
    if view.loading:
        return "Loading characters…"
    if view.error is not None:
        return f"Error: {view.error}"
    if view.empty:
        return "No characters match these filters."
    out = [
        f"Showing {len(view.items)} of {view.total_items} character(s) (page {view.page}/{view.total_pages})",
        format_table(view),
    ]
    if view.truncated:
        out.append("[results truncated: raise --max-records to load more]")
    if detail is not None:
        out.append(format_detail(detail))
    return "\n".join(out)

async def run(args) -> CatalogView:
    async with HttpClient(
        base_url=args.base_url,
        connect_timeout=args.connect_timeout,
        read_timeout=args.read_timeout,
    ) as http:
        engine = CatalogEngine(
            CharactersAPI(http),
            debounce_seconds=args.debounce,
            items_per_page=args.page_size,
            max_records=args.max_records,
        )
        print(f"""
            ====== Character catalog ======
            Base URL       : {args.base_url}
            Page size      : {args.page_size}
            Max records    : {args.max_records or 'unbounded'}
            Timeouts (s)   : connect={args.connect_timeout} read={args.read_timeout}
            ===============================
        """)
        try:
            engine.set_name_filter(args.name)
            engine.set_status_filter(args.status)
            engine.set_species_filter(args.species)
            engine.set_gender_filter(args.gender)
            engine.start()
            await engine.settle()
        finally:
            await engine.aclose()

        if args.sort_by:
            engine.set_sort_by(args.sort_by)
            engine.set_sort_order(args.sort_order)
        engine.set_page(args.page)
        view = engine.view()

        detail = None
        if args.show is not None:
            detail = engine.find(args.show)
            if detail is None and view.error is None:
                print(f"[warn] character {args.show} is not in the current results", file=sys.stderr)
        print(render(view, detail))
        return view

def main() -> None:
    args = parse_args()
    try:
        view = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Aborted.", file=sys.stderr)
        sys.exit(130)
    if view.error is not None:
        sys.exit(1)
