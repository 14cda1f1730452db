from __future__ import annotations
import argparse, os
from typing import Optional

from .models import PAGE_SIZES, SORT_KEYS, SORT_ORDERS

def _optional(cast, name: str):
    raw = os.getenv(name)
    return cast(raw) if raw not in (None, "") else None

def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Rick and Morty character catalog")
    p.add_argument("--base-url", default=os.getenv("API_BASE_URL", "https://rickandmortyapi.com/api"))
    p.add_argument("--debounce", type=float, default=float(os.getenv("DEBOUNCE_SECONDS", "0.5")))
    p.add_argument("--max-records", type=_positive_int, default=_optional(int, "MAX_RECORDS"))
    p.add_argument("--connect-timeout", type=float, default=_optional(float, "CONNECT_TIMEOUT"))
    p.add_argument("--read-timeout", type=float, default=_optional(float, "READ_TIMEOUT"))

    p.add_argument("--name", default="")
    p.add_argument("--status", default="", choices=["", "alive", "dead", "unknown"])
    p.add_argument("--species", default="")
    p.add_argument("--gender", default="", choices=["", "female", "male", "genderless", "unknown"])

    p.add_argument("--sort-by", default=None, choices=SORT_KEYS)
    p.add_argument("--sort-order", default="asc", choices=SORT_ORDERS)
    p.add_argument("--page-size", type=int, default=int(os.getenv("PAGE_SIZE", "20")), choices=PAGE_SIZES)
    p.add_argument("--page", type=_positive_int, default=1)
    p.add_argument("--show", type=int, default=None, metavar="ID", help="print details for one character")
    return p

def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
