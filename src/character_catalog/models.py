"""
Models for the Rick and Morty character API and the catalog engine.

Includes:
- LocationRef: opaque {name, url} reference (origin / last known location)
- Character: one record from /character
- PageInfo, ApiResponse: raw paginated response
- PageResult: adapter output, one page of records plus pagination metadata
- QueryState: user-mutable filters, sort and page settings owned by the engine
- CatalogView: what the engine hands to a presentation layer
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, TypedDict

STATUSES = ("Alive", "Dead", "unknown")
GENDERS = ("Female", "Male", "Genderless", "unknown")
SORT_KEYS = ("name", "id")
SORT_ORDERS = ("asc", "desc")
PAGE_SIZES = (5, 10, 20, 50, 100, 250)
DEFAULT_PAGE_SIZE = 20

SortKey = Literal["name", "id"]
SortOrder = Literal["asc", "desc"]

class LocationRef(TypedDict):
    name: str
    url: str

# GET /character (results[])
class Character(TypedDict):
    id: int
    name: str
    status: str              # one of STATUSES
    species: str
    type: str                # may be ""
    gender: str              # one of GENDERS
    origin: LocationRef
    location: LocationRef
    image: str
    episode: List[str]       # episode URLs
    url: str
    created: str             # opaque timestamp, never parsed

# GET /character (info)
class PageInfo(TypedDict):
    count: int
    pages: int
    next: Optional[str]
    prev: Optional[str]

# GET /character (page)
class ApiResponse(TypedDict):
    info: PageInfo
    results: List[Character]

class PageResult(TypedDict):
    results: List[Character]
    count: int
    pages: int
    next: Optional[str]      # None on the last page
    prev: Optional[str]


@dataclass
class QueryState:
    name: str = ""
    status: str = ""
    species: str = ""
    gender: str = ""
    sort_by: Optional[SortKey] = None
    sort_order: SortOrder = "asc"
    items_per_page: int = DEFAULT_PAGE_SIZE
    page: int = 1

    def filters(self) -> Dict[str, str]:
        """Only the filters that actually constrain the query."""
        values = {"name": self.name, "status": self.status, "species": self.species, "gender": self.gender}
        return {k: v for k, v in values.items() if v}


@dataclass(frozen=True)
class CatalogView:
    items: List[Character] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    page: int = 1
    total_pages: int = 1
    total_items: int = 0
    truncated: bool = False

    @property
    def empty(self) -> bool:
        # "no results" only once nothing is loading and nothing failed
        return not self.loading and self.error is None and not self.items
