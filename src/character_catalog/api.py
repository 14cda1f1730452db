"""
Async adapter around the Rick and Morty `/character` endpoint.

`CharactersAPI.fetch_page` is the only place that knows the remote schema:
- serializes the page number and non-empty filters into query params
- maps `{info, results}` onto a flat `PageResult`
- turns HTTP error statuses and connection failures into `RemoteError`

One attempt per call; there is no retry and no backoff here.
"""
from __future__ import annotations
import sys
from typing import Any, Dict, Optional

import httpx

from http_client import HttpClient

from .errors import NETWORK_ERROR_MESSAGE, RemoteError
from .models import GENDERS, STATUSES, ApiResponse, Character, PageResult
from .utils import build_query_params, normalize_choice

CHARACTER_PATH = "/character"

def to_character(raw: Dict[str, Any]) -> Character:
    """Type mapping only; unrecognised status/gender values fall back to "unknown"."""
    origin = raw.get("origin") or {}
    location = raw.get("location") or {}
    return {
        "id": int(raw["id"]),
        "name": raw.get("name", ""),
        "status": normalize_choice(raw.get("status"), STATUSES),
        "species": raw.get("species", ""),
        "type": raw.get("type") or "",
        "gender": normalize_choice(raw.get("gender"), GENDERS),
        "origin": {"name": origin.get("name", ""), "url": origin.get("url", "")},
        "location": {"name": location.get("name", ""), "url": location.get("url", "")},
        "image": raw.get("image", ""),
        "episode": list(raw.get("episode") or []),
        "url": raw.get("url", ""),
        "created": raw.get("created", ""),
    }

def error_message(resp: httpx.Response) -> str:
    """Prefer the API's own `{"error": ...}` text, else a status-code message."""
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str) and payload["error"]:
        return payload["error"]
    return f"API error: {resp.status_code}"

class CharactersAPI:

    def __init__(self, http: HttpClient):
        self.http = http

    async def fetch_page(self, page: int, filters: Optional[Dict[str, str]] = None) -> PageResult:
        params = build_query_params(page, filters or {})
        try:
            resp = await self.http.request("GET", CHARACTER_PATH, params=params)
        except httpx.HTTPStatusError as e:
            raise RemoteError(error_message(e.response), status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise RemoteError(NETWORK_ERROR_MESSAGE) from e

        try:
            body: ApiResponse = resp.json()
        except ValueError:
            print(f"[warn] Non-JSON for page {page}: {resp.text[:200]}", file=sys.stderr)
            return {"results": [], "count": 0, "pages": 0, "next": None, "prev": None}

        info = body.get("info") or {}
        return {
            "results": [to_character(r) for r in body.get("results") or []],
            "count": int(info.get("count", 0)),
            "pages": int(info.get("pages", 0)),
            "next": info.get("next"),
            "prev": info.get("prev"),
        }
