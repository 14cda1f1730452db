# http_client.py
from __future__ import annotations
import sys, uuid
from typing import Optional
import httpx

class HttpClient:
    """
    - Reusable async HTTP client with:
      - base_url
      - optional httpx timeouts (None disables them)
      - exactly one attempt per request, no retries
      - X-Request-Id tagging and stderr logging of failures
    """

    def __init__(
        self,
        base_url: str,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        *,
        default_headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=read_timeout,
            pool=read_timeout,
        )
        self.default_headers = {"Accept": "application/json", **(default_headers or {})}
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.default_headers,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Single-attempt request.
        Raises httpx.HTTPStatusError on any non-2xx and lets httpx.HTTPError
        (connect/read failures) propagate; both are logged with the request id.
        """
        assert self._client is not None, "HttpClient used outside 'async with'"

        req_id = kwargs.pop("req_id", str(uuid.uuid4()))
        headers = kwargs.pop("headers", {})
        headers.setdefault("X-Request-Id", req_id)
        kwargs["headers"] = headers

        url = self.base_url + path # for logs

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            print(f"[req#{req_id}] [network] {method} {url} params={kwargs.get('params')} failed: {e!r}", file=sys.stderr)
            raise

        status = resp.status_code
        if not (200 <= status < 300):
            print(f"[req#{req_id}] [fatal] {method} {url} returned {status}, not retrying", file=sys.stderr)
            resp.raise_for_status()
        return resp
