# http_client.py
from __future__ import annotations
import sys, uuid
from typing import Optional
import httpx

class HttpClient:
    """
    - Reusable async HTTP client with:
      - base_url
      - httpx timeouts
      - one attempt per request (no retries)
      - raise on any non-2xx
    """

    def __init__(
        self,
        base_url: str,
        connect_timeout: float,
        read_timeout: float,
        *,
        default_headers: Optional[dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=read_timeout,
            pool=read_timeout,
        )
        self.default_headers = {"Accept": "application/json", **(default_headers or {})}
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, headers=self.default_headers)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None:
            await self._client.aclose()

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Issue a single request and return the 2xx response.
        Non-2xx raises httpx.HTTPStatusError, transport failures raise httpx.HTTPError.
        Each request tagged with X-Request-Id for traceability.
        """
        assert self._client is not None
        req_id = kwargs.pop("req_id", str(uuid.uuid4()))
        headers = kwargs.pop("headers", {})
        headers.setdefault("X-Request-Id", req_id)
        kwargs["headers"] = headers

        url = self.base_url + path # for logs

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            print(f"[req#{req_id}] [network] {method} {url}: {type(e).__name__}: {e}", file=sys.stderr)
            raise

        status = resp.status_code
        if not (200 <= status < 300):
            print(f"[req#{req_id}] [fatal] {method} {url} returned {status}", file=sys.stderr)
            resp.raise_for_status()
        return resp
