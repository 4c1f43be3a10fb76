import asyncio
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Set

import httpx

from searchui import config
from searchui.errors import SearchUIError, UpstreamError
from searchui.models import FieldBoost, ResultPage, SearchConfig, SearchResponse, ViewState
from searchui.pagination import Paginator
from searchui.query_builder import build_params
from searchui.renderer import render_results

log = logging.getLogger("searchui.fetcher")

Params = Dict[str, Any]
Transport = Callable[[Params], Awaitable[SearchResponse]]


class HttpTransport:
    """Calls the /api/solr proxy over HTTP."""

    def __init__(
        self,
        proxy_url: str = config.PROXY_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.proxy_url = proxy_url
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __call__(self, params: Params) -> SearchResponse:
        try:
            resp = await self.client.get(self.proxy_url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or e.__class__.__name__) from e
        if not resp.is_success:
            raise UpstreamError(_error_message(resp))
        try:
            return SearchResponse.model_validate(resp.json())
        except ValueError as e:
            raise UpstreamError(str(e)) from e

    async def aclose(self):
        await self.client.aclose()


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP error! Status: {resp.status_code}"


# ---------- Fetcher ----------

class FetchState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SETTLED = "settled"


class ResultFetcher:
    """
    Holds the outcome of the latest query.

    Every request gets a sequence number; a completion is applied only if its
    number is higher than the last one applied, so a slow older response can
    never replace a newer one. Superseded requests are not cancelled.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self.state = FetchState.IDLE
        self.data: Optional[SearchResponse] = None
        self.error: Optional[str] = None
        self.requests_issued = 0
        self._seq = 0
        self._applied = 0

    async def fetch(self, params: Params) -> Optional[SearchResponse]:
        """Returns the response when it became current state, else None."""
        if not str(params.get("q") or "").strip():
            # clearing the box supersedes anything still in flight
            self._seq += 1
            self._applied = self._seq
            self.state = FetchState.IDLE
            self.data = None
            self.error = None
            return None

        self._seq += 1
        seq = self._seq
        self.requests_issued += 1
        self.state = FetchState.LOADING

        data: Optional[SearchResponse] = None
        error: Optional[str] = None
        try:
            data = await self.transport(params)
        except SearchUIError as e:
            error = e.message

        if not self._apply(seq, data, error):
            return None
        return data

    def _apply(self, seq: int, data: Optional[SearchResponse], error: Optional[str]) -> bool:
        if seq <= self._applied:
            log.debug(json.dumps({"event": "stale_response", "seq": seq, "applied": self._applied}))
            return False
        self._applied = seq
        self.data = data
        self.error = error
        self.state = FetchState.LOADING if self._applied < self._seq else FetchState.SETTLED
        return True


# ---------- Debounce ----------

class Debouncer:
    """Coalesces bursts of values; only the last one reaches `callback` after `delay`."""

    def __init__(self, delay: float, callback: Callable[[Any], None]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: Any):
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any):
        self._handle = None
        self.callback(value)


# ---------- Session ----------

class SearchSession:
    """
    One search page: view state, debounced input, fetcher and paginator.
    Must be driven from inside a running event loop.
    """

    def __init__(
        self,
        transport: Transport,
        cfg: Optional[SearchConfig] = None,
        debounce_seconds: float = config.DEBOUNCE_SECONDS,
    ):
        self.cfg = cfg or SearchConfig()
        self.view = ViewState()
        self.fetcher = ResultFetcher(transport)
        self.paginator = Paginator(rows=self.cfg.rows)
        self._debouncer = Debouncer(debounce_seconds, self._activate)
        self._tasks: Set[asyncio.Task] = set()
        self._last_params: Optional[Params] = None

    # ----- user actions -----

    def type(self, text: str):
        self.view.query = text
        self._debouncer.push(text)

    def submit(self):
        self._debouncer.cancel()
        self.paginator.reset()
        # explicit submit always reaches the engine, even for an unchanged query
        self._last_params = None
        self._activate(self.view.query)

    def next_page(self) -> bool:
        moved = self.paginator.next()
        if moved:
            self._refresh()
        return moved

    def previous_page(self) -> bool:
        moved = self.paginator.previous()
        if moved:
            self._refresh()
        return moved

    def set_field_boost(self, field: str, included: bool = True, weight: Any = 1):
        boosts = dict(self.view.field_boosts or self.cfg.field_boosts or {})
        boosts[field] = FieldBoost(included=included, weight=weight)
        self.view.field_boosts = boosts
        self.paginator.reset()
        self._refresh()

    # ----- plumbing -----

    def _activate(self, term: str):
        if term != self.view.term:
            self.view.term = term
            self.paginator.reset()
        self._refresh()

    def _refresh(self):
        self.view.start = self.paginator.offset
        params = build_params(self.view, self.cfg)
        if params == self._last_params:
            return
        self._last_params = params
        task = asyncio.get_running_loop().create_task(self._run(params))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, params: Params):
        result = await self.fetcher.fetch(params)
        if result is None or result.response is None:
            return
        # index may have shrunk under the current offset
        if self.paginator.clamp(result.response.numFound):
            self._refresh()

    async def settle(self):
        """Wait until every issued request (and any follow-up) has completed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    @property
    def state(self) -> FetchState:
        return self.fetcher.state

    @property
    def page(self) -> ResultPage:
        return render_results(
            self.fetcher.data,
            self.view.term,
            rows=self.cfg.rows,
            error=self.fetcher.error,
            max_length=self.cfg.max_length,
        )
