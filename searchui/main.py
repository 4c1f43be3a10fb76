# searchui/main.py
import json
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response
from fastapi.templating import Jinja2Templates
from prometheus_fastapi_instrumentator import Instrumentator

from searchui import config
from searchui.errors import SearchUIError
from searchui.models import SearchConfig, SearchResponse, ViewState
from searchui.pagination import Paginator
from searchui.query_builder import build_params
from searchui.renderer import render_results
from searchui.solr_client import SolrClient, require_term

# ---------- Logging: JSON lines ----------
logging.basicConfig(level=config.LOG_LEVEL, format="%(message)s")
log = logging.getLogger("searchui")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# ---------- Lifespan: initialize/teardown the upstream client ----------
solr: Optional[SolrClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global solr
    solr = SolrClient(config.SOLR_SELECT_URL, timeout=config.SOLR_TIMEOUT)
    try:
        yield
    finally:
        await solr.aclose()
        solr = None


def get_solr() -> SolrClient:
    assert solr is not None
    return solr


# ---------- FastAPI app ----------
app = FastAPI(title="Solr Search UI", version="0.1.0", lifespan=lifespan)

# Prometheus metrics at /metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")


# Access-log middleware (timing every request)
@app.middleware("http")
async def access_log(request: Request, call_next):
    t0 = time.perf_counter()
    resp = await call_next(request)
    took_ms = int((time.perf_counter() - t0) * 1000)
    log.info(
        json.dumps(
            {
                "event": "http_request",
                "method": request.method,
                "path": request.url.path,
                "status": resp.status_code,
                "took_ms": took_ms,
            }
        )
    )
    return resp


@app.exception_handler(SearchUIError)
async def search_error_handler(request: Request, exc: SearchUIError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# ---------- Endpoints ----------
@app.get("/healthz")
def healthz():
    return {"status": "ok", "message": "service running", "solr": config.SOLR_SELECT_URL}


@app.get("/api/solr")
async def solr_proxy(request: Request, client: SolrClient = Depends(get_solr)):
    """Forward the query string untouched to the Solr select handler."""
    require_term(request.query_params)
    body = await client.forward(request.url.query)
    return Response(content=body, status_code=200, media_type="application/json")


@app.get("/")
async def search_page(
    request: Request,
    q: str = Query(""),
    start: int = Query(0, ge=0),
    client: SolrClient = Depends(get_solr),
):
    cfg = SearchConfig()
    term = q.strip()
    # hand-edited links may point between pages
    pager = Paginator(rows=cfg.rows, offset=start - start % cfg.rows)

    response: Optional[SearchResponse] = None
    error: Optional[str] = None
    if term:
        try:
            response = await _select(client, term, pager, cfg)
        except SearchUIError as e:
            error = e.message

    page = render_results(response, term, rows=cfg.rows, error=error, max_length=cfg.max_length)
    if term:
        log.info(
            json.dumps(
                {
                    "event": "search",
                    "query_len": len(term),
                    "start": page.start,
                    "num_found": page.num_found,
                    "error": error is not None,
                }
            )
        )
    return templates.TemplateResponse(
        request,
        "search.html",
        {"query": q, "page": page},
    )


async def _select(client: SolrClient, term: str, pager: Paginator, cfg: SearchConfig) -> SearchResponse:
    state = ViewState(query=term, term=term, start=pager.offset)
    response = await client.select(build_params(state, cfg))
    # a stale link past the end of a shrunken index lands on the last page
    if response.response is not None and pager.clamp(response.response.numFound):
        state.start = pager.offset
        response = await client.select(build_params(state, cfg))
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("searchui.main:app", host="0.0.0.0", port=config.PORT, workers=config.WORKERS)
