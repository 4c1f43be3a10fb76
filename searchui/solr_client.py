import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx

from searchui.errors import QueryValidationError, UpstreamError
from searchui.models import SearchResponse

log = logging.getLogger("searchui.solr")

MISSING_TERM = 'Query parameter "q" is required.'


def require_term(params: Mapping[str, Any]) -> None:
    if not params.get("q"):
        raise QueryValidationError(MISSING_TERM)


class SolrClient:
    """
    Single best-effort forward to the Solr select handler.
    No retry and no cache; one shared AsyncClient per process.
    """

    def __init__(
        self,
        select_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.select_url = select_url
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self):
        await self.client.aclose()

    def url_for(self, query_string: str) -> str:
        return f"{self.select_url}?{query_string}" if query_string else self.select_url

    async def forward(self, query_string: str) -> bytes:
        """
        Send the raw query string as-is; returns the upstream JSON body bytes.
        Raises UpstreamError on transport failure, non-2xx status or a non-JSON body.
        """
        url = self.url_for(query_string)
        try:
            resp = await self.client.get(url)
        except httpx.HTTPError as e:
            log.warning(json.dumps({"event": "solr_error", "url": url, "error": str(e)}))
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        if not resp.is_success:
            log.warning(
                json.dumps({"event": "solr_error", "url": url, "status": resp.status_code})
            )
            raise UpstreamError(f"HTTP error! Status: {resp.status_code}")

        try:
            resp.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from search engine: {e}") from e

        # equivalent command for operators replaying the request
        log.debug(json.dumps({"event": "solr_forward", "curl": f'curl -X GET "{url}"'}))
        return resp.content

    async def select(self, params: Dict[str, Any]) -> SearchResponse:
        require_term(params)
        body = await self.forward(urlencode(params))
        try:
            return SearchResponse.model_validate_json(body)
        except ValueError as e:
            raise UpstreamError(f"Unexpected response from search engine: {e}") from e
