import httpx
import pytest
from fastapi.testclient import TestClient

from searchui.main import app, get_solr
from searchui.solr_client import SolrClient

SELECT_URL = "http://solr.test:8983/solr/nutch/select"


def solr_body(num_found=45, start=0, docs=None, highlighting=None):
    body = {
        "responseHeader": {"status": 0, "QTime": 3, "params": {"q": "mars"}},
        "response": {
            "numFound": num_found,
            "start": start,
            "numFoundExact": True,
            "docs": docs if docs is not None else [
                {
                    "id": "https://example.sa/mars",
                    "title": ["Life on Mars"],
                    "content": ["Mars is the fourth planet from the Sun."],
                    "url": ["https://example.sa/mars"],
                    "host": ["example.sa"],
                    "boost": [1.25],
                    "digest": ["d41d8cd9"],
                    "tstamp": ["2024-01-01T00:00:00Z"],
                    "_version_": 1790000000000000000,
                }
            ],
        },
    }
    if highlighting is not None:
        body["highlighting"] = highlighting
    return body


class FakeSolr:
    """Records forwarded requests and answers with a canned body or status."""

    def __init__(self):
        self.requests = []
        self.status = 200
        self.body = solr_body()
        self.raise_exc = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_exc is not None:
            raise self.raise_exc
        return httpx.Response(self.status, json=self.body)


@pytest.fixture
def fake_solr():
    return FakeSolr()


@pytest.fixture
def client(fake_solr):
    solr = SolrClient(SELECT_URL, transport=httpx.MockTransport(fake_solr.handler))
    app.dependency_overrides[get_solr] = lambda: solr
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
