from conftest import solr_body


def test_empty_page_has_search_box(client, fake_solr):
    r = client.get("/")
    assert r.status_code == 200
    assert 'name="q"' in r.text
    assert fake_solr.requests == []


def test_results_rendered(client, fake_solr):
    r = client.get("/", params={"q": "mars"})
    assert r.status_code == 200
    assert "Life on Mars" in r.text
    assert 'href="https://example.sa/mars"' in r.text
    assert '<span class="highlight">Mars</span>' in r.text
    assert "/?q=mars&start=20" in r.text
    sent = fake_solr.requests[0].url.params
    assert sent["q"] == "mars"
    assert sent["sort"] == "boost desc"


def test_no_results(client, fake_solr):
    fake_solr.body = solr_body(num_found=0, docs=[])
    r = client.get("/", params={"q": "nothing"})
    assert "No documents found." in r.text


def test_upstream_error_shown(client, fake_solr):
    fake_solr.status = 502
    r = client.get("/", params={"q": "mars"})
    assert r.status_code == 200
    assert "Error: HTTP error! Status: 502" in r.text


def test_stale_offset_is_clamped(client, fake_solr):
    fake_solr.body = solr_body(num_found=25)
    client.get("/", params={"q": "mars", "start": 100})
    starts = [req.url.params["start"] for req in fake_solr.requests]
    assert starts == ["100", "20"]


def test_crawled_url_cannot_inject_script(client, fake_solr):
    evil = "https://x.sa/');alert(document.domain);//"
    fake_solr.body = solr_body(docs=[{"id": "1", "title": ["t"], "url": [evil]}])
    r = client.get("/", params={"q": "t"})
    assert "onclick" not in r.text
    assert 'data-href="https://x.sa/&#39;);alert(document.domain);//"' in r.text


def test_javascript_url_not_linked(client, fake_solr):
    fake_solr.body = solr_body(docs=[{"id": "1", "title": ["t"], "url": ["javascript:alert(1)"]}])
    r = client.get("/", params={"q": "t"})
    assert 'href="javascript:' not in r.text
    assert "data-href" not in r.text.split("<script>")[0]


def test_malformed_engine_body_shows_error(client, fake_solr):
    fake_solr.body = {"response": {"numFound": "lots", "docs": []}}
    r = client.get("/", params={"q": "mars"})
    assert r.status_code == 200
    assert "Error: Unexpected response from search engine" in r.text


def test_offset_snapped_to_page_boundary(client, fake_solr):
    client.get("/", params={"q": "mars", "start": 25})
    assert fake_solr.requests[0].url.params["start"] == "20"


def test_long_query_renders_page(client, fake_solr):
    r = client.get("/", params={"q": "mars " * 200})
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
