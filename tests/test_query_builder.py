from searchui.models import FieldBoost, SearchConfig, ViewState
from searchui.query_builder import build_params, format_qf


def test_default_params():
    p = build_params(ViewState(term="mars"))
    assert p["q"] == "mars"
    assert p["defType"] == "dismax"
    assert p["qf"] == "title content url"
    assert p["sort"] == "boost desc"
    assert p["rows"] == SearchConfig().rows
    assert p["start"] == 0
    assert p["hl"] == "on"
    assert p["hl.fl"] == "content"
    assert p["hl.snippets"] == 3
    assert p["rq"] == "{!rerank reRankQuery=$rqq reRankDocs=1000 reRankWeight=30}"
    assert p["rqq"] == "url:*\\.sa"


def test_no_empty_values_for_non_empty_terms():
    cfg = SearchConfig(use_params="", highlight=False, rerank=False, indent=False)
    for term in ["a", "mars rover", "  padded  ", "ünïcode"]:
        p = build_params(ViewState(term=term, start=10), cfg)
        assert p["q"] == term.strip()
        for k, v in p.items():
            assert v not in (None, "", False), k
        assert "useParams" not in p
        assert "hl" not in p and "rq" not in p


def test_blank_term_has_no_q():
    assert "q" not in build_params(ViewState(term=""))
    assert "q" not in build_params(ViewState(term="   "))


def test_field_boosts_format_qf():
    boosts = {
        "title": FieldBoost(included=True, weight=5),
        "content": FieldBoost(included=True, weight=1.5),
        "url": FieldBoost(included=False, weight=9),
    }
    p = build_params(ViewState(term="x", field_boosts=boosts))
    assert p["qf"] == "title^5 content^1.5"


def test_config_boosts_used_when_view_has_none():
    cfg = SearchConfig(field_boosts={"host": FieldBoost(weight=2)})
    assert build_params(ViewState(term="x"), cfg)["qf"] == "host^2"


def test_malformed_weight_passed_through():
    assert format_qf({"title": FieldBoost(weight="abc")}) == "title^abc"


def test_all_fields_excluded_drops_qf():
    p = build_params(ViewState(term="x", field_boosts={"title": FieldBoost(included=False)}))
    assert "qf" not in p
