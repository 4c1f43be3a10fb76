from typing import Any, Dict, Optional

from searchui.models import FieldBoost, SearchConfig, ViewState


def _is_empty(v: Any) -> bool:
    # 0 is a real offset, only blanks count as empty
    if v is None or v is False:
        return True
    if isinstance(v, (str, list, dict, tuple)) and len(v) == 0:
        return True
    return False


def format_qf(boosts: Dict[str, FieldBoost]) -> str:
    """Included fields as `field^weight`, space separated."""
    parts = []
    for field, b in boosts.items():
        if not b.included:
            continue
        parts.append(f"{field}^{b.weight}")
    return " ".join(parts)


def rerank_directive(cfg: SearchConfig) -> str:
    return (
        "{!rerank reRankQuery=$rqq "
        f"reRankDocs={cfg.rerank_docs} reRankWeight={cfg.rerank_weight}}}"
    )


def build_params(state: ViewState, cfg: Optional[SearchConfig] = None) -> Dict[str, Any]:
    """
    View state -> flat engine parameter mapping.
    A blank term produces a mapping without `q`, which callers treat as "no query".
    """
    cfg = cfg or SearchConfig()
    term = (state.term or "").strip()

    boosts = state.field_boosts if state.field_boosts is not None else cfg.field_boosts
    qf = format_qf(boosts) if boosts is not None else cfg.qf

    params: Dict[str, Any] = {
        "q": term,
        "defType": cfg.def_type,
        "indent": "on" if cfg.indent else None,
        "qop": cfg.qop,
        "qf": qf,
        "rows": cfg.rows,
        "sort": cfg.sort,
        "start": max(0, state.start),
        "useParams": cfg.use_params,
    }
    if cfg.rerank:
        params["rq"] = rerank_directive(cfg)
        params["rqq"] = cfg.rerank_query
    if cfg.highlight:
        params["hl"] = "on"
        params["hl.fl"] = cfg.highlight_fields
        params["hl.snippets"] = cfg.highlight_snippets

    return {k: v for k, v in params.items() if not _is_empty(v)}
