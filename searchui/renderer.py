"""
Turns engine documents into display cards.

Title and content come from the engine's highlighted fragments when it sent
any for the current term, otherwise from the first stored value. Raw text is
escaped and gets the term wrapped in <span class="highlight"> locally, so
every card carries both a plain and an HTML rendition.
"""
import html
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from searchui import config
from searchui.models import Document, ResultCard, ResultPage, SearchResponse
from searchui.pagination import Paginator

ELLIPSIS = "..."
NO_TITLE = "No Title"
NO_CONTENT = "No Content"
NO_URL = "No URL"
NO_SCORE = "N/A"

ENGINE_MARK = "<em>"
ENGINE_UNMARK = "</em>"
LINK_SCHEMES = ("http", "https")


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def truncate_fragment(fragment: str, max_length: int) -> str:
    """Like truncate, but never leaves a cut or unclosed <em> mark behind."""
    if len(fragment) <= max_length:
        return fragment
    cut = re.sub(r"<[^>]*\Z", "", fragment[:max_length])
    if cut.count(ENGINE_MARK) > cut.count(ENGINE_UNMARK):
        cut += ENGINE_UNMARK
    return cut + ELLIPSIS


def safe_url(value: Any) -> Optional[str]:
    """Crawled URLs are only linked when they are plain http(s)."""
    if not value:
        return None
    url = str(value).strip()
    if urlsplit(url).scheme.lower() not in LINK_SCHEMES:
        return None
    return url


def pick_fragment(fragments: Optional[List[str]], term: str) -> Optional[str]:
    """First engine fragment that actually marks a match, if the term is set."""
    if not term or not term.strip() or not fragments:
        return None
    for frag in fragments:
        if ENGINE_MARK in frag:
            return frag
    return None


def fragment_html(fragment: str) -> str:
    # keep the engine's <em> marks, escape everything else
    return (
        html.escape(fragment)
        .replace("&lt;em&gt;", "<em>")
        .replace("&lt;/em&gt;", "</em>")
    )


def mark_term(text: str, term: str) -> str:
    """Escape `text` and wrap case-insensitive occurrences of `term`."""
    term = (term or "").strip()
    if not term:
        return html.escape(text)
    parts = re.split(f"({re.escape(term)})", text, flags=re.IGNORECASE)
    out = []
    for part in parts:
        if part and part.lower() == term.lower():
            out.append(f'<span class="highlight">{html.escape(part)}</span>')
        else:
            out.append(html.escape(part))
    return "".join(out)


def _format_score(value) -> str:
    if value is None:
        return NO_SCORE
    if isinstance(value, (int, float)):
        return f"{value:.3f}"
    return str(value)


def _resolve(doc: Document, field: str, term: str, hl: Dict[str, List[str]], placeholder: str):
    """(plain text, is engine fragment) for one display field."""
    frag = pick_fragment(hl.get(field), term)
    if frag is not None:
        return frag, True
    raw = doc.first(field)
    if raw is None or raw == "":
        return placeholder, False
    return str(raw), False


def render_document(
    doc: Document,
    term: str = "",
    highlighting: Optional[Dict[str, Dict[str, List[str]]]] = None,
    rank: int = 1,
    max_length: int = config.CONTENT_MAX_LENGTH,
) -> ResultCard:
    hl = (highlighting or {}).get(doc.id or "", {})

    title, title_from_engine = _resolve(doc, "title", term, hl, NO_TITLE)
    content, content_from_engine = _resolve(doc, "content", term, hl, NO_CONTENT)
    if content_from_engine:
        content = truncate_fragment(content, max_length)
    else:
        content = truncate(content, max_length)

    raw_url = doc.first("url")
    url = safe_url(raw_url)
    return ResultCard(
        id=doc.id,
        title=title,
        title_html=fragment_html(title) if title_from_engine else mark_term(title, term),
        url=url,
        url_label=str(raw_url) if raw_url else NO_URL,
        content=content,
        content_html=fragment_html(content) if content_from_engine else mark_term(content, term),
        boost=_format_score(doc.first("boost")),
        rank=rank,
    )


def render_results(
    response: Optional[SearchResponse],
    term: str = "",
    rows: int = config.PAGE_SIZE,
    error: Optional[str] = None,
    max_length: int = config.CONTENT_MAX_LENGTH,
) -> ResultPage:
    term = term or ""
    page = ResultPage(term=term, rows=rows, error=error)
    if error is not None:
        return page

    body = response.response if response is not None else None
    if body is None:
        page.no_results = bool(term.strip()) and response is not None
        return page

    page.num_found = body.numFound
    page.start = body.start
    page.cards = [
        render_document(doc, term, response.highlighting, body.start + i + 1, max_length)
        for i, doc in enumerate(body.docs)
    ]
    page.no_results = not page.cards and bool(term.strip())

    pager = Paginator(rows=rows, offset=body.start, total=body.numFound)
    page.has_previous = pager.has_previous
    page.has_next = pager.has_next
    return page
