from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional, Union

from searchui import config

MULTI_VALUED = ("title", "content", "url", "host", "boost", "digest", "tstamp")


# ---------- Engine response envelope ----------

class Document(BaseModel):
    """One engine document. Stored fields arrive as lists of values."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    title: Optional[List[Any]] = None
    content: Optional[List[Any]] = None
    url: Optional[List[Any]] = None
    host: Optional[List[Any]] = None
    boost: Optional[List[Any]] = None
    digest: Optional[List[Any]] = None
    tstamp: Optional[List[Any]] = None
    version: Optional[int] = Field(default=None, alias="_version_")

    @field_validator(*MULTI_VALUED, mode="before")
    @classmethod
    def _as_list(cls, v):
        # single-valued schema fields come back as scalars
        if v is None or isinstance(v, list):
            return v
        return [v]

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return None if v is None else str(v)

    def first(self, field: str) -> Optional[Any]:
        values = getattr(self, field, None)
        if values is None and self.model_extra:
            values = self.model_extra.get(field)
        if isinstance(values, list):
            return values[0] if values else None
        return values


class ResponseHeader(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: int = 0
    QTime: int = 0
    params: Dict[str, Any] = Field(default_factory=dict)


class ResultBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    numFound: int = 0
    start: int = 0
    numFoundExact: Optional[bool] = None
    docs: List[Document] = Field(default_factory=list)


class SearchResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    responseHeader: Optional[ResponseHeader] = None
    response: Optional[ResultBody] = None
    # doc id -> field -> marked-up fragments
    highlighting: Dict[str, Dict[str, List[str]]] = Field(default_factory=dict)


# ---------- View state + page configuration ----------

class FieldBoost(BaseModel):
    included: bool = True
    # passed through to the engine uninterpreted
    weight: Union[int, float, str] = 1


class SearchConfig(BaseModel):
    """Everything that used to differ between the page variants."""

    rows: int = config.PAGE_SIZE
    sort: str = "boost desc"
    def_type: str = "dismax"
    qop: str = "AND"
    qf: str = "title content url"
    # enables per-field weights; qf is then derived from these
    field_boosts: Optional[Dict[str, FieldBoost]] = None
    use_params: Optional[str] = None
    indent: bool = True

    highlight: bool = True
    highlight_fields: str = "content"
    highlight_snippets: int = 3

    rerank: bool = True
    rerank_query: str = "url:*\\.sa"
    rerank_docs: int = 1000
    rerank_weight: Union[int, float] = 30

    max_length: int = config.CONTENT_MAX_LENGTH


class ViewState(BaseModel):
    query: str = ""  # raw text in the box
    term: str = ""  # active term, after debounce/submit
    start: int = 0
    field_boosts: Optional[Dict[str, FieldBoost]] = None


# ---------- Rendered output ----------

class ResultCard(BaseModel):
    id: Optional[str] = None
    title: str
    title_html: str
    url: Optional[str] = None
    url_label: str
    content: str
    content_html: str
    boost: str
    rank: int


class ResultPage(BaseModel):
    term: str = ""
    cards: List[ResultCard] = Field(default_factory=list)
    num_found: int = 0
    start: int = 0
    rows: int = config.PAGE_SIZE
    has_previous: bool = False
    has_next: bool = False
    no_results: bool = False
    error: Optional[str] = None
