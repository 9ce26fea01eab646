from pydantic import Field
from typing import Literal
from models.document import CamelModel

LOCAL_SEARCH_REASON = "LOCAL SEARCH"
LOCAL_SEARCH_SNIPPET = "Offline mode: Basic keyword match found."
LOCAL_SEARCH_RELEVANCE = 0.5


class SearchMatch(CamelModel):
    doc_id: str
    snippet: str = ""
    relevance: float = 0.0
    reason: str = ""


class CorpusEntry(CamelModel):
    """What the ranking model sees of one stored document."""

    id: str
    file_name: str
    content_sample: str


class SearchRequest(CamelModel):
    query: str = Field(min_length=1)


class SearchResponse(CamelModel):
    query: str
    mode: Literal["semantic", "local"]
    results: list[SearchMatch] = []
