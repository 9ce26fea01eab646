import logging
from agents.base_agent import AgentStatus
from agents.search_agent import RankingRequest, SearchAgent
from errors import SearchError
from models.document import Document
from models.search import (
    CorpusEntry,
    SearchMatch,
    LOCAL_SEARCH_REASON,
    LOCAL_SEARCH_RELEVANCE,
    LOCAL_SEARCH_SNIPPET,
)
from services.connectivity import ConnectivityMonitor

logger = logging.getLogger("search_service")


def local_search(query: str, documents: list[Document]) -> list[SearchMatch]:
    """Offline fallback: case-insensitive substring match over full text, in store order."""
    needle = query.lower()
    return [
        SearchMatch(
            doc_id=doc.id,
            snippet=LOCAL_SEARCH_SNIPPET,
            relevance=LOCAL_SEARCH_RELEVANCE,
            reason=LOCAL_SEARCH_REASON,
        )
        for doc in documents
        if needle in doc.full_text.lower()
    ]


class SearchDispatcher:
    """Routes a query to the ranking model when online, or to the local scan when offline."""

    def __init__(self, monitor: ConnectivityMonitor, search_agent: SearchAgent, sample_chars: int = 500):
        self.monitor = monitor
        self.agent = search_agent
        self.sample_chars = sample_chars

    @property
    def mode(self) -> str:
        return "semantic" if self.monitor.online else "local"

    async def search(self, query: str, documents: list[Document]) -> list[SearchMatch]:
        if not documents:
            return []

        if not self.monitor.online:
            matches = local_search(query, documents)
            logger.info(f"Local search for {query!r}: {len(matches)} matches")
            return matches

        corpus = [
            CorpusEntry(id=doc.id, file_name=doc.file_name, content_sample=doc.full_text[:self.sample_chars])
            for doc in documents
        ]
        result = await self.agent.execute(RankingRequest(query=query, corpus=corpus))
        if result.status == AgentStatus.FAILED:
            raise SearchError(f"Semantic search failed: {result.error}")
        return result.output
