import logging
from fastapi import APIRouter, Depends, HTTPException
from api.dependencies import get_search_dispatcher, get_store
from errors import SearchError
from models.search import SearchRequest, SearchResponse
from services.search_service import SearchDispatcher
from store.document_store import DocumentStore

logger = logging.getLogger("api.search")
router = APIRouter(prefix="/api/v1/search", tags=["search"])


@router.post("/")
async def search(
    request: SearchRequest,
    store: DocumentStore = Depends(get_store),
    dispatcher: SearchDispatcher = Depends(get_search_dispatcher),
):
    """Query the knowledge base."""
    query = request.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query must not be empty")

    mode = dispatcher.mode
    try:
        results = await dispatcher.search(query, store.documents)
    except SearchError as e:
        logger.error(f"Search failed for {query!r}: {e}")
        raise HTTPException(status_code=502, detail="Search failed. Please try again.")

    return SearchResponse(query=query, mode=mode, results=results).model_dump(by_alias=True)
