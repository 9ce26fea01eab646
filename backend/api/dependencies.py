from functools import partial
from typing import Callable
from fastapi import Depends, Request
from agents.extraction_agent import ExtractionAgent
from agents.orchestrator import ExtractionOrchestrator
from agents.search_agent import SearchAgent
from config import get_settings
from services.connectivity import ConnectivityMonitor
from services.llm_service import get_llm_service
from services.pdf_renderer import PDFRenderer
from services.search_service import SearchDispatcher
from store.document_store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_monitor(request: Request) -> ConnectivityMonitor:
    return request.app.state.monitor


def get_extraction_agent() -> ExtractionAgent:
    return ExtractionAgent(get_llm_service())


def get_search_agent() -> SearchAgent:
    return SearchAgent(get_llm_service())


def get_renderer_factory() -> Callable[[bytes], PDFRenderer]:
    return partial(PDFRenderer, jpeg_quality=get_settings().JPEG_QUALITY)


def get_orchestrator(
    store: DocumentStore = Depends(get_store),
    monitor: ConnectivityMonitor = Depends(get_monitor),
    agent: ExtractionAgent = Depends(get_extraction_agent),
    renderer_factory: Callable[[bytes], PDFRenderer] = Depends(get_renderer_factory),
) -> ExtractionOrchestrator:
    # One orchestrator per upload so progress callbacks stay per job
    return ExtractionOrchestrator(store, agent, monitor, renderer_factory=renderer_factory)


def get_search_dispatcher(
    monitor: ConnectivityMonitor = Depends(get_monitor),
    agent: SearchAgent = Depends(get_search_agent),
) -> SearchDispatcher:
    return SearchDispatcher(monitor, agent, sample_chars=get_settings().SEARCH_SAMPLE_CHARS)
