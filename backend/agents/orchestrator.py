import logging
import time
import uuid
from typing import Callable, Optional
from agents.base_agent import AgentStatus
from agents.extraction_agent import ExtractionAgent, PageRequest
from config import get_settings
from errors import OfflineError, ProcessingError
from models.document import Document, Section, Table, Visual, UploadedFile
from services.connectivity import ConnectivityMonitor
from services.pdf_renderer import PDFRenderer
from store.document_store import DocumentStore

logger = logging.getLogger("orchestrator")


class ExtractionOrchestrator:
    """
    Turns one uploaded PDF into a stored Document.

    Pages are rendered and extracted strictly in order, up to max_pages.
    Any page failure aborts the whole file; nothing is stored.
    """

    def __init__(
        self,
        store: DocumentStore,
        extraction_agent: ExtractionAgent,
        monitor: ConnectivityMonitor,
        renderer_factory: Callable[[bytes], PDFRenderer] = PDFRenderer,
        max_pages: Optional[int] = None,
        render_scale: Optional[float] = None,
    ):
        settings = get_settings()
        self.store = store
        self.agent = extraction_agent
        self.monitor = monitor
        self.renderer_factory = renderer_factory
        self.max_pages = settings.MAX_PAGES if max_pages is None else max_pages
        self.render_scale = settings.RENDER_SCALE if render_scale is None else render_scale
        self.progress_callbacks: list[Callable] = []

    def on_progress(self, callback: Callable):
        self.progress_callbacks.append(callback)

    async def _emit(self, progress: float, detail: str = ""):
        for cb in self.progress_callbacks:
            try:
                await cb({"progress": progress, "detail": detail})
            except Exception as e:
                logger.error(f"Progress callback error: {e}")

    async def process(self, file: UploadedFile) -> Document:
        if not self.monitor.online:
            raise OfflineError("AI processing requires an active internet connection.")

        start_time = time.time()
        doc_id = str(uuid.uuid4())
        await self._emit(5, "Opening document...")

        renderer = self.renderer_factory(file.data)
        try:
            page_count = await renderer.page_count()
        except Exception as e:
            logger.error(f"Could not open {file.name}: {e}")
            raise ProcessingError(f"Could not open {file.name}") from e

        pages_to_process = min(page_count, self.max_pages)
        if pages_to_process < 1:
            raise ProcessingError(f"{file.name}: no pages to process")
        logger.info(f"Processing {file.name}: {pages_to_process} of {page_count} pages")

        sections: list[Section] = []
        tables: list[Table] = []
        visuals: list[Visual] = []
        full_text = ""

        for page_number in range(1, pages_to_process + 1):
            try:
                image = await renderer.render_page_base64(page_number, self.render_scale)
            except Exception as e:
                logger.error(f"Rendering page {page_number} of {file.name} failed: {e}")
                raise ProcessingError(f"Rendering page {page_number} failed") from e

            result = await self.agent.execute(PageRequest(
                doc_id=doc_id,
                file_name=file.name,
                page_number=page_number,
                image_base64=image,
            ))
            if result.status == AgentStatus.FAILED:
                raise ProcessingError(f"Extraction of page {page_number} failed: {result.error}")

            extracted = result.output
            sections.extend(extracted.sections)
            tables.extend(extracted.tables)
            visuals.extend(extracted.visuals)
            full_text += extracted.full_text + "\n\n"

            await self._emit(10 + (page_number / pages_to_process) * 85, f"Page {page_number}/{pages_to_process}")

        document = Document(
            id=doc_id,
            file_name=file.name,
            file_size=file.size,
            processed_at=int(time.time() * 1000),
            sections=sections,
            tables=tables,
            visuals=visuals,
            full_text=full_text,
        )
        await self.store.append(document)
        await self._emit(100, "Completed")

        logger.info(f"Processed {file.name} in {time.time() - start_time:.1f}s")
        return document
