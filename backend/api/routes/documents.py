import uuid
import json
import asyncio
import logging
from fastapi import APIRouter, UploadFile, File, HTTPException, BackgroundTasks, Depends
from fastapi.responses import StreamingResponse
from agents.orchestrator import ExtractionOrchestrator
from api.dependencies import get_monitor, get_orchestrator, get_store
from config import get_settings
from errors import KnowledgeVaultError
from models.document import DocumentSummary, UploadedFile
from services.connectivity import ConnectivityMonitor
from services.pdf_renderer import looks_like_pdf
from store.document_store import DocumentStore

logger = logging.getLogger("api.documents")
router = APIRouter(prefix="/api/v1/documents", tags=["documents"])

# In-memory progress events and status per processing job
job_events: dict[str, list[dict]] = {}
job_status: dict[str, dict] = {}

GENERIC_FAILURE = "Processing failed. Please check your API key and file format."


async def run_processing_job(job_id: str, orchestrator: ExtractionOrchestrator, file: UploadedFile):
    """Background task: extract the PDF and store the resulting document."""
    events = job_events.setdefault(job_id, [])

    async def on_progress(event):
        event["job_id"] = job_id
        events.append(event)
        job_status[job_id]["progress"] = event["progress"]

    orchestrator.on_progress(on_progress)

    try:
        document = await orchestrator.process(file)
    except KnowledgeVaultError as e:
        logger.error(f"Processing failed for job {job_id}: {e}")
        job_status[job_id].update(status="error", error=GENERIC_FAILURE)
        events.append({"job_id": job_id, "status": "error", "detail": GENERIC_FAILURE})
        return
    except Exception:
        job_status[job_id].update(status="error", error=GENERIC_FAILURE)
        events.append({"job_id": job_id, "status": "error", "detail": GENERIC_FAILURE})
        raise

    job_status[job_id].update(status="completed", progress=100, document_id=document.id)
    events.append({"job_id": job_id, "status": "completed", "document_id": document.id})


@router.post("/")
async def upload_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
    monitor: ConnectivityMonitor = Depends(get_monitor),
):
    """Upload a PDF for extraction."""
    settings = get_settings()
    content = await file.read()

    is_pdf_type = file.content_type == "application/pdf" or (file.filename or "").lower().endswith(".pdf")
    if not is_pdf_type or not looks_like_pdf(content):
        raise HTTPException(status_code=415, detail="Document type restricted to PDF for structural fidelity.")

    if len(content) > settings.MAX_FILE_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.MAX_FILE_SIZE_MB} MB")

    if not monitor.online:
        raise HTTPException(
            status_code=503,
            detail="AI Processing requires an active internet connection. Please reconnect to process new documents.",
        )

    job_id = str(uuid.uuid4())
    job_status[job_id] = {"job_id": job_id, "status": "processing", "progress": 0, "file_name": file.filename}
    job_events[job_id] = []

    uploaded = UploadedFile(name=file.filename or "document.pdf", size=len(content), data=content)
    background_tasks.add_task(run_processing_job, job_id, orchestrator, uploaded)

    return {"job_id": job_id, "status": "processing"}


@router.get("/")
async def list_documents(store: DocumentStore = Depends(get_store)):
    """List stored documents, most recent first."""
    return [
        DocumentSummary.from_document(doc).model_dump(by_alias=True)
        for doc in store.documents
    ]


@router.delete("/")
async def clear_documents(store: DocumentStore = Depends(get_store)):
    """Wipe the local knowledge database."""
    await store.clear()
    return {"status": "cleared"}


@router.get("/jobs/{job_id}")
async def get_job(job_id: str):
    """Get processing status and progress for an upload."""
    status = job_status.get(job_id)
    if not status:
        raise HTTPException(status_code=404, detail="Job not found")
    return status


@router.get("/jobs/{job_id}/stream")
async def stream_progress(job_id: str):
    """SSE endpoint for real-time extraction progress."""
    if job_id not in job_status:
        raise HTTPException(status_code=404, detail="Job not found")

    async def event_generator():
        sent_count = 0
        max_wait = 600  # 10 minute timeout
        waited = 0

        while waited < max_wait:
            events = job_events.get(job_id, [])
            while sent_count < len(events):
                event = events[sent_count]
                yield f"data: {json.dumps(event)}\n\n"
                sent_count += 1

                if event.get("status") in ("completed", "error"):
                    # Client has seen the outcome; drop the finished job
                    job_events.pop(job_id, None)
                    job_status.pop(job_id, None)
                    return

            await asyncio.sleep(0.5)
            waited += 0.5

    return StreamingResponse(event_generator(), media_type="text/event-stream")


@router.get("/{doc_id}")
async def get_document(doc_id: str, store: DocumentStore = Depends(get_store)):
    """Get the full extracted knowledge for one document."""
    doc = store.get(doc_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc.model_dump(by_alias=True)
