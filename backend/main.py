from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from config import get_settings
from db.database import create_engine, create_session_factory, init_db
from services.connectivity import ConnectivityMonitor
from store.document_store import DocumentStore
from store.slot import StorageSlot
from api.routes.documents import router as documents_router
from api.routes.search import router as search_router
from api.routes.system import router as system_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("knowledge_vault")


async def initial_connectivity(settings) -> bool:
    if settings.START_OFFLINE:
        return False
    if settings.CONNECTIVITY_PROBE_URL:
        return await ConnectivityMonitor.probe(settings.CONNECTIVITY_PROBE_URL)
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Knowledge Vault API...")
    settings = get_settings()
    engine = create_engine(settings.DATABASE_URL)
    await init_db(engine)
    logger.info("Database initialized.")

    store = DocumentStore(
        StorageSlot(create_session_factory(engine), settings.STORAGE_KEY),
        storage_limit_bytes=settings.STORAGE_LIMIT_BYTES,
    )
    documents = await store.load()
    logger.info(f"Loaded {len(documents)} documents from the knowledge base.")

    app.state.store = store
    app.state.monitor = ConnectivityMonitor(await initial_connectivity(settings))
    logger.info(f"AI service {'online' if app.state.monitor.online else 'offline'}.")
    yield
    # Shutdown
    logger.info("Shutting down Knowledge Vault API...")
    await engine.dispose()


app = FastAPI(
    title="Knowledge Vault API",
    description="Multimodal PDF knowledge extraction and search",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(documents_router)
app.include_router(search_router)
app.include_router(system_router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "knowledge-vault"}
