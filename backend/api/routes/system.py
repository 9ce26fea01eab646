from fastapi import APIRouter, Depends
from pydantic import BaseModel
from api.dependencies import get_monitor, get_store
from services.connectivity import ConnectivityMonitor
from store.document_store import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["system"])


class ConnectivityUpdate(BaseModel):
    online: bool


@router.get("/stats")
async def get_stats(store: DocumentStore = Depends(get_store)):
    return store.stats().model_dump(by_alias=True)


@router.get("/connectivity")
async def get_connectivity(monitor: ConnectivityMonitor = Depends(get_monitor)):
    return {"online": monitor.online}


@router.put("/connectivity")
async def set_connectivity(update: ConnectivityUpdate, monitor: ConnectivityMonitor = Depends(get_monitor)):
    """Push a connectivity transition from the host platform."""
    await monitor.set_online(update.online)
    return {"online": monitor.online}
