import asyncio
import logging
from typing import Optional
from pydantic import TypeAdapter
from models.document import Document
from models.stats import StoreStats
from store.slot import StorageSlot

logger = logging.getLogger("document_store")

_documents_adapter = TypeAdapter(list[Document])


def serialize(documents: list[Document]) -> str:
    return _documents_adapter.dump_json(documents, by_alias=True).decode("utf-8")


def deserialize(blob: str) -> list[Document]:
    return _documents_adapter.validate_json(blob)


class DocumentStore:
    """
    Ordered, most-recent-first collection of processed documents.

    The in-memory list is the source of truth for readers; every mutation
    updates it before the persisted slot is written. Writes are serialized
    and each one persists the list as it stands when the write runs, so the
    last write always matches memory.
    """

    def __init__(self, slot: StorageSlot, storage_limit_bytes: int = 5 * 1024 * 1024):
        self.slot = slot
        self.storage_limit_bytes = storage_limit_bytes
        self._documents: list[Document] = []
        self._write_lock = asyncio.Lock()

    @property
    def documents(self) -> list[Document]:
        return list(self._documents)

    def get(self, doc_id: str) -> Optional[Document]:
        return next((d for d in self._documents if d.id == doc_id), None)

    async def load(self) -> list[Document]:
        """Rehydrate from the persisted slot. Absent or corrupt blobs yield an empty store."""
        try:
            blob = await self.slot.get()
            documents = deserialize(blob) if blob is not None else []
        except Exception as e:
            logger.warning(f"Failed to load knowledge base from storage, starting empty: {e}")
            documents = []

        self._documents = documents
        return list(documents)

    async def save(self, documents: list[Document]):
        async with self._write_lock:
            await self.slot.put(serialize(documents))

    async def _persist(self):
        async with self._write_lock:
            if self._documents:
                await self.slot.put(serialize(self._documents))
            else:
                await self.slot.delete()

    async def append(self, document: Document):
        self._documents = [document, *self._documents]
        logger.info(f"Stored document {document.id} ({document.file_name})")
        await self._persist()

    async def clear(self):
        self._documents = []
        await self._persist()
        logger.info("Knowledge base wiped")

    def stats(self) -> StoreStats:
        used = len(serialize(self._documents).encode("utf-8"))
        return StoreStats(
            total_documents=len(self._documents),
            total_sections=sum(len(d.sections) for d in self._documents),
            total_tables=sum(len(d.tables) for d in self._documents),
            total_visuals=sum(len(d.visuals) for d in self._documents),
            storage_used_bytes=used,
            storage_limit_bytes=self.storage_limit_bytes,
            storage_percent=min(used / self.storage_limit_bytes * 100, 100.0) if self.storage_limit_bytes > 0 else 100.0,
        )
