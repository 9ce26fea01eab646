import logging
from datetime import datetime
from typing import Optional
from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import async_sessionmaker
from db.models import KeyValueSlot

logger = logging.getLogger("store.slot")


class StorageSlot:
    """A single named value in the kv_slots table."""

    def __init__(self, session_factory: async_sessionmaker, key: str):
        self.session_factory = session_factory
        self.key = key

    async def get(self) -> Optional[str]:
        async with self.session_factory() as session:
            result = await session.execute(select(KeyValueSlot.value).where(KeyValueSlot.key == self.key))
            return result.scalar_one_or_none()

    async def put(self, value: str):
        now = datetime.utcnow()
        stmt = insert(KeyValueSlot).values(key=self.key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[KeyValueSlot.key],
            set_={"value": value, "updated_at": now},
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            await session.commit()

    async def delete(self):
        async with self.session_factory() as session:
            await session.execute(delete(KeyValueSlot).where(KeyValueSlot.key == self.key))
            await session.commit()
