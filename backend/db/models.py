from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from db.database import Base


class KeyValueSlot(Base):
    __tablename__ = "kv_slots"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
