"""
Store Entry Model

One row per logical collection (reports, staff, settings). The value column
holds the whole collection as a JSON document; writers always replace it
wholesale.
"""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from app.database import Base


class StoreEntry(Base):
    __tablename__ = "store_entries"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self):
        return f"<StoreEntry {self.key}>"
