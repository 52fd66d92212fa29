# mediatags/database/models/kv_record.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from mediatags.database.core.main import Base


class KVRecord(Base):
    """
    One named JSON record. The tag engine owns three of them
    (tag array, association array, id counter).
    """
    __tablename__ = "kv_record"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    last_updated: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )
