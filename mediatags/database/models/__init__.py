# mediatags/database/models/__init__.py

from mediatags.database.core.main import Base
from mediatags.database.models.kv_record import KVRecord

__all__ = [
    "Base",
    "KVRecord",
]
