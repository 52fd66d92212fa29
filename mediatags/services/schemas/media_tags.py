from __future__ import annotations
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from mediatags.domain.enums.toggle_result import ToggleResult


class MediaTagAttach(BaseModel):
    tag_id: int
    assigned_by: Optional[str] = None


class MediaTagBatch(BaseModel):
    tag_ids: List[int] = Field(default_factory=list)
    assigned_by: Optional[str] = None


class MediaTagRead(BaseModel):
    media_id: str
    tag_id: int
    assigned_at: Optional[datetime] = None
    assigned_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BatchResult(BaseModel):
    requested: int
    succeeded: int


class ToggleRead(BaseModel):
    media_id: str
    tag_id: int
    result: ToggleResult


class MediaFilterRead(BaseModel):
    mode: Literal["all", "any"]
    tag_ids: List[int]
    media_ids: List[str]
