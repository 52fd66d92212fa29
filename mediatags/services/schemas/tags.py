from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# Tag
class TagBase(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    color: Optional[str] = None
    description: Optional[str] = None


class TagCreate(TagBase):
    is_system: bool = False


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    color: Optional[str] = None
    description: Optional[str] = None


class TagRead(TagBase):
    id: int
    color: str
    created_at: Optional[datetime] = None
    is_system: bool = False

    model_config = ConfigDict(from_attributes=True)


class TagUsageRead(BaseModel):
    tag: TagRead
    usage_count: int

    model_config = ConfigDict(from_attributes=True)


class TagStatisticsRead(BaseModel):
    total_tags: int
    total_associations: int
    average_tags_per_media: float
    most_used_tag: Optional[TagRead] = None

    model_config = ConfigDict(from_attributes=True)


# Import / export wire format: [{id, name, color, description, isSystem}, ...]
class TagExport(BaseModel):
    id: Optional[int] = None
    name: str = Field(min_length=1)
    color: Optional[str] = None
    description: Optional[str] = None
    is_system: bool = Field(default=False, alias="isSystem")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


TagExportList = TypeAdapter(List[TagExport])


class TagImportRequest(BaseModel):
    data: str


class TagImportResult(BaseModel):
    planned: int
    imported: int
    skipped: int
    imported_ids: List[int] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
