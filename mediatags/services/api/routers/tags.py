from __future__ import annotations

from http import HTTPStatus
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from mediatags.domain.entities.tag import Tag
from mediatags.domain.errors import DuplicateTagNameError, InvalidTagNameError, TagImportError
from mediatags.services.api.deps import get_tag_service
from mediatags.services.schemas import (
    TagCreate,
    TagImportRequest,
    TagImportResult,
    TagRead,
    TagStatisticsRead,
    TagUpdate,
    TagUsageRead,
)
from mediatags.services.tags.service import TagService
from mediatags.common.settings import get_settings

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/tags", tags=["tags"])


def _to_out(t: Tag) -> TagRead:
    return TagRead.model_validate(t)


@router.get("", response_model=List[TagRead])
def list_tags(
    q: Optional[str] = Query(None, description="Case-insensitive match on name or description"),
    svc: TagService = Depends(get_tag_service),
) -> List[TagRead]:
    rows = svc.search_tags(q) if q else svc.get_all_tags()
    return [_to_out(t) for t in rows]


@router.post("", response_model=TagRead, status_code=HTTPStatus.CREATED)
def create_tag(payload: TagCreate, svc: TagService = Depends(get_tag_service)) -> TagRead:
    try:
        obj = svc.create_tag(payload.name, payload.color, payload.description, payload.is_system)
    except DuplicateTagNameError as exc:
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    except InvalidTagNameError as exc:
        raise HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc))
    return _to_out(obj)


# ---------- aggregates (declared before /{tag_id}) ----------

@router.get("/most-used", response_model=List[TagUsageRead])
def most_used_tags(
    limit: Optional[int] = Query(None, ge=1, le=500),
    svc: TagService = Depends(get_tag_service),
) -> List[TagUsageRead]:
    return [TagUsageRead.model_validate(u) for u in svc.most_used_tags(limit)]


@router.get("/unused", response_model=List[TagRead])
def unused_tags(svc: TagService = Depends(get_tag_service)) -> List[TagRead]:
    return [_to_out(t) for t in svc.unused_tags()]


@router.get("/stats", response_model=TagStatisticsRead)
def tag_statistics(svc: TagService = Depends(get_tag_service)) -> TagStatisticsRead:
    return TagStatisticsRead.model_validate(svc.statistics())


@router.get("/export")
def export_tags(svc: TagService = Depends(get_tag_service)) -> Response:
    return Response(content=svc.export_tags(), media_type="application/json")


@router.post("/import", response_model=TagImportResult)
def import_tags(payload: TagImportRequest, svc: TagService = Depends(get_tag_service)) -> TagImportResult:
    try:
        report = svc.import_tags(payload.data)
    except TagImportError as exc:
        raise HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc))
    return TagImportResult(
        planned=report.planned,
        imported=report.imported,
        skipped=report.skipped,
        imported_ids=report.imported_ids,
        errors=[f"{subject}: {message}" for subject, message in report.error_details],
    )


@router.post("/defaults", status_code=HTTPStatus.CREATED)
def seed_default_tags(svc: TagService = Depends(get_tag_service)):
    return {"created": svc.create_default_tags()}


# ---------- single tag ----------

@router.get("/{tag_id}", response_model=TagRead)
def get_tag(tag_id: int, svc: TagService = Depends(get_tag_service)) -> TagRead:
    obj = svc.get_tag_by_id(tag_id)
    if not obj:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Tag not found")
    return _to_out(obj)


@router.patch("/{tag_id}", response_model=TagRead)
def patch_tag(tag_id: int, payload: TagUpdate, svc: TagService = Depends(get_tag_service)) -> TagRead:
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        obj = svc.update_tag(tag_id, **fields)
    except DuplicateTagNameError as exc:
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    except InvalidTagNameError as exc:
        raise HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc))
    if not obj:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Tag not found")
    return _to_out(obj)


@router.delete("/{tag_id}", status_code=HTTPStatus.NO_CONTENT)
def delete_tag(tag_id: int, svc: TagService = Depends(get_tag_service)) -> None:
    # deleting an absent tag is a no-op
    svc.delete_tag(tag_id)


@router.get("/{tag_id}/media", response_model=List[str])
def media_for_tag(tag_id: int, svc: TagService = Depends(get_tag_service)) -> List[str]:
    return svc.media_for_tag(tag_id)
