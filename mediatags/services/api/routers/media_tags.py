from __future__ import annotations

from http import HTTPStatus
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from mediatags.common.settings import get_settings
from mediatags.domain.errors import DuplicateAssociationError
from mediatags.services.api.deps import get_tag_service
from mediatags.services.schemas import (
    BatchResult,
    MediaFilterRead,
    MediaTagAttach,
    MediaTagBatch,
    MediaTagRead,
    TagRead,
    ToggleRead,
)
from mediatags.services.tags.service import TagService

cfg = get_settings()

router = APIRouter(prefix=f"{cfg.api.prefix}/media-tags", tags=["media-tags"])


# media ids are opaque and may contain slashes (file URIs), hence `:path`

@router.get("/filter", response_model=MediaFilterRead)
def filter_media(
    tag_ids: List[int] = Query([]),
    mode: Literal["all", "any"] = Query("any"),
    svc: TagService = Depends(get_tag_service),
) -> MediaFilterRead:
    media_ids = svc.filter_media(tag_ids, match_all=(mode == "all"))
    return MediaFilterRead(mode=mode, tag_ids=tag_ids, media_ids=media_ids)


@router.get("/media/{media_id:path}/tags", response_model=List[TagRead])
def list_tags_for_media(media_id: str, svc: TagService = Depends(get_tag_service)) -> List[TagRead]:
    return [TagRead.model_validate(t) for t in svc.tags_for_media(media_id)]


@router.post("/media/{media_id:path}/tags", response_model=MediaTagRead, status_code=HTTPStatus.CREATED)
def attach_tag_to_media(
    media_id: str,
    payload: MediaTagAttach,
    svc: TagService = Depends(get_tag_service),
) -> MediaTagRead:
    try:
        link = svc.assign_tag(media_id, payload.tag_id, payload.assigned_by)
    except DuplicateAssociationError as exc:
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    if link is None:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Tag not found")
    return MediaTagRead.model_validate(link)


@router.post("/media/{media_id:path}/tags/batch", response_model=BatchResult)
def attach_tags_to_media(
    media_id: str,
    payload: MediaTagBatch,
    svc: TagService = Depends(get_tag_service),
) -> BatchResult:
    n = svc.assign_multiple(media_id, payload.tag_ids, payload.assigned_by)
    return BatchResult(requested=len(payload.tag_ids), succeeded=n)


@router.post("/media/{media_id:path}/tags/batch-remove", response_model=BatchResult)
def detach_tags_from_media(
    media_id: str,
    payload: MediaTagBatch,
    svc: TagService = Depends(get_tag_service),
) -> BatchResult:
    n = svc.unassign_multiple(media_id, payload.tag_ids)
    return BatchResult(requested=len(payload.tag_ids), succeeded=n)


@router.post("/media/{media_id:path}/tags/{tag_id}/toggle", response_model=ToggleRead)
def toggle_tag_for_media(media_id: str, tag_id: int, svc: TagService = Depends(get_tag_service)) -> ToggleRead:
    return ToggleRead(media_id=media_id, tag_id=tag_id, result=svc.toggle_tag_for_media(media_id, tag_id))


@router.delete("/media/{media_id:path}/tags/{tag_id}", status_code=HTTPStatus.NO_CONTENT)
def detach_tag_from_media(media_id: str, tag_id: int, svc: TagService = Depends(get_tag_service)) -> None:
    # unassign is idempotent; a missing pair is not an error
    svc.unassign_tag(media_id, tag_id)


@router.delete("/media/{media_id:path}/tags", status_code=HTTPStatus.NO_CONTENT)
def detach_all_tags_from_media(media_id: str, svc: TagService = Depends(get_tag_service)) -> None:
    svc.remove_all_tags_from_media(media_id)
