from mediatags.services.schemas.tags import (
    TagRead,
    TagCreate,
    TagUpdate,
    TagExport,
    TagExportList,
    TagUsageRead,
    TagStatisticsRead,
    TagImportRequest,
    TagImportResult,
)
from mediatags.services.schemas.media_tags import (
    MediaTagAttach,
    MediaTagBatch,
    MediaTagRead,
    BatchResult,
    ToggleRead,
    MediaFilterRead,
)
__all__ = [
    "TagRead",
    "TagCreate",
    "TagUpdate",
    "TagExport",
    "TagExportList",
    "TagUsageRead",
    "TagStatisticsRead",
    "TagImportRequest",
    "TagImportResult",
    "MediaTagAttach",
    "MediaTagBatch",
    "MediaTagRead",
    "BatchResult",
    "ToggleRead",
    "MediaFilterRead",
]
