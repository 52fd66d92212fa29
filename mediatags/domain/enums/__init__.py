from mediatags.domain.enums.media_kind import MediaKind
from mediatags.domain.enums.toggle_result import ToggleResult
__all__ = [
    "MediaKind",
    "ToggleResult",
]
