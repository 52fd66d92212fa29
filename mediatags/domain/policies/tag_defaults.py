# mediatags/domain/policies/tag_defaults.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class DefaultTag:
    name: str
    color: str
    description: str


# Seeded as system tags on first run (see TagService.create_default_tags)
SYSTEM_TAGS: Tuple[DefaultTag, ...] = (
    DefaultTag("Personal", "#3880ff", "Personal and family photos"),
    DefaultTag("Work", "#10dc60", "Documents and work-related photos"),
    DefaultTag("Fun", "#ffce00", "Leisure and entertainment"),
    DefaultTag("Travel", "#f04141", "Trips and holidays"),
    DefaultTag("Food", "#7044ff", "Meals and restaurants"),
)


def pick_color(palette: Sequence[str], requested: Optional[str] = None) -> str:
    """
    Return `requested` when it is a non-blank string, otherwise a color drawn
    from `palette`.
    """
    if requested is not None and str(requested).strip():
        return str(requested).strip()
    pool = tuple(palette)
    if not pool:
        raise ValueError("palette is empty")
    return secrets.choice(pool)
