from __future__ import annotations
from enum import StrEnum

class ToggleResult(StrEnum):
    assigned = "assigned"
    unassigned = "unassigned"
    error = "error"
