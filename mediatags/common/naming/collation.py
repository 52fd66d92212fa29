# mediatags/common/naming/collation.py
from __future__ import annotations

import re
import unicodedata
from typing import Tuple

_ws_re = re.compile(r"\s+")


def fold_name(text: str) -> str:
    """
    Equality key for tag names: two names that fold to the same value are the
    same tag as far as uniqueness is concerned.

      - NFKC normalize (so full-width / composed forms compare equal)
      - casefold (stronger than lower(): "Straße" == "STRASSE")
      - collapse inner whitespace, trim ends

    Accents are kept: "Café" and "Cafe" are different names.
    """
    if text is None:
        return ""
    value = unicodedata.normalize("NFKC", str(text))
    value = _ws_re.sub(" ", value).strip()
    return value.casefold()


def collation_key(text: str) -> Tuple[str, str, str]:
    """
    Sort key that orders names the way a human-facing list would:
    accent- and case-insensitive first, then accented after plain,
    then the original spelling as a final tie-break.

    Examples (sorted):
      ["Äpfel", "apple", "Banana", "banana", "cafe", "café"]
    """
    if text is None:
        text = ""
    value = unicodedata.normalize("NFKD", str(text))
    base = "".join(ch for ch in value if not unicodedata.combining(ch))
    return (base.casefold(), value.casefold(), str(text))
