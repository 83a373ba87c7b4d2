from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def normalize_name(value: str) -> str:
    """Strip combining diacritics, then fold case, so "Éva" and "eva" compare equal."""
    decomposed = unicodedata.normalize("NFD", value)
    return _COMBINING_MARKS.sub("", decomposed).lower()
