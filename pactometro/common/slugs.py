"""Stable identifier derivation for candidacies and provinces."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ID_CHARS_RE = re.compile(r"[^a-z0-9_]")


def candidacy_id(short_name: str) -> str:
    """Derive the persisted party id from a candidacy short name.

    Always computed from the short name as published, never from an
    overridden display name, so ids stay stable across renames.
    """
    cleaned = short_name.lower()
    cleaned = _WHITESPACE_RE.sub("_", cleaned)
    return _NON_ID_CHARS_RE.sub("", cleaned)


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def province_id(display_name: str) -> str:
    cleaned = strip_diacritics(display_name).lower()
    return _WHITESPACE_RE.sub("_", cleaned)
