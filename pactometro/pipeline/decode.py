"""Decode the repeating candidacy group of a totals record."""

from __future__ import annotations

import math
from typing import Mapping

from pactometro.common.constants import DEFAULT_DISPLAY_NAME_OVERRIDES, EMPTY_CANDIDACY_CODE
from pactometro.common.errors import ParseWarning
from pactometro.common.models import CandidacyResult, DecodedRecord
from pactometro.common.slugs import candidacy_id
from pactometro.feed.layout import LAYOUT_V1, FeedLayout, check_layout, detect_layout

PCT_COUNTED_UNPARSEABLE = "PCT_COUNTED_UNPARSEABLE"
VOTE_PCT_UNPARSEABLE = "VOTE_PCT_UNPARSEABLE"
COUNT_UNPARSEABLE = "COUNT_UNPARSEABLE"


def _parse_number(raw: str) -> float:
    if "_" in raw:
        raise ParseWarning(f"Not a number: {raw!r}")
    try:
        value = float(raw)
    except ValueError as exc:
        raise ParseWarning(f"Not a number: {raw!r}") from exc
    if not math.isfinite(value):
        raise ParseWarning(f"Not a finite number: {raw!r}")
    return value


def decode_implied_pct(raw: str | None) -> float | None:
    """Decode a percentage whose last two digits are decimals ("3781" -> 37.81)."""
    cleaned = (raw or "").strip()
    if not cleaned:
        return None
    return _parse_number(cleaned) / 100


def decode_count(raw: str | None) -> int:
    cleaned = (raw or "").strip()
    if not cleaned:
        return 0
    value = _parse_number(cleaned)
    if not value.is_integer():
        raise ParseWarning(f"Not a whole count: {raw!r}")
    return int(value)


def display_name_for(short_name: str, overrides: Mapping[str, str] | None = None) -> str:
    overrides = DEFAULT_DISPLAY_NAME_OVERRIDES if overrides is None else overrides
    return overrides.get(short_name, short_name)


def decode_pct_counted(fields: list[str], layout: FeedLayout = LAYOUT_V1) -> tuple[float | None, list[str]]:
    index = layout.pct_counted_index
    raw = fields[index] if index < len(fields) else ""
    try:
        return decode_implied_pct(raw), []
    except ParseWarning:
        return None, [f"{PCT_COUNTED_UNPARSEABLE}:{raw.strip()}"]


def _candidacy_groups(fields: list[str], layout: FeedLayout):
    rest = fields[layout.header_fields :]
    width = layout.group_width
    for start in range(0, len(rest) - width + 1, width):
        yield rest[start : start + width]


def decode_candidacies(
    fields: list[str],
    *,
    layout: FeedLayout = LAYOUT_V1,
    overrides: Mapping[str, str] | None = None,
) -> tuple[list[CandidacyResult], list[str]]:
    candidacies: list[CandidacyResult] = []
    warnings: list[str] = []

    for code_raw, short_name_raw, votes_raw, pct_raw, seats_raw in _candidacy_groups(fields, layout):
        code = code_raw.strip()
        if not code or code == EMPTY_CANDIDACY_CODE:
            continue
        short_name = short_name_raw.strip()
        if not short_name:
            continue

        try:
            vote_pct = decode_implied_pct(pct_raw)
        except ParseWarning:
            vote_pct = None
            warnings.append(f"{VOTE_PCT_UNPARSEABLE}:{short_name}")

        counts = []
        for raw in (votes_raw, seats_raw):
            try:
                counts.append(decode_count(raw))
            except ParseWarning:
                counts.append(0)
                warnings.append(f"{COUNT_UNPARSEABLE}:{short_name}")
        votes, seats = counts

        candidacies.append(
            CandidacyResult(
                party_id=candidacy_id(short_name),
                party_name=display_name_for(short_name, overrides),
                seats=seats,
                vote_pct=vote_pct,
                votes=votes,
                code=code,
            )
        )

    return candidacies, warnings


def decode_record(
    fields: list[str],
    *,
    layout: FeedLayout = LAYOUT_V1,
    overrides: Mapping[str, str] | None = None,
) -> DecodedRecord:
    layout = detect_layout(fields, layout)
    layout_warnings = check_layout(fields, layout)
    candidacies, warnings = decode_candidacies(fields, layout=layout, overrides=overrides)
    pct_counted, pct_warnings = decode_pct_counted(fields, layout)
    return DecodedRecord(
        candidacies=candidacies,
        pct_counted=pct_counted,
        warnings=layout_warnings + pct_warnings + warnings,
    )
