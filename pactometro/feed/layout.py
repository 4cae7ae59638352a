"""Field layout of the totals feed.

The authority publishes totals records as a fixed header followed by a
repeating candidacy group. Offsets are an upstream contract we do not control,
so every offset lives in a named layout. A feed revision adds a new layout and
a branch in ``detect_layout``; the decoder itself does not change.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FeedLayout:
    version: str
    header_fields: int
    group_width: int
    type_index: int
    province_name_index: int
    pct_counted_index: int


LAYOUT_V1 = FeedLayout(
    version="v1",
    header_fields=22,  # up to "Número de votos faltantes"
    group_width=5,  # code, short name, votes, pct, seats
    type_index=1,
    province_name_index=5,
    pct_counted_index=9,
)

FEED_LAYOUTS: dict[str, FeedLayout] = {
    LAYOUT_V1.version: LAYOUT_V1,
}


def get_layout(version: str) -> FeedLayout:
    return FEED_LAYOUTS[version]


def detect_layout(fields: list[str], configured: FeedLayout = LAYOUT_V1) -> FeedLayout:
    """Pick the layout for one split record.

    Only one published layout exists so far; this is the branch point for
    future revisions of the feed.
    """
    return configured


LAYOUT_MISMATCH = "LAYOUT_MISMATCH"


def check_layout(fields: list[str], layout: FeedLayout) -> list[str]:
    """Report records whose field count does not fit the layout."""
    if len(fields) < layout.header_fields:
        return [f"{LAYOUT_MISMATCH}:layout={layout.version},fields={len(fields)},header={layout.header_fields}"]
    remainder = (len(fields) - layout.header_fields) % layout.group_width
    if remainder:
        return [f"{LAYOUT_MISMATCH}:layout={layout.version},fields={len(fields)},trailing={remainder}"]
    return []


def split_lines(body: str) -> list[str]:
    """Split a feed body into records on newline only.

    Fields may contain characters such as U+0085 that ``str.splitlines``
    would treat as line breaks.
    """
    return [line.rstrip("\r") for line in body.strip().split("\n")]
