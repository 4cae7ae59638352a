"""Resolve the id of the latest published snapshot ("envío")."""

from __future__ import annotations

from typing import Protocol

from pactometro.common.errors import MalformedFeedError
from pactometro.feed.layout import split_lines


class SnapshotIndexSource(Protocol):
    def fetch_snapshot_index(self) -> str: ...


def _first_line(body: str) -> str:
    return split_lines(body)[0]


def parse_snapshot_id(body: str) -> str:
    """Extract the snapshot id from a getEnvio payload.

    Publications have used both ``51`` and ``20251221;51;...`` as the first
    line, so a single field is the id and otherwise the second field is.
    """
    line = _first_line(body)
    parts = line.split(";")
    if len(parts) == 1:
        snapshot_id = parts[0].strip()
    else:
        snapshot_id = parts[1].strip()

    if not snapshot_id:
        raise MalformedFeedError(f"Could not read a snapshot id from line: {line!r}")
    return snapshot_id


def resolve_snapshot_id(source: SnapshotIndexSource) -> str:
    return parse_snapshot_id(source.fetch_snapshot_index())
