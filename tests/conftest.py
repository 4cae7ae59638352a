from __future__ import annotations

import pytest

HEADER_FIELDS = 22


def build_totals_line(
    record_type: str,
    name: str = "Extremadura",
    *,
    pct_counted: str = "10000",
    groups: list[list[str]] | None = None,
) -> str:
    header = [""] * HEADER_FIELDS
    header[0] = "510"
    header[1] = record_type
    header[5] = name
    header[9] = pct_counted
    fields = list(header)
    for group in groups or []:
        fields.extend(group)
    return ";".join(fields)


class FakeStore:
    def __init__(self, existing: dict[str, list[dict]] | None = None, fail_select: bool = False):
        self.existing = existing or {}
        self.fail_select = fail_select
        self.selects: list[tuple[str, list[str]]] = []
        self.upserts: list[tuple[str, list[dict], str]] = []

    def select(self, table, columns):
        from pactometro.common.errors import StoreError

        self.selects.append((table, columns))
        if self.fail_select:
            raise StoreError(f"Reading {table} failed: HTTP 500", status=500)
        return [dict(row) for row in self.existing.get(table, [])]

    def upsert(self, table, rows, *, on_conflict):
        self.upserts.append((table, rows, on_conflict))

    def close(self):
        return None

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        self.close()


class FakeFeedClient:
    def __init__(self, index_body: str, totals_bodies: dict[str, str]):
        self.index_body = index_body
        self.totals_bodies = totals_bodies
        self.totals_requests: list[str] = []

    def fetch_snapshot_index(self) -> str:
        return self.index_body

    def fetch_totals(self, snapshot_id: str) -> str:
        self.totals_requests.append(snapshot_id)
        return self.totals_bodies[snapshot_id]

    def close(self):
        return None

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        self.close()


@pytest.fixture
def totals_line():
    return build_totals_line


@pytest.fixture
def extremadura_totals() -> str:
    return "\n".join(
        [
            build_totals_line(
                "CM",
                "Extremadura",
                pct_counted="9987",
                groups=[["0001", "PP", "250000", "4312", "29"], ["0000", "", "", "", ""]],
            ),
            build_totals_line(
                "PR",
                "Badajoz",
                pct_counted="9990",
                groups=[["0001", "PP", "150000", "4401", "17"]],
            ),
            build_totals_line(
                "PR",
                "Cáceres",
                pct_counted="9981",
                groups=[["0001", "PP", "100000", "4190", "12"]],
            ),
        ]
    )


@pytest.fixture
def fake_store_cls():
    return FakeStore


@pytest.fixture
def fake_feed_cls():
    return FakeFeedClient
