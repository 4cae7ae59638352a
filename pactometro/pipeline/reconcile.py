"""Merge decoded candidacies with persisted state and build upsert rows."""

from __future__ import annotations

from typing import Any

from pactometro.common.constants import PROVINCE_CONFLICT_KEY, REGION_CONFLICT_KEY
from pactometro.common.models import CandidacyResult, DecodedProvince, ProvinceRow, RegionRow
from pactometro.store.supabase import ResultsStore


def prior_seats_lookup(existing_rows: list[dict[str, Any]]) -> dict[str, int | None]:
    lookup: dict[str, int | None] = {}
    for row in existing_rows:
        party_id = row.get("party_id")
        if party_id is None:
            continue
        lookup[party_id] = row.get("seats_2023")
    return lookup


def build_region_rows(
    candidacies: list[CandidacyResult],
    *,
    pct_counted: float | None,
    prior_seats: dict[str, int | None],
    updated_at: str,
) -> list[RegionRow]:
    return [
        RegionRow(
            party_id=c.party_id,
            party_name=c.party_name,
            seats_2025=c.seats,
            vote_pct_2025=c.vote_pct,
            seats_2023=prior_seats.get(c.party_id, 0),
            pct_escrutado=pct_counted,
            updated_at=updated_at,
        )
        for c in candidacies
    ]


def build_province_rows(provinces: list[DecodedProvince], *, updated_at: str) -> list[ProvinceRow]:
    rows: list[ProvinceRow] = []
    for province in provinces:
        for c in province.candidacies:
            rows.append(
                ProvinceRow(
                    province_id=province.province_id,
                    province_name=province.province_name,
                    party_id=c.party_id,
                    party_name=c.party_name,
                    seats_2025=c.seats,
                    vote_pct_2025=c.vote_pct,
                    votos_totales=c.votes,
                    updated_at=updated_at,
                )
            )
    return rows


def reconcile_region(
    store: ResultsStore,
    table: str,
    candidacies: list[CandidacyResult],
    *,
    pct_counted: float | None,
    updated_at: str,
) -> list[RegionRow]:
    """Upsert region rows, carrying prior-period seats forward.

    Returns the rows written; an empty list means nothing was upserted.
    Any read failure raises before the upsert is attempted.
    """
    if not candidacies:
        return []

    existing = store.select(table, ["party_id", "seats_2023"])
    rows = build_region_rows(
        candidacies,
        pct_counted=pct_counted,
        prior_seats=prior_seats_lookup(existing),
        updated_at=updated_at,
    )
    store.upsert(table, [row.to_dict() for row in rows], on_conflict=REGION_CONFLICT_KEY)
    return rows


def reconcile_provinces(
    store: ResultsStore,
    table: str,
    provinces: list[DecodedProvince],
    *,
    updated_at: str,
) -> list[ProvinceRow]:
    rows = build_province_rows(provinces, updated_at=updated_at)
    if not rows:
        return []
    store.upsert(table, [row.to_dict() for row in rows], on_conflict=PROVINCE_CONFLICT_KEY)
    return rows
