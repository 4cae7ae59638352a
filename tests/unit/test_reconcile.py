from __future__ import annotations

import pytest

from pactometro.common.errors import StoreError
from pactometro.common.models import CandidacyResult, DecodedProvince, DecodedRecord
from pactometro.pipeline.reconcile import (
    build_region_rows,
    prior_seats_lookup,
    reconcile_provinces,
    reconcile_region,
)

NOW = "2025-12-21T21:30:00.000+00:00"


def _candidacy(party_id: str, seats: int = 1, votes: int = 100, pct: float | None = 1.5) -> CandidacyResult:
    return CandidacyResult(
        party_id=party_id,
        party_name=party_id.upper(),
        seats=seats,
        vote_pct=pct,
        votes=votes,
        code="0001",
    )


def test_prior_seats_are_carried_forward_and_new_candidacies_start_at_zero(fake_store_cls):
    store = fake_store_cls({"pactometro_results": [{"party_id": "x", "seats_2023": 12}]})

    rows = reconcile_region(
        store,
        "pactometro_results",
        [_candidacy("x", seats=30), _candidacy("y", seats=2)],
        pct_counted=87.5,
        updated_at=NOW,
    )

    by_id = {row.party_id: row for row in rows}
    assert by_id["x"].seats_2023 == 12
    assert by_id["x"].seats_2025 == 30
    assert by_id["y"].seats_2023 == 0
    assert by_id["y"].pct_escrutado == 87.5

    table, written, on_conflict = store.upserts[0]
    assert table == "pactometro_results"
    assert on_conflict == "party_id"
    assert written[0] == {
        "party_id": "x",
        "party_name": "X",
        "seats_2025": 30,
        "vote_pct_2025": 1.5,
        "seats_2023": 12,
        "pct_escrutado": 87.5,
        "updated_at": NOW,
    }


def test_rerun_keeps_prior_seats_whatever_the_current_values(fake_store_cls):
    store = fake_store_cls({"pactometro_results": [{"party_id": "x", "seats_2023": 12}]})

    first = reconcile_region(store, "pactometro_results", [_candidacy("x", seats=1)], pct_counted=None, updated_at=NOW)
    second = reconcile_region(store, "pactometro_results", [_candidacy("x", seats=40)], pct_counted=None, updated_at=NOW)

    assert first[0].seats_2023 == 12
    assert second[0].seats_2023 == 12


def test_region_read_failure_aborts_before_upsert(fake_store_cls):
    store = fake_store_cls(fail_select=True)

    with pytest.raises(StoreError):
        reconcile_region(store, "pactometro_results", [_candidacy("x")], pct_counted=None, updated_at=NOW)

    assert store.upserts == []


def test_region_without_candidacies_is_a_noop(fake_store_cls):
    store = fake_store_cls()

    assert reconcile_region(store, "pactometro_results", [], pct_counted=None, updated_at=NOW) == []
    assert store.selects == []
    assert store.upserts == []


def test_prior_seats_lookup_keeps_stored_null():
    assert prior_seats_lookup([{"party_id": "a", "seats_2023": None}, {"seats_2023": 3}]) == {"a": None}


def test_stored_null_prior_seats_are_written_back_unchanged(fake_store_cls):
    store = fake_store_cls({"pactometro_results": [{"party_id": "x", "seats_2023": None}]})

    rows = reconcile_region(
        store,
        "pactometro_results",
        [_candidacy("x"), _candidacy("y")],
        pct_counted=None,
        updated_at=NOW,
    )

    by_id = {row.party_id: row for row in rows}
    assert by_id["x"].seats_2023 is None
    assert by_id["y"].seats_2023 == 0
    assert store.upserts[0][1][0]["seats_2023"] is None


def test_build_region_rows_uses_run_timestamp():
    rows = build_region_rows([_candidacy("a")], pct_counted=None, prior_seats={}, updated_at=NOW)
    assert rows[0].updated_at == NOW


def test_province_rows_are_keyed_by_province_and_candidacy(fake_store_cls):
    store = fake_store_cls()
    provinces = [
        DecodedProvince("badajoz", "Badajoz", DecodedRecord([_candidacy("pp", seats=17, votes=150000)], 99.9)),
        DecodedProvince("caceres", "Cáceres", DecodedRecord([_candidacy("pp", seats=12, votes=100000)], 99.8)),
    ]

    rows = reconcile_provinces(store, "pactometro_province_results", provinces, updated_at=NOW)

    assert [(r.province_id, r.party_id, r.seats_2025, r.votos_totales) for r in rows] == [
        ("badajoz", "pp", 17, 150000),
        ("caceres", "pp", 12, 100000),
    ]
    table, written, on_conflict = store.upserts[0]
    assert table == "pactometro_province_results"
    assert on_conflict == "province_id,party_id"
    assert written[1]["province_name"] == "Cáceres"
    assert "seats_2023" not in written[1]
    assert store.selects == []


def test_province_batch_without_candidacies_skips_upsert(fake_store_cls):
    store = fake_store_cls()
    provinces = [DecodedProvince("badajoz", "Badajoz", DecodedRecord([], None))]

    assert reconcile_provinces(store, "pactometro_province_results", provinces, updated_at=NOW) == []
    assert store.upserts == []
