"""Stage orchestration for one updater run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from pactometro.common.config_loader import PipelineConfig
from pactometro.common.errors import ConfigurationError
from pactometro.common.logging import log_event, log_warning
from pactometro.common.models import DecodedProvince, DecodedSnapshot, ProvinceRow, RegionRow
from pactometro.common.time_utils import utc_timestamp_iso
from pactometro.feed.records import fetch_and_locate
from pactometro.feed.sequence import resolve_snapshot_id
from pactometro.pipeline.decode import decode_record
from pactometro.pipeline.reconcile import reconcile_provinces, reconcile_region
from pactometro.store.supabase import ResultsStore


@dataclass
class UpdateResult:
    snapshot_id: str
    region_rows: list[RegionRow] = field(default_factory=list)
    province_rows: list[ProvinceRow] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def run_resolve(feed_client, logger: logging.Logger, run_id: str) -> str:
    log_event(logger, "stage start", run_id=run_id, stage="resolve", event="STAGE_START", status="ok")
    snapshot_id = resolve_snapshot_id(feed_client)
    log_event(
        logger,
        f"current snapshot id {snapshot_id}",
        run_id=run_id,
        stage="resolve",
        snapshot_id=snapshot_id,
        event="SNAPSHOT_RESOLVED",
        status="ok",
    )
    return snapshot_id


def run_decode(
    config: PipelineConfig,
    feed_client,
    snapshot_id: str,
    logger: logging.Logger,
    run_id: str,
) -> DecodedSnapshot:
    layout = config.feed.layout

    log_event(logger, "stage start", run_id=run_id, stage="locate", snapshot_id=snapshot_id, event="STAGE_START", status="ok")
    located = fetch_and_locate(feed_client, snapshot_id, layout=layout)
    for warning in located.warnings:
        log_warning(
            logger,
            f"ignoring extra region record ({warning})",
            run_id=run_id,
            stage="locate",
            snapshot_id=snapshot_id,
            event="DUPLICATE_REGION_RECORD",
            status="warning",
        )
    log_event(
        logger,
        f"located region record on line {located.region.line_number} and "
        f"{len(located.provinces)} province records: {[p.province_name for p in located.provinces]}",
        run_id=run_id,
        stage="locate",
        snapshot_id=snapshot_id,
        event="STAGE_END",
        status="ok",
        rows_out=1 + len(located.provinces),
    )

    log_event(logger, "stage start", run_id=run_id, stage="decode", snapshot_id=snapshot_id, event="STAGE_START", status="ok")
    region = decode_record(located.region.fields, layout=layout, overrides=config.display_name_overrides)
    provinces = [
        DecodedProvince(
            province_id=p.province_id,
            province_name=p.province_name,
            decoded=decode_record(p.fields, layout=layout, overrides=config.display_name_overrides),
        )
        for p in located.provinces
    ]
    snapshot = DecodedSnapshot(
        snapshot_id=snapshot_id,
        region=region,
        provinces=provinces,
        warnings=list(located.warnings),
    )

    _log_parse_warnings(logger, run_id, snapshot_id, None, region.warnings)
    for province in provinces:
        _log_parse_warnings(logger, run_id, snapshot_id, province.province_id, province.decoded.warnings)
    log_event(
        logger,
        f"decoded {len(region.candidacies)} region candidacies, pct counted {region.pct_counted}",
        run_id=run_id,
        stage="decode",
        snapshot_id=snapshot_id,
        event="STAGE_END",
        status="ok",
        rows_out=len(region.candidacies),
    )
    for province in provinces:
        log_event(
            logger,
            "decoded province candidacies: "
            + ", ".join(f"{c.party_id}={c.seats}" for c in province.candidacies),
            run_id=run_id,
            stage="decode",
            snapshot_id=snapshot_id,
            province=province.province_id,
            event="STAGE_END",
            status="ok",
            rows_out=len(province.candidacies),
        )
    return snapshot


def run_update(
    config: PipelineConfig,
    feed_client,
    store: ResultsStore,
    logger: logging.Logger,
    run_id: str,
    *,
    snapshot_id: str | None = None,
    now: datetime | None = None,
) -> UpdateResult:
    if config.store is None:
        raise ConfigurationError("Store settings are required for the update command")

    snapshot_id = snapshot_id or run_resolve(feed_client, logger, run_id)
    snapshot = run_decode(config, feed_client, snapshot_id, logger, run_id)
    updated_at = utc_timestamp_iso(now)

    log_event(
        logger,
        "stage start",
        run_id=run_id,
        stage="reconcile-region",
        snapshot_id=snapshot_id,
        event="STAGE_START",
        status="ok",
        rows_in=len(snapshot.region.candidacies),
    )
    region_rows = reconcile_region(
        store,
        config.store.region_table,
        snapshot.region.candidacies,
        pct_counted=snapshot.region.pct_counted,
        updated_at=updated_at,
    )
    _log_upsert(logger, run_id, snapshot_id, "reconcile-region", config.store.region_table, len(region_rows))

    province_rows = reconcile_provinces(
        store,
        config.store.province_table,
        snapshot.provinces,
        updated_at=updated_at,
    )
    _log_upsert(logger, run_id, snapshot_id, "reconcile-province", config.store.province_table, len(province_rows))

    return UpdateResult(
        snapshot_id=snapshot_id,
        region_rows=region_rows,
        province_rows=province_rows,
        warnings=snapshot.all_warnings(),
    )


def _log_upsert(logger: logging.Logger, run_id: str, snapshot_id: str, stage: str, table: str, count: int) -> None:
    if count == 0:
        log_event(
            logger,
            f"no candidacies to upsert into {table}",
            run_id=run_id,
            stage=stage,
            snapshot_id=snapshot_id,
            event="UPSERT_SKIPPED",
            status="ok",
            rows_out=0,
        )
        return
    log_event(
        logger,
        f"upserted {count} rows into {table}",
        run_id=run_id,
        stage=stage,
        snapshot_id=snapshot_id,
        event="UPSERT_DONE",
        status="ok",
        rows_out=count,
    )


def _log_parse_warnings(
    logger: logging.Logger,
    run_id: str,
    snapshot_id: str,
    province: str | None,
    warnings: list[str],
) -> None:
    for warning in warnings:
        log_warning(
            logger,
            f"recovered parse problem ({warning})",
            run_id=run_id,
            stage="decode",
            snapshot_id=snapshot_id,
            province=province,
            event=warning.split(":", 1)[0],
            status="warning",
            error_code="PARSE_WARNING",
        )
