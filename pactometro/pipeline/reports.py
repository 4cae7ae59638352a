"""Run report output."""

from __future__ import annotations

from pathlib import Path

from pactometro.common.fs import write_json
from pactometro.common.models import DecodedSnapshot


def write_snapshot(data_dir: Path, snapshot: DecodedSnapshot) -> Path:
    out_path = data_dir / "out" / f"snapshot_{snapshot.snapshot_id}.json"
    write_json(out_path, snapshot.to_dict())
    return out_path


def write_run_summary(
    data_dir: Path,
    *,
    run_id: str,
    command: str,
    status: str,
    snapshot_id: str | None = None,
    region_rows: int = 0,
    province_rows: int = 0,
    warnings: list[str] | None = None,
    error_code: str | None = None,
) -> Path:
    warnings = warnings or []
    if status == "success" and warnings:
        status = "partial"

    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    payload = {
        "run_id": run_id,
        "command": command,
        "status": status,
        "snapshot_id": snapshot_id,
        "counts": {
            "region_rows": region_rows,
            "province_rows": province_rows,
        },
        "warning_count": len(warnings),
        "warnings": warnings,
        "error_code": error_code,
    }
    write_json(summary_path, payload)
    return summary_path
