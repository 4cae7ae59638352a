"""CLI entrypoint for the pactómetro results updater."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pactometro.common.config_loader import load_pipeline_config
from pactometro.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_SUCCESS
from pactometro.common.errors import PipelineError
from pactometro.common.ids import generate_run_id
from pactometro.common.logging import build_logger, close_logger, log_error, log_event
from pactometro.feed.client import FeedClient
from pactometro.pipeline.reports import write_run_summary, write_snapshot
from pactometro.pipeline.runner import run_decode, run_resolve, run_update
from pactometro.store.supabase import SupabaseStore


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", nargs="?", default="update", choices=COMMANDS)
    parser.add_argument("--config", default="./config/pactometro.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--snapshot-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def execute_command(args: argparse.Namespace, config, logger, run_id: str, data_dir: Path | None) -> dict:
    with FeedClient(config.feed) as feed_client:
        if args.command == "resolve":
            snapshot_id = run_resolve(feed_client, logger, run_id)
            return {"snapshot_id": snapshot_id}

        if args.command == "decode":
            snapshot_id = args.snapshot_id or run_resolve(feed_client, logger, run_id)
            snapshot = run_decode(config, feed_client, snapshot_id, logger, run_id)
            if data_dir is not None:
                write_snapshot(data_dir, snapshot)
            return {"snapshot_id": snapshot_id, "warnings": snapshot.all_warnings()}

        with SupabaseStore(config.store) as store:
            result = run_update(config, feed_client, store, logger, run_id, snapshot_id=args.snapshot_id)
        return {
            "snapshot_id": result.snapshot_id,
            "region_rows": len(result.region_rows),
            "province_rows": len(result.province_rows),
            "warnings": result.warnings,
        }


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir) if args.data_dir else None
    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)

    log_event(logger, f"{args.command} start", run_id=run_id, event="RUN_START", status="ok")
    try:
        config = load_pipeline_config(
            Path(args.config),
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
            require_store=args.command == "update",
        )
        outcome = execute_command(args, config, logger, run_id, data_dir)
    except PipelineError as exc:
        log_error(
            logger,
            f"{args.command} failed: {exc}",
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        if data_dir is not None:
            write_run_summary(data_dir, run_id=run_id, command=args.command, status="error", error_code=exc.error_code)
        close_logger(logger)
        return EXIT_HARD_FAIL
    except Exception as exc:
        logger.exception(
            f"unexpected failure during {args.command}: {exc}",
            extra={"run_id": run_id, "event": "RUN_FAIL", "status": "error", "error_code": "UNEXPECTED_ERROR"},
        )
        if data_dir is not None:
            write_run_summary(data_dir, run_id=run_id, command=args.command, status="error", error_code="UNEXPECTED_ERROR")
        close_logger(logger)
        return EXIT_HARD_FAIL

    if data_dir is not None:
        write_run_summary(
            data_dir,
            run_id=run_id,
            command=args.command,
            status="success",
            snapshot_id=outcome.get("snapshot_id"),
            region_rows=outcome.get("region_rows", 0),
            province_rows=outcome.get("province_rows", 0),
            warnings=outcome.get("warnings"),
        )
    log_event(
        logger,
        f"{args.command} completed",
        run_id=run_id,
        snapshot_id=outcome.get("snapshot_id"),
        event="RUN_END",
        status="ok",
    )
    close_logger(logger)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
