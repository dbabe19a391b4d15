#!/usr/bin/env python3
"""
Build a subscription economics report from a CSV export.

Reads a subscription table, computes spend totals, category breakdown, trends,
dead weight, recommendations and upcoming renewals, and writes the report as JSON.

Usage:
    python scripts/subscription_report.py subscriptions.csv --now 2024-06-01
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
for extra_path in (REPO_ROOT / "services", REPO_ROOT / "services" / "economics-service" / "src"):
    if str(extra_path) not in sys.path:
        sys.path.insert(0, str(extra_path))

from csv_transfer import parse_subscriptions_csv  # noqa: E402
from economics_report import build_economics_report, report_to_dict  # noqa: E402
from engine_errors import EngineError  # noqa: E402
from shared.engine_settings import EngineSettingsError, load_engine_settings  # noqa: E402
from shared.observability import (  # noqa: E402
    bind_run_context,
    hash_payload,
    new_run_id,
    reset_run_context,
    setup_logging,
)
from subscription_model import (  # noqa: E402
    DEFAULT_RENEWAL_WINDOW_DAYS,
    DEFAULT_TREND_MONTHS,
    DEFAULT_UNUSED_THRESHOLD_DAYS,
    EngineConfig,
)

logger = logging.getLogger("subscription_report")


def _parse_date_arg(raw_value: str) -> date:
    try:
        return date.fromisoformat(raw_value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{raw_value}' is not a YYYY-MM-DD date") from exc


def _positive_int(raw_value: str) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{raw_value}' is not an integer") from exc
    if value < 1:
        raise argparse.ArgumentTypeError("value must be at least 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize subscription spend from a CSV export")
    parser.add_argument("csv_path", type=Path, help="CSV file with a name,cost,billing_cycle,... header")
    parser.add_argument("--now", type=_parse_date_arg, default=None, help="Reference date (default: today)")
    parser.add_argument("--unused-threshold-days", type=_positive_int, default=None)
    parser.add_argument("--renewal-window-days", type=_positive_int, default=None)
    parser.add_argument("--trend-months", type=_positive_int, default=None)
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("subscription-report", level=args.log_level)
    token = bind_run_context(new_run_id())

    try:
        settings = load_engine_settings(
            default_unused_threshold=DEFAULT_UNUSED_THRESHOLD_DAYS,
            default_renewal_window=DEFAULT_RENEWAL_WINDOW_DAYS,
            default_trend_months=DEFAULT_TREND_MONTHS,
        )
        config = EngineConfig(
            now=args.now or date.today(),
            unused_threshold_days=args.unused_threshold_days or settings.unused_threshold_days,
            renewal_window_days=args.renewal_window_days or settings.renewal_window_days,
        )

        content = args.csv_path.read_bytes()
        logger.info("Importing subscriptions", extra={"input_digest": hash_payload(content)})
        imported = parse_subscriptions_csv(content)
        if imported.warnings:
            logger.warning("Skipped %d CSV row(s)", len(imported.warnings))

        report = build_economics_report(
            imported.records,
            config,
            trend_months=args.trend_months or settings.trend_months,
        )
    except (EngineError, EngineSettingsError, OSError) as exc:
        logger.error("Report failed: %s", exc)
        return 1
    finally:
        reset_run_context(token)

    payload = report_to_dict(report)
    payload["import_warnings"] = [
        {"line_number": warning.line_number, "message": warning.message} for warning in imported.warnings
    ]
    rendered = json.dumps(payload, indent=2)

    if args.output:
        args.output.write_text(rendered + "\n", encoding="utf-8")
    else:
        print(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
