"""Smoke test: call the public holiday API and print working-day statistics.

Env vars (optional):
- FEIERTAGE_API_URL             [default: https://get.api-feiertage.de/]
- WORKING_DAYS_TIMEZONE         [default: Europe/Berlin]

Run:
  python scripts/working_days_smoke.py --state be
  python scripts/working_days_smoke.py --state by --from 2023-12-01 --to 2024-01-31
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime

from src.backend.common.config.app_config import config
from src.backend.v4.integrations.feiertage_client import FeiertageClient, HolidaySourceError
from src.backend.v4.use_cases.calendar_dates import DEFAULT_WORKING_DAYS, parse_datetime
from src.backend.v4.use_cases.working_days_report import (
    compute_multi_period_report,
    compute_range_report,
)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("--state", default="be", help="State name or code (default: be)")
    p.add_argument("--date", help="Reference date for day/week/month/year stats (default: today)")
    p.add_argument("--from", dest="from_date", help="Range start (enables range mode)")
    p.add_argument("--to", dest="to_date", help="Range end (enables range mode)")
    p.add_argument(
        "--working-days",
        default=",".join(DEFAULT_WORKING_DAYS),
        help="Comma-separated weekday names (default: Monday..Friday)",
    )
    p.add_argument("--breakdown", action="store_true", help="Include per-day breakdown")
    return p.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = _parse_args()

    tz = config.get_timezone()
    working_days = [d.strip() for d in args.working_days.split(",") if d.strip()]
    client = FeiertageClient.from_env()

    try:
        if args.from_date or args.to_date:
            if not (args.from_date and args.to_date):
                raise SystemExit("--from and --to must be given together")
            report = compute_range_report(
                parse_datetime(args.from_date, tz),
                parse_datetime(args.to_date, tz),
                args.state,
                working_days,
                holiday_client=client,
            )
        else:
            reference = parse_datetime(args.date, tz) if args.date else datetime.now(tz)
            report = compute_multi_period_report(
                reference, args.state, working_days, holiday_client=client
            )
    except HolidaySourceError as e:
        raise SystemExit(f"❌ Holiday API error: {e}")

    print(json.dumps(report.to_dict(args.breakdown), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
