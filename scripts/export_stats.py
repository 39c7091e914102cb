"""Export statistics charts and category totals for a period."""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from adreview.client.session import client_scope
from adreview.logic.charts import render_activity_chart, render_decisions_pie
from adreview.logic.stats import DEFAULT_PERIOD, PERIODS, StatsAggregator, ranked_categories
from adreview.utils.dates import format_date
from adreview.utils.labels import translate_period

logger = logging.getLogger(__name__)

CSV_OUTPUT_DIR = Path(os.environ.get("CSV_OUTPUT_DIR", "artifacts/csv"))


async def export_stats(period: str) -> list[Path]:
    written: list[Path] = []
    async with client_scope() as client:
        aggregator = StatsAggregator(client)
        snapshot = await aggregator.refresh(period)
    if snapshot is None:
        raise SystemExit(f"Could not load statistics for period {period}")

    for chart in (render_decisions_pie(snapshot.decisions), render_activity_chart(snapshot.activity)):
        if chart is not None:
            written.append(chart.save())

    CSV_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    csv_path = CSV_OUTPUT_DIR / f"categories-{period}.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(["category", "count"])
        writer.writerows(ranked_categories(snapshot.categories))
    written.append(csv_path)

    activity_path = CSV_OUTPUT_DIR / f"activity-{period}.csv"
    with activity_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=["date", "approved", "rejected", "request_changes", "total"])
        writer.writeheader()
        for point in snapshot.activity:
            writer.writerow(
                {
                    "date": format_date(point.date),
                    "approved": point.approved,
                    "rejected": point.rejected,
                    "request_changes": point.request_changes,
                    "total": point.total,
                }
            )
    written.append(activity_path)
    return written


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--period", choices=PERIODS, default=DEFAULT_PERIOD)
    args = parser.parse_args()
    paths = asyncio.run(export_stats(args.period))
    logger.info("Exported %s statistics (%s)", args.period, translate_period(args.period))
    for path in paths:
        print(path)


if __name__ == "__main__":
    main()
