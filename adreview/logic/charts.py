"""Chart rendering for the statistics dashboard."""

from __future__ import annotations

import io
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Wedge
from matplotlib.ticker import MaxNLocator

from adreview.client.models import ActivityPoint, DecisionsData
from adreview.utils.dates import format_day_short

plt.switch_backend("Agg")

OUTPUT_DIR = Path(os.environ.get("CHART_OUTPUT_DIR", "artifacts/charts"))

SUCCESS_COLOR = "#22c55e"
DANGER_COLOR = "#ef4444"
WARNING_COLOR = "#f59e0b"

PIE_SIZE = 200
PIE_CENTER = (100.0, 100.0)
PIE_RADIUS = 80.0
PIE_BORDER_WIDTH = 3
PIE_START_ANGLE = -math.pi / 2
DPI = 100


@dataclass(slots=True)
class Sector:
    label: str
    count: int
    start: float
    sweep: float
    color: str

    @property
    def end(self) -> float:
        return self.start + self.sweep


@dataclass(slots=True)
class ChartResult:
    name: str
    content: bytes

    def save(self, directory: Path | None = None) -> Path:
        directory = directory or OUTPUT_DIR
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{self.name}.png"
        path.write_bytes(self.content)
        return path


def pie_sectors(approved: int, rejected: int, request_changes: int) -> list[Sector]:
    """Split the circle between the three decision kinds.

    Angles are in radians, measured clockwise on a y-down surface from the
    3 o'clock direction, so the first sector starts at 12 o'clock. Returns an
    empty list when there is nothing to draw.
    """
    counts = (
        ("approved", approved, SUCCESS_COLOR),
        ("rejected", rejected, DANGER_COLOR),
        ("requestChanges", request_changes, WARNING_COLOR),
    )
    if any(count < 0 for _, count, _ in counts):
        raise ValueError("Decision counts must be non-negative")
    total = approved + rejected + request_changes
    if total == 0:
        return []
    sectors: list[Sector] = []
    current = PIE_START_ANGLE
    for label, count, color in counts:
        sweep = count / total * 2 * math.pi
        sectors.append(Sector(label=label, count=count, start=current, sweep=sweep, color=color))
        current += sweep
    return sectors


def render_decisions_pie(decisions: DecisionsData) -> ChartResult | None:
    sectors = pie_sectors(decisions.approved, decisions.rejected, decisions.request_changes)
    if not sectors:
        return None
    fig = plt.figure(figsize=(PIE_SIZE / DPI, PIE_SIZE / DPI), dpi=DPI)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, PIE_SIZE)
    # y grows downwards like a canvas, so increasing angles turn clockwise
    ax.set_ylim(PIE_SIZE, 0)
    ax.set_aspect("equal")
    ax.axis("off")
    for sector in sectors:
        if sector.sweep == 0:
            continue
        ax.add_patch(
            Wedge(
                PIE_CENTER,
                PIE_RADIUS,
                math.degrees(sector.start),
                math.degrees(sector.end),
                facecolor=sector.color,
                edgecolor="none",
            )
        )
    ax.add_patch(
        Circle(
            PIE_CENTER,
            PIE_RADIUS,
            fill=False,
            edgecolor="#fff",
            linewidth=PIE_BORDER_WIDTH * 72 / DPI,
        )
    )
    return ChartResult(name="decisions", content=_to_png(fig))


def render_activity_chart(points: Sequence[ActivityPoint]) -> ChartResult | None:
    if not points:
        return None
    frame = pd.DataFrame(
        [
            {
                "date": point.date,
                "approved": point.approved,
                "rejected": point.rejected,
                "request_changes": point.request_changes,
            }
            for point in points
        ]
    )
    frame["day"] = pd.to_datetime(frame["date"]).dt.date
    frame = frame.sort_values("day")
    labels = [format_day_short(value) for value in frame["date"]]

    fig, ax = plt.subplots(figsize=(8, 4))
    bottom = None
    for column, color, title in (
        ("approved", SUCCESS_COLOR, "Одобрено"),
        ("rejected", DANGER_COLOR, "Отклонено"),
        ("request_changes", WARNING_COLOR, "На доработку"),
    ):
        ax.bar(labels, frame[column], bottom=bottom, color=color, label=title)
        bottom = frame[column] if bottom is None else bottom + frame[column]
    ax.set_ylabel("Проверено объявлений")
    ax.yaxis.set_major_locator(MaxNLocator(integer=True))
    ax.legend(loc="upper left")
    fig.autofmt_xdate()
    fig.tight_layout()
    return ChartResult(name="activity", content=_to_png(fig))


def _to_png(fig: Figure) -> bytes:
    buffer = io.BytesIO()
    try:
        fig.savefig(buffer, format="png", dpi=DPI)
    finally:
        plt.close(fig)
    return buffer.getvalue()
