import math

import pytest

from adreview.client.models import ActivityPoint, DecisionsData
from adreview.logic import charts
from adreview.logic.charts import pie_sectors, render_activity_chart, render_decisions_pie

PNG_MAGIC = b"\x89PNG"


def test_pie_sectors_split_the_circle():
    sectors = pie_sectors(3, 1, 0)
    assert [s.label for s in sectors] == ["approved", "rejected", "requestChanges"]
    assert [s.sweep for s in sectors] == pytest.approx([3 * math.pi / 2, math.pi / 2, 0.0])
    assert [s.start for s in sectors] == pytest.approx([-math.pi / 2, math.pi, 3 * math.pi / 2])
    assert sum(s.sweep for s in sectors) == pytest.approx(2 * math.pi)
    assert sectors[-1].end == pytest.approx(3 * math.pi / 2)


def test_pie_sector_colours_are_fixed():
    sectors = pie_sectors(1, 1, 1)
    assert [s.color for s in sectors] == [charts.SUCCESS_COLOR, charts.DANGER_COLOR, charts.WARNING_COLOR]


def test_empty_pie():
    assert pie_sectors(0, 0, 0) == []
    assert render_decisions_pie(DecisionsData()) is None


def test_negative_counts_rejected():
    with pytest.raises(ValueError):
        pie_sectors(1, -1, 0)


def test_render_decisions_pie():
    chart = render_decisions_pie(DecisionsData(approved=3, rejected=1, request_changes=0))
    assert chart.name == "decisions"
    assert chart.content.startswith(PNG_MAGIC)


def test_render_activity_chart(tmp_path):
    points = [
        ActivityPoint(date="2025-01-07", approved=2, rejected=1, request_changes=1),
        ActivityPoint(date="2025-01-06", approved=5, rejected=2, request_changes=1),
    ]
    chart = render_activity_chart(points)
    assert chart.content.startswith(PNG_MAGIC)
    path = chart.save(tmp_path)
    assert path == tmp_path / "activity.png"
    assert path.read_bytes() == chart.content
    assert render_activity_chart([]) is None
