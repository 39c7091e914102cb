"""HTML page rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from adreview.utils.dates import format_date, format_datetime, format_day_short
from adreview.utils.labels import translate_action, translate_period, translate_status

TEMPLATE_DIR = Path(__file__).with_name("templates")
ENV = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html",)),
)
ENV.filters.update(
    status_label=translate_status,
    action_label=translate_action,
    period_label=translate_period,
    date=format_date,
    datetime=format_datetime,
    day_short=format_day_short,
)

def render_page(name: str, context: dict[str, Any]) -> str:
    template = ENV.get_template(f"{name}.html")
    return template.render(**context)
