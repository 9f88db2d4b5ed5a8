"""JSON, HTML and Markdown renderings of a ReportData record.

HTML and Markdown come from Jinja2 templates in ``templates/``; only the
``.html`` templates are autoescaped.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import ReportData

TEMPLATE_DIR = Path(__file__).parent / "templates"

DEFAULT_PROJECT_NAME = "CI Simple Python Project"

COVERAGE_METRICS = [
    ("lines", "Líneas"),
    ("functions", "Funciones"),
    ("branches", "Ramas"),
    ("statements", "Declaraciones"),
]


def format_timestamp(value: str) -> str:
    """ISO timestamp -> "18/10/2026, 14:03:05" (es-ES style)."""
    try:
        return datetime.fromisoformat(value).strftime("%d/%m/%Y, %H:%M:%S")
    except (TypeError, ValueError):
        return value


def coverage_rows(coverage: Optional[dict[str, Any]]) -> list[tuple[str, Any]]:
    """(label, pct) pairs from an istanbul-style coverage summary."""
    if not coverage:
        return []
    total = coverage.get("total")
    if not isinstance(total, dict):
        total = {}

    rows = []
    for key, label in COVERAGE_METRICS:
        metric = total.get(key)
        pct = metric.get("pct") if isinstance(metric, dict) else None
        rows.append((label, pct or 0))
    return rows


_jinja = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
_jinja.filters["es_datetime"] = format_timestamp


def _context(report: ReportData, project_name: str) -> dict[str, Any]:
    return {
        "report": report,
        "summary": report.summary,
        "suites": report.test_suites,
        "coverage": coverage_rows(report.coverage),
        "env": report.environment,
        "project_name": project_name,
    }


def render_json(report: ReportData) -> str:
    return report.model_dump_json(indent=2, by_alias=True)


def render_html(report: ReportData, project_name: str = DEFAULT_PROJECT_NAME) -> str:
    return _jinja.get_template("report.html").render(**_context(report, project_name))


def render_markdown(report: ReportData, project_name: str = DEFAULT_PROJECT_NAME) -> str:
    return _jinja.get_template("report.md").render(**_context(report, project_name))


def render_email_html(report: ReportData, project_name: str = DEFAULT_PROJECT_NAME) -> str:
    return _jinja.get_template("email.html").render(**_context(report, project_name))
