"""Assemble test reports and write them to disk.

Layout under the reports directory:
  json/test-report-<epoch-ms>.json   + json/latest-report.json
  html/test-report-<epoch-ms>.html   + html/latest-report.html
  test-report-<epoch-ms>.md          + latest-report.md
  junit/, coverage/                  (created, populated by external tooling)
"""

import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .config import ReportConfig
from .environment import VcsInfoProvider, collect_environment
from .extractors import extract_suites, extract_summary
from .models import ReportData, TestRunResult
from .renderers import render_html, render_json, render_markdown

logger = logging.getLogger(__name__)

SUBDIRS = ("html", "json", "junit", "coverage")


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class ReportGenerator:
    """Builds a ReportData from raw results and persists every format."""

    def __init__(
        self,
        config: Optional[ReportConfig] = None,
        vcs: Optional[VcsInfoProvider] = None,
    ):
        self.config = config or ReportConfig()
        self.vcs = vcs
        self.reports_dir = Path(self.config.reports_dir)
        self.ensure_reports_directory()

    def ensure_reports_directory(self) -> None:
        for sub in SUBDIRS:
            (self.reports_dir / sub).mkdir(parents=True, exist_ok=True)

    @property
    def latest_paths(self) -> dict[str, Path]:
        return {
            "html": self.reports_dir / "html" / "latest-report.html",
            "json": self.reports_dir / "json" / "latest-report.json",
            "markdown": self.reports_dir / "latest-report.md",
        }

    async def generate_test_report(self, results: TestRunResult) -> ReportData:
        """Assemble the report and write JSON, HTML and Markdown.

        Write failures propagate to the caller.
        """
        coverage, environment = await asyncio.gather(
            asyncio.to_thread(self.extract_coverage),
            asyncio.to_thread(collect_environment, self.vcs),
        )
        report = ReportData(
            timestamp=datetime.now(timezone.utc).isoformat(),
            summary=extract_summary(results),
            test_suites=extract_suites(results),
            coverage=coverage,
            environment=environment,
        )

        await asyncio.gather(
            self.write_json_report(report),
            self.write_html_report(report),
            self.write_markdown_report(report),
        )
        return report

    def extract_coverage(self) -> Optional[dict[str, Any]]:
        """Coverage summary from disk, or None if absent or unreadable."""
        path = Path(self.config.coverage_path)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read coverage data: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Could not read coverage data: expected an object in {path}")
            return None
        return data

    def _write_pair(self, directory: Path, ext: str, content: str) -> Path:
        file_path = directory / f"test-report-{_epoch_ms()}.{ext}"
        latest_path = directory / f"latest-report.{ext}"
        file_path.write_text(content, encoding="utf-8")
        latest_path.write_text(content, encoding="utf-8")
        return file_path

    async def write_json_report(self, report: ReportData) -> Path:
        path = await asyncio.to_thread(
            self._write_pair, self.reports_dir / "json", "json", render_json(report)
        )
        logger.info(f"JSON report generated: {path}")
        return path

    async def write_html_report(self, report: ReportData) -> Path:
        html = render_html(report, self.config.project_name)
        path = await asyncio.to_thread(self._write_pair, self.reports_dir / "html", "html", html)
        logger.info(f"HTML report generated: {path}")
        return path

    async def write_markdown_report(self, report: ReportData) -> Path:
        markdown = render_markdown(report, self.config.project_name)
        path = await asyncio.to_thread(self._write_pair, self.reports_dir, "md", markdown)
        logger.info(f"Markdown report generated: {path}")
        return path
