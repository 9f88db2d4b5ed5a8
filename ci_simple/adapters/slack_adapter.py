"""Slack notification adapter using Incoming Webhooks.

Sends a legacy attachment with one field per metric.
No Slack SDK dependency, just a webhook POST via httpx.
"""

import logging
import time
from pathlib import Path
from typing import Any, Optional

from ..config import NotificationConfig
from ..models import ChannelType, ReportData
from .webhook import post_webhook

logger = logging.getLogger(__name__)


class SlackAdapter:
    """Slack Incoming Webhook adapter."""

    channel_type = ChannelType.SLACK

    def __init__(self, config: NotificationConfig, project_name: str = "CI Simple Python Project"):
        self.config = config
        self.project_name = project_name

    @property
    def is_enabled(self) -> bool:
        return bool(self.config.slack_webhook)

    async def send(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> Any:
        result = await post_webhook(
            self.config.slack_webhook,
            self._build_payload(report),
            timeout=self.config.timeout_s,
        )
        logger.info("Slack notification sent")
        return result

    def _build_payload(self, report: ReportData) -> dict:
        summary, env = report.summary, report.environment
        emoji = ":white_check_mark:" if summary.success else ":x:"

        def field(title: str, value: str) -> dict:
            return {"title": title, "value": value, "short": True}

        return {
            "username": "Test Reporter",
            "icon_emoji": ":test_tube:",
            "attachments": [
                {
                    "color": "good" if summary.success else "danger",
                    "title": f"{emoji} Reporte de Pruebas - {summary.success_rate}% éxito",
                    "fields": [
                        field("Total de Pruebas", str(summary.total_tests)),
                        field("Exitosas", str(summary.passed_tests)),
                        field("Fallidas", str(summary.failed_tests)),
                        field("Tiempo Total", f"{summary.total_time_seconds}s"),
                        field("Rama", env.git_branch),
                        field("Commit", env.short_commit),
                    ],
                    "footer": self.project_name,
                    "ts": int(time.time()),
                }
            ],
        }
