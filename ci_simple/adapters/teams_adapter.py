"""Microsoft Teams notification adapter (Office 365 connector MessageCard)."""

import logging
from pathlib import Path
from typing import Any, Optional

from ..config import NotificationConfig
from ..models import ChannelType, ReportData
from ..renderers import format_timestamp
from .webhook import post_webhook

logger = logging.getLogger(__name__)


class TeamsAdapter:
    """Teams Incoming Webhook adapter."""

    channel_type = ChannelType.TEAMS

    def __init__(self, config: NotificationConfig):
        self.config = config

    @property
    def is_enabled(self) -> bool:
        return bool(self.config.teams_webhook)

    async def send(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> Any:
        result = await post_webhook(
            self.config.teams_webhook,
            self._build_payload(report),
            timeout=self.config.timeout_s,
        )
        logger.info("Teams notification sent")
        return result

    def _build_payload(self, report: ReportData) -> dict:
        summary, env = report.summary, report.environment
        facts = [
            ("Total de Pruebas", str(summary.total_tests)),
            ("Exitosas", str(summary.passed_tests)),
            ("Fallidas", str(summary.failed_tests)),
            ("Tasa de Éxito", f"{summary.success_rate}%"),
            ("Tiempo Total", f"{summary.total_time_seconds}s"),
            ("Rama", env.git_branch),
            ("Commit", env.short_commit),
        ]
        return {
            "@type": "MessageCard",
            "@context": "https://schema.org/extensions",
            "summary": f"Reporte de Pruebas - {summary.success_rate}% éxito",
            "themeColor": "28a745" if summary.success else "dc3545",
            "sections": [
                {
                    "activityTitle": f"{'✅' if summary.success else '❌'} Reporte de Pruebas",
                    "activitySubtitle": f"Generado el {format_timestamp(report.timestamp)}",
                    "facts": [{"name": name, "value": value} for name, value in facts],
                }
            ],
        }
