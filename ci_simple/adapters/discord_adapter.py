"""Discord notification adapter using channel webhooks with embeds."""

import logging
from pathlib import Path
from typing import Any, Optional

from ..config import NotificationConfig
from ..models import ChannelType, ReportData
from .webhook import post_webhook

logger = logging.getLogger(__name__)

AVATAR_URL = "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/72x72/1f9ea.png"


class DiscordAdapter:
    """Discord webhook adapter."""

    channel_type = ChannelType.DISCORD

    def __init__(self, config: NotificationConfig, project_name: str = "CI Simple Python Project"):
        self.config = config
        self.project_name = project_name

    @property
    def is_enabled(self) -> bool:
        return bool(self.config.discord_webhook)

    async def send(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> Any:
        result = await post_webhook(
            self.config.discord_webhook,
            self._build_payload(report),
            timeout=self.config.timeout_s,
        )
        logger.info("Discord notification sent")
        return result

    def _build_payload(self, report: ReportData) -> dict:
        summary, env = report.summary, report.environment
        fields = [
            ("Total", str(summary.total_tests)),
            ("Exitosas", str(summary.passed_tests)),
            ("Fallidas", str(summary.failed_tests)),
            ("Tiempo", f"{summary.total_time_seconds}s"),
            ("Rama", env.git_branch),
            ("Commit", env.short_commit),
        ]
        return {
            "username": "Test Reporter",
            "avatar_url": AVATAR_URL,
            "embeds": [
                {
                    "title": f"{'✅' if summary.success else '❌'} Reporte de Pruebas",
                    "description": f"Tasa de éxito: **{summary.success_rate}%**",
                    "color": 0x28A745 if summary.success else 0xDC3545,
                    "fields": [
                        {"name": name, "value": value, "inline": True}
                        for name, value in fields
                    ],
                    "timestamp": report.timestamp,
                    "footer": {"text": self.project_name},
                }
            ],
        }
