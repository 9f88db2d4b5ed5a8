"""Notification dispatcher: delivers a report to every configured channel.

Handles:
- Channel discovery in fixed order (email, slack, teams, discord, console)
- Per-channel timeout
- Error isolation (one channel failure doesn't block others)
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .adapters import NotificationAdapter
from .adapters.console_adapter import ConsoleAdapter
from .adapters.discord_adapter import DiscordAdapter
from .adapters.email_adapter import EmailAdapter
from .adapters.slack_adapter import SlackAdapter
from .adapters.teams_adapter import TeamsAdapter
from .config import NotificationConfig
from .models import NotificationOutcome, ReportData

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Orchestrates notification delivery across all configured channels."""

    def __init__(
        self,
        config: NotificationConfig,
        adapters: Optional[list[NotificationAdapter]] = None,
        project_name: str = "CI Simple Python Project",
    ):
        self.config = config
        self.project_name = project_name
        self.adapters: list[NotificationAdapter] = (
            adapters if adapters is not None else self._init_adapters()
        )

    def _init_adapters(self) -> list[NotificationAdapter]:
        """All adapters in delivery order; console always last."""
        adapters: list[NotificationAdapter] = [
            EmailAdapter(self.config, self.project_name),
            SlackAdapter(self.config, self.project_name),
            TeamsAdapter(self.config),
            DiscordAdapter(self.config, self.project_name),
            ConsoleAdapter(),
        ]
        logger.info(
            f"Notification channels: "
            f"{[a.channel_type.value for a in adapters if a.is_enabled]}"
        )
        return adapters

    @property
    def enabled_channels(self) -> list[str]:
        return [a.channel_type.value for a in self.adapters if a.is_enabled]

    async def _send_safe(
        self,
        adapter: NotificationAdapter,
        report: ReportData,
        report_paths: Optional[dict[str, Path]],
    ) -> NotificationOutcome:
        try:
            result = await asyncio.wait_for(
                adapter.send(report, report_paths),
                timeout=self.config.timeout_s,
            )
            return NotificationOutcome(
                type=adapter.channel_type, success=True, result=result
            )
        except asyncio.TimeoutError:
            error = f"timed out after {self.config.timeout_s}s"
        except Exception as e:
            logger.error(
                f"Channel {adapter.channel_type.value} failed: {e}",
                exc_info=True,
            )
            error = str(e) or e.__class__.__name__
        return NotificationOutcome(type=adapter.channel_type, success=False, error=error)

    async def dispatch(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> list[NotificationOutcome]:
        """Send the report to each enabled channel, one after another.

        Args:
            report: The assembled report
            report_paths: format -> file path, used for email attachments

        Returns:
            One outcome per attempted channel, in delivery order
        """
        outcomes = []
        for adapter in self.adapters:
            if not adapter.is_enabled:
                continue
            outcome = await self._send_safe(adapter, report, report_paths)
            if outcome.success:
                logger.info(f"✅ {outcome.type.value}: sent")
            else:
                logger.warning(f"❌ {outcome.type.value}: {outcome.error}")
            outcomes.append(outcome)
        return outcomes
