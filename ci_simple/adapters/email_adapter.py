"""Email notification adapter over SMTP.

Sends an HTML summary rendered from ``templates/email.html`` and attaches
the HTML/JSON report files when they exist.

Environment variables:
  SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, NOTIFICATION_EMAIL
"""

import asyncio
import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from pathlib import Path
from typing import Any, Optional

from ..config import NotificationConfig
from ..models import ChannelType, ReportData
from ..renderers import render_email_html

logger = logging.getLogger(__name__)

ATTACHMENTS = {"html": "test-report.html", "json": "test-report.json"}


class EmailAdapter:
    """SMTP adapter for email notifications."""

    channel_type = ChannelType.EMAIL

    def __init__(self, config: NotificationConfig, project_name: str = "CI Simple Python Project"):
        self.config = config
        self.project_name = project_name

    @property
    def is_enabled(self) -> bool:
        return bool(self.config.smtp_user) and bool(self.config.smtp_pass)

    @property
    def recipient(self) -> str:
        return self.config.notification_email or self.config.smtp_user

    def build_message(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> MIMEMultipart:
        summary = report.summary
        msg = MIMEMultipart("mixed")
        msg["Subject"] = (
            f"{'✅' if summary.success else '❌'} Reporte de Pruebas - "
            f"{summary.success_rate}% éxito"
        )
        msg["From"] = self.config.smtp_user
        msg["To"] = self.recipient
        msg["Message-ID"] = make_msgid()
        msg.attach(MIMEText(render_email_html(report, self.project_name), "html", "utf-8"))

        for key, filename in ATTACHMENTS.items():
            path = (report_paths or {}).get(key)
            if path and Path(path).exists():
                part = MIMEApplication(Path(path).read_bytes(), Name=filename)
                part["Content-Disposition"] = f'attachment; filename="{filename}"'
                msg.attach(part)
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(
            self.config.smtp_host,
            self.config.smtp_port,
            timeout=self.config.timeout_s,
        ) as smtp:
            smtp.starttls()
            smtp.login(self.config.smtp_user, self.config.smtp_pass)
            smtp.send_message(msg)

    async def send(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> Any:
        msg = self.build_message(report, report_paths)
        await asyncio.to_thread(self._deliver, msg)
        logger.info(f"Email notification sent: {msg['Message-ID']}")
        return {"message_id": msg["Message-ID"], "recipient": self.recipient}
