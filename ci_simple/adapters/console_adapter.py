"""Console notification: a summary block on stdout. Always enabled."""

from pathlib import Path
from typing import Any, Optional

from ..models import ChannelType, ReportData
from ..renderers import format_timestamp


def format_console_summary(report: ReportData) -> str:
    summary, env = report.summary, report.environment
    rule = "=" * 60
    return "\n".join([
        "",
        rule,
        "📊 REPORTE DE PRUEBAS",
        rule,
        f"Estado: {summary.status_label}",
        f"Total de Pruebas: {summary.total_tests}",
        f"Exitosas: {summary.passed_tests}",
        f"Fallidas: {summary.failed_tests}",
        f"Omitidas: {summary.skipped_tests}",
        f"Tasa de Éxito: {summary.success_rate}%",
        f"Tiempo Total: {summary.total_time_seconds}s",
        f"Rama: {env.git_branch}",
        f"Commit: {env.short_commit}",
        f"Generado: {format_timestamp(report.timestamp)}",
        rule,
        "",
    ])


class ConsoleAdapter:
    channel_type = ChannelType.CONSOLE

    @property
    def is_enabled(self) -> bool:
        return True

    async def send(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> Any:
        print(format_console_summary(report))
        return None
