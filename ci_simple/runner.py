#!/usr/bin/env python3
"""Run the test suite, generate reports and send notifications.

Usage:
    ci-simple-report
    ci-simple-report --verbose
    ci-simple-report --testNamePattern="calculator"

pytest writes JUnit XML to reports/junit/junit.xml; that file is converted
into a TestRunResult and pushed through the report/notification pipeline.
pytest-cov writes reports/coverage/coverage.json, which is converted into
the coverage summary shown in the reports.
Exit code: 0 if every test passed, 1 otherwise or on a fatal error.
"""

import argparse
import asyncio
import json
import logging
import os
import subprocess
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .config import ServiceConfig, load_config
from .dispatcher import NotificationDispatcher
from .extractors import convert_coverage_json, parse_junit_xml
from .models import ChannelType, NotificationOutcome, ReportData, TestRunResult
from .report_generator import ReportGenerator

logger = logging.getLogger(__name__)

EPILOG = """
Variables de entorno para notificaciones:
  SMTP_HOST             Host del servidor SMTP (default: smtp.gmail.com)
  SMTP_PORT             Puerto SMTP (default: 587)
  SMTP_USER             Usuario SMTP
  SMTP_PASS             Contraseña SMTP
  NOTIFICATION_EMAIL    Email de destino para notificaciones
  SLACK_WEBHOOK_URL     URL del webhook de Slack
  TEAMS_WEBHOOK_URL     URL del webhook de Microsoft Teams
  DISCORD_WEBHOOK_URL   URL del webhook de Discord

Ejemplos:
  ci-simple-report
  ci-simple-report --verbose
  ci-simple-report --testNamePattern="calculator"
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ci-simple-report",
        description="📊 Ejecuta las pruebas y genera reportes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mostrar salida detallada de las pruebas",
    )
    parser.add_argument(
        "--testNamePattern",
        dest="test_name_pattern",
        metavar="<pattern>",
        help="Ejecutar solo pruebas que coincidan con el patrón",
    )
    return parser


class ReportRunner:
    """Runs pytest and feeds its results through the reporting pipeline."""

    def __init__(
        self,
        config: ServiceConfig,
        project_root: Optional[Path] = None,
        generator: Optional[ReportGenerator] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        self.config = config
        self.project_root = Path(project_root or os.getcwd())
        self.generator = generator or ReportGenerator(config.report)
        self.dispatcher = dispatcher or NotificationDispatcher(
            config.notification, project_name=config.report.project_name
        )

    @property
    def junit_path(self) -> Path:
        return self.generator.reports_dir / "junit" / "junit.xml"

    @property
    def raw_coverage_path(self) -> Path:
        """coverage.py JSON report, before conversion."""
        return self.generator.reports_dir / "coverage" / "coverage.json"

    def build_pytest_command(
        self, verbose: bool = False, pattern: Optional[str] = None
    ) -> list[str]:
        cmd = [
            sys.executable, "-m", "pytest",
            f"--junitxml={self.junit_path}",
            "-o", "junit_family=xunit1",
            f"--cov={self.generator.config.coverage_source}",
            "--cov-branch",
            f"--cov-report=json:{self.raw_coverage_path}",
            "-v" if verbose else "-q",
        ]
        if pattern:
            cmd += ["-k", pattern]
        return cmd

    def write_coverage_summary(self) -> Optional[Path]:
        """Convert the coverage.py report into the summary the generator reads."""
        if not self.raw_coverage_path.exists():
            logger.warning("⚠️  No se generó el reporte de cobertura")
            return None
        summary_path = Path(self.generator.config.coverage_path)
        try:
            data = json.loads(self.raw_coverage_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            summary_path.parent.mkdir(parents=True, exist_ok=True)
            summary_path.write_text(
                json.dumps(convert_coverage_json(data), indent=2), encoding="utf-8"
            )
        except (ValueError, OSError) as e:
            logger.warning(f"⚠️  No se pudo procesar el reporte de cobertura: {e}")
            return None

        logger.info(f"Coverage summary written: {summary_path}")
        return summary_path

    def execute_tests(
        self, verbose: bool = False, pattern: Optional[str] = None
    ) -> TestRunResult:
        cmd = self.build_pytest_command(verbose, pattern)
        print(f"Ejecutando: {' '.join(cmd[1:])}")

        for stale in (self.junit_path, self.raw_coverage_path):
            if stale.exists():
                stale.unlink()
        proc = subprocess.run(cmd, cwd=self.project_root)
        success = proc.returncode == 0
        self.write_coverage_summary()

        try:
            return parse_junit_xml(self.junit_path.read_text(encoding="utf-8"), success)
        except (OSError, ET.ParseError) as e:
            logger.warning(f"⚠️  No se pudo leer el archivo de resultados JUnit, usando datos básicos: {e}")
            return TestRunResult(
                success=success,
                num_total_tests=0,
                num_passed_tests=0,
                num_failed_tests=0,
                num_pending_tests=0,
                test_results=[],
            )

    async def run(self, verbose: bool = False, pattern: Optional[str] = None) -> int:
        print("🚀 Iniciando ejecución de pruebas con generación de reportes...\n")
        results = await asyncio.to_thread(self.execute_tests, verbose, pattern)

        print("\n📊 Generando reportes...")
        report = await self.generator.generate_test_report(results)
        report_paths = self.generator.latest_paths

        print("\n📧 Enviando notificaciones...")
        try:
            outcomes = await self.dispatcher.dispatch(report, report_paths)
        except Exception as e:
            logger.error(f"Error enviando notificaciones: {e}", exc_info=True)
            outcomes = [NotificationOutcome(type=ChannelType.ERROR, success=False, error=str(e))]

        self.print_summary(report, report_paths, outcomes)
        return 0 if results.success else 1

    def print_summary(
        self,
        report: ReportData,
        report_paths: dict[str, Path],
        outcomes: list[NotificationOutcome],
    ) -> None:
        summary = report.summary
        rule = "=" * 60
        print(f"\n{rule}")
        print("📋 RESUMEN DE EJECUCIÓN")
        print(rule)
        print(f"Estado: {summary.status_label}")
        print(f"Total de pruebas: {summary.total_tests}")
        print(f"Exitosas: {summary.passed_tests}")
        print(f"Fallidas: {summary.failed_tests}")

        print("\n📊 Reportes generados:")
        for kind, path in report_paths.items():
            if Path(path).exists():
                print(f"  • {kind.upper()}: {path}")

        print("\n📧 Notificaciones enviadas:")
        for outcome in outcomes:
            status = "✅" if outcome.success else "❌"
            print(f"  • {outcome.type.value.upper()}: {status}")
        print(f"{rule}\n")


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        runner = ReportRunner(load_config())
        return asyncio.run(runner.run(args.verbose, args.test_name_pattern))
    except Exception as e:
        logger.error(f"❌ Error durante la ejecución: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
