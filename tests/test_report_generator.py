"""Tests for report assembly and the on-disk layout."""

import json
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from ci_simple.models import ReportData, TestRunResult, VcsInfo
from ci_simple.report_generator import ReportGenerator


@pytest.fixture
def generator(report_config, stub_vcs) -> ReportGenerator:
    return ReportGenerator(report_config, vcs=stub_vcs)


class TestDirectories:

    def test_creates_structure(self, generator):
        for sub in ("html", "json", "junit", "coverage"):
            assert (generator.reports_dir / sub).is_dir()

    def test_idempotent(self, report_config, stub_vcs):
        ReportGenerator(report_config, vcs=stub_vcs)
        again = ReportGenerator(report_config, vcs=stub_vcs)
        assert (again.reports_dir / "json").is_dir()

    def test_latest_paths(self, generator):
        paths = generator.latest_paths
        assert paths["html"] == generator.reports_dir / "html" / "latest-report.html"
        assert paths["json"] == generator.reports_dir / "json" / "latest-report.json"
        assert paths["markdown"] == generator.reports_dir / "latest-report.md"


class TestCoverage:

    def test_absent(self, generator):
        assert generator.extract_coverage() is None

    def test_present(self, generator, report_config):
        path = Path(report_config.coverage_path)
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"total": {"lines": {"pct": 80}}}))
        assert generator.extract_coverage() == {"total": {"lines": {"pct": 80}}}

    def test_unparsable_logs_warning(self, generator, report_config, caplog):
        path = Path(report_config.coverage_path)
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        assert generator.extract_coverage() is None
        assert "Could not read coverage data" in caplog.text

    def test_non_object_is_absent(self, generator, report_config, caplog):
        path = Path(report_config.coverage_path)
        path.parent.mkdir(parents=True)
        path.write_text("[1, 2]")
        assert generator.extract_coverage() is None
        assert "Could not read coverage data" in caplog.text


class TestGenerateReport:

    @pytest.mark.asyncio
    async def test_returns_report(self, generator, jest_results):
        report = await generator.generate_test_report(TestRunResult.model_validate(jest_results))
        assert report.summary.total_tests == 3
        assert report.summary.success is False
        assert len(report.test_suites) == 2
        assert report.coverage is None
        assert report.environment.git_branch == "main"
        assert report.timestamp

    @pytest.mark.asyncio
    async def test_writes_all_formats(self, generator, jest_results):
        await generator.generate_test_report(TestRunResult.model_validate(jest_results))
        reports = generator.reports_dir

        assert len(list((reports / "json").glob("test-report-*.json"))) == 1
        assert len(list((reports / "html").glob("test-report-*.html"))) == 1
        assert len(list(reports.glob("test-report-*.md"))) == 1
        for path in generator.latest_paths.values():
            assert path.exists()

    @pytest.mark.asyncio
    async def test_latest_json_round_trips(self, generator, jest_results):
        report = await generator.generate_test_report(TestRunResult.model_validate(jest_results))
        latest = generator.latest_paths["json"].read_text(encoding="utf-8")
        assert ReportData.model_validate_json(latest) == report

    @pytest.mark.asyncio
    async def test_latest_overwritten(self, generator, jest_results):
        await generator.generate_test_report(TestRunResult.model_validate(jest_results))
        second = await generator.generate_test_report(
            TestRunResult(num_total_tests=15, num_passed_tests=15, success=True)
        )
        latest = json.loads(generator.latest_paths["json"].read_text(encoding="utf-8"))
        assert latest["summary"]["totalTests"] == 15
        assert latest["timestamp"] == second.timestamp

    @pytest.mark.asyncio
    async def test_includes_coverage(self, generator, report_config, jest_results):
        path = Path(report_config.coverage_path)
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"total": {"lines": {"pct": 64.2}}}))

        await generator.generate_test_report(TestRunResult.model_validate(jest_results))
        html = generator.latest_paths["html"].read_text(encoding="utf-8")
        assert "64.2%" in html

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, generator, empty_results):
        with patch("pathlib.Path.write_text", side_effect=PermissionError("read-only")):
            with pytest.raises(PermissionError):
                await generator.generate_test_report(empty_results)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ['{"total": {"lines": 80}}', '{"total": 5}'])
    async def test_odd_coverage_shape_still_reports(self, generator, report_config, empty_results, content):
        path = Path(report_config.coverage_path)
        path.parent.mkdir(parents=True)
        path.write_text(content)

        await generator.generate_test_report(empty_results)
        html = generator.latest_paths["html"].read_text(encoding="utf-8")
        assert "Cobertura de Código" in html
        assert generator.latest_paths["markdown"].exists()

    @pytest.mark.asyncio
    async def test_blocking_work_runs_off_loop(self, report_config, empty_results):
        loop_thread = threading.get_ident()
        seen = []

        class RecordingVcs:
            def get_info(self):
                seen.append(threading.get_ident())
                return VcsInfo(commit="abc", branch="main")

        generator = ReportGenerator(report_config, vcs=RecordingVcs())
        real_write_pair = generator._write_pair

        def recording_write_pair(*args):
            seen.append(threading.get_ident())
            return real_write_pair(*args)

        with patch.object(generator, "_write_pair", side_effect=recording_write_pair):
            await generator.generate_test_report(empty_results)

        assert len(seen) == 4
        assert loop_thread not in seen
