"""Tests for JSON / HTML / Markdown rendering."""

import json

import pytest

from ci_simple.models import ReportData, Summary
from ci_simple.renderers import (
    coverage_rows,
    format_timestamp,
    render_email_html,
    render_html,
    render_json,
    render_markdown,
)

COVERAGE = {
    "total": {
        "lines": {"pct": 91.5},
        "functions": {"pct": 88},
        "branches": {"pct": 75.25},
        "statements": {"pct": 90},
    }
}


class TestSuccessRate:

    def test_two_decimals(self):
        assert Summary(total_tests=5, passed_tests=4).success_rate == "80.00"

    def test_zero_total_guard(self):
        assert Summary(total_tests=0, passed_tests=0).success_rate == "0"

    def test_thirds(self):
        assert Summary(total_tests=3, passed_tests=1).success_rate == "33.33"


class TestHTML:

    def test_contains_metrics_and_tests(self, sample_report):
        html = render_html(sample_report)
        assert html.startswith("<!DOCTYPE html>")
        assert "Reporte de Pruebas" in html
        assert "80.00%" in html
        assert "example_test.py" in html
        assert "should pass" in html
        assert "should fail" in html
        assert "Expected true but got false" in html

    def test_status_classes(self, sample_report):
        html = render_html(sample_report)
        assert 'class="test-status passed"' in html
        assert 'class="test-status failed"' in html
        assert 'class="suite-status failed">FAILED<' in html

    def test_environment_section(self, sample_report):
        html = render_html(sample_report)
        assert "abc123de" in html
        assert "abc123def456" not in html
        assert "darwin (x86_64)" in html
        assert "❌ FALLO" in html

    def test_no_coverage_section_without_coverage(self, sample_report):
        assert "Cobertura de Código" not in render_html(sample_report)

    def test_coverage_section(self, sample_report):
        report = sample_report.model_copy(update={"coverage": COVERAGE})
        html = render_html(report)
        assert "Cobertura de Código" in html
        assert "91.5%" in html
        assert "75.25%" in html

    def test_error_text_escaped(self, sample_report):
        suite = sample_report.test_suites[0]
        broken = suite.tests[1].model_copy(update={"error_message": "<script>x</script>"})
        report = sample_report.model_copy(update={
            "test_suites": [suite.model_copy(update={"tests": [broken]})],
        })
        html = render_html(report)
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html

    def test_project_name_in_footer(self, sample_report):
        assert "generado automáticamente por Acme" in render_html(sample_report, "Acme")


class TestMarkdown:

    def test_summary_table(self, sample_report):
        md = render_markdown(sample_report)
        assert md.startswith("# 📊 Reporte de Pruebas")
        assert "| Tasa de Éxito | 80.00% |" in md
        assert "| Total de Pruebas | 5 |" in md
        assert "| Tiempo Total | 5.00s |" in md

    def test_suite_section(self, sample_report):
        md = render_markdown(sample_report)
        assert "### example_test.py" in md
        assert "- **Duración:** 2.00s" in md
        assert "- ✅ should pass" in md
        assert "- ❌ should fail" in md
        assert "Expected true but got false" in md

    def test_not_escaped(self, sample_report):
        report = sample_report.model_copy(update={
            "environment": sample_report.environment.model_copy(update={"git_branch": "a&b"}),
        })
        assert "**Rama Git:** a&b" in render_markdown(report)

    def test_coverage_table(self, sample_report):
        md = render_markdown(sample_report.model_copy(update={"coverage": COVERAGE}))
        assert "| Líneas | 91.5% |" in md
        assert "| Ramas | 75.25% |" in md

    def test_empty_run(self, sample_report):
        report = sample_report.model_copy(update={"summary": Summary(), "test_suites": []})
        assert "| Tasa de Éxito | 0% |" in render_markdown(report)


class TestJSON:

    def test_round_trip(self, sample_report):
        parsed = ReportData.model_validate_json(render_json(sample_report))
        assert parsed == sample_report

    def test_round_trip_with_coverage(self, sample_report):
        report = sample_report.model_copy(update={"coverage": COVERAGE})
        assert ReportData.model_validate_json(render_json(report)) == report

    def test_pretty_printed(self, sample_report):
        assert '\n  "summary": {' in render_json(sample_report)

    def test_camel_case_keys(self, sample_report):
        data = json.loads(render_json(sample_report))
        assert set(data) == {"timestamp", "summary", "testSuites", "coverage", "environment"}
        assert data["summary"]["totalTests"] == 5
        assert data["summary"]["skippedTests"] == 0
        assert data["testSuites"][0]["fullPath"] == "/project/tests/example_test.py"
        assert data["testSuites"][0]["tests"][1]["errorMessage"] == "Expected true but got false"
        assert data["environment"]["gitCommit"] == "abc123def456"
        assert data["environment"]["pythonVersion"] == "3.12.1"


class TestHelpers:

    def test_coverage_rows_missing_keys(self):
        rows = coverage_rows({"total": {"lines": {"pct": 50}}})
        assert rows == [("Líneas", 50), ("Funciones", 0), ("Ramas", 0), ("Declaraciones", 0)]

    def test_coverage_rows_none(self):
        assert coverage_rows(None) == []

    @pytest.mark.parametrize("coverage", [
        {"total": {"lines": 80}},
        {"total": 5},
        {"total": {"lines": None, "branches": [1]}},
        {"other": 1},
    ])
    def test_coverage_rows_unexpected_shape(self, coverage):
        assert [pct for _, pct in coverage_rows(coverage)] == [0, 0, 0, 0]

    def test_format_timestamp(self):
        assert format_timestamp("2026-10-18T10:30:05+00:00") == "18/10/2026, 10:30:05"

    def test_format_timestamp_passthrough(self):
        assert format_timestamp("not a date") == "not a date"

    def test_email_body(self, passing_report):
        html = render_email_html(passing_report)
        assert "Todas las pruebas pasaron" in html
        assert "100.00%" in html
