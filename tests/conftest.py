"""
CI Simple Test Configuration

Shared fixtures for all tests.
"""
import pytest

from ci_simple.config import NotificationConfig, ReportConfig
from ci_simple.models import (
    Environment,
    ReportData,
    Suite,
    Summary,
    TestCase,
    TestRunResult,
    VcsInfo,
)


# =============================================================================
# FIXTURES: Stubs
# =============================================================================

class StubVcs:
    """VcsInfoProvider returning fixed values."""

    def __init__(self, commit: str = "abc123def456", branch: str = "main"):
        self.info = VcsInfo(commit=commit, branch=branch)

    def get_info(self) -> VcsInfo:
        return self.info


@pytest.fixture
def stub_vcs() -> StubVcs:
    return StubVcs()


@pytest.fixture
def report_config(tmp_path) -> ReportConfig:
    """Report output and coverage input inside tmp_path."""
    return ReportConfig(
        reports_dir=str(tmp_path / "reports"),
        coverage_path=str(tmp_path / "coverage" / "coverage-summary.json"),
    )


@pytest.fixture
def notification_config(monkeypatch) -> NotificationConfig:
    """No channels besides the console."""
    for name in (
        "SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "NOTIFICATION_EMAIL",
        "SLACK_WEBHOOK_URL", "TEAMS_WEBHOOK_URL", "DISCORD_WEBHOOK_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return NotificationConfig()


# =============================================================================
# FIXTURES: Sample Data
# =============================================================================

@pytest.fixture
def jest_results() -> dict:
    """Raw runner output in Jest JSON shape."""
    return {
        "success": False,
        "numTotalTests": 3,
        "numPassedTests": 2,
        "numFailedTests": 1,
        "numPendingTests": 0,
        "testResults": [
            {
                "testFilePath": "/project/tests/test_calculator.py",
                "status": "passed",
                "perfStats": {"start": 1000, "end": 2000},
                "assertionResults": [
                    {"title": "adds numbers", "status": "passed", "duration": 12},
                ],
            },
            {
                "testFilePath": "/project/tests/test_utils.py",
                "status": "failed",
                "perfStats": {"start": 2000, "end": 2500},
                "assertionResults": [
                    {"title": "reverses", "status": "passed", "duration": 5},
                    {
                        "title": "detects primes",
                        "status": "failed",
                        "duration": 7,
                        "failureMessages": ["AssertionError: 4 is not prime", "at line 12"],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def sample_report() -> ReportData:
    """5 tests, 4 passed, 1 failed."""
    return ReportData(
        timestamp="2026-10-18T10:30:00+00:00",
        summary=Summary(
            total_tests=5,
            passed_tests=4,
            failed_tests=1,
            skipped_tests=0,
            total_time=5000,
            success=False,
        ),
        test_suites=[
            Suite(
                name="example_test.py",
                full_path="/project/tests/example_test.py",
                status="failed",
                duration=2000,
                tests=[
                    TestCase(name="should pass", status="passed", duration=100),
                    TestCase(
                        name="should fail",
                        status="failed",
                        duration=200,
                        error_message="Expected true but got false",
                    ),
                ],
            )
        ],
        coverage=None,
        environment=Environment(
            python_version="3.12.1",
            platform="darwin",
            arch="x86_64",
            timestamp="2026-10-18T10:30:00+00:00",
            git_commit="abc123def456",
            git_branch="main",
        ),
    )


@pytest.fixture
def passing_report(sample_report) -> ReportData:
    return sample_report.model_copy(update={
        "summary": Summary(
            total_tests=3, passed_tests=3, failed_tests=0,
            skipped_tests=0, total_time=1500, success=True,
        ),
    })


@pytest.fixture
def empty_results() -> TestRunResult:
    return TestRunResult()
