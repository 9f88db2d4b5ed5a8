"""Pydantic models for test results, reports and notification outcomes."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Raw test run input (Jest-style JSON or converted JUnit XML) ---


class PerfStats(BaseModel):
    start: float = 0  # epoch ms
    end: float = 0


class AssertionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    status: str = ""
    duration: Optional[float] = None  # ms
    failure_messages: list[str] = Field(default_factory=list, alias="failureMessages")


class FileResult(BaseModel):
    """Results for a single test file."""

    model_config = ConfigDict(populate_by_name=True)

    test_file_path: Optional[str] = Field(None, alias="testFilePath")
    status: Optional[str] = None
    perf_stats: Optional[PerfStats] = Field(None, alias="perfStats")
    assertion_results: list[AssertionResult] = Field(
        default_factory=list, alias="assertionResults"
    )


class TestRunResult(BaseModel):
    """Aggregated output of one test run, as reported by the runner."""

    __test__ = False  # prevent pytest collection

    model_config = ConfigDict(populate_by_name=True)

    num_total_tests: Optional[int] = Field(None, alias="numTotalTests")
    num_passed_tests: Optional[int] = Field(None, alias="numPassedTests")
    num_failed_tests: Optional[int] = Field(None, alias="numFailedTests")
    num_pending_tests: Optional[int] = Field(None, alias="numPendingTests")
    success: Optional[bool] = None
    test_results: Optional[list[FileResult]] = Field(None, alias="testResults")


# --- Report ---


class ReportModel(BaseModel):
    """Immutable report record, serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Summary(ReportModel):
    total_tests: int = Field(0, ge=0)
    passed_tests: int = Field(0, ge=0)
    failed_tests: int = Field(0, ge=0)
    skipped_tests: int = Field(0, ge=0)
    total_time: float = 0  # ms
    success: bool = False

    @property
    def success_rate(self) -> str:
        """Passed / total as a percentage string, "0" for an empty run."""
        if self.total_tests > 0:
            return f"{self.passed_tests / self.total_tests * 100:.2f}"
        return "0"

    @property
    def total_time_seconds(self) -> str:
        return f"{self.total_time / 1000:.2f}"

    @property
    def status_label(self) -> str:
        return "✅ ÉXITO" if self.success else "❌ FALLO"


class TestCase(ReportModel):
    """A single test within a suite."""

    __test__ = False  # prevent pytest collection

    name: str
    status: str
    duration: float = 0  # ms
    error_message: Optional[str] = None


class Suite(ReportModel):
    name: str
    full_path: Optional[str] = None
    status: Optional[str] = None
    duration: float = 0  # ms
    tests: list[TestCase] = []

    @property
    def duration_seconds(self) -> str:
        return f"{self.duration / 1000:.2f}"


class VcsInfo(BaseModel):
    commit: str = "unknown"
    branch: str = "unknown"


class Environment(ReportModel):
    python_version: str
    platform: str
    arch: str
    timestamp: str
    git_commit: str = "unknown"
    git_branch: str = "unknown"

    @property
    def short_commit(self) -> str:
        return self.git_commit[:8]


class ReportData(ReportModel):
    """Everything known about one test run. Built once, never mutated."""

    timestamp: str
    summary: Summary
    test_suites: list[Suite] = []
    coverage: Optional[dict[str, Any]] = None
    environment: Environment


# --- Notifications ---


class ChannelType(str, Enum):
    CONSOLE = "console"
    EMAIL = "email"
    SLACK = "slack"
    TEAMS = "teams"
    DISCORD = "discord"
    ERROR = "error"  # dispatch itself failed


class NotificationOutcome(BaseModel):
    type: ChannelType
    success: bool
    result: Optional[Any] = None
    error: Optional[str] = None
