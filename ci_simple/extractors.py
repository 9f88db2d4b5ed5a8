"""Reduce raw test-run results into report summaries and suites.

Also converts pytest's JUnit XML output into a TestRunResult and
coverage.py's JSON report into a coverage summary, so the runner can feed
the same pipeline.
"""

import os
import xml.etree.ElementTree as ET
from collections import OrderedDict
from datetime import datetime
from typing import Optional

from .models import (
    AssertionResult,
    FileResult,
    PerfStats,
    Suite,
    Summary,
    TestCase,
    TestRunResult,
)


def _suite_duration(suite: FileResult) -> float:
    if suite.perf_stats is None:
        return 0
    return suite.perf_stats.end - suite.perf_stats.start


def _count(value: Optional[int]) -> int:
    return max(value or 0, 0)


def extract_summary(results: TestRunResult) -> Summary:
    """Totals for the whole run. Missing or negative counts degrade to zero."""
    return Summary(
        total_tests=_count(results.num_total_tests),
        passed_tests=_count(results.num_passed_tests),
        failed_tests=_count(results.num_failed_tests),
        skipped_tests=_count(results.num_pending_tests),
        total_time=sum(_suite_duration(s) for s in results.test_results or []),
        success=results.success or False,
    )


def extract_suites(results: TestRunResult) -> list[Suite]:
    """One Suite per test file, in execution order."""
    if not results.test_results:
        return []

    suites = []
    for suite in results.test_results:
        tests = [
            TestCase(
                name=test.title,
                status=test.status,
                duration=test.duration or 0,
                error_message="\n".join(test.failure_messages) or None,
            )
            for test in suite.assertion_results
        ]
        suites.append(Suite(
            name=os.path.basename(suite.test_file_path) if suite.test_file_path else "Unknown",
            full_path=suite.test_file_path,
            status=suite.status,
            duration=_suite_duration(suite),
            tests=tests,
        ))
    return suites


# ---------------------------------------------------------------------------
# JUnit XML
# ---------------------------------------------------------------------------


def _case_file(tc_el: ET.Element) -> str:
    """Source file of a testcase; derived from the classname if pytest omits it."""
    if tc_el.get("file"):
        return tc_el.get("file")
    parts = tc_el.get("classname", "").split(".")
    # Drop a trailing TestClass segment
    if len(parts) > 1 and parts[-1][:1].isupper():
        parts = parts[:-1]
    return "/".join(parts) + ".py" if parts and parts[0] else "Unknown"


def _case_outcome(tc_el: ET.Element) -> tuple[str, list[str]]:
    for tag in ("failure", "error"):
        el = tc_el.find(tag)
        if el is not None:
            message = el.get("message", "")
            detail = (el.text or "").strip()
            return "failed", [m for m in (message, detail) if m]
    if tc_el.find("skipped") is not None:
        return "skipped", []
    return "passed", []


def _suite_start_ms(suite_el: ET.Element) -> float:
    stamp = suite_el.get("timestamp")
    if stamp:
        try:
            return datetime.fromisoformat(stamp).timestamp() * 1000
        except ValueError:
            pass
    return 0


def parse_junit_xml(xml_content: str, success: Optional[bool] = None) -> TestRunResult:
    """Parse JUnit XML content into a TestRunResult.

    Handles both single <testsuite> and <testsuites> wrapper formats.
    Testcases are grouped by source file; errors count as failures.
    """
    root = ET.fromstring(xml_content)

    if root.tag == "testsuites":
        suite_elements = root.findall("testsuite")
    elif root.tag == "testsuite":
        suite_elements = [root]
    else:
        return TestRunResult(success=success)

    files: "OrderedDict[str, FileResult]" = OrderedDict()
    passed = failed = skipped = 0

    for suite_el in suite_elements:
        clock = _suite_start_ms(suite_el)

        for tc_el in suite_el.findall("testcase"):
            status, messages = _case_outcome(tc_el)
            if status == "passed":
                passed += 1
            elif status == "failed":
                failed += 1
            else:
                skipped += 1

            duration = float(tc_el.get("time", 0)) * 1000
            path = _case_file(tc_el)
            entry = files.get(path)
            if entry is None:
                entry = files[path] = FileResult(
                    test_file_path=path,
                    status="passed",
                    perf_stats=PerfStats(start=clock, end=clock),
                )
            entry.assertion_results.append(AssertionResult(
                title=tc_el.get("name", "unknown"),
                status=status,
                duration=duration,
                failure_messages=messages,
            ))
            entry.perf_stats.end += duration
            clock += duration
            if status == "failed":
                entry.status = "failed"

    if success is None:
        success = failed == 0

    return TestRunResult(
        num_total_tests=passed + failed + skipped,
        num_passed_tests=passed,
        num_failed_tests=failed,
        num_pending_tests=skipped,
        success=success,
        test_results=list(files.values()),
    )


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------


def _metric(covered: int, total: int) -> dict:
    # Nothing to measure counts as fully covered
    pct = round(covered / total * 100, 2) if total else 100
    return {"total": total, "covered": covered, "skipped": 0, "pct": pct}


def _function_counts(files: dict) -> tuple[int, int]:
    covered = total = 0
    for data in files.values():
        for name, func in (data.get("functions") or {}).items():
            if not name:  # module-level code
                continue
            total += 1
            if (func.get("summary") or {}).get("covered_lines", 0) > 0:
                covered += 1
    return covered, total


def convert_coverage_json(data: dict) -> dict:
    """Map a coverage.py JSON report onto the coverage-summary shape.

    coverage.py reports statements (used for both lines and statements) and,
    with --cov-branch, branches. Functions are counted from the per-file
    function regions: a function is covered when any of its lines ran.
    """
    totals = data.get("totals") or {}
    statements = _metric(totals.get("covered_lines", 0), totals.get("num_statements", 0))
    functions = _metric(*_function_counts(data.get("files") or {}))
    branches = _metric(totals.get("covered_branches", 0), totals.get("num_branches", 0))
    return {
        "total": {
            "lines": statements,
            "statements": dict(statements),
            "functions": functions,
            "branches": branches,
        }
    }
