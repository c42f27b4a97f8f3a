"""Tests for ValidationIssue and ValidationReport."""

import pytest
from pydantic import ValidationError

from bmadflow.schemas.validation import IssueLevel, ValidationIssue, ValidationReport


def _issue(level: IssueLevel, rule: str = "r") -> ValidationIssue:
    return ValidationIssue(level=level, rule=rule, message=f"{rule} message", location="root")


class TestValidationIssue:
    def test_frozen(self) -> None:
        issue = _issue(IssueLevel.ERROR)
        with pytest.raises(ValidationError):
            issue.rule = "other"  # type: ignore[misc]

    def test_level_from_string(self) -> None:
        issue = ValidationIssue(level="warning", rule="r", message="m", location="name")
        assert issue.level is IssueLevel.WARNING

    def test_to_dict_drops_unset_optionals(self) -> None:
        data = _issue(IssueLevel.INFO).to_dict()
        assert data == {
            "level": "info",
            "rule": "r",
            "message": "r message",
            "location": "root",
        }

    def test_to_dict_keeps_set_optionals(self) -> None:
        issue = ValidationIssue(
            level=IssueLevel.WARNING,
            rule="workflow-prefix",
            message="m",
            location="name",
            current="Test",
            suggestion="wf_Test",
        )
        data = issue.to_dict()
        assert data["current"] == "Test"
        assert data["suggestion"] == "wf_Test"
        assert "expression" not in data


class TestValidationReport:
    def test_empty_report_passes(self) -> None:
        report = ValidationReport()
        assert report.passed
        assert report.total_count == 0
        assert report.exit_code() == 0
        assert report.exit_code(strict=True) == 0

    def test_counts_by_level(self) -> None:
        report = ValidationReport(issues=[
            _issue(IssueLevel.ERROR, "a"),
            _issue(IssueLevel.WARNING, "b"),
            _issue(IssueLevel.WARNING, "c"),
            _issue(IssueLevel.INFO, "d"),
        ])
        assert report.error_count == 1
        assert report.warning_count == 2
        assert report.info_count == 1
        assert report.total_count == 4
        assert [i.rule for i in report.warnings] == ["b", "c"]
        assert [i.rule for i in report.infos] == ["d"]

    def test_warnings_do_not_fail(self) -> None:
        report = ValidationReport(issues=[_issue(IssueLevel.WARNING)])
        assert report.passed
        assert report.exit_code() == 0

    def test_strict_fails_on_warnings(self) -> None:
        report = ValidationReport(issues=[_issue(IssueLevel.WARNING)])
        assert report.exit_code(strict=True) == 1

    def test_strict_ignores_info(self) -> None:
        report = ValidationReport(issues=[_issue(IssueLevel.INFO)])
        assert report.exit_code(strict=True) == 0

    def test_errors_fail(self) -> None:
        report = ValidationReport(issues=[_issue(IssueLevel.ERROR)])
        assert not report.passed
        assert report.exit_code() == 1

    def test_to_dict_shape(self) -> None:
        report = ValidationReport(issues=[
            _issue(IssueLevel.ERROR, "a"),
            _issue(IssueLevel.INFO, "b"),
        ])
        data = report.to_dict()
        assert data["totalCount"] == 2
        assert data["errorCount"] == 1
        assert data["warningCount"] == 0
        assert data["infoCount"] == 1
        assert data["passed"] is False
        assert [i["rule"] for i in data["issues"]] == ["a", "b"]
