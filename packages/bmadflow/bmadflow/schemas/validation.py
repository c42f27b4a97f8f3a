"""Validation issue and report schemas."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IssueLevel(StrEnum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single defect found in a validated document.

    Issues are data, never exceptions. Each one is produced by exactly one
    rule checker and is not modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    level: IssueLevel
    rule: str = Field(description="Identifier of the check that produced the issue")
    message: str
    location: str = Field(description="Path into the document, e.g. 'nodes[2].parameters'")
    suggestion: str | None = None
    expression: str | None = None
    current: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output, dropping unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ValidationReport(BaseModel):
    """Ordered issues from one validation run plus summary counts.

    ``passed`` only looks at errors. Whether warnings should also block is
    the caller's decision, see :meth:`exit_code`.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)

    def _by_level(self, level: IssueLevel) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == level]

    @property
    def errors(self) -> list[ValidationIssue]:
        return self._by_level(IssueLevel.ERROR)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return self._by_level(IssueLevel.WARNING)

    @property
    def infos(self) -> list[ValidationIssue]:
        return self._by_level(IssueLevel.INFO)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def info_count(self) -> int:
        return len(self.infos)

    @property
    def total_count(self) -> int:
        return len(self.issues)

    @property
    def passed(self) -> bool:
        return self.error_count == 0

    def exit_code(self, strict: bool = False) -> int:
        """Process exit code: 1 on errors, or on any warning when strict."""
        if strict:
            return 1 if self.error_count + self.warning_count > 0 else 0
        return 0 if self.passed else 1

    def to_dict(self) -> dict[str, Any]:
        """Summary counts and issues in the CLI's JSON output shape."""
        return {
            "totalCount": self.total_count,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "infoCount": self.info_count,
            "passed": self.passed,
            "issues": [i.to_dict() for i in self.issues],
        }

