"""Validation engine — runs the rule checkers over a workflow document."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bmadflow.schemas.naming import NamingConvention
from bmadflow.schemas.validation import ValidationIssue, ValidationReport
from bmadflow.validation.credentials import check_credentials
from bmadflow.validation.expressions import check_expressions
from bmadflow.validation.naming import check_naming
from bmadflow.validation.structure import check_structure

logger = logging.getLogger(__name__)

RULE_CHECKERS = ("structure", "expressions", "naming", "credentials")


def validate_workflow(
    workflow: Mapping[str, Any],
    convention: NamingConvention | None = None,
    *,
    structure: bool = True,
    expressions: bool = True,
    naming: bool = True,
    credentials: bool = True,
) -> ValidationReport:
    """Validate a raw workflow document.

    The enabled checkers run independently and their issues are
    concatenated in a fixed order: structure, expressions, naming,
    credentials. The document is never modified and never rejected; every
    defect is reported as an issue.
    """
    issues: list[ValidationIssue] = []

    if structure:
        issues.extend(check_structure(workflow))
    if expressions:
        issues.extend(check_expressions(workflow))
    if naming:
        issues.extend(check_naming(workflow, convention))
    if credentials:
        issues.extend(check_credentials(workflow))

    report = ValidationReport(issues=issues)
    logger.debug(
        "Validated workflow %r: %d errors, %d warnings, %d info",
        workflow.get("name"), report.error_count, report.warning_count, report.info_count,
    )
    return report
