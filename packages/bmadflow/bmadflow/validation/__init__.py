"""bmadflow validation — rule checkers for workflow documents."""

from bmadflow.validation.credentials import check_credentials
from bmadflow.validation.engine import RULE_CHECKERS, validate_workflow
from bmadflow.validation.expressions import check_expressions
from bmadflow.validation.naming import NameKind, check_naming, validate_name
from bmadflow.validation.structure import check_structure

__all__ = [
    "RULE_CHECKERS",
    "NameKind",
    "check_credentials",
    "check_expressions",
    "check_naming",
    "check_structure",
    "validate_name",
    "validate_workflow",
]
