"""Naming convention settings consumed by the naming rule checker."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NamingConvention(BaseModel):
    """Project naming rules for workflows and credentials."""

    workflow_prefix: str = "wf_"
    credential_prefix: str = "cred_"
    use_snake_case: bool = True
    environment_separator: str = Field(
        default="_",
        description="Separator between a name and its environment suffix",
    )
