"""Pydantic models for the reference checker API."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class CheckRequest(BaseModel):
    """Request model for the check endpoint."""

    workspace: str = Field(
        ...,
        description="Absolute path of the repository checkout to inspect",
        examples=["/srv/content"],
    )
    activities_csv: str = Field(
        "./activities.csv",
        description="Activities manifest, relative to the workspace",
    )
    articles_csv: str = Field(
        "./articles.csv",
        description="Articles manifest, relative to the workspace",
    )
    magic_tasks: List[str] = Field(
        default_factory=list,
        description="Task files that count as referenced",
        examples=[["tasks/intro.json"]],
    )
    git_base_sha: Optional[str] = Field(
        None,
        description="Base revision for the change report",
        examples=["5f92d0ba63f6031189e16c87d591a9500701b523"],
    )
    git_head_sha: Optional[str] = Field(
        None,
        description="Head revision for changed-file annotations",
        examples=["2f3be3b6145ab7099db73e727bf4b02696292f66"],
    )

    @field_validator("workspace")
    @classmethod
    def workspace_must_be_absolute(cls, v):
        """Only absolute paths are accepted."""
        v = v.strip()
        if not v:
            raise ValueError("workspace cannot be empty")
        if not (v.startswith("/") or (len(v) > 2 and v[1] == ":")):
            raise ValueError("workspace must be an absolute path")
        return v

    @field_validator("git_base_sha", "git_head_sha")
    @classmethod
    def revision_must_not_be_blank(cls, v):
        """Blank revisions are treated as absent."""
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("magic_tasks")
    @classmethod
    def magic_tasks_strip_blanks(cls, v):
        """Drop empty entries."""
        return [item.strip() for item in v if item.strip()]


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., examples=["healthy"])
    version: str = Field(..., examples=["1.0.0"])
    workspace: Optional[str] = Field(None, examples=["/github/workspace"])
    workspace_is_checkout: Optional[bool] = Field(None, examples=[True])
    manifests: Dict[str, bool] = Field(
        default_factory=dict,
        examples=[{"./activities.csv": True, "./articles.csv": True}],
    )


class VersionResponse(BaseModel):
    """Response model for version endpoint."""

    version: str = Field(..., examples=["1.0.0"])
    api_version: str = Field(..., examples=["v1"])
    supported_features: List[str] = Field(
        default_factory=lambda: [
            "reference_check",
            "media_references",
            "change_report",
            "logic_flags",
        ]
    )
