"""Artifact request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RepositoryPathResponse(BaseModel):
    path: str


class ScanRequest(BaseModel):
    repo_path: str = Field(min_length=1)


class InvalidArtifactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    folder: str
    base_name: str
    reason: str
    detail: str | None = None


class CleanItemIn(BaseModel):
    folder: str
    base_name: str


class CleanRequest(BaseModel):
    items: list[CleanItemIn] = Field(default_factory=list)
    # When set, items outside this repository are refused.
    repo_path: str | None = Field(default=None, min_length=1)


class CleanResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    deleted_count: int
    errors: list[str]
