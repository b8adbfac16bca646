"""Artifacts router — scan for corrupted artifacts and delete them."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from m2doctor.api.deps import get_cleanup_executor, get_scanner
from m2doctor.api.schemas.artifact import (
    CleanRequest,
    CleanResultOut,
    InvalidArtifactOut,
    ScanRequest,
)
from m2doctor.engines.artifact_scanner import ArtifactLocation, ArtifactScanner
from m2doctor.engines.cleanup import CleanupExecutor

router = APIRouter()


@router.post("/scan", response_model=list[InvalidArtifactOut])
async def scan_artifacts(
    body: ScanRequest,
    scanner: ArtifactScanner = Depends(get_scanner),
) -> list[InvalidArtifactOut]:
    found = await asyncio.to_thread(scanner.scan, body.repo_path)
    return [InvalidArtifactOut.model_validate(a) for a in found]


@router.post("/clean", response_model=CleanResultOut)
async def clean_artifacts(
    body: CleanRequest,
    executor: CleanupExecutor = Depends(get_cleanup_executor),
) -> CleanResultOut:
    if body.repo_path:
        executor = CleanupExecutor(root=body.repo_path)
    # Scan results list a jar and its pom separately; clean each location once.
    items = list(
        dict.fromkeys(ArtifactLocation(i.folder, i.base_name) for i in body.items)
    )
    result = await asyncio.to_thread(executor.clean, items)
    return CleanResultOut.model_validate(result)
