"""Repository router — where the local repository lives."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from m2doctor.api.deps import get_resolver
from m2doctor.api.schemas.artifact import RepositoryPathResponse
from m2doctor.engines.repo_resolver import RepositoryPathResolver

router = APIRouter()


@router.get("/path", response_model=RepositoryPathResponse)
async def repository_path(
    resolver: RepositoryPathResolver = Depends(get_resolver),
) -> RepositoryPathResponse:
    # `mvn -v` can take seconds; keep it off the event loop.
    path = await asyncio.to_thread(resolver.resolve)
    return RepositoryPathResponse(path=str(path))
