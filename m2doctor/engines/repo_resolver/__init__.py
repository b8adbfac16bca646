"""Repository resolver engine — find the local Maven repository on disk."""

from m2doctor.engines.repo_resolver.resolver import (
    RepositoryPathResolver,
    default_strategies,
    resolve_repository_path,
)

__all__ = ["RepositoryPathResolver", "default_strategies", "resolve_repository_path"]
