"""RepositoryPathResolver — ordered fallback over resolution strategies."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from m2doctor.engines.repo_resolver.strategies import (
    CommandRunner,
    ResolutionStrategy,
    default_location_strategy,
    maven_command_strategy,
    maven_commands,
    maven_home_env_strategy,
    run_command,
    user_settings_strategy,
)
from m2doctor.exceptions import ResolutionError

log = structlog.get_logger("m2doctor.engine")


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def default_strategies(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
    runner: CommandRunner = run_command,
    platform: str = sys.platform,
) -> list[tuple[str, ResolutionStrategy]]:
    """Build the standard chain: mvn -v, MAVEN_HOME/M2_HOME/PATH, user settings, default."""
    env = os.environ if environ is None else environ
    user_home = home if home is not None else _home_dir()
    return [
        (
            "maven-command",
            maven_command_strategy(
                runner=runner, home=user_home, environ=env, commands=maven_commands(platform)
            ),
        ),
        ("maven-home-env", maven_home_env_strategy(environ=env, home=user_home)),
        ("user-settings", user_settings_strategy(user_home, environ=env)),
        ("default-location", default_location_strategy(user_home)),
    ]


class RepositoryPathResolver:
    """Try each named strategy in order; the first path wins."""

    def __init__(self, strategies: Sequence[tuple[str, ResolutionStrategy]] | None = None) -> None:
        self._strategies = list(strategies) if strategies is not None else default_strategies()

    def resolve(self) -> Path:
        """Return the absolute repository root.

        Raises ``ResolutionError`` once every strategy has come up empty.
        """
        for name, strategy in self._strategies:
            log.debug("resolver.strategy_started", strategy=name)
            try:
                found = strategy()
            except Exception:
                log.warning("resolver.strategy_failed", strategy=name, exc_info=True)
                continue
            if found is not None:
                path = Path(found).expanduser().absolute()
                log.info("resolver.resolved", strategy=name, path=str(path))
                return path
        raise ResolutionError("no local repository path could be determined")


def resolve_repository_path() -> str:
    """Resolve the repository root from the real process environment."""
    return str(RepositoryPathResolver().resolve())
