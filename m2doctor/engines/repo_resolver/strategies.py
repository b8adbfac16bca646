"""Repository path strategies — each one looks at a single ambient source.

Parsing helpers are pure functions over text so they can be tested without a
Maven installation. The ``*_strategy`` factories bind a parser to its ambient
input (command runner, environment mapping, home directory) and return a
zero-argument callable yielding ``Path | None``.
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import structlog

log = structlog.get_logger("m2doctor.engine")

ResolutionStrategy = Callable[[], Path | None]
CommandRunner = Callable[[list[str]], str | None]
FileReader = Callable[[Path], str | None]

MAVEN_COMMAND_TIMEOUT = 30
_MAVEN_HOME_PREFIX = "Maven home:"
_SETTINGS_NS = "{http://maven.apache.org/SETTINGS/1.0.0}"

_PROP_RE = re.compile(r"\$\{([^}]+)\}")


def maven_commands(platform: str = sys.platform) -> list[str]:
    """Executable names to try for ``mvn -v``."""
    if platform.startswith("win"):
        return ["mvn.cmd", "mvn.bat", "mvn"]
    return ["mvn"]


def parse_maven_home(output: str) -> str | None:
    """Extract the installation directory from ``mvn -v`` output."""
    for line in output.splitlines():
        line = line.strip()
        if line.startswith(_MAVEN_HOME_PREFIX):
            home = line[len(_MAVEN_HOME_PREFIX) :].strip()
            return home or None
    return None


def expand_placeholders(value: str, home: Path | None, environ: Mapping[str, str]) -> str:
    """Expand ``${user.home}`` and ``${env.NAME}`` the way Maven does.

    Unknown placeholders are kept verbatim.
    """

    def _replace(m: re.Match) -> str:
        key = m.group(1)
        if key == "user.home" and home is not None:
            return str(home)
        if key.startswith("env."):
            return environ.get(key[4:], m.group(0))
        return m.group(0)

    return _PROP_RE.sub(_replace, value)


def parse_local_repository(content: str) -> str | None:
    """Return the first non-blank ``<localRepository>`` of a settings.xml."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        log.debug("resolver.settings_unparseable", error=str(exc))
        return None

    for ns in (_SETTINGS_NS, ""):
        for el in root.iter(f"{ns}localRepository"):
            if el.text and el.text.strip():
                return el.text.strip()
    return None


def maven_homes_from_env(environ: Mapping[str, str]) -> list[Path]:
    """Candidate Maven installations named by MAVEN_HOME, M2_HOME and PATH."""
    homes: list[Path] = []
    for name in ("MAVEN_HOME", "M2_HOME"):
        value = environ.get(name)
        if value:
            homes.append(Path(value))
        else:
            log.debug("resolver.env_unset", variable=name)

    for entry in environ.get("PATH", "").split(os.pathsep):
        lowered = entry.lower()
        if entry and "maven" in lowered and "bin" in lowered:
            homes.append(Path(entry).parent)

    # keep order, drop repeats
    return list(dict.fromkeys(homes))


def run_command(cmd: list[str]) -> str | None:
    """Run *cmd* and return stdout, or None on any failure."""
    kwargs: dict = {}
    if sys.platform.startswith("win"):
        kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=MAVEN_COMMAND_TIMEOUT,
            **kwargs,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        log.debug("resolver.command_failed", command=cmd[0], error=str(exc))
        return None
    if result.returncode != 0:
        log.debug("resolver.command_nonzero", command=cmd[0], returncode=result.returncode)
        return None
    return result.stdout


def read_text(path: Path) -> str | None:
    """Read a settings file, or None when it is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug("resolver.settings_missing", path=str(path))
        return None
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("resolver.settings_unreadable", path=str(path), error=str(exc))
        return None


def _as_absolute(raw: str, home: Path | None, environ: Mapping[str, str]) -> Path:
    return Path(expand_placeholders(raw, home, environ)).expanduser().absolute()


def _local_repo_from_settings(
    settings: Path,
    reader: FileReader,
    home: Path | None,
    environ: Mapping[str, str],
) -> Path | None:
    content = reader(settings)
    if content is None:
        return None
    raw = parse_local_repository(content)
    if raw is None:
        log.debug("resolver.no_local_repository", path=str(settings))
        return None
    return _as_absolute(raw, home, environ)


def maven_command_strategy(
    runner: CommandRunner = run_command,
    reader: FileReader = read_text,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
    commands: Iterable[str] | None = None,
) -> ResolutionStrategy:
    """Ask ``mvn -v`` where Maven lives, then read its global settings."""
    env = os.environ if environ is None else environ

    def _strategy() -> Path | None:
        for cmd in commands or maven_commands():
            output = runner([cmd, "-v"])
            if output is None:
                continue
            maven_home = parse_maven_home(output)
            if maven_home is None:
                log.debug("resolver.no_maven_home_line", command=cmd)
                continue
            return _local_repo_from_settings(
                Path(maven_home) / "conf" / "settings.xml", reader, home, env
            )
        return None

    return _strategy


def maven_home_env_strategy(
    environ: Mapping[str, str] | None = None,
    reader: FileReader = read_text,
    home: Path | None = None,
) -> ResolutionStrategy:
    """Read global settings of every Maven home named by the environment."""
    env = os.environ if environ is None else environ

    def _strategy() -> Path | None:
        for maven_home in maven_homes_from_env(env):
            found = _local_repo_from_settings(
                maven_home / "conf" / "settings.xml", reader, home, env
            )
            if found is not None:
                return found
        return None

    return _strategy


def user_settings_strategy(
    home: Path | None,
    reader: FileReader = read_text,
    environ: Mapping[str, str] | None = None,
) -> ResolutionStrategy:
    """Read ``~/.m2/settings.xml``."""
    env = os.environ if environ is None else environ

    def _strategy() -> Path | None:
        if home is None:
            return None
        return _local_repo_from_settings(home / ".m2" / "settings.xml", reader, home, env)

    return _strategy


def default_location_strategy(home: Path | None) -> ResolutionStrategy:
    """Maven's conventional ``~/.m2/repository``."""

    def _strategy() -> Path | None:
        if home is None:
            return None
        return (home / ".m2" / "repository").absolute()

    return _strategy
