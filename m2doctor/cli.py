"""CLI entry point: m2doctor.

Subcommands:
    m2doctor resolve                         # Print the local repository path
    m2doctor scan [REPO_PATH] [--json]       # List corrupted artifacts
    m2doctor clean [REPO_PATH] [--yes]       # Scan, confirm, delete
    m2doctor clean --from-json report.json   # Delete a saved `scan --json` report
    m2doctor serve                           # Run the HTTP API
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path

import click

from m2doctor.core.logging import setup_logging
from m2doctor.engines.artifact_scanner import ArtifactLocation, InvalidArtifact, scan
from m2doctor.engines.cleanup import CleanResult, CleanupExecutor
from m2doctor.engines.repo_resolver import resolve_repository_path
from m2doctor.exceptions import M2DoctorError


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _repo_path_or_resolve(repo_path: str | None) -> str:
    if repo_path:
        return repo_path
    try:
        resolved = resolve_repository_path()
    except M2DoctorError as e:
        _fail(e)
    click.echo(f"Using repository: {resolved}", err=True)
    return resolved


def _print_findings(findings: list[InvalidArtifact]) -> None:
    if not findings:
        click.echo("No corrupted artifacts found.")
        return
    click.echo(f"Found {len(findings)} corrupted artifact(s)\n")
    for item in sorted(findings, key=lambda a: (a.folder, a.base_name)):
        detail = f" ({item.detail})" if item.detail else ""
        click.echo(f"  {Path(item.folder) / item.base_name}")
        click.echo(f"      {item.reason}{detail}")


def _load_report(report_file: str) -> list[ArtifactLocation]:
    try:
        rows = json.loads(Path(report_file).read_text())
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid JSON in {report_file}: {e}", err=True)
        sys.exit(1)
    if not isinstance(rows, list):
        click.echo("Error: report must be a JSON array", err=True)
        sys.exit(1)
    items: list[ArtifactLocation] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict) or "folder" not in row or "base_name" not in row:
            click.echo(f"Error: entry {i} needs 'folder' and 'base_name'", err=True)
            sys.exit(1)
        items.append(ArtifactLocation(folder=str(row["folder"]), base_name=str(row["base_name"])))
    return items


def _print_clean_result(result: CleanResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(asdict(result), indent=2))
        return
    click.echo(f"Deleted {result.deleted_count} artifact(s).")
    if result.errors:
        click.echo(f"{len(result.errors)} error(s):")
        for err in result.errors:
            click.echo(f"  ! {err}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """m2doctor: find and remove corrupted artifacts in a local Maven repository."""
    setup_logging("DEBUG" if verbose else None)


@main.command("resolve")
def resolve() -> None:
    """Print the local repository path Maven would use."""
    try:
        click.echo(resolve_repository_path())
    except M2DoctorError as e:
        _fail(e)


@main.command("scan")
@click.argument("repo_path", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print findings as a JSON array")
def scan_cmd(repo_path: str | None, as_json: bool) -> None:
    """Scan REPO_PATH (default: resolved repository) for corrupted artifacts."""
    target = _repo_path_or_resolve(repo_path)
    try:
        findings = scan(target)
    except M2DoctorError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([asdict(f) for f in findings], indent=2))
    else:
        _print_findings(findings)


@main.command("clean")
@click.argument("repo_path", required=False)
@click.option(
    "--from-json",
    "report_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Delete the entries of a saved `scan --json` report instead of scanning",
)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def clean_cmd(repo_path: str | None, report_file: str | None, yes: bool, as_json: bool) -> None:
    """Delete corrupted artifacts. Exit code 2 when some deletions failed."""
    if report_file:
        items = _load_report(report_file)
        executor = CleanupExecutor(root=repo_path) if repo_path else CleanupExecutor()
    else:
        target = _repo_path_or_resolve(repo_path)
        try:
            findings = scan(target)
        except M2DoctorError as e:
            _fail(e)
        if not as_json:
            _print_findings(findings)
        # A jar and its pom are flagged separately; clean each location once.
        items = list(dict.fromkeys(f.location for f in findings))
        executor = CleanupExecutor(root=target)

    if not items:
        _print_clean_result(CleanResult(), as_json)
        return

    if not yes and not click.confirm(f"\nDelete {len(items)} artifact(s)?", default=False):
        click.echo("Aborted.")
        return

    result = executor.clean(items)
    _print_clean_result(result, as_json)
    if result.errors:
        sys.exit(2)


@main.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8765, show_default=True, type=int, help="Bind port")
def serve(host: str, port: int) -> None:
    """Run the HTTP API used by the desktop shell."""
    import uvicorn

    uvicorn.run("m2doctor.api:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    main()
