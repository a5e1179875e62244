"""craprs CLI - CRAP metric for Rust."""

import json
from pathlib import Path
from typing import Any

import click

from craprs import __version__
from craprs.config import load_config
from craprs.core.errors import CrapError
from craprs.core.formatting import run_summary
from craprs.core.logging import configure_logging
from craprs.core.progress import status
from craprs.ops import run_analysis
from craprs.report import build_summary, format_report


def _overrides(
    *,
    coverage_tool: str | None,
    skip_coverage: bool,
    src: str | None,
    limit: int | None,
    as_json: bool,
    verbose: bool,
) -> dict[str, Any]:
    """Config overrides for the options that were actually given."""
    overrides: dict[str, dict[str, Any]] = {}
    if coverage_tool is not None:
        overrides.setdefault("coverage", {})["tool"] = coverage_tool
    if skip_coverage:
        overrides.setdefault("coverage", {})["skip"] = True
    if src is not None:
        overrides.setdefault("analysis", {})["src_dir"] = src
    if limit is not None:
        overrides.setdefault("report", {})["limit"] = limit
    if as_json:
        overrides.setdefault("report", {})["format"] = "json"
    if verbose:
        overrides.setdefault("logging", {})["level"] = "DEBUG"
    return overrides


@click.command()
@click.version_option(version=__version__, prog_name="craprs")
@click.argument("filters", nargs=-1)
@click.option(
    "--coverage-tool",
    type=click.Choice(["tarpaulin", "llvm-cov"]),
    default=None,
    help="Coverage tool to use (default: tarpaulin)",
)
@click.option("--skip-coverage", is_flag=True, help="Skip coverage generation, use existing lcov.info")
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project directory (where Cargo.toml lives)",
)
@click.option("--src", default=None, help="Source directory relative to the project (default: src)")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Show only the N riskiest")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    filters: tuple[str, ...],
    coverage_tool: str | None,
    skip_coverage: bool,
    project_dir: Path | None,
    src: str | None,
    limit: int | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Rank Rust functions by CRAP score (complexity x missing coverage).

    FILTERS are module or file path fragments; a function is shown when its
    module path or file path contains any of them.
    """
    project_dir = project_dir or Path.cwd()
    overrides = _overrides(
        coverage_tool=coverage_tool,
        skip_coverage=skip_coverage,
        src=src,
        limit=limit,
        as_json=as_json,
        verbose=verbose,
    )

    try:
        config = load_config(project_dir, **overrides)
        configure_logging(config=config.logging)
        result = run_analysis(project_dir, config, filters)
    except CrapError as e:
        raise click.ClickException(str(e)) from e

    if config.report.format == "json":
        click.echo(json.dumps(build_summary(result), indent=2))
        return

    click.echo(format_report(result.rows), nl=False)
    for warning in result.warnings:
        status(f"{warning.message} (skipped)", style="warning")
    summary = run_summary(
        result.files_analyzed,
        result.functions_scored,
        result.elapsed_sec,
        skipped=len(result.warnings),
    )
    status(summary, style="success")


if __name__ == "__main__":
    cli()
