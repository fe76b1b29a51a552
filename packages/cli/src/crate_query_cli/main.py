"""Crate Query CLI - Main entry point.

Provides the `crate-query` command-line interface.

Usage:
    crate-query libc --features
    crate-query serde libc --deps
    crate-query semver@^1.0 --format json-pretty
    cargo add $(crate-query tokio --deps --format cargo-add-all)

Query output goes to stdout; diagnostics go to stderr. The exit code is 0
only when every requested package resolved to a version.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from crate_index import (
    Encoding,
    LocalIndexFetcher,
    QueryEngine,
    QueryReport,
    SparseIndexClient,
    ViewKind,
)
from crate_query_common import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

app = typer.Typer(
    name="crate-query",
    help="Query the crates.io index for versions, features and dependencies.",
    add_completion=False,
)


def resolve_view(deps: bool, features: bool) -> ViewKind:
    """Map the view flags to a ViewKind."""
    if deps and features:
        raise typer.BadParameter("--deps and --features are mutually exclusive")
    if deps:
        return ViewKind.deps
    if features:
        return ViewKind.features
    return ViewKind.full


def resolve_encoding(
    format: Optional[Encoding],
    json_output: bool,
    pretty: bool,
) -> Encoding:
    """Map --format and the --json/--pretty shortcuts to an Encoding.

    An explicit --format wins over the shortcuts.
    """
    if format is not None:
        return format
    if pretty:
        return Encoding.json_pretty
    if json_output:
        return Encoding.json
    return Encoding.plain


async def run_query(
    packages: list[str],
    version_range: Optional[str],
    view: ViewKind,
    encoding: Encoding,
    include_yanked: bool,
    all_matches: bool,
    index_url: str,
    index_dir: Optional[Path],
    max_concurrency: int,
    timeout_seconds: float,
    user_agent: str,
) -> QueryReport:
    """Open the configured index and run the batch query."""
    if index_dir is not None:
        fetcher = LocalIndexFetcher(index_dir)
    else:
        fetcher = SparseIndexClient(
            base_url=index_url,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
        )

    async with fetcher:
        engine = QueryEngine(fetcher, max_concurrency=max_concurrency)
        return await engine.run(
            packages,
            version_range=version_range,
            view=view,
            encoding=encoding,
            include_yanked=include_yanked,
            all_matches=all_matches,
        )


def report_diagnostics(report: QueryReport) -> None:
    """Write yanked-version warnings and per-package errors to stderr."""
    for query, selection in report.yanked_fallbacks.items():
        typer.echo(
            f"warning: {query}: only yanked versions exist, selected {selection.best.vers}",
            err=True,
        )
    for failure in report.failed.values():
        typer.echo(f"error: {failure.query}: {failure.message}", err=True)


@app.command()
def query(
    packages: List[str] = typer.Argument(
        ...,
        help="Packages to query, optionally with a range (e.g. 'serde@^1.0')",
    ),
    deps: bool = typer.Option(
        False,
        "--deps",
        "-d",
        help="Show dependencies for each package",
    ),
    features: bool = typer.Option(
        False,
        "--features",
        "-f",
        help="Show features for each package",
    ),
    format: Optional[Encoding] = typer.Option(
        None,
        "--format",
        "-F",
        help="Output format",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print output in json format (same as --format json)",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        "-p",
        help="Pretty print json output (same as --format json-pretty)",
    ),
    version_range: Optional[str] = typer.Option(
        None,
        "--range",
        "-r",
        help="Version requirement for packages without their own (e.g. '>=1.0, <2.0')",
    ),
    all_matches: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Show every matching version instead of the highest",
    ),
    include_yanked: bool = typer.Option(
        False,
        "--include-yanked",
        help="Allow yanked versions to be selected",
    ),
    index_url: Optional[str] = typer.Option(
        None,
        "--index-url",
        help="Sparse index URL (default: CRATE_QUERY_INDEX_URL or crates.io)",
    ),
    index_dir: Optional[Path] = typer.Option(
        None,
        "--index-dir",
        help="Read shards from a local index checkout instead of HTTP",
        exists=True,
        file_okay=False,
    ),
    jobs: Optional[int] = typer.Option(
        None,
        "--jobs",
        "-J",
        min=1,
        help="Maximum concurrent shard fetches",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging on stderr",
    ),
):
    """Show versions, features or dependencies of crates.

    Examples:

        crate-query libc --features

        crate-query serde libc --deps

        crate-query semver --format json-pretty

        crate-query tokio@~1.28 --all
    """
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_output=settings.log_format == "json",
    )

    view = resolve_view(deps, features)
    encoding = resolve_encoding(format, json_output, pretty)
    if index_dir is None and settings.index_dir:
        index_dir = Path(settings.index_dir)

    report = asyncio.run(
        run_query(
            packages,
            version_range=version_range,
            view=view,
            encoding=encoding,
            include_yanked=include_yanked,
            all_matches=all_matches,
            index_url=index_url or settings.index_url,
            index_dir=index_dir,
            max_concurrency=jobs or settings.max_concurrency,
            timeout_seconds=settings.timeout_seconds,
            user_agent=settings.user_agent,
        )
    )

    if report.output:
        typer.echo(report.output)
    report_diagnostics(report)

    if report.exit_code:
        logger.debug(
            "query_exit",
            failed=list(report.failed),
            total_failure=report.total_failure,
        )
        raise typer.Exit(report.exit_code)


if __name__ == "__main__":
    app()
