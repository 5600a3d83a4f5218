"""CLI interface for docnav.

Command-line tool for indexing documentation and validating sidebar navigation.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from docnav.build import BuildResult, run_build
from docnav.config import Config
from docnav.core.errors import DocnavError, NavigationValidationError
from docnav.core.types import Policy
from docnav.output import OutputWriter

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docnav.toml)",
)
_source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)
_navigation_option = click.option(
    "--navigation",
    "-n",
    "definition",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Navigation definition file (overrides config)",
)
_strict_option = click.option(
    "--strict/--no-strict",
    default=None,
    help="Fail on broken links instead of warning (overrides config)",
)
_verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)


@click.group()
def cli() -> None:
    """docnav - Index documentation and validate sidebar navigation."""


@cli.command()
@_config_option
@_source_dir_option
@_navigation_option
@_strict_option
@_verbose_option
def check(
    config_path: Path | None,
    source_dir: Path | None,
    definition: Path | None,
    strict: bool | None,
    verbose: bool,
) -> None:
    """Collect documents and validate the navigation tree."""
    _configure_logging(verbose)
    config = _load_config(config_path, source_dir=source_dir, definition=definition, strict=strict)
    result = _run(config)
    _print_summary(result)


@cli.command()
@_config_option
@_source_dir_option
@_navigation_option
@click.option(
    "--out-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
@_strict_option
@_verbose_option
def build(
    config_path: Path | None,
    source_dir: Path | None,
    definition: Path | None,
    out_dir: Path | None,
    strict: bool | None,
    verbose: bool,
) -> None:
    """Validate and write collection and navigation JSON files."""
    _configure_logging(verbose)
    config = _load_config(
        config_path,
        source_dir=source_dir,
        definition=definition,
        out_dir=out_dir,
        strict=strict,
    )
    result = _run(config)
    _print_summary(result)

    writer = OutputWriter(config.output.dir)
    click.echo(f"Wrote {writer.write_collection(result.collection)}")
    if result.tree is not None:
        click.echo(f"Wrote {writer.write_navigation(result.tree)}")


@cli.command(name="list")
@_config_option
@_source_dir_option
@_verbose_option
def list_documents(
    config_path: Path | None,
    source_dir: Path | None,
    verbose: bool,
) -> None:
    """List collected document paths and titles."""
    _configure_logging(verbose)
    config = _load_config(config_path, source_dir=source_dir)
    # Navigation is not needed for listing
    config = replace(config, navigation=replace(config.navigation, definition=None))
    result = _run(config)
    for document in result.collection:
        title = document.title or ""
        click.echo(f"{document.path}\t{title}\t{document.source_path.as_posix()}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    config_path: Path | None,
    *,
    source_dir: Path | None = None,
    definition: Path | None = None,
    out_dir: Path | None = None,
    strict: bool | None = None,
) -> Config:
    """Load configuration and apply CLI overrides, exiting on invalid config."""
    on_broken_link: Policy | None = None
    if strict is not None:
        on_broken_link = Policy.ERROR if strict else Policy.WARN

    try:
        config = Config.load(config_path)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    return config.with_overrides(
        source_dir=source_dir,
        definition=definition,
        out_dir=out_dir,
        on_broken_link=on_broken_link,
    )


def _run(config: Config) -> BuildResult:
    """Run the build, printing a report and exiting on failure."""
    try:
        return run_build(config)
    except NavigationValidationError as e:
        click.echo(click.style(e.report(), fg="red"), err=True)
        sys.exit(1)
    except (DocnavError, OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _print_summary(result: BuildResult) -> None:
    """Print collection and navigation summary.

    Args:
        result: Completed build
    """
    click.echo(f"Collected {len(result.collection)} documents")
    for error in result.collection.parse_errors:
        click.echo(click.style(f"Skipped: {error}", fg="yellow"))

    if result.tree is None:
        click.echo("Navigation: not configured")
        return

    links = sum(1 for _ in result.tree.leaves())
    if result.broken_links:
        click.echo(
            click.style(
                f"Navigation: {links} links, {len(result.broken_links)} broken:",
                fg="yellow",
            ),
        )
        for error in result.broken_links:
            click.echo(f"  - {error}")
    else:
        click.echo(click.style(f"Navigation: {links} links, all valid", fg="green"))

    for warning in result.tree.warnings:
        click.echo(click.style(f"Duplicate: {warning}", fg="yellow"))


if __name__ == "__main__":
    cli()
