"""Main CLI interface for git-rss."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from git_rss.config import load_config
from git_rss.core.engine import RunStats, build_matcher, derive_channel
from git_rss.core.walker import open_repository
from git_rss.exceptions import GitRssError
from git_rss.rss import render_channel

console = Console(stderr=True)


def setup_logging(debug: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_stats(stats: RunStats) -> None:
    table = Table(title="git-rss run")
    table.add_column("Counter")
    table.add_column("Value", justify="right")
    for name, value in stats.model_dump().items():
        table.add_row(name.replace("_", " "), str(value))
    console.print(table)


@click.command()
@click.version_option(package_name="git-rss")
@click.option(
    "-c",
    "--conf",
    "conf",
    required=True,
    metavar="FILE",
    help="Config file, '-' reads it from stdin",
)
@click.option("-d", "--debug", is_flag=True, help="Print debug messages")
@click.option(
    "-p",
    "--prefix",
    metavar="PREFIX",
    help="PREFIX gets removed from the beginning of file names",
)
@click.option("-y", "--pretty", is_flag=True, help="Pretty print output")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the feed to a file instead of stdout",
)
@click.argument("paths", nargs=-1, required=True, metavar="PATH...")
def main(
    conf: str,
    debug: bool,
    prefix: Optional[str],
    pretty: bool,
    output: Optional[str],
    paths: Tuple[str, ...],
):
    """Generate an RSS feed from the git history of the given PATHs."""
    setup_logging(debug)

    try:
        config = load_config(conf)
        # Validate patterns before touching the repository
        matcher = build_matcher(config, paths, prefix)
        with open_repository(config.repo) as repo:
            result = derive_channel(repo, config, paths, matcher=matcher)
    except GitRssError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    if debug:
        _print_stats(result.stats)

    xml = render_channel(result.channel, pretty=pretty)
    if output:
        Path(output).write_text(xml + "\n", encoding="utf-8")
    else:
        click.echo(xml)


if __name__ == "__main__":
    main()
