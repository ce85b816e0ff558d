from __future__ import annotations

import logging
from datetime import datetime

import typer
from rich import print
from rich.markup import escape

from . import __version__
from .browser.reader import BrowserHistoryReader
from .exceptions import HomeDirectoryError
from .ranking import DEFAULT_LIMIT, RankedEntry, rank

app = typer.Typer(add_completion=False)


def _format_time(ts: int) -> str:
    try:
        return datetime.fromtimestamp(ts).isoformat(sep=" ")
    except (OSError, ValueError, OverflowError):
        return str(ts)


def print_ranked(position: int, item: RankedEntry) -> None:
    entry = item.entry
    print(f"\n[bold]{position}. {escape(entry.title or entry.url)}[/bold]  score={item.score:.2f}")
    print(f"  browser={entry.variant.display_name}")
    print(f"  id={escape(entry.id)}")
    print(f"  url={escape(entry.url)}")
    print(f"  title={escape(entry.title)}")
    print(f"  visit_count={entry.visit_count}")
    print(f"  typed_count={entry.typed_count}")
    print(f"  last_visit_time={entry.last_visit_time} ({_format_time(entry.last_visit_time)})")


@app.command()
def top(
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", help="Maximum number of URLs to show."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every copy and query."),
) -> None:
    """
    Collect history from every installed browser and print the top URLs by frecency.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    reader = BrowserHistoryReader()
    try:
        entries = reader.collate()
    except HomeDirectoryError as e:
        print(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    ranked = rank(entries, limit=limit)
    for position, item in enumerate(ranked, start=1):
        print_ranked(position, item)

    if verbose:
        print(f"\nbrowser-frecency version={__version__}")
        print(f"entries collected={len(entries)} ranked={len(ranked)}")
        for name, error in reader.last_errors.items():
            print(f"  {name}: {escape(error)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
