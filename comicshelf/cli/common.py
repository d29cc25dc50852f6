"""
Shared helpers for CLI commands.
"""
from typing import Awaitable, Callable, Iterable, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from comicshelf.context import ComicShelf
from comicshelf.providers.errors import ComicCatalogError
from comicshelf.providers.models import CharacterRecord, IssueRecord
from comicshelf.utils.async_utils import run_async_safe

console = Console()

T = TypeVar("T")


async def create_shelf() -> ComicShelf:
    """Build the application context from the global settings."""
    return await ComicShelf.create()


def run_with_shelf(action: Callable[[ComicShelf], Awaitable[T]]) -> T:
    """
    Run ``action`` against a freshly created ComicShelf and close it afterwards.

    Catalog errors are printed in red and end the command with exit code 1.
    """
    async def runner() -> T:
        shelf = await create_shelf()
        async with shelf:
            return await action(shelf)

    try:
        return run_async_safe(runner())
    except ComicCatalogError as e:
        console.print(f"[bold red]Error: {e}")
        raise typer.Exit(code=1)


def characters_table(characters: Iterable[CharacterRecord], favorite_ids=frozenset()) -> Table:
    table = Table(show_header=True, header_style="bold green")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Publisher")
    table.add_column("Issues", justify="right")
    table.add_column("Fav", justify="center")

    for character in characters:
        table.add_row(
            str(character.id),
            character.name,
            character.publisher.name if character.publisher and character.publisher.name else "-",
            str(character.count_of_issue_appearances),
            "★" if character.id in favorite_ids else "",
        )
    return table


def issues_table(issues: Iterable[IssueRecord]) -> Table:
    table = Table(show_header=True, header_style="bold green")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Cover date")

    for issue in issues:
        table.add_row(str(issue.id), issue.title, issue.cover_date or "-")
    return table
