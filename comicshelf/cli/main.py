from typing import Optional

import typer
from rich.panel import Panel

from comicshelf.cli.commands.cache import cache_app
from comicshelf.cli.commands.favorites import favorites_app
from comicshelf.cli.commands.search import search_app
from comicshelf.cli.common import characters_table, console, issues_table, run_with_shelf
from comicshelf.config.logging_setup import setup_logging
from comicshelf.providers.settings import get_settings

app = typer.Typer(help="Browse the ComicVine catalog with a local cache and favorites")

app.add_typer(search_app, name="search", help="Search characters and issues")
app.add_typer(favorites_app, name="favorites", help="Manage favorite characters")
app.add_typer(cache_app, name="cache", help="Inspect and clear the query cache")


@app.callback()
def main(
    log_config: Optional[str] = typer.Option(None, help="YAML logging configuration file"),
):
    """
    comicshelf command line interface.
    """
    setup_logging(log_config or get_settings().log_config)


@app.command()
def characters(
    offset: int = typer.Option(0, help="Number of characters to skip"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of characters (defaults to COMICSHELF_PAGE_SIZE)"),
):
    """
    List characters, most recently updated first.
    """
    async def action(shelf):
        results = await shelf.list_characters.execute(offset=offset, limit=limit)
        return results, shelf.favorites.favorite_ids

    results, favorite_ids = run_with_shelf(action)
    console.print(characters_table(results, favorite_ids))


@app.command()
def character(
    character_id: int = typer.Argument(..., help="ComicVine character id"),
):
    """
    Show the details of a character.
    """
    async def action(shelf):
        record = await shelf.character_detail.execute(character_id)
        return record, await shelf.favorites.is_favorite(character_id)

    record, is_favorite = run_with_shelf(action)

    lines = [
        f"[bold]Real name:[/] {record.real_name or '-'}",
        f"[bold]Publisher:[/] {record.publisher.name if record.publisher else '-'}",
        f"[bold]Issue appearances:[/] {record.count_of_issue_appearances}",
        f"[bold]Image:[/] {record.image.best_quality_url or '-'}",
    ]
    if record.deck:
        lines.append("")
        lines.append(record.deck)
    title = f"{record.name} ★" if is_favorite else record.name
    console.print(Panel("\n".join(lines), title=title, expand=False))


@app.command("character-issues")
def character_issues(
    character_id: int = typer.Argument(..., help="ComicVine character id"),
    offset: int = typer.Option(0, help="Number of issue credits to skip"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of issues (defaults to COMICSHELF_PAGE_SIZE)"),
):
    """
    List the issues a character appears in, most recent first.
    """
    issues = run_with_shelf(
        lambda shelf: shelf.character_issues.execute(character_id, offset=offset, limit=limit)
    )
    if not issues:
        console.print(f"[yellow]No issues found for character {character_id}")
        return
    console.print(issues_table(issues))


if __name__ == "__main__":
    app()
