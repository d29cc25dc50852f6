from typing import Optional

import typer

from comicshelf.cli.common import characters_table, console, issues_table, run_with_shelf

search_app = typer.Typer(help="Search the ComicVine catalog")


@search_app.command("characters")
def search_characters(
    query: str = typer.Argument(..., help="Name (or part of it) to search for"),
    offset: int = typer.Option(0, help="Number of results to skip"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of results (defaults to COMICSHELF_PAGE_SIZE)"),
):
    """
    Search characters by name.
    """
    async def action(shelf):
        results = await shelf.search_characters.execute(query, offset=offset, limit=limit)
        return results, shelf.favorites.favorite_ids

    results, favorite_ids = run_with_shelf(action)
    if not results:
        console.print(f"[yellow]No characters found for '{query}'")
        return
    console.print(characters_table(results, favorite_ids))


@search_app.command("issues")
def search_issues(
    query: str = typer.Argument(..., help="Title (or part of it) to search for"),
    offset: int = typer.Option(0, help="Number of results to skip"),
    limit: Optional[int] = typer.Option(None, help="Maximum number of results (defaults to COMICSHELF_PAGE_SIZE)"),
):
    """
    Search issues by name.
    """
    results = run_with_shelf(
        lambda shelf: shelf.search_issues.execute(query, offset=offset, limit=limit)
    )
    if not results:
        console.print(f"[yellow]No issues found for '{query}'")
        return
    console.print(issues_table(results))
