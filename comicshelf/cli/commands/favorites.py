from typing import Optional

import typer

from comicshelf.cli.common import characters_table, console, run_with_shelf
from comicshelf.services.favorites_service import FavoriteCharacterInput, FavoritesSort

favorites_app = typer.Typer(help="Manage favorite characters")


@favorites_app.command("list")
def list_favorites(
    filter_text: str = typer.Option("", "--filter", help="Only names containing this text"),
    sort: FavoritesSort = typer.Option(FavoritesSort.DATE_ADDED, help="Sort order"),
):
    """
    List favorite characters.
    """
    favorites = run_with_shelf(
        lambda shelf: shelf.favorites.filter_favorites(filter_text, sort=sort)
    )
    if not favorites:
        console.print("[yellow]No favorites yet")
        return
    console.print(characters_table(favorites, {record.id for record in favorites}))


@favorites_app.command("add")
def add_favorite(
    character_id: int = typer.Argument(..., help="ComicVine character id"),
    name: str = typer.Argument(..., help="Character name"),
    image: Optional[str] = typer.Option(None, help="Thumbnail URL"),
):
    """
    Add a character to the favorites.
    """
    favorite = FavoriteCharacterInput(id=character_id, name=name, thumbnail_url=image)
    changed = run_with_shelf(lambda shelf: shelf.favorites.add_favorite(favorite))
    if changed:
        console.print(f"[green]Added [bold]{name}[/] to favorites")
    else:
        console.print(f"[yellow]{name} is already a favorite")


@favorites_app.command("remove")
def remove_favorite(
    character_id: int = typer.Argument(..., help="ComicVine character id"),
    purge: bool = typer.Option(False, help="Also delete the stored character"),
):
    """
    Remove a character from the favorites.
    """
    changed = run_with_shelf(
        lambda shelf: shelf.favorites.remove_favorite(character_id, purge=purge)
    )
    if changed:
        console.print(f"[green]Removed character {character_id} from favorites")
    else:
        console.print(f"[yellow]Character {character_id} is not a favorite")
