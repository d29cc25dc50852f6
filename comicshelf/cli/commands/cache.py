import typer
from rich.table import Table

from comicshelf.cli.common import console, run_with_shelf

cache_app = typer.Typer(help="Inspect and clear the query cache")


@cache_app.command("stats")
def stats():
    """
    Show cache statistics.
    """
    data = run_with_shelf(lambda shelf: shelf.store.cache_stats())

    table = Table(show_header=True, header_style="bold green")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total entries", str(data["total_entries"]))
    table.add_row("Valid entries", str(data["valid_entries"]))
    table.add_row("Expired entries", str(data["expired_entries"]))
    table.add_row("Total hits", str(data["total_hits"]))
    for operation, count in sorted(data["by_operation"].items()):
        table.add_row(f"  {operation}", str(count))
    console.print(table)


@cache_app.command("clear")
def clear(
    expired_only: bool = typer.Option(False, help="Only delete expired entries"),
):
    """
    Delete cached query results.
    """
    if expired_only:
        deleted = run_with_shelf(lambda shelf: shelf.store.purge_expired())
    else:
        deleted = run_with_shelf(lambda shelf: shelf.store.clear_cache())
    console.print(f"[green]Deleted {deleted} cache entries")
