from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import typer
from rich.console import Console

from expiry_tracker.config import Config, DEFAULT_TRACKER_DIR
from expiry_tracker.config_provider import ConfigProvider
from expiry_tracker.core.tracker import KnowledgeTracker
from expiry_tracker.cli.render import RichRenderer
from expiry_tracker.domain.exceptions import NotFoundError, TrackerError
from expiry_tracker.domain.filter_state import ALL, FilterState
from expiry_tracker.domain.priority import Priority
from expiry_tracker.domain.settings import SortKey
from expiry_tracker.engine.import_export import ImportMode
from expiry_tracker.infra.logging_setup import setup_logging
from expiry_tracker.infra.notifier import ConsoleNotifier
from expiry_tracker.storage.json_tracker_store import JsonTrackerStore

app = typer.Typer(help="Track knowledge, credentials, and skills that expire.")
console = Console()
STORE_HELP = f"Data is stored under {DEFAULT_TRACKER_DIR.as_posix()}/store by default."
_provider = ConfigProvider()


def _build_tracker(config: Config) -> KnowledgeTracker:
    """Builds a tracker backed by the configured JSON store."""

    return KnowledgeTracker(
        store=JsonTrackerStore(config.get_store_dir()),
        config=config,
        notifier=ConsoleNotifier(console),
    )


@contextmanager
def _tracker() -> Iterator[KnowledgeTracker]:
    """Yields a tracker and reports domain errors as a failed command."""

    try:
        yield _build_tracker(_provider.load())
    except TrackerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.callback(help=STORE_HELP)
def main(
    tracker_dir: Optional[Path] = typer.Option(
        None,
        "--tracker-dir",
        "-t",
        help="Tracker directory holding config.json, the store, and exports.",
    ),
) -> None:
    """
    Select the tracker directory and configure logging for every command.
    """
    global _provider
    _provider = ConfigProvider(tracker_dir=tracker_dir)
    setup_logging(_provider.load().log_level)


@app.command()
def dashboard() -> None:
    """
    Show dashboard counters, chart data, and all items.
    """
    with _tracker() as tracker:
        RichRenderer(console).render(
            tracker.state.items, tracker.state.categories, tracker.summary
        )


@app.command("list")
def list_items(
    search: str = typer.Option("", "--search", "-s", help="Search name/description."),
    category: str = typer.Option(ALL, "--category", "-c", help="Category id or 'all'."),
    status: str = typer.Option(ALL, "--status", help="Status or 'all'."),
    page: int = typer.Option(1, "--page", "-p", min=1, help="1-indexed page."),
    sort: Optional[SortKey] = typer.Option(None, "--sort", help="Sort order."),
) -> None:
    """
    List knowledge items matching a filter.
    """
    with _tracker() as tracker:
        try:
            item_filter = FilterState(search=search, category=category, status=status)
        except ValueError as e:
            console.print(f"[red]Error:[/red] invalid filter: {e}")
            raise typer.Exit(code=1)
        result = tracker.list_items(item_filter, page=page, sort=sort)
        RichRenderer(console).render_items(
            result.items,
            tracker.state.categories,
            tracker.today(),
            tracker.config.status_threshold_days,
            now=tracker.now(),
        )
        console.print(
            f"Page {result.page} of {max(result.total_pages, 1)} "
            f"({result.total_items} items)"
        )


@app.command()
def add(
    name: str,
    category: str = typer.Option(..., "--category", "-c", help="Category id."),
    expiry: str = typer.Option(..., "--expiry", "-e", help="Expiry date (YYYY-MM-DD)."),
    priority: Priority = typer.Option(Priority.MEDIUM, "--priority"),
    cost: float = typer.Option(0.0, "--cost", min=0.0),
    description: str = typer.Option("", "--description", "-d"),
    tags: str = typer.Option("", "--tags", help="Comma-separated tags."),
    notes: str = typer.Option("", "--notes"),
) -> None:
    """
    Add a knowledge item.
    """
    with _tracker() as tracker:
        item = tracker.add_item(
            {
                "name": name,
                "category": category,
                "expiry_date": expiry,
                "priority": priority,
                "cost": cost,
                "description": description,
                "tags": tags,
                "notes": notes,
            }
        )
        console.print(f"[green]Added {item.name}[/green] ({item.id})")


@app.command()
def edit(
    item_id: str,
    name: Optional[str] = typer.Option(None, "--name"),
    category: Optional[str] = typer.Option(None, "--category", "-c"),
    expiry: Optional[str] = typer.Option(None, "--expiry", "-e"),
    priority: Optional[Priority] = typer.Option(None, "--priority"),
    cost: Optional[float] = typer.Option(None, "--cost", min=0.0),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    tags: Optional[str] = typer.Option(None, "--tags"),
    notes: Optional[str] = typer.Option(None, "--notes"),
) -> None:
    """
    Edit a knowledge item; omitted options keep their current value.
    """
    with _tracker() as tracker:
        existing = tracker.state.find_item(item_id)
        if existing is None:
            raise NotFoundError(f"Knowledge item not found: {item_id}")
        payload: Dict[str, Any] = existing.model_dump(
            include={
                "name",
                "category",
                "expiry_date",
                "priority",
                "cost",
                "description",
                "tags",
                "notes",
            }
        )
        overrides = {
            "name": name,
            "category": category,
            "expiry_date": expiry,
            "priority": priority,
            "cost": cost,
            "description": description,
            "tags": tags,
            "notes": notes,
        }
        payload.update({key: value for key, value in overrides.items() if value is not None})
        item = tracker.edit_item(item_id, payload)
        console.print(f"[green]Updated {item.name}[/green]")


@app.command()
def renew(item_id: str) -> None:
    """
    Record a renewal of a knowledge item.
    """
    with _tracker() as tracker:
        tracker.renew_item(item_id)


@app.command()
def delete(item_id: str) -> None:
    """
    Delete a knowledge item.
    """
    with _tracker() as tracker:
        item = tracker.delete_item(item_id)
        console.print(f"[yellow]Deleted {item.name}[/yellow]")


@app.command()
def categories() -> None:
    """
    List categories with their item counts.
    """
    with _tracker() as tracker:
        RichRenderer(console).render_categories(
            tracker.state.categories, tracker.state.items
        )


@app.command("add-category")
def add_category(
    name: str,
    description: str = typer.Option("", "--description", "-d"),
    color: str = typer.Option("#2563eb", "--color"),
) -> None:
    """
    Add a category.
    """
    with _tracker() as tracker:
        category = tracker.add_category(
            {"name": name, "description": description, "color": color}
        )
        console.print(f"[green]Added category {category.name}[/green] ({category.id})")


@app.command("delete-category")
def delete_category(category_id: str) -> None:
    """
    Delete a category; its items keep the dangling reference.
    """
    with _tracker() as tracker:
        category = tracker.delete_category(category_id)
        console.print(f"[yellow]Deleted category {category.name}[/yellow]")


@app.command()
def reminders() -> None:
    """
    Show items expiring within the reminder window and expired items.
    """
    with _tracker() as tracker:
        RichRenderer(console).render_reminders(tracker.reminders())
        tracker.check_reminders()


@app.command()
def analytics() -> None:
    """
    Show renewal and cost analytics.
    """
    with _tracker() as tracker:
        RichRenderer(console).render_analytics(tracker.summary.renewals)


@app.command("export")
def export_data(
    path: Optional[Path] = typer.Argument(None, help="Destination JSON file."),
    full: bool = typer.Option(False, "--full", help="Include the activity log."),
) -> None:
    """
    Export items, categories, and settings to JSON.
    """
    with _tracker() as tracker:
        written = tracker.write_export(path, full=full)
        console.print(f"[green]Exported to {written}[/green]")


@app.command("import")
def import_data(
    path: Path,
    mode: ImportMode = typer.Option(ImportMode.REPLACE, "--mode", "-m"),
) -> None:
    """
    Import an export file, replacing or merging by id.
    """
    with _tracker() as tracker:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Error:[/red] cannot read {path}: {e}")
            raise typer.Exit(code=1)
        report = tracker.import_document(text, mode=mode)
        console.print(
            f"[green]Imported {report.items_received} items; "
            f"{report.items_after} tracked ({report.duplicates_skipped} duplicates skipped).[/green]"
        )


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation."),
) -> None:
    """
    Clear all data and restore defaults.
    """
    if not yes and not typer.confirm(
        "Are you sure you want to clear all data? This cannot be undone."
    ):
        raise typer.Exit()
    with _tracker() as tracker:
        tracker.clear_all()


@app.command()
def settings(
    items_per_page: Optional[int] = typer.Option(None, "--items-per-page", min=1),
    reminder_days: Optional[int] = typer.Option(None, "--reminder-days", min=0),
    notifications: Optional[bool] = typer.Option(
        None, "--notifications/--no-notifications"
    ),
    default_sort: Optional[SortKey] = typer.Option(None, "--default-sort"),
    reset: bool = typer.Option(False, "--reset", help="Restore default settings."),
) -> None:
    """
    Show or change settings.
    """
    with _tracker() as tracker:
        if reset:
            tracker.reset_settings()
        changes = {
            "items_per_page": items_per_page,
            "reminder_days": reminder_days,
            "enable_notifications": notifications,
            "default_sort": default_sort,
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if changes:
            tracker.update_settings(changes)
        RichRenderer(console).render_settings(tracker.state.settings)


if __name__ == "__main__":
    app()
