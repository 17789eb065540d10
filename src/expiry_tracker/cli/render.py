from datetime import date, datetime
from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.table import Table

from expiry_tracker.domain.category import Category
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.settings import TrackerSettings
from expiry_tracker.domain.status import Status
from expiry_tracker.engine.analytics import (
    ChartSeries,
    RenewalAnalytics,
    TrackerSummary,
    category_item_counts,
    category_label,
)
from expiry_tracker.engine.reminders import Reminder
from expiry_tracker.engine.status_classifier import classify, days_until_expiry
from expiry_tracker.infra.renderer import Renderer

STATUS_STYLES: Dict[Status, str] = {
    Status.ACTIVE: "green",
    Status.RENEWED: "cyan",
    Status.EXPIRING_SOON: "yellow",
    Status.EXPIRED: "red",
}


def _expiry_text(item: KnowledgeItem, today: date) -> str:
    remaining = days_until_expiry(item.expiry_date, today)
    if remaining > 0:
        return f"{item.expiry_date.isoformat()} ({remaining} days)"
    if remaining == 0:
        return f"{item.expiry_date.isoformat()} (today)"
    return f"{item.expiry_date.isoformat()} (Expired)"


class RichRenderer(Renderer):
    """Renders tracker views as Rich tables."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def render(
        self,
        items: Sequence[KnowledgeItem],
        categories: Sequence[Category],
        summary: TrackerSummary,
    ) -> None:
        self.render_dashboard(summary)
        self.render_items(items, categories, summary.today, now=summary.now)

    def render_dashboard(self, summary: TrackerSummary) -> None:
        """Print the headline counters and chart datasets."""

        counts = summary.counts
        table = Table(title="Dashboard")
        table.add_column("Total", justify="right")
        table.add_column("Expiring soon", justify="right", style="yellow")
        table.add_column("Expired", justify="right", style="red")
        table.add_column("Up to date", justify="right", style="green")
        table.add_row(
            str(counts.total),
            str(counts.expiring_soon),
            str(counts.expired),
            str(counts.up_to_date),
        )
        self.console.print(table)
        for series in (summary.status_chart, summary.priority_chart, summary.category_chart):
            self.render_series(series)
        upcoming = [(label, value) for label, value in summary.timeline_chart.as_pairs() if value]
        if upcoming:
            timeline = Table(title="Expiring in the next days")
            timeline.add_column("Date")
            timeline.add_column("Items", justify="right")
            for label, value in upcoming:
                timeline.add_row(label, str(value))
            self.console.print(timeline)

    def render_series(self, series: ChartSeries) -> None:
        """Print a chart dataset as a two-column table."""

        table = Table(title=f"{series.kind.value.title()} breakdown")
        table.add_column("Label")
        table.add_column("Count", justify="right")
        for label, value in series.as_pairs():
            table.add_row(label, str(value))
        self.console.print(table)

    def render_items(
        self,
        items: Sequence[KnowledgeItem],
        categories: Sequence[Category],
        today: date,
        reminder_threshold: int = 30,
        now: Optional[datetime] = None,
    ) -> None:
        """Print knowledge items with their derived status."""

        table = Table(title="Knowledge items")
        table.add_column("ID", overflow="fold")
        table.add_column("Name")
        table.add_column("Category")
        table.add_column("Priority")
        table.add_column("Expires")
        table.add_column("Status")
        table.add_column("Cost", justify="right")
        for item in items:
            status = classify(item, today, reminder_threshold, now=now)
            table.add_row(
                item.id,
                item.name,
                category_label(categories, item.category),
                item.priority.value,
                _expiry_text(item, today),
                f"[{STATUS_STYLES[status]}]{status.value}[/{STATUS_STYLES[status]}]",
                f"${item.cost:.2f}" if item.cost > 0 else "",
            )
        self.console.print(table)

    def render_categories(
        self, categories: Sequence[Category], items: Sequence[KnowledgeItem]
    ) -> None:
        """Print categories with their item counts."""

        counts = category_item_counts(items, categories)
        table = Table(title="Categories")
        table.add_column("ID", overflow="fold")
        table.add_column("Name")
        table.add_column("Description")
        table.add_column("Color")
        table.add_column("Items", justify="right")
        for category in categories:
            table.add_row(
                category.id,
                category.name,
                category.description,
                category.color,
                str(counts[category.id]),
            )
        self.console.print(table)

    def render_analytics(self, analytics: RenewalAnalytics) -> None:
        """Print renewal and cost analytics."""

        table = Table(title="Analytics")
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_row("Average lifespan", f"{analytics.avg_lifespan} days")
        table.add_row("Renewal rate", f"{analytics.renewal_rate}%")
        table.add_row("Most active category", analytics.most_active_category)
        table.add_row("Total renewals", str(analytics.total_renewals))
        table.add_row("Total cost", f"${analytics.total_cost:.2f}")
        self.console.print(table)

    def render_reminders(self, reminders: Sequence[Reminder]) -> None:
        """Print due reminders."""

        if not reminders:
            self.console.print("[green]No reminders due.[/green]")
            return
        table = Table(title="Reminders")
        table.add_column("ID", overflow="fold")
        table.add_column("Name")
        table.add_column("Description")
        table.add_column("When")
        for reminder in reminders:
            if reminder.status == Status.EXPIRED:
                when = f"[red]Expired {reminder.expiry_date.isoformat()}[/red]"
            else:
                when = (
                    f"[yellow]Expires {reminder.expiry_date.isoformat()} "
                    f"({reminder.days_until_expiry} days)[/yellow]"
                )
            table.add_row(
                reminder.item_id,
                reminder.name,
                reminder.description or "No description",
                when,
            )
        self.console.print(table)

    def render_settings(self, settings: TrackerSettings) -> None:
        """Print the current settings."""

        table = Table(title="Settings")
        table.add_column("Setting")
        table.add_column("Value")
        for name, value in settings.model_dump(mode="json").items():
            table.add_row(name, str(value))
        self.console.print(table)
