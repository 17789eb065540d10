import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from expiry_tracker.config import Config
from expiry_tracker.config_provider import ConfigProvider
from expiry_tracker.domain.activity import ActivityType
from expiry_tracker.domain.category import Category, CategoryInput
from expiry_tracker.domain.exceptions import ValidationError
from expiry_tracker.domain.filter_state import FilterState
from expiry_tracker.domain.knowledge_item import KnowledgeItem, KnowledgeItemInput
from expiry_tracker.domain.settings import SortKey
from expiry_tracker.domain.status import Status
from expiry_tracker.domain.timestamps import utc_now
from expiry_tracker.domain.tracker_state import TrackerState
from expiry_tracker.engine import mutations
from expiry_tracker.engine.analytics import TrackerSummary, build_summary
from expiry_tracker.engine.filtering import (
    filter_items,
    paginate,
    sort_items,
    total_pages,
)
from expiry_tracker.engine.import_export import (
    ImportMode,
    ImportReport,
    apply_import,
    build_export,
    parse_import_text,
)
from expiry_tracker.engine.reminders import (
    Reminder,
    collect_reminders,
    reminder_message,
)
from expiry_tracker.engine.status_classifier import classify
from expiry_tracker.infra.notifier import LoggingNotifier, Notifier
from expiry_tracker.infra.renderer import Renderer
from expiry_tracker.storage.json_tracker_store import JsonTrackerStore
from expiry_tracker.storage.state_repository import load_state, save_state
from expiry_tracker.storage.tracker_store import TrackerStore

logger = logging.getLogger(__name__)

ItemPayload = Union[KnowledgeItemInput, Mapping[str, Any]]
CategoryPayload = Union[CategoryInput, Mapping[str, Any]]


class ItemPage(BaseModel):
    """One page of the filtered item list."""

    items: List[KnowledgeItem] = Field(default_factory=list)
    page: int = Field(description="1-indexed page number.")
    page_size: int = Field(description="Items per page.")
    total_items: int = Field(description="Items matching the filter.")
    total_pages: int = Field(description="Pages needed for the matching items.")


class KnowledgeTracker:
    """
    Session facade owning the tracker state.

    Each mutation follows the same order: compute the new state, record the
    activity, persist, then recompute and render the derived views. A failed
    operation raises before any of these steps, leaving state and storage
    untouched.
    """

    def __init__(
        self,
        store: Optional[TrackerStore] = None,
        config: Optional[Config] = None,
        notifier: Optional[Notifier] = None,
        renderer: Optional[Renderer] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or ConfigProvider().load()
        self.store = store or JsonTrackerStore(self.config.get_store_dir())
        self.notifier = notifier or LoggingNotifier()
        self.renderer = renderer
        self._clock = clock
        self.state = load_state(self.store)
        self.summary = self._recompute()

    def now(self) -> datetime:
        """Returns the current timestamp from the injected clock."""

        return self._clock()

    def today(self) -> date:
        """Returns the current local calendar date from the injected clock."""

        return self._clock().astimezone().date()

    def _recompute(self) -> TrackerSummary:
        now = self.now()
        return build_summary(
            self.state,
            now.astimezone().date(),
            reminder_threshold=self.config.status_threshold_days,
            renewed_window=self.config.renewed_window_days,
            timeline_days=self.config.timeline_days,
            timeline_visible_days=self.config.timeline_visible_days,
            now=now,
        )

    def _commit(
        self,
        state: TrackerState,
        activity_type: Optional[ActivityType] = None,
        description: str = "",
    ) -> None:
        if activity_type is not None:
            state = mutations.record_activity(
                state,
                activity_type,
                description,
                self.now(),
                limit=self.config.activity_limit,
            )
        save_state(self.store, state)
        self.state = state
        self.refresh()

    def refresh(self) -> TrackerSummary:
        """
        Recomputes every derived view and hands it to the renderer.

        Returns:
            The fresh summary.
        """
        self.summary = self._recompute()
        if self.renderer is not None:
            self.renderer.render(self.state.items, self.state.categories, self.summary)
        return self.summary

    def status_of(self, item: KnowledgeItem) -> Status:
        """Returns the derived status of an item as of today."""

        return classify(
            item,
            self.today(),
            self.config.status_threshold_days,
            self.config.renewed_window_days,
            now=self.now(),
        )

    def add_item(self, payload: ItemPayload) -> KnowledgeItem:
        """
        Creates a knowledge item.

        Args:
            payload: Item fields as an input model or mapping.

        Returns:
            The created item.
        """
        state, item = mutations.create_item(self.state, payload, self.now())
        self._commit(state, ActivityType.ADD, f"Added knowledge item: {item.name}")
        logger.info("Knowledge item created", extra={"item_id": item.id})
        return item

    def edit_item(self, item_id: str, payload: ItemPayload) -> KnowledgeItem:
        """Replaces the editable fields of an item."""

        state, item = mutations.edit_item(self.state, item_id, payload)
        self._commit(state, ActivityType.EDIT, f"Updated knowledge item: {item.name}")
        logger.info("Knowledge item updated", extra={"item_id": item.id})
        return item

    def renew_item(self, item_id: str) -> KnowledgeItem:
        """Records a renewal for an item and notifies the user."""

        state, item = mutations.renew_item(self.state, item_id, self.now())
        self._commit(state, ActivityType.RENEW, f"Renewed knowledge item: {item.name}")
        self.notifier.notify(f"Successfully renewed: {item.name}")
        return item

    def delete_item(self, item_id: str) -> KnowledgeItem:
        """Deletes an item; a repeated delete raises NotFoundError."""

        state, item = mutations.delete_item(self.state, item_id)
        self._commit(state, ActivityType.DELETE, f"Deleted knowledge item: {item.name}")
        logger.info("Knowledge item deleted", extra={"item_id": item.id})
        return item

    def add_category(self, payload: CategoryPayload) -> Category:
        """Creates a category."""

        state, category = mutations.create_category(self.state, payload)
        self._commit(state, ActivityType.CATEGORY, f"Added category: {category.name}")
        return category

    def edit_category(self, category_id: str, payload: CategoryPayload) -> Category:
        """Updates a category's display fields."""

        state, category = mutations.update_category(self.state, category_id, payload)
        self._commit(
            state, ActivityType.CATEGORY, f"Updated category: {category.name}"
        )
        return category

    def delete_category(self, category_id: str) -> Category:
        """Deletes a category without touching the items that reference it."""

        state, category = mutations.delete_category(self.state, category_id)
        self._commit(
            state, ActivityType.CATEGORY, f"Deleted category: {category.name}"
        )
        return category

    def update_settings(self, changes: Mapping[str, Any]) -> None:
        """Merges validated setting changes and persists them."""

        self._commit(mutations.update_settings(self.state, changes))

    def reset_settings(self) -> None:
        """Restores default settings."""

        self._commit(mutations.reset_settings(self.state))

    def list_items(
        self,
        item_filter: Optional[FilterState] = None,
        page: int = 1,
        sort: Optional[SortKey] = None,
    ) -> ItemPage:
        """
        Returns one page of filtered items.

        Args:
            item_filter: Filter to apply; defaults to showing everything.
            page: 1-indexed page number.
            sort: Optional explicit sort order; no sorting when omitted.

        Returns:
            The requested page with paging metadata.
        """
        page_size = self.state.settings.items_per_page
        matches = filter_items(
            self.state.items,
            item_filter or FilterState(),
            self.today(),
            self.config.status_threshold_days,
            now=self.now(),
        )
        if sort is not None:
            matches = sort_items(matches, sort)
        return ItemPage(
            items=paginate(matches, page, page_size),
            page=page,
            page_size=page_size,
            total_items=len(matches),
            total_pages=total_pages(len(matches), page_size),
        )

    def reminders(self) -> List[Reminder]:
        """Returns reminders for the user's configured reminder window."""

        return collect_reminders(
            self.state.items, self.today(), self.state.settings.reminder_days
        )

    def check_reminders(self) -> Optional[str]:
        """
        Scans for due reminders and notifies when notifications are enabled.

        Returns:
            The notification message, or None when nothing was sent.
        """
        if not self.state.settings.enable_notifications:
            return None
        message = reminder_message(self.reminders())
        if message is not None:
            self.notifier.notify(message)
        return message

    def export_document(self, full: bool = False) -> dict:
        """Builds an export document for the current state."""

        return build_export(self.state, self.now(), include_activities=full)

    def write_export(self, path: Optional[Path] = None, full: bool = False) -> Path:
        """
        Writes an export document to disk.

        Args:
            path: Destination file; defaults to the dated export path.
            full: Whether to include the activity log.

        Returns:
            The path written.
        """
        target = path or self.config.get_export_path(
            self.now().date().isoformat(), full=full
        )
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            json.dumps(self.export_document(full=full), indent=2), encoding="utf-8"
        )
        return target

    def import_document(
        self,
        payload: Union[str, Mapping[str, Any]],
        mode: ImportMode = ImportMode.REPLACE,
    ) -> ImportReport:
        """
        Imports an export document, as raw text or decoded JSON.

        Args:
            payload: Buffered file content or an already decoded document.
            mode: Replace or merge-by-id.

        Returns:
            A report describing the import.
        """
        try:
            document = (
                parse_import_text(payload) if isinstance(payload, str) else payload
            )
            state, report = apply_import(
                self.state,
                document,
                mode,
                retention_cap=self.config.retention_cap,
                activity_limit=self.config.activity_limit,
            )
        except ValidationError as exc:
            logger.warning("Import rejected", extra={"reason": str(exc)})
            raise
        self._commit(
            state,
            ActivityType.IMPORT,
            f"Imported {report.items_received} knowledge items ({mode.value})",
        )
        self.notifier.notify("Data imported successfully!")
        return report

    def clear_all(self) -> None:
        """Removes all stored data and restores defaults."""

        self.store.clear()
        self._commit(mutations.clear_all(self.state))
        self.notifier.notify("All data cleared!")
