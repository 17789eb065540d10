"""Export documents and validated, all-or-nothing imports."""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import (
    Any,
    Callable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Set,
    Tuple,
    Type,
    TypeVar,
)

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from expiry_tracker.domain.activity import ActivityEntry
from expiry_tracker.domain.category import Category
from expiry_tracker.domain.exceptions import ValidationError
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.settings import TrackerSettings
from expiry_tracker.domain.timestamps import as_utc
from expiry_tracker.domain.tracker_state import TrackerState
from expiry_tracker.domain.wire_model import WireModel
from expiry_tracker.engine.mutations import DEFAULT_ACTIVITY_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_CAP = 100


class Identified(Protocol):
    id: str


Record = TypeVar("Record", bound=Identified)
Model = TypeVar("Model", bound=BaseModel)


class ImportMode(str, Enum):
    """Policies for combining imported records with existing ones."""

    REPLACE = "replace"
    MERGE_BY_ID = "merge-by-id"


class ExportDocument(WireModel):
    """Shape of an export file."""

    knowledge_items: List[KnowledgeItem] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)
    settings: TrackerSettings = Field(default_factory=TrackerSettings)
    export_date: datetime = Field(description="When the export was produced.")
    activities: Optional[List[ActivityEntry]] = Field(
        default=None, description="Activity log, only present in full exports."
    )


class ImportReport(BaseModel):
    """Outcome of an import, for notifications."""

    mode: ImportMode
    items_before: int
    items_after: int
    items_received: int
    duplicates_skipped: int


def import_merge(
    existing: Sequence[Record],
    incoming: Sequence[Record],
    mode: ImportMode,
    retention_cap: Optional[int] = DEFAULT_RETENTION_CAP,
    timestamp_of: Optional[Callable[[Record], datetime]] = None,
) -> List[Record]:
    """Combine two record collections according to ``mode``.

    Replace mode returns ``incoming`` unchanged. Merge-by-id mode drops
    incoming records whose id already exists (existing records win). When
    ``timestamp_of`` is given, the merged set is ordered newest first and
    truncated to ``retention_cap`` records.

    Args:
        existing: Records currently held.
        incoming: Validated records from the import.
        mode: Merge policy.
        retention_cap: Maximum number of records kept after a merge.
        timestamp_of: Key returning each record's timestamp.

    Returns:
        The merged records.
    """

    if mode == ImportMode.REPLACE:
        return list(incoming)

    existing_ids = {record.id for record in existing}
    fresh = [record for record in incoming if record.id not in existing_ids]
    if timestamp_of is None:
        return [*existing, *fresh]

    merged = sorted([*fresh, *existing], key=timestamp_of, reverse=True)
    if retention_cap is not None and retention_cap >= 0:
        merged = merged[:retention_cap]
    return merged


def validate_batch(payload: Any, model: Type[Model], label: str) -> List[Model]:
    """Validate every record in a batch or reject the batch as a whole.

    Args:
        payload: Raw decoded JSON expected to be a list of records.
        model: Model each record must satisfy.
        label: Name of the batch used in error messages.

    Returns:
        The validated records in input order.

    Raises:
        ValidationError: When the payload is not a list or any record fails.
    """

    if not isinstance(payload, list):
        raise ValidationError(f"Import field '{label}' must be a list.")
    records: List[Model] = []
    failures: List[str] = []
    for index, raw in enumerate(payload):
        try:
            records.append(model.model_validate(raw))
        except PydanticValidationError as exc:
            failures.append(f"{label}[{index}]: {exc.error_count()} error(s)")
    if failures:
        raise ValidationError(
            f"Import rejected, {len(failures)} invalid record(s): " + "; ".join(failures)
        )
    return records


def require_unique_ids(records: Sequence[Identified], label: str) -> None:
    """Reject a batch that carries the same id more than once.

    Raises:
        ValidationError: When any id repeats.
    """

    seen: Set[str] = set()
    repeated: List[str] = []
    for record in records:
        if record.id in seen and record.id not in repeated:
            repeated.append(record.id)
        seen.add(record.id)
    if repeated:
        raise ValidationError(
            f"Import rejected, duplicate ids in '{label}': " + ", ".join(repeated)
        )


def build_export(
    state: TrackerState, now: datetime, include_activities: bool = False
) -> dict:
    """Build the JSON-compatible export document for a state.

    Args:
        state: State to export.
        now: Export timestamp.
        include_activities: When True, produce a full export with activities.

    Returns:
        A dictionary ready for ``json.dumps``.
    """

    document = ExportDocument(
        knowledge_items=state.items,
        categories=state.categories,
        settings=state.settings,
        export_date=as_utc(now),
        activities=state.activities if include_activities else None,
    ).to_wire()
    if not include_activities:
        document.pop("activities", None)
    return document


def parse_import_text(text: str) -> Any:
    """Decode buffered import file content.

    Raises:
        ValidationError: When the content is not valid JSON.
    """

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Import file is not valid JSON: {exc.msg}") from exc


def _merge_settings(current: TrackerSettings, payload: Any) -> TrackerSettings:
    if not isinstance(payload, Mapping):
        raise ValidationError("Import field 'settings' must be an object.")
    try:
        incoming = TrackerSettings.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(f"Import rejected, invalid settings: {exc}") from exc
    updates = {name: getattr(incoming, name) for name in incoming.model_fields_set}
    return current.model_copy(update=updates)


def apply_import(
    state: TrackerState,
    payload: Any,
    mode: ImportMode = ImportMode.REPLACE,
    retention_cap: Optional[int] = DEFAULT_RETENTION_CAP,
    activity_limit: Optional[int] = DEFAULT_ACTIVITY_LIMIT,
) -> Tuple[TrackerState, ImportReport]:
    """Apply an export document to a state.

    Top-level fields missing from the document keep their current value;
    settings merge field by field. Every present field is validated before
    anything is combined, so a rejected import changes nothing.

    Args:
        state: Current state.
        payload: Decoded export document.
        mode: How imported records combine with existing ones.
        retention_cap: Item cap applied by merge-by-id imports.
        activity_limit: Activity cap applied by merge-by-id imports.

    Returns:
        The updated state and an import report.

    Raises:
        ValidationError: When the document or any record is malformed.
    """

    if not isinstance(payload, Mapping):
        raise ValidationError("Import document must be a JSON object.")

    incoming_items = _optional_batch(payload, "knowledgeItems", KnowledgeItem)
    incoming_categories = _optional_batch(payload, "categories", Category)
    incoming_activities = _optional_batch(payload, "activities", ActivityEntry)
    settings = state.settings
    if payload.get("settings") is not None:
        settings = _merge_settings(state.settings, payload["settings"])

    items = state.items
    duplicates = 0
    if incoming_items is not None:
        items = import_merge(
            state.items,
            incoming_items,
            mode,
            retention_cap,
            timestamp_of=lambda item: item.created_at,
        )
        if mode == ImportMode.MERGE_BY_ID:
            existing_ids = {item.id for item in state.items}
            duplicates = sum(1 for item in incoming_items if item.id in existing_ids)

    categories = state.categories
    if incoming_categories is not None:
        categories = import_merge(state.categories, incoming_categories, mode)

    activities = state.activities
    if incoming_activities is not None:
        activities = import_merge(
            state.activities,
            incoming_activities,
            mode,
            activity_limit,
            timestamp_of=lambda entry: entry.timestamp,
        )

    updated = state.model_copy(
        update={
            "items": items,
            "categories": categories,
            "settings": settings,
            "activities": activities,
        }
    )
    report = ImportReport(
        mode=mode,
        items_before=len(state.items),
        items_after=len(items),
        items_received=len(incoming_items or []),
        duplicates_skipped=duplicates,
    )
    logger.info(
        "Import applied",
        extra={"mode": mode.value, "items_after": report.items_after},
    )
    return updated, report


def _optional_batch(
    payload: Mapping[str, Any], key: str, model: Type[Model]
) -> Optional[List[Model]]:
    if payload.get(key) is None:
        return None
    records = validate_batch(payload[key], model, key)
    require_unique_ids(records, key)
    return records
