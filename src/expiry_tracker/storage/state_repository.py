"""Serialization of TrackerState to and from a TrackerStore."""

import json
import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from expiry_tracker.domain.activity import ActivityEntry
from expiry_tracker.domain.category import Category, default_categories
from expiry_tracker.domain.exceptions import ValidationError
from expiry_tracker.domain.knowledge_item import KnowledgeItem
from expiry_tracker.domain.settings import TrackerSettings
from expiry_tracker.domain.tracker_state import TrackerState
from expiry_tracker.storage.tracker_store import TrackerStore

logger = logging.getLogger(__name__)

ITEMS_KEY = "knowledge-items"
CATEGORIES_KEY = "knowledge-categories"
SETTINGS_KEY = "knowledge-settings"
ACTIVITIES_KEY = "knowledge-activities"
ALL_KEYS = (ITEMS_KEY, CATEGORIES_KEY, SETTINGS_KEY, ACTIVITIES_KEY)

Model = TypeVar("Model", bound=BaseModel)


def _decode(blob: str, key: str) -> Any:
    try:
        return json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Stored '{key}' is not valid JSON.") from exc


def _decode_list(blob: Optional[str], key: str, model: Type[Model]) -> Optional[List[Model]]:
    """Decode a stored JSON array; None when the key is absent."""

    if blob is None:
        return None
    payload = _decode(blob, key)
    if not isinstance(payload, list):
        raise ValidationError(f"Stored '{key}' must be a list.")
    try:
        return [model.model_validate(entry) for entry in payload]
    except PydanticValidationError as exc:
        raise ValidationError(f"Stored '{key}' has invalid records.") from exc


def _decode_settings(blob: Optional[str]) -> TrackerSettings:
    if blob is None:
        return TrackerSettings()
    payload = _decode(blob, SETTINGS_KEY)
    if not isinstance(payload, dict):
        raise ValidationError(f"Stored '{SETTINGS_KEY}' must be an object.")
    try:
        return TrackerSettings.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(f"Stored '{SETTINGS_KEY}' is invalid.") from exc


def load_state(store: TrackerStore) -> TrackerState:
    """Load a TrackerState, falling back to defaults for corrupt data.

    Corrupt items or categories reset both to an empty item list with the
    default categories. Corrupt settings reset to default settings and a
    corrupt activity log resets to empty; each fallback is logged.

    Args:
        store: The key-value store to read.

    Returns:
        The loaded state.
    """

    try:
        items = _decode_list(store.load(ITEMS_KEY), ITEMS_KEY, KnowledgeItem) or []
        categories = _decode_list(store.load(CATEGORIES_KEY), CATEGORIES_KEY, Category)
        if categories is None:
            categories = default_categories()
    except ValidationError as exc:
        logger.warning(
            "Stored items are corrupt; starting with an empty collection",
            extra={"reason": str(exc)},
        )
        items = []
        categories = default_categories()

    try:
        settings = _decode_settings(store.load(SETTINGS_KEY))
    except ValidationError as exc:
        logger.warning(
            "Stored settings are corrupt; using defaults", extra={"reason": str(exc)}
        )
        settings = TrackerSettings()

    try:
        activities = (
            _decode_list(store.load(ACTIVITIES_KEY), ACTIVITIES_KEY, ActivityEntry) or []
        )
    except ValidationError as exc:
        logger.warning(
            "Stored activity log is corrupt; starting empty", extra={"reason": str(exc)}
        )
        activities = []

    return TrackerState(
        items=items, categories=categories, settings=settings, activities=activities
    )


def _encode_list(models: List[Any]) -> str:
    return json.dumps([model.to_wire() for model in models])


def save_state(store: TrackerStore, state: TrackerState) -> None:
    """Persist every part of a TrackerState."""

    store.save(ITEMS_KEY, _encode_list(state.items))
    store.save(CATEGORIES_KEY, _encode_list(state.categories))
    store.save(SETTINGS_KEY, json.dumps(state.settings.to_wire()))
    store.save(ACTIVITIES_KEY, _encode_list(state.activities))
