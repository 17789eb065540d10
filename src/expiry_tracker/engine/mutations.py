"""State transitions for items and categories.

Every operation takes a TrackerState and returns an updated copy. Failures
raise before anything is built, so the input state is never altered.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar, Union
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from expiry_tracker.domain.activity import ActivityEntry, ActivityType
from expiry_tracker.domain.category import Category, CategoryInput, default_categories
from expiry_tracker.domain.exceptions import NotFoundError, ValidationError
from expiry_tracker.domain.knowledge_item import (
    KnowledgeItem,
    KnowledgeItemInput,
    RenewalEvent,
)
from expiry_tracker.domain.settings import TrackerSettings
from expiry_tracker.domain.timestamps import as_utc
from expiry_tracker.domain.tracker_state import TrackerState

DEFAULT_ACTIVITY_LIMIT = 50

InputModel = TypeVar("InputModel", bound=BaseModel)


def new_identifier() -> str:
    """Return a fresh unique identifier."""

    return uuid4().hex


def coerce_input(
    payload: Union[InputModel, Mapping[str, Any]], model: Type[InputModel]
) -> InputModel:
    """Validate a mapping into an input model, raising the tracker's error type.

    Args:
        payload: An input model instance or a raw mapping.
        model: The input model class.

    Returns:
        A validated input model.
    """

    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {model.__name__}: {exc}") from exc


def _validated_item_input(
    state: TrackerState, payload: Union[KnowledgeItemInput, Mapping[str, Any]]
) -> KnowledgeItemInput:
    data = coerce_input(payload, KnowledgeItemInput)
    if not data.name:
        raise ValidationError("Knowledge item name must not be empty.")
    if state.find_category(data.category) is None:
        raise ValidationError(f"Unknown category: {data.category}")
    return data


def _require_item(state: TrackerState, item_id: str) -> KnowledgeItem:
    item = state.find_item(item_id)
    if item is None:
        raise NotFoundError(f"Knowledge item not found: {item_id}")
    return item


def _replace_item(items: List[KnowledgeItem], updated: KnowledgeItem) -> List[KnowledgeItem]:
    return [updated if item.id == updated.id else item for item in items]


def create_item(
    state: TrackerState,
    payload: Union[KnowledgeItemInput, Mapping[str, Any]],
    now: datetime,
) -> Tuple[TrackerState, KnowledgeItem]:
    """Create a new item with a fresh id and no renewal history.

    Args:
        state: Current state.
        payload: User-supplied item fields.
        now: Creation timestamp.

    Returns:
        The updated state and the created item.

    Raises:
        ValidationError: When the name is empty or the category is unknown.
    """

    data = _validated_item_input(state, payload)
    item = KnowledgeItem(
        id=new_identifier(),
        created_at=as_utc(now),
        last_renewed=None,
        renewal_history=[],
        **data.model_dump(),
    )
    return state.model_copy(update={"items": [*state.items, item]}), item


def edit_item(
    state: TrackerState,
    item_id: str,
    payload: Union[KnowledgeItemInput, Mapping[str, Any]],
) -> Tuple[TrackerState, KnowledgeItem]:
    """Replace an item's editable fields, keeping its identity and history.

    Raises:
        NotFoundError: When the id is unknown.
        ValidationError: When the input is invalid.
    """

    existing = _require_item(state, item_id)
    data = _validated_item_input(state, payload)
    updated = KnowledgeItem(
        id=existing.id,
        created_at=existing.created_at,
        last_renewed=existing.last_renewed,
        renewal_history=list(existing.renewal_history),
        **data.model_dump(),
    )
    return state.model_copy(update={"items": _replace_item(state.items, updated)}), updated


def renew_item(
    state: TrackerState, item_id: str, now: datetime
) -> Tuple[TrackerState, KnowledgeItem]:
    """Append a renewal event at the item's current cost.

    Raises:
        NotFoundError: When the id is unknown.
    """

    existing = _require_item(state, item_id)
    renewed_at = as_utc(now)
    event = RenewalEvent(date=renewed_at, cost=existing.cost)
    updated = existing.model_copy(
        update={
            "last_renewed": renewed_at,
            "renewal_history": [*existing.renewal_history, event],
        }
    )
    return state.model_copy(update={"items": _replace_item(state.items, updated)}), updated


def delete_item(state: TrackerState, item_id: str) -> Tuple[TrackerState, KnowledgeItem]:
    """Remove an item. Deleting an already-removed id fails.

    Raises:
        NotFoundError: When the id is unknown.
    """

    existing = _require_item(state, item_id)
    remaining = [item for item in state.items if item.id != item_id]
    return state.model_copy(update={"items": remaining}), existing


def _validated_category_input(
    payload: Union[CategoryInput, Mapping[str, Any]],
) -> CategoryInput:
    data = coerce_input(payload, CategoryInput)
    if not data.name:
        raise ValidationError("Category name must not be empty.")
    return data


def create_category(
    state: TrackerState, payload: Union[CategoryInput, Mapping[str, Any]]
) -> Tuple[TrackerState, Category]:
    """Append a new category."""

    data = _validated_category_input(payload)
    category = Category(id=new_identifier(), **data.model_dump())
    return (
        state.model_copy(update={"categories": [*state.categories, category]}),
        category,
    )


def update_category(
    state: TrackerState,
    category_id: str,
    payload: Union[CategoryInput, Mapping[str, Any]],
) -> Tuple[TrackerState, Category]:
    """Replace a category's name, description, and color in place."""

    if state.find_category(category_id) is None:
        raise NotFoundError(f"Category not found: {category_id}")
    data = _validated_category_input(payload)
    updated = Category(id=category_id, **data.model_dump())
    categories = [
        updated if category.id == category_id else category
        for category in state.categories
    ]
    return state.model_copy(update={"categories": categories}), updated


def delete_category(
    state: TrackerState, category_id: str
) -> Tuple[TrackerState, Category]:
    """Remove a category. Items referencing it are left untouched."""

    existing = state.find_category(category_id)
    if existing is None:
        raise NotFoundError(f"Category not found: {category_id}")
    categories = [c for c in state.categories if c.id != category_id]
    return state.model_copy(update={"categories": categories}), existing


def update_settings(state: TrackerState, changes: Mapping[str, Any]) -> TrackerState:
    """Merge setting changes over the current settings after validation."""

    merged = {**state.settings.model_dump(), **dict(changes)}
    settings = coerce_input(merged, TrackerSettings)
    return state.model_copy(update={"settings": settings})


def reset_settings(state: TrackerState) -> TrackerState:
    """Restore default settings."""

    return state.model_copy(update={"settings": TrackerSettings()})


def clear_all(state: TrackerState) -> TrackerState:
    """Drop every item and activity and restore default categories and settings."""

    return TrackerState(
        items=[],
        categories=default_categories(),
        settings=TrackerSettings(),
        activities=[],
    )


def record_activity(
    state: TrackerState,
    activity_type: ActivityType,
    description: str,
    now: datetime,
    limit: Optional[int] = DEFAULT_ACTIVITY_LIMIT,
) -> TrackerState:
    """Prepend an activity entry, keeping at most ``limit`` entries."""

    entry = ActivityEntry(
        id=new_identifier(),
        type=activity_type,
        description=description,
        timestamp=as_utc(now),
    )
    activities = [entry, *state.activities]
    if limit is not None:
        activities = activities[:limit]
    return state.model_copy(update={"activities": activities})
