"""Individual override store.

A user has zero or one ``IndividualLayoutOverride``. Absence is a
normal state, so lookups return ``None`` rather than raising.

The record is written through two separate paths:

* ``upsert_override`` replaces the whole record (personal order,
  enabled map, sizes, switch and hidden list),
* ``set_widget_hidden`` adds or removes one id from
  ``hidden_widgets`` and leaves every other field alone.

``toggle_personal_layout`` only flips the switch and never clears the
hidden list; ``reset_override`` deletes the record outright.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..db import commit_or_raise, db
from ..errors import NotFoundError, ValidationError
from ..models import IndividualLayoutOverride

logger = logging.getLogger(__name__)


def _unique(widget_ids) -> list[str]:
    seen: set[str] = set()
    result = []
    for widget_id in widget_ids or []:
        if widget_id not in seen:
            seen.add(widget_id)
            result.append(widget_id)
    return result


def get_override(user_id: str) -> Optional[IndividualLayoutOverride]:
    """Return the user's override record, or ``None`` if they have none."""
    return IndividualLayoutOverride.query.filter_by(user_id=user_id).first()


def default_override_payload(user_id: str) -> dict[str, Any]:
    """The shape reported for a user who has no override record."""
    return {
        "user_id": user_id,
        "couple_id": None,
        "use_personal_layout": False,
        "widget_order": None,
        "enabled_widgets": None,
        "widget_sizes": None,
        "hidden_widgets": [],
    }


def upsert_override(user_id: str, fields: Mapping[str, Any]) -> IndividualLayoutOverride:
    """Create or fully replace a user's override record.

    Every field is written: anything the caller leaves out becomes
    NULL (or ``False``/``[]`` for the switch and hidden list). The
    ``couple_id`` may only be omitted when a record already exists.
    """
    override = get_override(user_id)
    couple_id = fields.get("couple_id") or (override.couple_id if override else None)
    if not couple_id:
        raise ValidationError(
            "couple_id is required for a new layout override.",
            fields={"couple_id": ["Missing data for required field."]},
        )
    if override is None:
        override = IndividualLayoutOverride(user_id=user_id)
        db.session.add(override)

    widget_order = fields.get("widget_order")
    enabled_widgets = fields.get("enabled_widgets")
    widget_sizes = fields.get("widget_sizes")
    override.couple_id = couple_id
    override.use_personal_layout = bool(fields.get("use_personal_layout", False))
    override.widget_order = list(widget_order) if widget_order is not None else None
    override.enabled_widgets = dict(enabled_widgets) if enabled_widgets is not None else None
    override.widget_sizes = dict(widget_sizes) if widget_sizes is not None else None
    override.hidden_widgets = _unique(fields.get("hidden_widgets"))
    override.updated_at = datetime.utcnow()
    commit_or_raise("save the layout override")
    return override


def toggle_personal_layout(user_id: str, use_personal_layout: bool) -> IndividualLayoutOverride:
    """Switch the personal layout on or off for an existing override."""
    override = get_override(user_id)
    if override is None:
        raise NotFoundError("Layout override not found.")
    override.use_personal_layout = bool(use_personal_layout)
    override.updated_at = datetime.utcnow()
    commit_or_raise("toggle the personal layout")
    return override


def set_widget_hidden(
    user_id: str,
    widget_id: str,
    hidden: bool,
    couple_id: Optional[str] = None,
) -> Optional[IndividualLayoutOverride]:
    """Add ``widget_id`` to, or remove it from, the user's hidden widgets.

    Repeated hides never duplicate an id. When the user has no record,
    hiding creates one (``couple_id`` is then required) and un-hiding
    is a no-op that returns ``None``.
    """
    override = get_override(user_id)
    if override is None:
        if not hidden:
            return None
        if not couple_id:
            raise ValidationError(
                "couple_id is required for a new layout override.",
                fields={"couple_id": ["Missing data for required field."]},
            )
        override = IndividualLayoutOverride(
            user_id=user_id,
            couple_id=couple_id,
            use_personal_layout=False,
        )
        db.session.add(override)

    hidden_widgets = _unique(override.hidden_widgets)
    if hidden:
        if widget_id not in hidden_widgets:
            hidden_widgets.append(widget_id)
    else:
        hidden_widgets = [w for w in hidden_widgets if w != widget_id]
    override.hidden_widgets = hidden_widgets
    override.updated_at = datetime.utcnow()
    commit_or_raise("update hidden widgets")
    return override


def reset_override(user_id: str) -> None:
    """Delete the user's override, returning them to the couple layout."""
    deleted = IndividualLayoutOverride.query.filter_by(user_id=user_id).delete()
    commit_or_raise("reset the layout override")
    if deleted:
        logger.info("Reset layout override for user %s", user_id)
