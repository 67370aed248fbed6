"""Couple layout store.

Each couple has at most one stored ``CoupleLayout``. Reads never fail
for a missing row: a transient default layout is returned instead.
Writes are upserts keyed by ``couple_id`` and are last-writer-wins;
no version check is performed.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..catalog import DEFAULT_WIDGET_ORDER
from ..db import commit_or_raise, db
from ..models import LAYOUT_FIELDS, CoupleLayout

logger = logging.getLogger(__name__)

# Map-valued fields that PATCH merges key by key.
MERGEABLE_FIELDS = ("enabled_widgets", "widget_sizes", "widget_content_overrides")


def default_layout_fields() -> dict[str, Any]:
    """Return fresh copies of the hard-coded default layout fields."""
    return {
        "widget_order": list(DEFAULT_WIDGET_ORDER),
        "enabled_widgets": {widget_id: True for widget_id in DEFAULT_WIDGET_ORDER},
        "widget_sizes": {},
        "widget_content_overrides": {},
    }


def default_couple_layout(couple_id: str) -> CoupleLayout:
    """Build an unsaved ``CoupleLayout`` carrying the default fields."""
    return CoupleLayout(couple_id=couple_id, therapist_id=None, **default_layout_fields())


def find_couple_layout(couple_id: str) -> Optional[CoupleLayout]:
    """Return the stored layout for ``couple_id`` or ``None``."""
    return CoupleLayout.query.filter_by(couple_id=couple_id).first()


def get_couple_layout(couple_id: str) -> CoupleLayout:
    """Return the stored layout, or the default layout if none is stored."""
    return find_couple_layout(couple_id) or default_couple_layout(couple_id)


def write_couple_layout(couple_id: str, values: Mapping[str, Any]) -> CoupleLayout:
    """Stage an upsert of ``values`` onto the couple's layout without committing.

    Only keys present in ``values`` are written; other fields keep
    their stored value, or the default for a new row. This is the one
    overwrite path shared by direct edits, template application and
    couple-to-couple copies.
    """
    layout = find_couple_layout(couple_id)
    if layout is None:
        layout = default_couple_layout(couple_id)
        db.session.add(layout)
    if "therapist_id" in values:
        layout.therapist_id = values["therapist_id"]
    for field in LAYOUT_FIELDS:
        if field in values and values[field] is not None:
            # Assign new containers so JSON columns register the change.
            value = values[field]
            setattr(layout, field, list(value) if field == "widget_order" else dict(value))
    layout.updated_at = datetime.utcnow()
    return layout


def upsert_couple_layout(couple_id: str, fields: Mapping[str, Any]) -> CoupleLayout:
    """Create or update a couple layout, replacing each supplied field whole."""
    layout = write_couple_layout(couple_id, fields)
    commit_or_raise("save the couple layout")
    logger.debug("Saved layout for couple %s", couple_id)
    return layout


def patch_couple_layout(couple_id: str, fields: Mapping[str, Any]) -> CoupleLayout:
    """Create or update a couple layout, merging map fields key by key.

    ``widget_order`` and ``therapist_id`` are replaced when supplied;
    ``enabled_widgets``, ``widget_sizes`` and ``widget_content_overrides``
    are merged into the stored maps.
    """
    current = get_couple_layout(couple_id)
    values = dict(fields)
    for field in MERGEABLE_FIELDS:
        if field in fields and fields[field] is not None:
            merged = dict(getattr(current, field) or {})
            merged.update(fields[field])
            values[field] = merged
    layout = write_couple_layout(couple_id, values)
    commit_or_raise("update the couple layout")
    logger.debug("Merged layout changes for couple %s", couple_id)
    return layout
