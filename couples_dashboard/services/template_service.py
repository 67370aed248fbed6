"""Layout template store.

Templates are named layouts owned by a provider and optionally shared
with every other provider. Two operations write couple layouts from
elsewhere, and both go through
``couple_layout_service.write_couple_layout`` so there is one
overwrite path:

* ``apply_template`` copies a template's layout fields onto a couple
  and bumps the template's ``usage_count``,
* ``copy_couple_layout`` copies one couple's stored layout onto
  another and leaves every template untouched.

The usage counter is incremented with a single ``UPDATE`` expression
so concurrent applies never lose an increment.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from sqlalchemy import func, or_

from ..db import commit_or_raise, db
from ..errors import NotFoundError, ValidationError
from ..models import LAYOUT_FIELDS, CoupleLayout, LayoutTemplate
from ..util.sanitization import strip_tags
from .couple_layout_service import find_couple_layout, write_couple_layout

logger = logging.getLogger(__name__)

# Fields a template update may change; ownership and usage are not editable.
EDITABLE_FIELDS = ("name", "description", "is_shared") + LAYOUT_FIELDS


def list_templates_for(therapist_id: str) -> list[LayoutTemplate]:
    """Return templates owned by ``therapist_id`` or shared, newest first."""
    return (
        LayoutTemplate.query
        .filter(or_(LayoutTemplate.therapist_id == therapist_id, LayoutTemplate.is_shared.is_(True)))
        .order_by(LayoutTemplate.created_at.desc(), LayoutTemplate.name.asc())
        .all()
    )


def get_template(template_id: str) -> LayoutTemplate:
    template = db.session.get(LayoutTemplate, template_id)
    if template is None:
        raise NotFoundError("Layout template not found.")
    return template


def _clean_text(fields: dict) -> None:
    if "name" in fields:
        fields["name"] = strip_tags(fields["name"])
        if not fields["name"]:
            raise ValidationError("Template name is required.", fields={"name": ["Template name is required."]})
    if fields.get("description") is not None:
        fields["description"] = strip_tags(fields["description"])


def create_template(fields: Mapping[str, Any]) -> LayoutTemplate:
    """Create a template from validated fields; ``therapist_id`` is required."""
    values = dict(fields)
    if not values.get("therapist_id"):
        raise ValidationError(
            "therapist_id is required.",
            fields={"therapist_id": ["Missing data for required field."]},
        )
    _clean_text(values)
    now = datetime.utcnow()
    template = LayoutTemplate(
        therapist_id=values["therapist_id"],
        name=values["name"],
        description=values.get("description"),
        is_shared=bool(values.get("is_shared", False)),
        widget_order=list(values.get("widget_order") or []),
        enabled_widgets=dict(values.get("enabled_widgets") or {}),
        widget_sizes=dict(values.get("widget_sizes") or {}),
        widget_content_overrides=dict(values.get("widget_content_overrides") or {}),
        usage_count=0,
        created_at=now,
        updated_at=now,
    )
    db.session.add(template)
    commit_or_raise("create the layout template")
    return template


def update_template(template_id: str, fields: Mapping[str, Any]) -> LayoutTemplate:
    """Update only the supplied editable fields of a template."""
    template = get_template(template_id)
    values = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
    _clean_text(values)
    for field, value in values.items():
        if field in LAYOUT_FIELDS:
            value = list(value or []) if field == "widget_order" else dict(value or {})
        setattr(template, field, value)
    template.updated_at = datetime.utcnow()
    commit_or_raise("update the layout template")
    return template


def delete_template(template_id: str) -> None:
    template = get_template(template_id)
    db.session.delete(template)
    commit_or_raise("delete the layout template")


def apply_template(template_id: str, couple_id: str, therapist_id: str | None) -> CoupleLayout:
    """Overwrite a couple's layout from a template and count the use.

    The couple layout write and the counter increment commit together.
    """
    template = get_template(template_id)
    values = template.layout_fields()
    values["therapist_id"] = therapist_id
    layout = write_couple_layout(couple_id, values)
    (
        LayoutTemplate.query
        .filter(LayoutTemplate.id == template.id)
        .update(
            {
                LayoutTemplate.usage_count: func.coalesce(LayoutTemplate.usage_count, 0) + 1,
                LayoutTemplate.updated_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )
    )
    commit_or_raise("apply the layout template")
    logger.info("Applied layout template %s to couple %s", template_id, couple_id)
    return layout


def copy_couple_layout(source_couple_id: str, target_couple_id: str, therapist_id: str | None) -> CoupleLayout:
    """Overwrite one couple's layout with another couple's stored layout."""
    source = find_couple_layout(source_couple_id)
    if source is None:
        raise NotFoundError("Source couple has no saved layout.")
    values = source.layout_fields()
    values["therapist_id"] = therapist_id
    layout = write_couple_layout(target_couple_id, values)
    commit_or_raise("copy the couple layout")
    logger.info("Copied layout from couple %s to couple %s", source_couple_id, target_couple_id)
    return layout
