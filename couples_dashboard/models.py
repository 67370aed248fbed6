"""
Database models for the couples dashboard layout engine.

Three tables make up the layout subsystem. ``CoupleLayout`` holds the
baseline dashboard a provider configures for a couple (one row per
couple). ``IndividualLayoutOverride`` holds an optional personal
deviation for a single partner (one row per user). ``LayoutTemplate``
holds named, reusable layouts a provider can share and apply.

Couples, users and therapists live in other services; they are
referenced here by their opaque string identifiers only. Layout
fields are stored as JSON and keep the persisted names used by the
rest of the platform (``widget_order``, ``enabled_widgets``,
``widget_sizes``, ``widget_content_overrides``, ``hidden_widgets``).
"""

from __future__ import annotations

import copy
import enum
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from . import db

# Fields copied wholesale when a template is applied or a couple layout copied.
LAYOUT_FIELDS = ("widget_order", "enabled_widgets", "widget_sizes", "widget_content_overrides")


class Role(enum.Enum):
    """Roles carried in the ``role`` claim of an access token."""
    CLIENT = "client"
    THERAPIST = "therapist"


class LayoutFieldsMixin:
    """Shared accessors for models carrying the four layout fields."""

    def layout_fields(self) -> dict[str, Any]:
        """Return deep copies of the layout fields, with empty fallbacks."""
        return {
            "widget_order": list(self.widget_order or []),
            "enabled_widgets": copy.deepcopy(self.enabled_widgets or {}),
            "widget_sizes": copy.deepcopy(self.widget_sizes or {}),
            "widget_content_overrides": copy.deepcopy(self.widget_content_overrides or {}),
        }


class CoupleLayout(LayoutFieldsMixin, db.Model):
    """The dashboard layout every member of a couple sees by default.

    Rows are created on the first customisation or template
    application and only ever overwritten afterwards. When no row
    exists the service layer hands out a transient default instance.
    """
    __allow_unmapped__ = True
    __tablename__ = "couple_layouts"

    id: int = db.Column(db.Integer, primary_key=True)
    couple_id: str = db.Column(db.String(64), unique=True, nullable=False, index=True)
    # Last provider who edited the layout
    therapist_id: Optional[str] = db.Column(db.String(64), nullable=True)
    widget_order: list = db.Column(db.JSON, nullable=False, default=list)
    enabled_widgets: dict = db.Column(db.JSON, nullable=False, default=dict)
    widget_sizes: dict = db.Column(db.JSON, nullable=False, default=dict)
    widget_content_overrides: dict = db.Column(db.JSON, nullable=False, default=dict)
    updated_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<CoupleLayout couple={self.couple_id}>"


class IndividualLayoutOverride(db.Model):
    """A single partner's personal deviation from the couple layout.

    ``widget_order``, ``enabled_widgets`` and ``widget_sizes`` are each
    either NULL (defer to the couple layout) or a complete value, and
    only take effect while ``use_personal_layout`` is set.
    ``hidden_widgets`` always applies, whatever the switch says.
    """
    __allow_unmapped__ = True
    __tablename__ = "individual_layout_overrides"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: str = db.Column(db.String(64), unique=True, nullable=False, index=True)
    couple_id: str = db.Column(db.String(64), nullable=False, index=True)
    use_personal_layout: bool = db.Column(db.Boolean, nullable=False, default=False)
    widget_order: Optional[list] = db.Column(db.JSON, nullable=True)
    enabled_widgets: Optional[dict] = db.Column(db.JSON, nullable=True)
    widget_sizes: Optional[dict] = db.Column(db.JSON, nullable=True)
    hidden_widgets: list = db.Column(db.JSON, nullable=False, default=list)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<IndividualLayoutOverride user={self.user_id} personal={self.use_personal_layout}>"


class LayoutTemplate(LayoutFieldsMixin, db.Model):
    """A named layout a provider can reuse across couples.

    Applying a template copies its fields onto a couple layout; later
    edits to the template do not reach couples that already applied it.
    """
    __allow_unmapped__ = True
    __tablename__ = "layout_templates"

    id: str = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid4()))
    therapist_id: str = db.Column(db.String(64), nullable=False, index=True)
    name: str = db.Column(db.String(200), nullable=False)
    description: Optional[str] = db.Column(db.Text, nullable=True)
    widget_order: list = db.Column(db.JSON, nullable=False, default=list)
    enabled_widgets: dict = db.Column(db.JSON, nullable=False, default=dict)
    widget_sizes: dict = db.Column(db.JSON, nullable=False, default=dict)
    widget_content_overrides: dict = db.Column(db.JSON, nullable=False, default=dict)
    is_shared: bool = db.Column(db.Boolean, nullable=False, default=False)
    # Bumped with a single UPDATE ... SET usage_count = usage_count + 1 per apply
    usage_count: int = db.Column(db.Integer, nullable=False, default=0)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<LayoutTemplate {self.name!r} owner={self.therapist_id}>"
