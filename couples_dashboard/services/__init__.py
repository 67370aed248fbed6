"""Service layer for the couples dashboard layout engine.

This package contains the layout logic that sits between the
Flask route handlers and the database models: the three stores
(couple layouts, individual overrides, templates), the pure
resolver, and the staged editor.

Nothing in this package should perform any HTTP handling.
Instead, services return simple Python data structures or
database objects, and raise exceptions defined in
``couples_dashboard.errors`` when something goes wrong.
"""

from .resolver import ResolvedWidget, resolve, reconcile_order
from .couple_layout_service import (
    get_couple_layout,
    upsert_couple_layout,
    patch_couple_layout,
)
from .override_service import (
    get_override,
    upsert_override,
    toggle_personal_layout,
    set_widget_hidden,
    reset_override,
)
from .template_service import (
    list_templates_for,
    get_template,
    create_template,
    update_template,
    delete_template,
    apply_template,
    copy_couple_layout,
)
from .dashboard_service import resolve_dashboard
from .layout_editor import LayoutDraft, swap_positions

__all__ = [
    "ResolvedWidget",
    "resolve",
    "reconcile_order",
    "get_couple_layout",
    "upsert_couple_layout",
    "patch_couple_layout",
    "get_override",
    "upsert_override",
    "toggle_personal_layout",
    "set_widget_hidden",
    "reset_override",
    "list_templates_for",
    "get_template",
    "create_template",
    "update_template",
    "delete_template",
    "apply_template",
    "copy_couple_layout",
    "resolve_dashboard",
    "LayoutDraft",
    "swap_positions",
]
