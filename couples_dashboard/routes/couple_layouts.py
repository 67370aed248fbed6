"""
Routes for couple dashboard layouts.

A couple layout is the baseline dashboard both partners see. Any
authenticated user may read it (a default layout is returned when
none has been saved) or ask for the resolved, per-viewer widget list.
Only therapists may write it.
"""

from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from ..schemas import (
    CatalogEntrySchema,
    CoupleLayoutInputSchema,
    CoupleLayoutSchema,
    ResolvedWidgetSchema,
    load_or_raise,
)
from ..services import get_couple_layout, patch_couple_layout, resolve_dashboard, upsert_couple_layout
from ..util.access import FORBIDDEN, current_identity, is_self, is_therapist


couple_layouts_bp = Blueprint("couple_layouts", __name__)


def _catalog():
    return current_app.extensions["widget_catalog"]


@couple_layouts_bp.route("/dashboard-layout/widgets", methods=["GET"])
@jwt_required()
def list_widgets() -> tuple[list[dict], int]:
    """List the widget catalog in display order."""
    return CatalogEntrySchema(many=True).dump(list(_catalog())), 200


@couple_layouts_bp.route("/dashboard-layout/couple/<couple_id>", methods=["GET"])
@jwt_required()
def get_layout(couple_id: str) -> tuple[dict, int]:
    """Return the couple's layout, or the default layout if none is saved."""
    return CoupleLayoutSchema().dump(get_couple_layout(couple_id)), 200


@couple_layouts_bp.route("/dashboard-layout/couple/<couple_id>", methods=["POST"])
@jwt_required()
def save_layout(couple_id: str) -> tuple[dict, int]:
    """Create or update a couple's layout.

    Accepts ``therapist_id``, ``widget_order``, ``enabled_widgets``,
    ``widget_sizes`` and ``widget_content_overrides``. Each supplied
    field replaces the stored one; omitted fields are kept.
    Only therapists may perform this operation.
    """
    if not is_therapist():
        return FORBIDDEN
    fields = load_or_raise(CoupleLayoutInputSchema(), request.get_json(silent=True), "Invalid layout data.")
    fields.setdefault("therapist_id", current_identity())
    layout = upsert_couple_layout(couple_id, fields)
    return CoupleLayoutSchema().dump(layout), 200


@couple_layouts_bp.route("/dashboard-layout/couple/<couple_id>", methods=["PATCH"])
@jwt_required()
def merge_layout(couple_id: str) -> tuple[dict, int]:
    """Merge changes into a couple's layout.

    Map fields (``enabled_widgets``, ``widget_sizes``,
    ``widget_content_overrides``) are merged key by key instead of
    replaced. Only therapists may perform this operation.
    """
    if not is_therapist():
        return FORBIDDEN
    fields = load_or_raise(CoupleLayoutInputSchema(), request.get_json(silent=True), "Invalid layout data.")
    fields.setdefault("therapist_id", current_identity())
    layout = patch_couple_layout(couple_id, fields)
    return CoupleLayoutSchema().dump(layout), 200


@couple_layouts_bp.route("/dashboard-layout/couple/<couple_id>/resolved", methods=["GET"])
@jwt_required()
def resolved_layout(couple_id: str) -> tuple[dict, int]:
    """Return the widgets a viewer actually sees, in order.

    ``user_id`` defaults to the caller. Only therapists may resolve
    the dashboard on behalf of someone else.
    """
    user_id = request.args.get("user_id") or current_identity()
    if not (is_therapist() or is_self(user_id)):
        return FORBIDDEN
    widgets = resolve_dashboard(couple_id, user_id, _catalog())
    return {
        "couple_id": couple_id,
        "user_id": user_id,
        "widgets": ResolvedWidgetSchema(many=True).dump(widgets),
    }, 200
