"""
Routes for individual (per-partner) layout overrides.

A partner can keep a personal layout that replaces the couple's
order, visibility or sizes, and a personal list of hidden widgets
that applies regardless. Users may manage their own override;
therapists may manage anyone's.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..schemas import (
    HideWidgetInputSchema,
    IndividualLayoutInputSchema,
    IndividualLayoutOverrideSchema,
    ToggleInputSchema,
    load_or_raise,
)
from ..services import (
    get_override,
    reset_override,
    set_widget_hidden,
    toggle_personal_layout,
    upsert_override,
)
from ..services.override_service import default_override_payload
from ..util.access import FORBIDDEN, is_self, is_therapist


individual_layouts_bp = Blueprint("individual_layouts", __name__)


def _can_manage(user_id: str) -> bool:
    return is_therapist() or is_self(user_id)


@individual_layouts_bp.route("/dashboard-layout/user/<user_id>", methods=["GET"])
@jwt_required()
def get_user_layout(user_id: str) -> tuple[dict, int]:
    """Return the user's override, or the empty default shape if they have none."""
    if not _can_manage(user_id):
        return FORBIDDEN
    override = get_override(user_id)
    if override is None:
        return default_override_payload(user_id), 200
    return IndividualLayoutOverrideSchema().dump(override), 200


@individual_layouts_bp.route("/dashboard-layout/user/<user_id>", methods=["POST"])
@jwt_required()
def save_user_layout(user_id: str) -> tuple[dict, int]:
    """Create or fully replace the user's override.

    Accepts ``couple_id`` (required for a new record),
    ``use_personal_layout``, ``widget_order``, ``enabled_widgets``,
    ``widget_sizes`` and ``hidden_widgets``.
    """
    if not _can_manage(user_id):
        return FORBIDDEN
    fields = load_or_raise(IndividualLayoutInputSchema(), request.get_json(silent=True), "Invalid layout data.")
    override = upsert_override(user_id, fields)
    return IndividualLayoutOverrideSchema().dump(override), 200


@individual_layouts_bp.route("/dashboard-layout/user/<user_id>/toggle", methods=["PATCH"])
@jwt_required()
def toggle_user_layout(user_id: str) -> tuple[dict, int]:
    """Switch the personal layout on or off. 404 if no override exists yet."""
    if not _can_manage(user_id):
        return FORBIDDEN
    data = load_or_raise(ToggleInputSchema(), request.get_json(silent=True))
    override = toggle_personal_layout(user_id, data["use_personal_layout"])
    return IndividualLayoutOverrideSchema().dump(override), 200


@individual_layouts_bp.route("/dashboard-layout/user/<user_id>/hide-widget", methods=["PUT"])
@jwt_required()
def hide_widget(user_id: str) -> tuple[dict, int]:
    """Hide or un-hide one widget for the user.

    Accepts ``widget_id``, ``hidden`` (default ``true``) and
    ``couple_id``, which is required when hiding creates the user's
    first override record.
    """
    if not _can_manage(user_id):
        return FORBIDDEN
    data = load_or_raise(HideWidgetInputSchema(), request.get_json(silent=True))
    override = set_widget_hidden(user_id, data["widget_id"], data["hidden"], data["couple_id"])
    if override is None:
        return default_override_payload(user_id), 200
    return IndividualLayoutOverrideSchema().dump(override), 200


@individual_layouts_bp.route("/dashboard-layout/user/<user_id>", methods=["DELETE"])
@jwt_required()
def reset_user_layout(user_id: str) -> tuple[dict, int]:
    """Delete the user's override so they see the couple layout again."""
    if not _can_manage(user_id):
        return FORBIDDEN
    reset_override(user_id)
    return {"success": True, "message": "Preferences reset to couple defaults"}, 200
