"""
Routes for layout templates.

Therapists build named layouts, optionally share them with other
therapists, and apply them to couples. Applying a template (or
copying one couple's layout to another) overwrites the target
couple's layout. Only the owner may edit or delete a template.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..schemas import (
    ApplyTemplateInputSchema,
    CoupleLayoutSchema,
    LayoutTemplateInputSchema,
    LayoutTemplateSchema,
    load_or_raise,
)
from ..services import (
    apply_template,
    copy_couple_layout,
    create_template,
    delete_template,
    get_template,
    list_templates_for,
    update_template,
)
from ..util.access import FORBIDDEN, current_identity, is_therapist


layout_templates_bp = Blueprint("layout_templates", __name__)


def _applying_therapist() -> str | None:
    data = load_or_raise(ApplyTemplateInputSchema(), request.get_json(silent=True))
    return data["therapist_id"] or current_identity()


@layout_templates_bp.route("/dashboard-layout/templates/therapist/<therapist_id>", methods=["GET"])
@jwt_required()
def list_templates(therapist_id: str) -> tuple[list[dict], int]:
    """List templates owned by the therapist plus all shared templates."""
    if not is_therapist():
        return FORBIDDEN
    return LayoutTemplateSchema(many=True).dump(list_templates_for(therapist_id)), 200


@layout_templates_bp.route("/dashboard-layout/templates/<template_id>", methods=["GET"])
@jwt_required()
def get_layout_template(template_id: str) -> tuple[dict, int]:
    if not is_therapist():
        return FORBIDDEN
    return LayoutTemplateSchema().dump(get_template(template_id)), 200


@layout_templates_bp.route("/dashboard-layout/templates", methods=["POST"])
@jwt_required()
def create_layout_template() -> tuple[dict, int]:
    """Create a template.

    Requires ``name``, ``widget_order`` and ``enabled_widgets``.
    ``therapist_id`` defaults to the caller.
    """
    if not is_therapist():
        return FORBIDDEN
    fields = load_or_raise(LayoutTemplateInputSchema(), request.get_json(silent=True), "Invalid template data.")
    fields["therapist_id"] = fields.get("therapist_id") or current_identity()
    template = create_template(fields)
    return LayoutTemplateSchema().dump(template), 201


@layout_templates_bp.route("/dashboard-layout/templates/<template_id>", methods=["PUT"])
@jwt_required()
def update_layout_template(template_id: str) -> tuple[dict, int]:
    """Update any subset of a template's fields. Owner only."""
    if not is_therapist():
        return FORBIDDEN
    if get_template(template_id).therapist_id != current_identity():
        return FORBIDDEN
    fields = load_or_raise(
        LayoutTemplateInputSchema(), request.get_json(silent=True), "Invalid template data.", partial=True
    )
    template = update_template(template_id, fields)
    return LayoutTemplateSchema().dump(template), 200


@layout_templates_bp.route("/dashboard-layout/templates/<template_id>", methods=["DELETE"])
@jwt_required()
def delete_layout_template(template_id: str) -> tuple[dict, int]:
    """Delete a template. Owner only."""
    if not is_therapist():
        return FORBIDDEN
    if get_template(template_id).therapist_id != current_identity():
        return FORBIDDEN
    delete_template(template_id)
    return {"success": True}, 200


@layout_templates_bp.route("/dashboard-layout/templates/<template_id>/apply/<couple_id>", methods=["POST"])
@jwt_required()
def apply_layout_template(template_id: str, couple_id: str) -> tuple[dict, int]:
    """Overwrite the couple's layout with the template and count the use."""
    if not is_therapist():
        return FORBIDDEN
    layout = apply_template(template_id, couple_id, _applying_therapist())
    return {
        "success": True,
        "message": "Template applied successfully",
        "layout": CoupleLayoutSchema().dump(layout),
    }, 200


@layout_templates_bp.route(
    "/dashboard-layout/templates/copy/<source_couple_id>/to/<target_couple_id>", methods=["POST"]
)
@jwt_required()
def copy_layout(source_couple_id: str, target_couple_id: str) -> tuple[dict, int]:
    """Copy one couple's saved layout onto another couple."""
    if not is_therapist():
        return FORBIDDEN
    layout = copy_couple_layout(source_couple_id, target_couple_id, _applying_therapist())
    return {
        "success": True,
        "message": "Layout copied successfully",
        "layout": CoupleLayoutSchema().dump(layout),
    }, 200
