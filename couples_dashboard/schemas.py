"""
Serialization schemas using Marshmallow for the layout engine.

Output schemas convert SQLAlchemy models to JSON-friendly
representations using the persisted field names verbatim. Input
schemas validate request bodies before they reach the service layer;
``load_or_raise`` turns marshmallow failures into the application's
own ``ValidationError`` so the error handlers can render them.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow import ValidationError as MarshmallowValidationError
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from .catalog import ALLOWED_COLUMNS, ALLOWED_ROWS
from .errors import ValidationError
from .models import CoupleLayout, IndividualLayoutOverride, LayoutTemplate


def load_or_raise(schema: Schema, data, message: str = "Invalid request data.", **kwargs) -> dict:
    """Load ``data`` with ``schema`` or raise ``ValidationError`` with field messages."""
    try:
        return schema.load(data if data is not None else {}, **kwargs)
    except MarshmallowValidationError as err:
        fields_ = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        raise ValidationError(message, fields=fields_) from err


class WidgetSizeSchema(Schema):
    """A ``{columns, rows}`` size descriptor."""

    class Meta:
        unknown = EXCLUDE

    columns = fields.Integer(required=True, strict=True, validate=validate.OneOf(ALLOWED_COLUMNS))
    rows = fields.Integer(required=True, strict=True, validate=validate.OneOf(ALLOWED_ROWS))


def _order_field(**kwargs):
    return fields.List(fields.String(validate=validate.Length(min=1)), **kwargs)


def _enabled_field(**kwargs):
    return fields.Dict(keys=fields.String(), values=fields.Boolean(), **kwargs)


def _sizes_field(**kwargs):
    return fields.Dict(keys=fields.String(), values=fields.Nested(WidgetSizeSchema), **kwargs)


def _content_field(**kwargs):
    return fields.Dict(keys=fields.String(), values=fields.Raw(allow_none=True), **kwargs)


# ---------------------------------------------------------------------------
# Output schemas


class CoupleLayoutSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``CoupleLayout`` objects."""

    class Meta:
        model = CoupleLayout
        exclude = ("id",)


class IndividualLayoutOverrideSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``IndividualLayoutOverride`` objects."""

    class Meta:
        model = IndividualLayoutOverride
        exclude = ("id",)


class LayoutTemplateSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``LayoutTemplate`` objects."""

    class Meta:
        model = LayoutTemplate


class ResolvedWidgetSchema(Schema):
    """One visible widget in a resolved dashboard."""

    widget_id = fields.String()
    label = fields.String()
    size = fields.Nested(WidgetSizeSchema)
    content_override = fields.Raw(allow_none=True)


class CatalogEntrySchema(Schema):
    id = fields.String(attribute="widget_id")
    label = fields.String()
    default_size = fields.Function(lambda definition: definition.default_size.as_dict())


# ---------------------------------------------------------------------------
# Input schemas


class CoupleLayoutInputSchema(Schema):
    """Body of a couple layout write. Omitted fields keep their current value."""

    class Meta:
        unknown = EXCLUDE

    therapist_id = fields.String(allow_none=True)
    widget_order = _order_field()
    enabled_widgets = _enabled_field()
    widget_sizes = _sizes_field()
    widget_content_overrides = _content_field()


class IndividualLayoutInputSchema(Schema):
    """Body of a full-replace write of an individual override."""

    class Meta:
        unknown = EXCLUDE

    couple_id = fields.String(load_default=None, allow_none=True)
    use_personal_layout = fields.Boolean(load_default=False)
    widget_order = _order_field(load_default=None, allow_none=True)
    enabled_widgets = _enabled_field(load_default=None, allow_none=True)
    widget_sizes = _sizes_field(load_default=None, allow_none=True)
    hidden_widgets = fields.List(fields.String(), load_default=list)


class ToggleInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    use_personal_layout = fields.Boolean(required=True)


class HideWidgetInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    widget_id = fields.String(required=True, validate=validate.Length(min=1))
    hidden = fields.Boolean(load_default=True)
    couple_id = fields.String(load_default=None, allow_none=True)


class LayoutTemplateInputSchema(Schema):
    """Body of a template create; loaded with ``partial=True`` for updates."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(load_default=None, allow_none=True)
    therapist_id = fields.String(load_default=None, allow_none=True)
    is_shared = fields.Boolean(load_default=False)
    widget_order = _order_field(required=True)
    enabled_widgets = _enabled_field(required=True)
    widget_sizes = _sizes_field(load_default=dict)
    widget_content_overrides = _content_field(load_default=dict)


class ApplyTemplateInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    therapist_id = fields.String(load_default=None, allow_none=True)
