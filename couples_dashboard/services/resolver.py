"""Layout resolution.

``resolve`` decides, for one viewer, which dashboard widgets appear,
in what order, at what size and with what provider-authored content.
It combines three inputs:

* the couple layout (the baseline every partner sees),
* the viewer's individual override, if any,
* the widget catalog (the widgets that currently exist).

The function is pure: it performs no I/O, never mutates its inputs,
and never raises for missing or malformed stored data. Every absent
value has a fallback, so a dashboard can always be rendered. Layouts
may be passed as model instances or as plain mappings with the
persisted field names.
"""
from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from ..catalog import WidgetCatalog, is_size_descriptor


class ResolvedWidget(NamedTuple):
    widget_id: str
    label: str
    size: dict
    content_override: Any = None


def _field(source, name: str):
    """Read ``name`` from a model instance or mapping, ``None`` when absent."""
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _mapping(value) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _sequence(value) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def personal_layout_active(override) -> bool:
    """Return True if the override's personal order/enabled/sizes apply."""
    return bool(_field(override, "use_personal_layout"))


def reconcile_order(order: Iterable, catalog: WidgetCatalog) -> list[str]:
    """Align a stored order with the catalog.

    Ids the catalog no longer knows are dropped, repeated ids keep
    their first position, and catalog widgets missing from the order
    are appended in catalog order.
    """
    result: list[str] = []
    seen: set[str] = set()
    for widget_id in order:
        if widget_id in catalog and widget_id not in seen:
            seen.add(widget_id)
            result.append(widget_id)
    for widget_id in catalog.ids:
        if widget_id not in seen:
            seen.add(widget_id)
            result.append(widget_id)
    return result


def resolve(couple_layout, override, catalog: WidgetCatalog) -> list[ResolvedWidget]:
    """Return the ordered, visible widgets for one viewer.

    Parameters
    ----------
    couple_layout:
        The couple's layout (stored or default). ``None`` behaves like
        an empty layout.
    override:
        The viewer's ``IndividualLayoutOverride`` or ``None``.
    catalog:
        The widget catalog in effect.

    Returns
    -------
    list[ResolvedWidget]
        Enabled, non-hidden widgets in display order, each with its
        resolved size and the couple layout's content override.
    """
    personal = personal_layout_active(override)

    order = _sequence(_field(couple_layout, "widget_order"))
    personal_order = _field(override, "widget_order") if personal else None
    if personal_order is not None:
        order = _sequence(personal_order)
    order = reconcile_order(order, catalog)

    couple_enabled = _mapping(_field(couple_layout, "enabled_widgets"))
    couple_sizes = _mapping(_field(couple_layout, "widget_sizes"))
    content_overrides = _mapping(_field(couple_layout, "widget_content_overrides"))
    personal_enabled: Optional[Mapping] = None
    personal_sizes: Optional[Mapping] = None
    if personal:
        personal_enabled = _mapping(_field(override, "enabled_widgets"))
        personal_sizes = _mapping(_field(override, "widget_sizes"))

    # Hidden widgets apply whether or not the personal layout is switched on.
    hidden = {w for w in _sequence(_field(override, "hidden_widgets")) if isinstance(w, str)}

    widgets: list[ResolvedWidget] = []
    for widget_id in order:
        if not _is_enabled(widget_id, personal_enabled, couple_enabled):
            continue
        if widget_id in hidden:
            continue
        definition = catalog.get(widget_id)
        content = content_overrides.get(widget_id)
        widgets.append(
            ResolvedWidget(
                widget_id=widget_id,
                label=definition.label,
                size=_resolve_size(widget_id, personal_sizes, couple_sizes, catalog),
                content_override=copy.deepcopy(content),
            )
        )
    return widgets


def _is_enabled(widget_id: str, personal_enabled: Optional[Mapping], couple_enabled: Mapping) -> bool:
    if personal_enabled and widget_id in personal_enabled:
        return bool(personal_enabled[widget_id])
    if widget_id in couple_enabled:
        return bool(couple_enabled[widget_id])
    return True


def _resolve_size(
    widget_id: str,
    personal_sizes: Optional[Mapping],
    couple_sizes: Mapping,
    catalog: WidgetCatalog,
) -> dict:
    # Malformed stored sizes (e.g. legacy "medium" strings) fall through to the next layer.
    for sizes in (personal_sizes, couple_sizes):
        if sizes and is_size_descriptor(sizes.get(widget_id)):
            size = sizes[widget_id]
            return {"columns": size["columns"], "rows": size["rows"]}
    return catalog.default_size(widget_id).as_dict()
