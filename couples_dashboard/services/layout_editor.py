"""Staged layout edits.

``LayoutDraft`` backs the interactive dashboard editor. Reordering,
showing/hiding and resizing only change the draft; nothing reaches
the database until ``save_to_couple`` or ``save_to_user`` is called.

Dropping one widget onto another swaps their two positions; the
widgets in between do not move. See ``swap_positions``.
"""
from __future__ import annotations

import copy
from typing import Iterable, Optional

from ..catalog import is_size_descriptor
from ..errors import ValidationError
from . import couple_layout_service, override_service


def swap_positions(order: Iterable[str], first: int, second: int) -> list[str]:
    """Return a copy of ``order`` with the items at two indexes exchanged."""
    result = list(order)
    for index in (first, second):
        if not 0 <= index < len(result):
            raise ValidationError(f"Position {index} is outside the layout.")
    result[first], result[second] = result[second], result[first]
    return result


class LayoutDraft:
    """Local, unsaved copy of a layout's order, visibility and sizes."""

    def __init__(self, widget_order, enabled_widgets=None, widget_sizes=None) -> None:
        self.widget_order: list[str] = list(widget_order or [])
        self.enabled_widgets: dict[str, bool] = dict(enabled_widgets or {})
        self.widget_sizes: dict[str, dict] = copy.deepcopy(dict(widget_sizes or {}))
        self._dirty = False

    @classmethod
    def from_couple_layout(cls, layout) -> "LayoutDraft":
        return cls(layout.widget_order, layout.enabled_widgets, layout.widget_sizes)

    @classmethod
    def from_override(cls, override, couple_layout) -> "LayoutDraft":
        """Start from the viewer's personal fields, falling back to the couple's."""
        def pick(field):
            value = getattr(override, field, None) if override is not None else None
            return value if value is not None else getattr(couple_layout, field)

        return cls(pick("widget_order"), pick("enabled_widgets"), pick("widget_sizes"))

    @property
    def dirty(self) -> bool:
        return self._dirty

    def reorder(self, new_order: Iterable[str]) -> None:
        self.widget_order = list(new_order)
        self._dirty = True

    def drop(self, dragged_id: str, target_id: str) -> None:
        """Drop ``dragged_id`` onto ``target_id``'s slot, swapping the two."""
        if dragged_id == target_id:
            return
        for widget_id in (dragged_id, target_id):
            if widget_id not in self.widget_order:
                raise ValidationError(f"Widget {widget_id!r} is not in the layout.")
        self.reorder(
            swap_positions(
                self.widget_order,
                self.widget_order.index(dragged_id),
                self.widget_order.index(target_id),
            )
        )

    def set_enabled(self, widget_id: str, enabled: bool) -> None:
        self.enabled_widgets[widget_id] = bool(enabled)
        self._dirty = True

    def set_size(self, widget_id: str, columns: int, rows: int) -> None:
        size = {"columns": columns, "rows": rows}
        if not is_size_descriptor(size):
            raise ValidationError(
                "Invalid widget size.",
                fields={"widget_sizes": {widget_id: ["columns must be 1-3 and rows 1-2."]}},
            )
        self.widget_sizes[widget_id] = size
        self._dirty = True

    def changes(self) -> dict:
        return {
            "widget_order": list(self.widget_order),
            "enabled_widgets": dict(self.enabled_widgets),
            "widget_sizes": copy.deepcopy(self.widget_sizes),
        }

    def save_to_couple(self, couple_id: str, therapist_id: Optional[str] = None):
        """Persist the draft as the couple's layout."""
        fields = self.changes()
        if therapist_id is not None:
            fields["therapist_id"] = therapist_id
        layout = couple_layout_service.upsert_couple_layout(couple_id, fields)
        self._dirty = False
        return layout

    def save_to_user(self, user_id: str, couple_id: str):
        """Persist the draft as the user's personal layout, keeping hidden widgets."""
        existing = override_service.get_override(user_id)
        fields = self.changes()
        fields.update(
            couple_id=couple_id,
            use_personal_layout=True,
            hidden_widgets=list(existing.hidden_widgets or []) if existing else [],
        )
        override = override_service.upsert_override(user_id, fields)
        self._dirty = False
        return override
