"""Widget catalog and layout defaults.

The catalog is the externally supplied list of dashboard widgets the
platform knows about: an ordered sequence of identifiers, each with a
human-readable label and a default size. It is configuration, not
data, so it is built once per application (see ``create_app``) and
never mutated afterwards. Layout resolution treats it as a read-only
input alongside the stored layouts.

Applications can replace the built-in catalog by setting the
``WIDGET_CATALOG`` config key to a list of mappings::

    [{"id": "gratitude", "label": "Gratitude Log",
      "default_size": {"columns": 2, "rows": 1}}, ...]
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, NamedTuple, Optional

ALLOWED_COLUMNS = (1, 2, 3)
ALLOWED_ROWS = (1, 2)


class WidgetSize(NamedTuple):
    """Grid footprint of a widget."""

    columns: int = 1
    rows: int = 1

    def as_dict(self) -> dict[str, int]:
        return {"columns": self.columns, "rows": self.rows}


class WidgetDefinition(NamedTuple):
    widget_id: str
    label: str
    default_size: WidgetSize = WidgetSize()


def is_size_descriptor(value) -> bool:
    """Return True if ``value`` is a well-formed ``{columns, rows}`` mapping."""
    if not isinstance(value, Mapping):
        return False
    columns = value.get("columns")
    rows = value.get("rows")
    # bool is an int subclass; a size of True is not a size
    if isinstance(columns, bool) or isinstance(rows, bool):
        return False
    return columns in ALLOWED_COLUMNS and rows in ALLOWED_ROWS


class WidgetCatalog:
    """Immutable, ordered table of known widgets."""

    def __init__(self, definitions: Iterable[WidgetDefinition]) -> None:
        ordered: list[WidgetDefinition] = []
        index: dict[str, WidgetDefinition] = {}
        for definition in definitions:
            if definition.widget_id in index:
                raise ValueError(f"Duplicate widget id in catalog: {definition.widget_id!r}")
            index[definition.widget_id] = definition
            ordered.append(definition)
        self._definitions = tuple(ordered)
        self._index = MappingProxyType(index)

    @classmethod
    def from_config(cls, entries: Optional[Iterable[Mapping]]) -> "WidgetCatalog":
        """Build a catalog from plain config mappings.

        ``None`` yields the built-in catalog. Malformed entries raise
        ``ValueError`` so that a bad deployment fails at start-up
        rather than at render time.
        """
        if entries is None:
            return DEFAULT_CATALOG
        definitions = []
        for entry in entries:
            widget_id = entry.get("id") if isinstance(entry, Mapping) else None
            if not isinstance(widget_id, str) or not widget_id:
                raise ValueError(f"Catalog entry needs a non-empty string 'id': {entry!r}")
            size = entry.get("default_size") or {"columns": 1, "rows": 1}
            if not is_size_descriptor(size):
                raise ValueError(f"Invalid default_size for widget {widget_id!r}: {size!r}")
            definitions.append(
                WidgetDefinition(
                    widget_id=widget_id,
                    label=entry.get("label") or widget_id,
                    default_size=WidgetSize(size["columns"], size["rows"]),
                )
            )
        return cls(definitions)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(d.widget_id for d in self._definitions)

    def get(self, widget_id: str) -> Optional[WidgetDefinition]:
        return self._index.get(widget_id)

    def default_size(self, widget_id: str) -> WidgetSize:
        definition = self._index.get(widget_id)
        return definition.default_size if definition else WidgetSize()

    def __contains__(self, widget_id) -> bool:
        return isinstance(widget_id, str) and widget_id in self._index

    def __iter__(self) -> Iterator[WidgetDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"<WidgetCatalog {len(self)} widgets>"


# Order shown to a couple before any provider has customised it.
DEFAULT_WIDGET_ORDER: tuple[str, ...] = (
    "weekly-checkin",
    "love-languages",
    "gratitude",
    "shared-goals",
    "conversations",
    "love-map",
    "voice-memos",
    "calendar",
    "rituals",
)

DEFAULT_CATALOG = WidgetCatalog(
    WidgetDefinition(widget_id, label)
    for widget_id, label in (
        ("date-night", "Date Night Generator"),
        ("checkin-history", "Check-In History"),
        ("ai-suggestions", "AI Suggestions"),
        ("weekly-checkin", "Weekly Check-in"),
        ("love-languages", "Love Languages"),
        ("gratitude", "Gratitude Log"),
        ("shared-goals", "Shared Goals"),
        ("conversations", "Hold Me Tight"),
        ("love-map", "Love Map Quiz"),
        ("voice-memos", "Voice Memos"),
        ("calendar", "Shared Calendar"),
        ("rituals", "Rituals of Connection"),
        ("four-horsemen", "Four Horsemen"),
        ("demon-dialogues", "Demon Dialogues"),
        ("meditation", "Meditation Library"),
        ("intimacy", "Intimacy Mapping"),
        ("values", "Values & Vision"),
        ("parenting", "Parenting Partners"),
        ("therapist-thoughts", "Therapist Thoughts"),
        ("compatibility", "Couples Compatibility"),
        ("progress-timeline", "Progress Timeline"),
        ("growth-plan", "Growth Plan"),
        ("attachment", "Attachment Style"),
        ("enneagram", "Enneagram"),
        ("messages", "Messages"),
        ("echo-empathy", "Echo & Empathy"),
        ("conflict", "Conflict Resolution"),
        ("pause", "Pause Button"),
        ("journal", "Couple Journal"),
        ("mood", "Mood Tracker"),
        ("ifs", "IFS Exercises"),
        ("chores", "Chore Chart"),
        ("todos", "Shared To-Do List"),
        ("financial", "Financial Toolkit"),
        ("daily-tips", "Daily Tips"),
        ("reflection-prompts", "Reflection Prompts"),
    )
)
