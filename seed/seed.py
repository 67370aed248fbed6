"""Seed script for initial data.

Running this script inserts the preset layout templates as shared
templates so every therapist can apply them. Each preset enables only
its own widgets, in the listed order; the remaining catalog widgets are
stored as disabled. It can be executed with
``python -m seed.seed`` from the repository root.
"""
from __future__ import annotations

from couples_dashboard import create_app, db
from couples_dashboard.catalog import DEFAULT_CATALOG
from couples_dashboard.models import LayoutTemplate

# Owner recorded on templates that ship with the platform.
SYSTEM_THERAPIST_ID = "system"

PRESET_TEMPLATES = [
    {
        "name": "Essential Starter",
        "description": "Core features for new couples starting therapy",
        "widgets": ["weekly-checkin", "love-languages", "gratitude", "shared-goals", "therapist-thoughts"],
    },
    {
        "name": "Communication Focus",
        "description": "Emphasis on improving partner communication",
        "widgets": ["messages", "voice-memos", "echo-empathy", "conversations", "pause", "weekly-checkin"],
    },
    {
        "name": "Deep Assessment",
        "description": "Comprehensive personality and compatibility analysis",
        "widgets": ["love-languages", "attachment", "enneagram", "love-map", "compatibility", "weekly-checkin"],
    },
    {
        "name": "AI-Enhanced",
        "description": "Leverage AI for personalized recommendations",
        "widgets": ["date-night", "ai-suggestions", "growth-plan", "daily-tips", "weekly-checkin"],
    },
    {
        "name": "Full Experience",
        "description": "All features enabled for comprehensive support",
        "widgets": list(DEFAULT_CATALOG.ids),
    },
]


def build_preset(preset: dict) -> LayoutTemplate:
    """Turn a preset definition into a shared ``LayoutTemplate``."""
    enabled = list(preset["widgets"])
    rest = [widget_id for widget_id in DEFAULT_CATALOG.ids if widget_id not in enabled]
    return LayoutTemplate(
        therapist_id=SYSTEM_THERAPIST_ID,
        name=preset["name"],
        description=preset["description"],
        widget_order=enabled + rest,
        enabled_widgets={widget_id: widget_id in enabled for widget_id in enabled + rest},
        widget_sizes={},
        widget_content_overrides={},
        is_shared=True,
        usage_count=0,
    )


def run_seeds(app=None) -> int:
    """Insert any preset templates that are not already present."""
    app = app or create_app()
    with app.app_context():
        existing = {
            t.name for t in LayoutTemplate.query.filter_by(therapist_id=SYSTEM_THERAPIST_ID).all()
        }
        templates = [build_preset(p) for p in PRESET_TEMPLATES if p["name"] not in existing]
        db.session.add_all(templates)
        db.session.commit()
        print(f"Seeded {len(templates)} layout templates.")
        return len(templates)


if __name__ == "__main__":
    run_seeds()
