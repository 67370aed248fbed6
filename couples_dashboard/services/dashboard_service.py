"""Resolve a couple's dashboard for a particular viewer."""
from __future__ import annotations

from typing import Optional

from ..catalog import WidgetCatalog
from .couple_layout_service import get_couple_layout
from .override_service import get_override
from .resolver import ResolvedWidget, resolve


def resolve_dashboard(couple_id: str, user_id: Optional[str], catalog: WidgetCatalog) -> list[ResolvedWidget]:
    """Load the layouts for ``couple_id`` and ``user_id`` and resolve them.

    An override that belongs to another couple is ignored, so a viewer
    only ever personalises their own couple's dashboard.
    """
    couple_layout = get_couple_layout(couple_id)
    override = get_override(user_id) if user_id else None
    if override is not None and override.couple_id != couple_id:
        override = None
    return resolve(couple_layout, override, catalog)
