"""Tests for the couple layout store and its routes."""
from __future__ import annotations

from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from couples_dashboard import db
from couples_dashboard.catalog import DEFAULT_WIDGET_ORDER
from couples_dashboard.errors import DataAccessError
from couples_dashboard.models import CoupleLayout
from couples_dashboard.services import get_couple_layout, patch_couple_layout, upsert_couple_layout

from conftest import COUPLE_ID, THERAPIST_ID


def test_missing_layout_returns_default(app) -> None:
    layout = get_couple_layout(COUPLE_ID)
    assert layout.couple_id == COUPLE_ID
    assert layout.widget_order == list(DEFAULT_WIDGET_ORDER)
    assert all(layout.enabled_widgets[w] for w in DEFAULT_WIDGET_ORDER)
    assert layout.widget_sizes == {}
    assert layout.widget_content_overrides == {}
    assert CoupleLayout.query.count() == 0


def test_upsert_new_layout_fills_omitted_fields_with_defaults(app) -> None:
    layout = upsert_couple_layout(COUPLE_ID, {"widget_order": ["gratitude", "calendar"]})
    assert layout.widget_order == ["gratitude", "calendar"]
    assert layout.enabled_widgets == {w: True for w in DEFAULT_WIDGET_ORDER}
    assert layout.updated_at is not None


def test_upsert_keeps_existing_values_for_omitted_fields(app) -> None:
    upsert_couple_layout(
        COUPLE_ID,
        {"therapist_id": THERAPIST_ID, "widget_sizes": {"gratitude": {"columns": 2, "rows": 1}}},
    )
    first_stamp = get_couple_layout(COUPLE_ID).updated_at
    layout = upsert_couple_layout(COUPLE_ID, {"enabled_widgets": {"gratitude": False}})
    assert layout.therapist_id == THERAPIST_ID
    assert layout.widget_sizes == {"gratitude": {"columns": 2, "rows": 1}}
    # POST replaces the map whole
    assert layout.enabled_widgets == {"gratitude": False}
    assert layout.updated_at >= first_stamp
    assert CoupleLayout.query.count() == 1


def test_patch_merges_map_fields(app) -> None:
    upsert_couple_layout(COUPLE_ID, {"enabled_widgets": {"gratitude": False, "calendar": True}})
    layout = patch_couple_layout(COUPLE_ID, {"enabled_widgets": {"calendar": False, "rituals": True}})
    assert layout.enabled_widgets == {"gratitude": False, "calendar": False, "rituals": True}


def test_failed_write_surfaces_data_access_error(app) -> None:
    with mock.patch.object(db.session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("down"))):
        with pytest.raises(DataAccessError):
            upsert_couple_layout(COUPLE_ID, {"widget_order": ["gratitude"]})


def test_get_route_returns_default_layout(client, partner_headers) -> None:
    response = client.get(f"/api/dashboard-layout/couple/{COUPLE_ID}", headers=partner_headers)
    assert response.status_code == 200
    body = response.get_json()
    assert body["couple_id"] == COUPLE_ID
    assert body["widget_order"] == list(DEFAULT_WIDGET_ORDER)
    assert body["widget_content_overrides"] == {}


def test_post_route_requires_therapist(client, partner_headers) -> None:
    response = client.post(
        f"/api/dashboard-layout/couple/{COUPLE_ID}",
        json={"widget_order": ["gratitude"]},
        headers=partner_headers,
    )
    assert response.status_code == 403


def test_post_route_saves_layout(client, therapist_headers) -> None:
    response = client.post(
        f"/api/dashboard-layout/couple/{COUPLE_ID}",
        json={
            "widget_order": ["calendar", "gratitude"],
            "enabled_widgets": {"calendar": True},
            "widget_sizes": {"calendar": {"columns": 3, "rows": 2}},
            "widget_content_overrides": {"calendar": {"title": "Dates"}},
        },
        headers=therapist_headers,
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["therapist_id"] == THERAPIST_ID
    assert body["widget_sizes"] == {"calendar": {"columns": 3, "rows": 2}}
    assert body["widget_content_overrides"] == {"calendar": {"title": "Dates"}}


def test_post_route_rejects_malformed_size(client, therapist_headers) -> None:
    response = client.post(
        f"/api/dashboard-layout/couple/{COUPLE_ID}",
        json={"widget_sizes": {"calendar": {"columns": 4, "rows": 1}}},
        headers=therapist_headers,
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_routes_require_a_token(client) -> None:
    response = client.get(f"/api/dashboard-layout/couple/{COUPLE_ID}")
    assert response.status_code == 401


def test_widgets_route_lists_catalog(client, partner_headers, catalog) -> None:
    response = client.get("/api/dashboard-layout/widgets", headers=partner_headers)
    assert response.status_code == 200
    body = response.get_json()
    assert [entry["id"] for entry in body] == list(catalog.ids)
    assert body[0]["default_size"] == {"columns": 1, "rows": 1}


def test_resolved_route_applies_viewer_override(client, therapist_headers, partner_headers) -> None:
    client.post(
        f"/api/dashboard-layout/couple/{COUPLE_ID}",
        json={"widget_order": ["gratitude", "calendar"], "enabled_widgets": {"calendar": False}},
        headers=therapist_headers,
    )
    client.put(
        "/api/dashboard-layout/user/user-a/hide-widget",
        json={"widget_id": "gratitude", "couple_id": COUPLE_ID},
        headers=partner_headers,
    )
    response = client.get(f"/api/dashboard-layout/couple/{COUPLE_ID}/resolved", headers=partner_headers)
    assert response.status_code == 200
    ids = [w["widget_id"] for w in response.get_json()["widgets"]]
    assert "gratitude" not in ids
    assert "calendar" not in ids
    assert ids[0] == "date-night"


def test_resolved_route_forbids_other_users(client, other_partner_headers) -> None:
    response = client.get(
        f"/api/dashboard-layout/couple/{COUPLE_ID}/resolved?user_id=user-a",
        headers=other_partner_headers,
    )
    assert response.status_code == 403
