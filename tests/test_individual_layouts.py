"""Tests for the individual override store and its routes."""
from __future__ import annotations

import pytest

from couples_dashboard.errors import NotFoundError, ValidationError
from couples_dashboard.models import IndividualLayoutOverride
from couples_dashboard.services import (
    get_override,
    reset_override,
    set_widget_hidden,
    toggle_personal_layout,
    upsert_override,
)

from conftest import COUPLE_ID, PARTNER_ID


def test_absent_override_is_none(app) -> None:
    assert get_override(PARTNER_ID) is None


def test_upsert_replaces_whole_record(app) -> None:
    upsert_override(
        PARTNER_ID,
        {
            "couple_id": COUPLE_ID,
            "use_personal_layout": True,
            "widget_order": ["calendar"],
            "enabled_widgets": {"calendar": True},
        },
    )
    override = upsert_override(PARTNER_ID, {"widget_sizes": {"calendar": {"columns": 2, "rows": 1}}})
    assert override.couple_id == COUPLE_ID
    assert override.use_personal_layout is False
    assert override.widget_order is None
    assert override.enabled_widgets is None
    assert override.widget_sizes == {"calendar": {"columns": 2, "rows": 1}}


def test_upsert_requires_couple_for_new_record(app) -> None:
    with pytest.raises(ValidationError):
        upsert_override(PARTNER_ID, {"use_personal_layout": True})


def test_toggle_requires_existing_record(app) -> None:
    with pytest.raises(NotFoundError):
        toggle_personal_layout(PARTNER_ID, True)


def test_toggle_keeps_hidden_widgets(app) -> None:
    set_widget_hidden(PARTNER_ID, "gratitude", True, COUPLE_ID)
    toggle_personal_layout(PARTNER_ID, True)
    override = toggle_personal_layout(PARTNER_ID, False)
    assert override.hidden_widgets == ["gratitude"]
    assert override.use_personal_layout is False


def test_hiding_twice_stores_widget_once(app) -> None:
    set_widget_hidden(PARTNER_ID, "w1", True, COUPLE_ID)
    override = set_widget_hidden(PARTNER_ID, "w1", True, COUPLE_ID)
    assert override.hidden_widgets == ["w1"]


def test_unhide_removes_widget_and_keeps_other_fields(app) -> None:
    upsert_override(
        PARTNER_ID,
        {"couple_id": COUPLE_ID, "use_personal_layout": True, "widget_order": ["calendar"], "hidden_widgets": ["a", "b"]},
    )
    override = set_widget_hidden(PARTNER_ID, "a", False)
    assert override.hidden_widgets == ["b"]
    assert override.widget_order == ["calendar"]
    assert override.use_personal_layout is True


def test_unhide_without_record_is_noop(app) -> None:
    assert set_widget_hidden(PARTNER_ID, "w1", False) is None
    assert IndividualLayoutOverride.query.count() == 0


def test_hide_without_record_needs_couple(app) -> None:
    with pytest.raises(ValidationError):
        set_widget_hidden(PARTNER_ID, "w1", True)


def test_reset_deletes_record_and_tolerates_absence(app) -> None:
    set_widget_hidden(PARTNER_ID, "w1", True, COUPLE_ID)
    reset_override(PARTNER_ID)
    assert get_override(PARTNER_ID) is None
    reset_override(PARTNER_ID)


def test_get_route_returns_default_shape(client, partner_headers) -> None:
    response = client.get(f"/api/dashboard-layout/user/{PARTNER_ID}", headers=partner_headers)
    assert response.status_code == 200
    assert response.get_json() == {
        "user_id": PARTNER_ID,
        "couple_id": None,
        "use_personal_layout": False,
        "widget_order": None,
        "enabled_widgets": None,
        "widget_sizes": None,
        "hidden_widgets": [],
    }


def test_other_partner_cannot_read_override(client, other_partner_headers) -> None:
    response = client.get(f"/api/dashboard-layout/user/{PARTNER_ID}", headers=other_partner_headers)
    assert response.status_code == 403


def test_therapist_can_save_override(client, therapist_headers) -> None:
    response = client.post(
        f"/api/dashboard-layout/user/{PARTNER_ID}",
        json={"couple_id": COUPLE_ID, "use_personal_layout": True, "widget_order": ["calendar", "gratitude"]},
        headers=therapist_headers,
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["widget_order"] == ["calendar", "gratitude"]
    assert body["hidden_widgets"] == []


def test_toggle_route_returns_404_without_record(client, partner_headers) -> None:
    response = client.patch(
        f"/api/dashboard-layout/user/{PARTNER_ID}/toggle",
        json={"use_personal_layout": True},
        headers=partner_headers,
    )
    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NOT_FOUND"


def test_hide_route_requires_widget_id(client, partner_headers) -> None:
    response = client.put(
        f"/api/dashboard-layout/user/{PARTNER_ID}/hide-widget",
        json={"couple_id": COUPLE_ID},
        headers=partner_headers,
    )
    assert response.status_code == 400
    assert "widget_id" in response.get_json()["error"]["fields"]


def test_hide_then_reset_route(client, partner_headers) -> None:
    hide = client.put(
        f"/api/dashboard-layout/user/{PARTNER_ID}/hide-widget",
        json={"widget_id": "gratitude", "hidden": True, "couple_id": COUPLE_ID},
        headers=partner_headers,
    )
    assert hide.status_code == 200
    assert hide.get_json()["hidden_widgets"] == ["gratitude"]

    reset = client.delete(f"/api/dashboard-layout/user/{PARTNER_ID}", headers=partner_headers)
    assert reset.status_code == 200
    assert reset.get_json()["success"] is True

    after = client.get(f"/api/dashboard-layout/user/{PARTNER_ID}", headers=partner_headers)
    assert after.get_json()["hidden_widgets"] == []
