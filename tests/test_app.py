"""Application factory, configuration and seed tests."""
from __future__ import annotations

import pytest

from couples_dashboard import create_app
from couples_dashboard.catalog import DEFAULT_CATALOG
from couples_dashboard.models import LayoutTemplate

from seed.seed import PRESET_TEMPLATES, run_seeds


def test_health_endpoint(client) -> None:
    """Ensure the health check returns the expected response."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_default_catalog_is_used_without_config(catalog) -> None:
    assert catalog is DEFAULT_CATALOG
    assert len(catalog) == 36


def test_widget_catalog_from_config() -> None:
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "WIDGET_CATALOG": [
                {"id": "gratitude", "label": "Gratitude", "default_size": {"columns": 2, "rows": 1}},
                {"id": "calendar"},
            ],
        }
    )
    catalog = app.extensions["widget_catalog"]
    assert catalog.ids == ("gratitude", "calendar")
    assert catalog.default_size("gratitude").as_dict() == {"columns": 2, "rows": 1}
    assert catalog.get("calendar").label == "calendar"


def test_malformed_catalog_config_fails_start_up() -> None:
    with pytest.raises(ValueError):
        create_app(
            {
                "TESTING": True,
                "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
                "WIDGET_CATALOG": [{"id": "gratitude", "default_size": {"columns": 5, "rows": 1}}],
            }
        )


def test_seed_inserts_shared_presets_once(app) -> None:
    assert run_seeds(app) == len(PRESET_TEMPLATES)
    assert run_seeds(app) == 0
    starter = LayoutTemplate.query.filter_by(name="Essential Starter").one()
    assert starter.is_shared is True
    enabled = [w for w in starter.widget_order if starter.enabled_widgets[w]]
    assert enabled == PRESET_TEMPLATES[0]["widgets"]
