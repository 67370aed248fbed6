"""Shared pytest fixtures.

Each test gets a fresh application bound to an in-memory SQLite
database. Access tokens are minted locally with
``create_access_token``, standing in for the platform's session
service.
"""
from __future__ import annotations

import pytest
from flask_jwt_extended import create_access_token

from couples_dashboard import create_app, db

THERAPIST_ID = "therapist-1"
OTHER_THERAPIST_ID = "therapist-2"
PARTNER_ID = "user-a"
OTHER_PARTNER_ID = "user-b"
COUPLE_ID = "couple-1"


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _headers(identity: str, role: str) -> dict[str, str]:
    token = create_access_token(identity=identity, additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def therapist_headers(app):
    return _headers(THERAPIST_ID, "therapist")


@pytest.fixture
def other_therapist_headers(app):
    return _headers(OTHER_THERAPIST_ID, "therapist")


@pytest.fixture
def partner_headers(app):
    return _headers(PARTNER_ID, "client")


@pytest.fixture
def other_partner_headers(app):
    return _headers(OTHER_PARTNER_ID, "client")


@pytest.fixture
def catalog(app):
    return app.extensions["widget_catalog"]
