"""Helpers for reading the caller's identity from the verified JWT.

Tokens are issued by the platform's session service; this app only
verifies them (via ``jwt_required``) and reads the ``sub`` identity
and the ``role`` claim.
"""
from __future__ import annotations

from flask_jwt_extended import get_jwt, get_jwt_identity

from ..models import Role

FORBIDDEN = ({"error": "Forbidden"}, 403)


def current_identity() -> str | None:
    identity = get_jwt_identity()
    return str(identity) if identity is not None else None


def is_therapist() -> bool:
    """Return True if the current user is a therapist."""
    return get_jwt().get("role") == Role.THERAPIST.value


def is_self(user_id: str) -> bool:
    """Return True if the current user matches the given ``user_id``."""
    return current_identity() == str(user_id)
