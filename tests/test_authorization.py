"""
tests/test_authorization.py
Unit tests for the role policy and bootstrap-admin assignment.
"""

import pytest

from services.auth.credentials import role_for_email
from shared.middleware.auth import is_authorized
from shared.models.models import UserRole


@pytest.mark.parametrize(
    "actor, required, allowed",
    [
        (UserRole.USER, UserRole.USER, True),
        (UserRole.ADMIN, UserRole.USER, True),
        (UserRole.ADMIN, UserRole.ADMIN, True),
        (UserRole.USER, UserRole.ADMIN, False),
        ("admin", "user", True),
        ("user", "admin", False),
    ],
)
def test_is_authorized(actor, required, allowed):
    assert is_authorized(actor, required) is allowed


def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        is_authorized("superuser", UserRole.USER)


def test_bootstrap_email_is_admin():
    assert role_for_email("admin@example.com") == UserRole.ADMIN


def test_other_emails_are_users():
    assert role_for_email("someone@example.com") == UserRole.USER
    assert role_for_email("admin@example.org") == UserRole.USER


def test_bootstrap_email_follows_settings(monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "BOOTSTRAP_ADMIN_EMAIL", "Boss@Corp.io")
    assert role_for_email("boss@corp.io") == UserRole.ADMIN
    assert role_for_email("admin@example.com") == UserRole.USER
