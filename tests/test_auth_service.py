from __future__ import annotations

import pytest

from brickbook.db.gateway import AuthError
from brickbook.services.auth_service import AuthService, require_email
from brickbook.services.common import ServiceError
from brickbook.utils.validators import ValidationError


@pytest.fixture
def auth(store):
    return AuthService(store)


def test_fresh_database_needs_setup(auth):
    assert auth.needs_setup()
    assert auth.current_user() is None


def test_create_first_user_signs_in(auth, store):
    session = auth.create_first_user(" Owner@Example.com ", "secret1")
    assert session.user.email == "owner@example.com"
    assert session.user.role == "admin"
    assert not auth.needs_setup()
    assert auth.current_user() == session.user
    assert store.current_session() == session


def test_second_setup_rejected(auth):
    auth.create_first_user("owner@example.com", "secret1")
    with pytest.raises(ServiceError):
        auth.create_first_user("other@example.com", "secret2")


def test_short_password_rejected(auth):
    with pytest.raises(ValidationError):
        auth.create_first_user("owner@example.com", "123")
    assert auth.needs_setup()


@pytest.mark.parametrize("email", ["", "   ", "owner", "owner@", "a b@c.d"])
def test_invalid_email(email):
    with pytest.raises(ValidationError):
        require_email(email)


def test_password_sign_in_and_out(auth):
    auth.create_first_user("owner@example.com", "secret1")
    auth.sign_out()
    assert auth.current_user() is None
    with pytest.raises(AuthError):
        auth.sign_in("owner@example.com", "wrong-pw")
    session = auth.sign_in("OWNER@example.com", "secret1")
    assert auth.current_user() == session.user


def test_login_link_flow(auth, sent_links):
    auth.create_first_user("owner@example.com", "secret1")
    auth.sign_out()
    auth.send_login_link("owner@example.com")
    [(email, code)] = sent_links
    assert email == "owner@example.com"
    session = auth.verify_login_link("owner@example.com", code)
    assert session.user.email == "owner@example.com"


def test_blank_code_rejected(auth):
    with pytest.raises(ValidationError):
        auth.verify_login_link("owner@example.com", "  ")
