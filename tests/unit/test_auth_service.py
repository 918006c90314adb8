import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from eduplay.db.db_interface import StoreError
from eduplay.services.auth_service import AuthError, AuthService

pytestmark = pytest.mark.unit


def _auth_response(user_id="u1", email="kid@example.com", token="tok"):
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        session=SimpleNamespace(access_token=token, refresh_token="refresh"),
    )


def _service(shared=None, session=None):
    """AuthService whose per-call clients are all ``session``."""
    shared = shared or MagicMock()
    session = session or MagicMock()
    factory = MagicMock(return_value=session)
    return AuthService(shared, factory), shared, session, factory


class TestAuthService:

    def test_get_user(self):
        service, shared, _, factory = _service()
        shared.auth.get_user.return_value = _auth_response()

        assert service.get_user("tok") == {"id": "u1", "email": "kid@example.com"}
        shared.auth.get_user.assert_called_once_with("tok")
        factory.assert_not_called()

    def test_rejected_token_is_anonymous(self):
        service, shared, _, _ = _service()
        shared.auth.get_user.side_effect = Exception("invalid JWT")

        assert service.get_user("bad") is None

    def test_empty_token_skips_the_call(self):
        service, shared, _, _ = _service()
        assert service.get_user("") is None
        shared.auth.get_user.assert_not_called()

    def test_sign_in(self):
        service, _, session, _ = _service()
        session.auth.sign_in_with_password.return_value = _auth_response()

        result = service.sign_in("kid@example.com", "secret")

        session.auth.sign_in_with_password.assert_called_once_with({"email": "kid@example.com", "password": "secret"})
        assert result == {
            "user_id": "u1",
            "email": "kid@example.com",
            "access_token": "tok",
            "refresh_token": "refresh",
        }

    def test_sign_in_leaves_the_shared_client_alone(self):
        shared = MagicMock()
        shared.options.headers = {"Authorization": "Bearer anon-key"}
        service, _, session, _ = _service(shared=shared)
        session.auth.sign_in_with_password.return_value = _auth_response(token="JWT-OF-STUDENT-A")

        service.sign_in("a@example.com", "secret")

        shared.auth.sign_in_with_password.assert_not_called()
        assert shared.options.headers["Authorization"] == "Bearer anon-key"

    def test_every_sign_in_gets_its_own_client(self):
        first, second = MagicMock(), MagicMock()
        first.auth.sign_in_with_password.return_value = _auth_response(user_id="a")
        second.auth.sign_in_with_password.return_value = _auth_response(user_id="b")
        service = AuthService(MagicMock(), MagicMock(side_effect=[first, second]))

        assert service.sign_in("a@example.com", "x")["user_id"] == "a"
        assert service.sign_in("b@example.com", "y")["user_id"] == "b"

    def test_sign_in_failure(self):
        service, _, session, _ = _service()
        session.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with pytest.raises(AuthError, match="Invalid login credentials"):
            service.sign_in("kid@example.com", "wrong")

    def test_unbuildable_client_is_a_store_error(self):
        service = AuthService(MagicMock(), MagicMock(side_effect=StoreError("Supabase client error")))

        with pytest.raises(StoreError):
            service.sign_in("kid@example.com", "secret")

    def test_sign_up_without_session(self):
        # Email confirmation pending: no session yet
        service, shared, session, _ = _service()
        session.auth.sign_up.return_value = SimpleNamespace(user=SimpleNamespace(id="u2", email="new@example.com"), session=None)

        result = service.sign_up("new@example.com", "secret")

        assert result["user_id"] == "u2"
        assert result["access_token"] is None
        shared.auth.sign_up.assert_not_called()

    def test_oauth_url(self):
        service, _, session, _ = _service()
        session.auth.sign_in_with_oauth.return_value = SimpleNamespace(url="https://accounts.google.com/o/oauth2")

        url = service.sign_in_with_oauth("google", redirect_to="https://eduplay.example/dashboard")

        assert url == "https://accounts.google.com/o/oauth2"
        session.auth.sign_in_with_oauth.assert_called_once_with(
            {"provider": "google", "options": {"redirect_to": "https://eduplay.example/dashboard"}}
        )
