"""
Auth Service
Thin wrapper over Supabase auth: password sign-in / sign-up, OAuth redirect
and resolving a bearer token to the current identity.
"""
import logging
from typing import Any, Callable, Dict, Optional

from supabase import Client

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when Supabase rejects a sign-in, sign-up or access token."""


def _session_payload(response) -> Dict[str, Any]:
    user = getattr(response, "user", None)
    session = getattr(response, "session", None)
    return {
        "user_id": user.id if user else None,
        "email": user.email if user else None,
        "access_token": session.access_token if session else None,
        "refresh_token": session.refresh_token if session else None,
    }


class AuthService:
    """
    Authentication operations against the Supabase auth API.

    ``client`` is the shared client and only verifies access tokens.
    Sign-in, sign-up and OAuth run on a client from ``session_client``,
    one per call, so a session never lands on the shared client.
    """

    def __init__(self, client: Client, session_client: Callable[[], Client]):
        self.client = client
        self.session_client = session_client

    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        """Return ``{"id", "email"}`` for a valid access token, None otherwise."""
        if not access_token:
            return None
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.warning(f"Access token rejected: {e}")
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return {"id": user.id, "email": user.email}

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        auth = self.session_client().auth
        try:
            response = auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.error(f"Sign-in failed for {email}: {e}")
            raise AuthError(str(e)) from e
        logger.info(f"User {email} signed in")
        return _session_payload(response)

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        auth = self.session_client().auth
        try:
            response = auth.sign_up({"email": email, "password": password})
        except Exception as e:
            logger.error(f"Sign-up failed for {email}: {e}")
            raise AuthError(str(e)) from e
        logger.info(f"User {email} signed up")
        return _session_payload(response)

    def sign_in_with_oauth(self, provider: str, redirect_to: Optional[str] = None) -> str:
        """Return the provider URL the browser has to be sent to."""
        credentials: Dict[str, Any] = {"provider": provider}
        if redirect_to:
            credentials["options"] = {"redirect_to": redirect_to}
        auth = self.session_client().auth
        try:
            response = auth.sign_in_with_oauth(credentials)
        except Exception as e:
            logger.error(f"OAuth sign-in with {provider} failed: {e}")
            raise AuthError(str(e)) from e
        return response.url
