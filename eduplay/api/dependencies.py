"""
FastAPI dependencies: store, Supabase-backed services and the current user.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from eduplay import messages
from eduplay.db.db_factory import DatabaseFactory
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.services.admin_service import AdminService
from eduplay.services.auth_service import AuthService
from eduplay.services.profile_service import ProfileService
from eduplay.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def get_store() -> DatabaseProvider:
    try:
        return DatabaseFactory.get_provider()
    except StoreError as e:
        logger.error(f"Store unavailable: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)


def get_auth_service() -> AuthService:
    try:
        return AuthService(DatabaseFactory.get_client(), DatabaseFactory.create_session_client)
    except StoreError as e:
        logger.error(f"Auth unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))


def get_storage_service() -> StorageService:
    try:
        return StorageService(DatabaseFactory.get_client())
    except StoreError as e:
        logger.error(f"Storage unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))


def get_admin_service(store: DatabaseProvider = Depends(get_store)) -> AdminService:
    return AdminService(store)


def get_profile_service(
    store: DatabaseProvider = Depends(get_store),
    storage: StorageService = Depends(get_storage_service),
) -> ProfileService:
    return ProfileService(store, storage)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return None


def get_current_user_optional(
    request: Request, auth: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """
    Get the current user from the bearer token (doesn't raise if not authenticated).

    Returns:
        ``{"id", "email"}`` if authenticated, None otherwise
    """
    token = _bearer_token(request)
    if not token:
        return None
    return auth.get_user(token)


def get_current_user(user: Optional[Dict[str, Any]] = Depends(get_current_user_optional)) -> Dict[str, Any]:
    """Current user, or 401 for anonymous requests."""
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_writer(user: Optional[Dict[str, Any]] = Depends(get_current_user_optional)) -> Dict[str, Any]:
    """Store writes are authentication-gated."""
    if not user:
        raise HTTPException(status_code=401, detail=messages.LOGIN_REQUIRED)
    return user
