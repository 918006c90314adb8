from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from typing import Any, Dict, Optional
import logging

from eduplay import messages
from eduplay.api.dependencies import (
    get_auth_service,
    get_current_user,
    get_profile_service,
    get_store,
)
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.models.schemas import Credentials, ProfileUpdate, ResultState
from eduplay.services import catalog_service, content_service
from eduplay.services.auth_service import AuthError, AuthService
from eduplay.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Catalog and content
# ============================================================================

@router.get("/grades")
def list_grades(store: DatabaseProvider = Depends(get_store)):
    """Grades for the class selector, in id order."""
    try:
        return catalog_service.list_grades(store)
    except StoreError as e:
        logger.error(f"Error listing grades: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)


@router.get("/class/{standard}")
def class_subjects(standard: str, store: DatabaseProvider = Depends(get_store)):
    """Subjects of the grade named by a /class/<standard> route token."""
    result = catalog_service.subjects_for_standard(store, standard)
    logger.debug(f"Class {standard!r}: {result.state.value}, {len(result.subjects)} subjects")
    return result.model_dump(mode="json")


@router.get("/lessons/{subject}")
def lesson_contents(
    subject: str,
    class_name: Optional[str] = Query(default=None, alias="class"),
    store: DatabaseProvider = Depends(get_store),
):
    """
    Content list for a subject and class.

    The body always carries a state: 'loaded', 'empty' (nothing matched) or
    'failed' (the store call failed, returned with status 502).
    """
    result = content_service.resolve_content_list(store, class_name=class_name, subject=subject)
    if result.state == ResultState.FAILED:
        raise HTTPException(status_code=502, detail=result.message)
    return result.model_dump(by_alias=True, mode="json")


@router.get("/content/{content_id}")
def content_page(
    content_id: str,
    subject: Optional[str] = None,
    class_name: Optional[str] = Query(default=None, alias="class"),
    store: DatabaseProvider = Depends(get_store),
):
    """A single content item with the chapter sidebar of its subject/class."""
    if not content_id.strip():
        raise HTTPException(status_code=400, detail=messages.CONTENT_ID_MISSING)
    try:
        detail = content_service.content_detail(store, content_id, subject=subject, class_name=class_name)
    except StoreError as e:
        logger.error(f"Error loading content {content_id}: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)
    if detail is None:
        raise HTTPException(status_code=404, detail=messages.NO_CONTENT_FOUND)
    return detail.model_dump(by_alias=True, mode="json")


# ============================================================================
# Auth
# ============================================================================

@router.post("/auth/login")
def login(credentials: Credentials, auth: AuthService = Depends(get_auth_service)):
    try:
        return auth.sign_in(credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except StoreError as e:
        logger.error(f"Auth unavailable for sign-in: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/auth/signup")
def signup(credentials: Credentials, auth: AuthService = Depends(get_auth_service)):
    try:
        return auth.sign_up(credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error(f"Auth unavailable for sign-up: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/auth/oauth/{provider}")
def oauth_url(provider: str, redirect_to: Optional[str] = None, auth: AuthService = Depends(get_auth_service)):
    try:
        return {"url": auth.sign_in_with_oauth(provider, redirect_to=redirect_to)}
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error(f"Auth unavailable for OAuth: {e}")
        raise HTTPException(status_code=502, detail=str(e))


# ============================================================================
# Profile and dashboard
# ============================================================================

@router.get("/dashboard")
def dashboard(
    user: Dict[str, Any] = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        summary = profiles.dashboard(user["id"])
    except StoreError as e:
        logger.error(f"Error loading dashboard for {user['id']}: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)
    if summary is None:
        raise HTTPException(status_code=404, detail=messages.PROFILE_NOT_FOUND)
    return summary


@router.get("/profile")
def get_profile(
    user: Dict[str, Any] = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        profile = profiles.get_profile(user["id"])
    except StoreError as e:
        logger.error(f"Error loading profile for {user['id']}: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)
    if profile is None:
        raise HTTPException(status_code=404, detail=messages.PROFILE_NOT_FOUND)
    return profile.model_dump(mode="json")


@router.put("/profile")
def save_profile(
    update: ProfileUpdate,
    user: Dict[str, Any] = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        profile = profiles.save_profile(user["id"], update)
    except StoreError as e:
        logger.error(f"Error saving profile for {user['id']}: {e}")
        raise HTTPException(status_code=502, detail=messages.PROFILE_SAVE_FAILED)
    return {"message": messages.PROFILE_SAVED, "profile": profile.model_dump(mode="json")}


@router.get("/profile/grades")
def profile_grades(store: DatabaseProvider = Depends(get_store)):
    try:
        return ProfileService(store).grade_names()
    except StoreError as e:
        logger.error(f"Error loading grade names: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)


@router.post("/profile/avatar")
def upload_avatar(
    file: UploadFile = File(...),
    user: Dict[str, Any] = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        url = profiles.upload_avatar(user["id"], file.filename or "", file.file.read(), file.content_type)
    except StoreError as e:
        logger.error(f"Avatar upload failed for {user['id']}: {e}")
        raise HTTPException(status_code=502, detail=messages.AVATAR_UPLOAD_FAILED)
    return {"avatar_url": url}
