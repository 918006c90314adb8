"""
Admin API
Content management endpoints. Every write requires an authenticated user.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict
import logging

from eduplay import messages
from eduplay.api.dependencies import get_admin_service, get_store, require_writer
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.models.schemas import ChapterRequest, ContentForm, NameRequest, SubjectRequest
from eduplay.services.admin_service import AdminService
from eduplay.services.cascade_delete import CascadeDeleter, CascadeLog, CascadeResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/state")
def admin_state(admin: AdminService = Depends(get_admin_service)):
    """Flat lists of grades, subjects, chapters and contents."""
    try:
        return admin.load_state().model_dump(by_alias=True, mode="json")
    except StoreError as e:
        logger.error(f"Error loading admin state: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)


@router.get("/tree")
def admin_tree(admin: AdminService = Depends(get_admin_service)):
    """Grades with their nested subjects, chapters and contents."""
    try:
        return admin.tree(admin.load_state())
    except StoreError as e:
        logger.error(f"Error loading admin tree: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)


# ============================================================================
# Grades, subjects, chapters
# ============================================================================

def _create(action, description: str):
    try:
        return action().model_dump()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        logger.error(f"Failed to add {description}: {e}")
        raise HTTPException(status_code=502, detail=f"{description} যোগ করতে ব্যর্থ: {e}")


@router.post("/grades")
def add_grade(
    request: NameRequest,
    user: Dict[str, Any] = Depends(require_writer),
    admin: AdminService = Depends(get_admin_service),
):
    return _create(lambda: admin.add_grade(request.name), "Grade")


@router.post("/subjects")
def add_subject(
    request: SubjectRequest,
    user: Dict[str, Any] = Depends(require_writer),
    admin: AdminService = Depends(get_admin_service),
):
    return _create(lambda: admin.add_subject(request.name, request.grade_id), "Subject")


@router.post("/chapters")
def add_chapter(
    request: ChapterRequest,
    user: Dict[str, Any] = Depends(require_writer),
    admin: AdminService = Depends(get_admin_service),
):
    return _create(lambda: admin.add_chapter(request.name, request.grade_id, request.subject_id), "Chapter")


# ============================================================================
# Contents
# ============================================================================

@router.post("/contents")
def add_content(
    form: ContentForm,
    user: Dict[str, Any] = Depends(require_writer),
    admin: AdminService = Depends(get_admin_service),
):
    try:
        content = admin.add_content(form)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        logger.error(f"Failed to add content: {e}")
        raise HTTPException(status_code=502, detail=messages.SAVE_FAILED)
    return {"message": messages.CONTENT_ADDED, "content": content.model_dump(by_alias=True, mode="json")}


@router.put("/contents/{content_id}")
def update_content(
    content_id: str,
    form: ContentForm,
    user: Dict[str, Any] = Depends(require_writer),
    admin: AdminService = Depends(get_admin_service),
):
    try:
        content = admin.update_content(content_id, form)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.error(f"Update error for content {content_id}: {e}")
        raise HTTPException(status_code=502, detail=f"Update error: {e}")
    return {"message": messages.CONTENT_UPDATED, "content": content.model_dump(by_alias=True, mode="json")}


@router.delete("/contents/{content_id}")
def delete_content(
    content_id: str,
    user: Dict[str, Any] = Depends(require_writer),
    admin: AdminService = Depends(get_admin_service),
):
    try:
        admin.delete_content(content_id)
    except StoreError as e:
        logger.error(f"Delete error for content {content_id}: {e}")
        raise HTTPException(status_code=502, detail=messages.SAVE_FAILED)
    return {"message": messages.CONTENT_DELETED, "id": content_id}


@router.get("/contents/{content_id}/form")
def content_edit_form(content_id: str, admin: AdminService = Depends(get_admin_service)):
    """Form defaults for editing a content row."""
    try:
        return admin.edit_form_for(content_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.error(f"Error loading content {content_id} for editing: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)


# ============================================================================
# Cascading deletes
# ============================================================================

def _cascade(admin: AdminService, run) -> Dict[str, Any]:
    """Run a cascade and return its result with the reconciled admin snapshot."""
    try:
        state = admin.load_state()
    except StoreError as e:
        logger.error(f"Error loading admin state before cascade: {e}")
        raise HTTPException(status_code=502, detail=messages.LOAD_FAILED)

    result: CascadeResult = run()
    body = result.model_dump(mode="json")
    if result.log is not None:
        body["state"] = state.reconcile(result.log).model_dump(by_alias=True, mode="json")
    else:
        body["state"] = state.model_dump(by_alias=True, mode="json")
    if result.status == "partial":
        body["message"] = messages.SAVE_FAILED
    return body


@router.delete("/grades/{grade_id}")
def delete_grade(
    grade_id: int,
    confirm: bool = False,
    user: Dict[str, Any] = Depends(require_writer),
    store: DatabaseProvider = Depends(get_store),
    admin: AdminService = Depends(get_admin_service),
):
    deleter = CascadeDeleter(store, confirm=lambda message: confirm)
    return _cascade(admin, lambda: deleter.delete_grade(grade_id))


@router.delete("/subjects/{subject_id}")
def delete_subject(
    subject_id: int,
    confirm: bool = False,
    user: Dict[str, Any] = Depends(require_writer),
    store: DatabaseProvider = Depends(get_store),
    admin: AdminService = Depends(get_admin_service),
):
    deleter = CascadeDeleter(store, confirm=lambda message: confirm)
    return _cascade(admin, lambda: deleter.delete_subject(subject_id))


@router.delete("/chapters/{chapter_id}")
def delete_chapter(
    chapter_id: int,
    confirm: bool = False,
    user: Dict[str, Any] = Depends(require_writer),
    store: DatabaseProvider = Depends(get_store),
    admin: AdminService = Depends(get_admin_service),
):
    deleter = CascadeDeleter(store, confirm=lambda message: confirm)
    return _cascade(admin, lambda: deleter.delete_chapter(chapter_id))


@router.post("/cascades/resume")
def resume_cascade(
    log: CascadeLog,
    user: Dict[str, Any] = Depends(require_writer),
    store: DatabaseProvider = Depends(get_store),
    admin: AdminService = Depends(get_admin_service),
):
    """Roll a partially applied cascade forward from its failed step."""
    try:
        return _cascade(admin, lambda: CascadeDeleter(store).resume(log))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
