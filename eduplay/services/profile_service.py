"""
Profile Service
Student profiles, avatar upload and the dashboard summary.
"""
import logging
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

from eduplay.config import AVATAR_BUCKET
from eduplay.db.db_interface import DatabaseProvider
from eduplay.models.schemas import Profile, ProfileUpdate, parse_row
from eduplay.services.catalog_service import subjects_for_profile
from eduplay.services.storage_service import StorageService

logger = logging.getLogger(__name__)


class ProfileService:
    """Reads and writes the profiles table (one row per auth identity)."""

    def __init__(self, store: DatabaseProvider, storage: Optional[StorageService] = None):
        self.store = store
        self.storage = storage

    def get_profile(self, user_id: str) -> Optional[Profile]:
        row = self.store.select_one("profiles", {"id": user_id})
        return parse_row(Profile, row) if row else None

    def save_profile(self, user_id: str, update: ProfileUpdate) -> Profile:
        values = {"id": user_id, **update.model_dump(), "updated_at": datetime.now(UTC)}
        row = self.store.upsert("profiles", values)
        logger.info(f"Profile saved for user {user_id}")
        return parse_row(Profile, row)

    def grade_names(self) -> List[str]:
        """Grade names offered by the profile form."""
        return [row["name"] for row in self.store.select("grades", columns="name")]

    def upload_avatar(self, user_id: str, filename: str, data: bytes, content_type: str = None) -> str:
        """Store the avatar as ``<user_id>.<ext>`` (replacing any previous one) and return its public URL."""
        if self.storage is None:
            raise RuntimeError("File storage is not configured")
        extension = filename.rsplit(".", 1)[-1] if "." in filename else "png"
        path = f"{user_id}.{extension}"
        self.storage.upload(AVATAR_BUCKET, path, data, content_type=content_type, upsert=True)
        url = self.storage.public_url(AVATAR_BUCKET, path)
        logger.info(f"Avatar uploaded for user {user_id}: {path}")
        return url

    def dashboard(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Profile summary plus the subjects of the profile's grade; None without a profile."""
        profile = self.get_profile(user_id)
        if profile is None:
            return None
        subjects = subjects_for_profile(self.store, profile)
        return {
            "name": profile.name or "User",
            "grade": profile.grade,
            "avatar_url": profile.avatar_url,
            "subjects": [s.model_dump() for s in subjects],
        }
