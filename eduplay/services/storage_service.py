import logging

from supabase import Client

from eduplay.db.db_interface import StoreError

logger = logging.getLogger(__name__)


class StorageService:
    """Supabase file storage (avatar images)."""

    def __init__(self, client: Client):
        self.client = client

    def upload(self, bucket: str, path: str, data: bytes, content_type: str = None, upsert: bool = True) -> None:
        options = {"upsert": "true" if upsert else "false"}
        if content_type:
            options["content-type"] = content_type
        try:
            self.client.storage.from_(bucket).upload(path, data, options)
        except Exception as e:
            logger.error(f"Upload of {bucket}/{path} failed: {e}")
            raise StoreError(f"Storage error: {e}") from e
        logger.debug(f"Uploaded {len(data)} bytes to {bucket}/{path}")

    def public_url(self, bucket: str, path: str) -> str:
        return self.client.storage.from_(bucket).get_public_url(path)
