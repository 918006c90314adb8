"""
Health API - reports whether the content store is reachable and configured.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List, Optional
import logging

from eduplay import config
from eduplay.api.dependencies import get_store
from eduplay.db.db_interface import DatabaseProvider, StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for the health endpoint"""
    status: str
    provider: str
    missing_settings: List[str] = []
    error: Optional[str] = None


@router.get("/health", response_model=HealthResponse)
def health(store: DatabaseProvider = Depends(get_store)):
    """
    Ping the store.

    Returns:
        - status: 'ok' when the ping succeeded, 'degraded' otherwise
        - provider: the configured store provider
        - missing_settings: Supabase settings that are not set
        - error: the ping failure, if any
    """
    missing = config.missing_store_settings() if config.DATABASE_PROVIDER == "supabase" else []
    try:
        store.ping()
    except StoreError as e:
        logger.warning(f"Health check failed: {e}")
        return HealthResponse(status="degraded", provider=config.DATABASE_PROVIDER,
                              missing_settings=missing, error=str(e))
    return HealthResponse(status="ok", provider=config.DATABASE_PROVIDER, missing_settings=missing)
