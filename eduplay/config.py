import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment-specific configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

if ENVIRONMENT == "development":
    load_dotenv(".env.development")
elif ENVIRONMENT == "production":
    load_dotenv(".env.production")
else:
    load_dotenv()  # Fallback to default .env

# Supabase settings - the two values the remote store connection needs
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Store provider: 'supabase' for the hosted store, 'sql' for a local SQLAlchemy database
DATABASE_PROVIDER = os.getenv("DATABASE_PROVIDER", "supabase").lower()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eduplay_dev.db")

# File storage
AVATAR_BUCKET = os.getenv("AVATAR_BUCKET", "avatars")

# Taxonomy settings
DEFAULT_GRADE_NAME = os.getenv("DEFAULT_GRADE_NAME", "Grade 5")

# Query cache settings (seconds)
QUERY_CACHE_TTL = int(os.getenv("QUERY_CACHE_TTL", "60"))

APP_TITLE = os.getenv("APP_TITLE", "EduPlay Learning API")

# Debug mode - logs full requests and responses
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"


def missing_store_settings() -> list:
    """Return the names of required Supabase settings that are not set."""
    return [name for name, value in {
        "SUPABASE_URL": SUPABASE_URL,
        "SUPABASE_ANON_KEY": SUPABASE_ANON_KEY,
    }.items() if not value]
