import logging
from supabase import create_client, Client, ClientOptions
from eduplay import config
from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.db.query_cache import QueryCache
from eduplay.db.sql_provider import SQLProvider
from eduplay.db.supabase_provider import SupabaseProvider

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """Factory for creating the store provider and the Supabase client."""

    _instance = None
    _client = None

    @staticmethod
    def get_client() -> Client:
        """
        Get or create the shared Supabase client (also used for token checks and file storage).

        Missing connection settings are logged as a warning; if the client
        cannot be built from them the failure surfaces as a StoreError.
        """
        if DatabaseFactory._client is None:
            missing = config.missing_store_settings()
            if missing:
                logger.warning(f"Supabase settings not set: {', '.join(missing)}")
            try:
                DatabaseFactory._client = create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
            except Exception as e:
                logger.error(f"Could not create Supabase client: {e}")
                raise StoreError(f"Supabase client error: {e}") from e
        return DatabaseFactory._client

    @staticmethod
    def create_session_client() -> Client:
        """
        A new Supabase client for one sign-in, sign-up or OAuth flow.

        Signing in on a client rewrites its Authorization header to the
        user's token, so these flows never run on the shared store client.
        The session is neither persisted nor refreshed.
        """
        options = ClientOptions(persist_session=False, auto_refresh_token=False)
        try:
            return create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY, options=options)
        except Exception as e:
            logger.error(f"Could not create Supabase session client: {e}")
            raise StoreError(f"Supabase client error: {e}") from e

    @staticmethod
    def get_provider() -> DatabaseProvider:
        """
        Get or create the store provider selected by DATABASE_PROVIDER.

        Returns:
            DatabaseProvider: the provider wrapped in a read-through QueryCache
        """
        if DatabaseFactory._instance is None:
            provider_name = config.DATABASE_PROVIDER

            if provider_name == "supabase":
                logger.info("Using Supabase store (SupabaseProvider)")
                provider = SupabaseProvider(
                    url=config.SUPABASE_URL,
                    key=config.SUPABASE_ANON_KEY,
                    client=DatabaseFactory.get_client(),
                )
            elif provider_name == "sql":
                logger.info(f"Using SQL store (SQLProvider) at {config.DATABASE_URL}")
                provider = SQLProvider(config.DATABASE_URL)
            else:
                raise ValueError(f"Unsupported database provider: {provider_name}")

            provider.init_db()
            DatabaseFactory._instance = QueryCache(provider, default_ttl=config.QUERY_CACHE_TTL)

        return DatabaseFactory._instance

    @staticmethod
    def reset() -> None:
        """Forget the cached provider and client (used by tests)."""
        DatabaseFactory._instance = None
        DatabaseFactory._client = None
