import logging
from datetime import date, datetime
from typing import List, Dict, Any, Optional, Sequence
from supabase import create_client, Client
from eduplay.db.db_interface import DatabaseProvider, StoreError

logger = logging.getLogger(__name__)


def _apply_filters(query, filters: Optional[Dict[str, Any]], in_filters: Optional[Dict[str, Sequence[Any]]]):
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    for column, values in (in_filters or {}).items():
        query = query.in_(column, list(values))
    return query


def _jsonable(values: Dict[str, Any]) -> Dict[str, Any]:
    """Supabase takes JSON bodies, so datetimes go over the wire as ISO strings."""
    return {k: v.isoformat() if isinstance(v, (datetime, date)) else v for k, v in values.items()}


class SupabaseProvider(DatabaseProvider):
    """Supabase implementation of the store provider."""

    def __init__(self, url: str, key: str, client: Optional[Client] = None):
        self.url = url
        self.key = key
        self.client = client or create_client(url, key)

    def init_db(self) -> None:
        """
        Check the Supabase connection.

        Tables live in the Supabase project (see migrations/ for the schema);
        this only verifies that 'grades' can be read.
        """
        logger.info("Connected to Supabase at %s", self.url)
        try:
            self.ping()
            logger.info("Successfully connected to Supabase table 'grades'")
        except StoreError as e:
            logger.error(f"Failed to connect to Supabase: {e}")
            logger.warning("You may need to create the grades/subjects/chapters/contents/profiles tables")

    def _execute(self, query, action: str, table: str):
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Error during {action} on Supabase table '{table}': {e}")
            raise StoreError(f"Database error: {e}") from e

        if hasattr(response, 'error') and response.error:
            logger.error(f"Supabase error during {action} on '{table}': {response.error}")
            raise StoreError(f"Supabase error: {response.error}")
        return response

    def ping(self) -> None:
        query = self.client.table('grades').select('id', count='exact').limit(1)
        self._execute(query, "ping", 'grades')

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Sequence[Any]]] = None,
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query = _apply_filters(self.client.table(table).select(columns), filters, in_filters)
        if order_by:
            query = query.order(order_by, desc=desc)
        if limit is not None:
            query = query.limit(limit)

        response = self._execute(query, "select", table)
        data = response.data or []
        logger.debug(f"Retrieved {len(data)} rows from '{table}' (filters={filters}, in={in_filters})")
        return data

    def select_one(self, table: str, filters: Dict[str, Any], columns: str = "*") -> Optional[Dict[str, Any]]:
        # Two rows are enough to tell "one" from "many"
        rows = self.select(table, columns=columns, filters=filters, limit=2)
        if len(rows) > 1:
            raise StoreError(f"Expected at most one row in '{table}' for {filters}, got several")
        return rows[0] if rows else None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        response = self._execute(self.client.table(table).insert(_jsonable(values)), "insert", table)
        logger.debug(f"Inserted row into '{table}'")
        return response.data[0] if response.data else dict(values)

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        query = _apply_filters(self.client.table(table).update(_jsonable(values)), filters, None)
        response = self._execute(query, "update", table)
        return response.data or []

    def upsert(self, table: str, values: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
        query = self.client.table(table).upsert(_jsonable(values), on_conflict=key)
        response = self._execute(query, "upsert", table)
        return response.data[0] if response.data else dict(values)

    def delete(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Sequence[Any]]] = None,
    ) -> Optional[int]:
        if not filters and not in_filters:
            raise StoreError(f"Refusing to delete from '{table}' without a filter")
        query = _apply_filters(self.client.table(table).delete(), filters, in_filters)
        response = self._execute(query, "delete", table)
        count = len(response.data) if response.data is not None else None
        logger.debug(f"Deleted {count} rows from '{table}' (filters={filters}, in={in_filters})")
        return count
