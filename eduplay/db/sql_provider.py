import logging
from typing import List, Dict, Any, Optional, Sequence

from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.exc import SQLAlchemyError

from eduplay.db.db_interface import DatabaseProvider, StoreError
from eduplay.db.models import Base, get_engine

logger = logging.getLogger(__name__)


class SQLProvider(DatabaseProvider):
    """SQLAlchemy implementation of the store provider for local development and tests."""

    def __init__(self, database_url: str):
        """
        Initialize the SQL provider.

        Args:
            database_url: SQLAlchemy URL, e.g. 'sqlite:///./eduplay_dev.db'
        """
        self.database_url = database_url
        self.engine = get_engine(database_url)
        logger.info(f"Initializing SQL provider with database at: {database_url}")

    def init_db(self) -> None:
        """Create all tables if they don't exist."""
        try:
            Base.metadata.create_all(self.engine)
            logger.info("Successfully initialized SQL database with all tables")
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize SQL database: {e}")
            raise StoreError(f"Database initialization error: {e}") from e

    def _table(self, name: str):
        table = Base.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table: {name}")
        return table

    @staticmethod
    def _where(statement, table, filters, in_filters):
        for column, value in (filters or {}).items():
            statement = statement.where(table.c[column] == value)
        for column, values in (in_filters or {}).items():
            statement = statement.where(table.c[column].in_(list(values)))
        return statement

    def ping(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(select(func.count()).select_from(self._table('grades')))
        except SQLAlchemyError as e:
            logger.error(f"SQL database ping failed: {e}")
            raise StoreError(f"Database error: {e}") from e

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
        t = self._table(table)
        try:
            if columns.strip() == "*":
                statement = select(t)
            else:
                statement = select(*[t.c[name.strip()] for name in columns.split(",")])
            statement = self._where(statement, t, filters, in_filters)
            if order_by:
                statement = statement.order_by(t.c[order_by].desc() if desc else t.c[order_by].asc())
            if limit is not None:
                statement = statement.limit(limit)

            with self.engine.connect() as conn:
                rows = [dict(row._mapping) for row in conn.execute(statement)]
        except (SQLAlchemyError, KeyError) as e:
            logger.error(f"Error selecting from '{table}': {e}")
            raise StoreError(f"Database error: {e}") from e

        logger.debug(f"Retrieved {len(rows)} rows from '{table}' (filters={filters}, in={in_filters})")
        return rows

    def select_one(self, table: str, filters: Dict[str, Any], columns: str = "*") -> Optional[Dict[str, Any]]:
        rows = self.select(table, columns=columns, filters=filters, limit=2)
        if len(rows) > 1:
            raise StoreError(f"Expected at most one row in '{table}' for {filters}, got several")
        return rows[0] if rows else None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        t = self._table(table)
        try:
            with self.engine.begin() as conn:
                result = conn.execute(insert(t).values(values))
                key = values.get("id", result.inserted_primary_key[0])
                row = conn.execute(select(t).where(t.c.id == key)).first()
        except SQLAlchemyError as e:
            logger.error(f"Error inserting into '{table}': {e}")
            raise StoreError(f"Database error: {e}") from e

        logger.debug(f"Inserted row {key} into '{table}'")
        return dict(row._mapping)

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        t = self._table(table)
        try:
            with self.engine.begin() as conn:
                conn.execute(self._where(update(t), t, filters, None).values(values))
                rows = conn.execute(self._where(select(t), t, filters, None)).all()
        except SQLAlchemyError as e:
            logger.error(f"Error updating '{table}': {e}")
            raise StoreError(f"Database error: {e}") from e
        return [dict(row._mapping) for row in rows]

    def upsert(self, table: str, values: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
        if self.select_one(table, {key: values[key]}) is None:
            return self.insert(table, values)
        return self.update(table, values, {key: values[key]})[0]

    def delete(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Sequence[Any]]] = None,
    ) -> Optional[int]:
        if not filters and not in_filters:
            raise StoreError(f"Refusing to delete from '{table}' without a filter")
        t = self._table(table)
        try:
            with self.engine.begin() as conn:
                result = conn.execute(self._where(delete(t), t, filters, in_filters))
        except SQLAlchemyError as e:
            logger.error(f"Error deleting from '{table}': {e}")
            raise StoreError(f"Database error: {e}") from e

        logger.debug(f"Deleted {result.rowcount} rows from '{table}' (filters={filters}, in={in_filters})")
        return result.rowcount
