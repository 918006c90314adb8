"""
Read-through query cache in front of a store provider.

Reads are cached per (table, filters, columns, order) with a TTL; any write to
a table drops every cached read of that table. Each table keeps a generation
counter so that a read which started before a write cannot put its stale
result back into the cache. Callers always get deep copies of cached rows.
"""

import copy
import logging
import time
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence, Tuple

from eduplay.db.db_interface import DatabaseProvider

logger = logging.getLogger(__name__)


def _freeze(mapping: Optional[Dict[str, Any]]) -> Tuple:
    if not mapping:
        return ()
    return tuple(sorted(
        (key, tuple(value) if isinstance(value, (list, tuple, set)) else value)
        for key, value in mapping.items()
    ))


class QueryCache(DatabaseProvider):
    """Thread-safe caching decorator for a DatabaseProvider."""

    def __init__(self, provider: DatabaseProvider, default_ttl: int = 60):
        self.provider = provider
        self.default_ttl = default_ttl
        self.cache: Dict[Tuple, Tuple[Any, float]] = {}
        self.generations: Dict[str, int] = {}
        self.lock = Lock()

    # -- cache bookkeeping -------------------------------------------------

    def _generation(self, table: str) -> int:
        with self.lock:
            return self.generations.get(table, 0)

    def _get(self, key: Tuple) -> Tuple[bool, Any]:
        with self.lock:
            if key in self.cache:
                value, expiry = self.cache[key]
                if time.time() < expiry:
                    return True, value
                del self.cache[key]
        return False, None

    def _set(self, key: Tuple, value: Any, generation: int) -> None:
        table = key[0]
        with self.lock:
            if self.generations.get(table, 0) != generation:
                logger.debug(f"Discarding stale read of '{table}'")
                return
            self.cache[key] = (value, time.time() + self.default_ttl)

    def invalidate(self, table: str) -> None:
        """Drop every cached read of ``table``."""
        with self.lock:
            self.generations[table] = self.generations.get(table, 0) + 1
            for key in [k for k in self.cache if k[0] == table]:
                del self.cache[key]
        logger.debug(f"Invalidated cached reads of '{table}'")

    def clear(self) -> None:
        with self.lock:
            for table in list(self.generations):
                self.generations[table] += 1
            self.cache.clear()

    def _read(self, key: Tuple, fetch):
        hit, value = self._get(key)
        if hit:
            return value
        generation = self._generation(key[0])
        value = fetch()
        self._set(key, value, generation)
        return value

    # -- DatabaseProvider --------------------------------------------------

    def init_db(self) -> None:
        self.provider.init_db()

    def ping(self) -> None:
        self.provider.ping()

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
        key = (table, "many", columns, _freeze(filters), _freeze(in_filters), order_by, desc, limit)
        rows = self._read(key, lambda: self.provider.select(
            table, columns=columns, filters=filters, in_filters=in_filters,
            order_by=order_by, desc=desc, limit=limit,
        ))
        return copy.deepcopy(rows)

    def select_one(self, table: str, filters: Dict[str, Any], columns: str = "*") -> Optional[Dict[str, Any]]:
        key = (table, "one", columns, _freeze(filters))
        row = self._read(key, lambda: self.provider.select_one(table, filters, columns=columns))
        return copy.deepcopy(row)

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self.provider.insert(table, values)
        finally:
            self.invalidate(table)

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            return self.provider.update(table, values, filters)
        finally:
            self.invalidate(table)

    def upsert(self, table: str, values: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
        try:
            return self.provider.upsert(table, values, key=key)
        finally:
            self.invalidate(table)

    def delete(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Sequence[Any]]] = None,
    ) -> Optional[int]:
        try:
            return self.provider.delete(table, filters=filters, in_filters=in_filters)
        finally:
            self.invalidate(table)
