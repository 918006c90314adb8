from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional, Sequence


class StoreError(Exception):
    """Raised for any remote-call failure (network, auth or schema) from a store provider."""


class DatabaseProvider(ABC):
    """Abstract base class for store providers.

    Filters are equality constraints (``{"grade_id": 3}``); ``in_filters`` are
    membership constraints (``{"chapter_id": [1, 2]}``).
    """

    @abstractmethod
    def init_db(self) -> None:
        """Check the connection and prepare the tables if the provider owns them."""
        pass

    @abstractmethod
    def ping(self) -> None:
        """Raise StoreError if the store cannot be reached."""
        pass

    @abstractmethod
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
        """Return all rows of ``table`` matching the filters."""
        pass

    @abstractmethod
    def select_one(self, table: str, filters: Dict[str, Any], columns: str = "*") -> Optional[Dict[str, Any]]:
        """Return the single matching row, None when nothing matches.

        More than one matching row is a StoreError.
        """
        pass

    @abstractmethod
    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored."""
        pass

    @abstractmethod
    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update matching rows and return them."""
        pass

    @abstractmethod
    def upsert(self, table: str, values: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
        """Insert or replace the row identified by ``values[key]``."""
        pass

    @abstractmethod
    def delete(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Sequence[Any]]] = None,
    ) -> Optional[int]:
        """Delete matching rows, returning the count when the provider knows it."""
        pass
