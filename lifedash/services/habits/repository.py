"""
Habits Repository - Record store access for habit records
A generic keyed store (list/get/create/update/delete) with a Supabase
implementation and an in-memory one for local development and tests
"""
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
import logging
import threading
import uuid

from lifedash.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

RecordId = Union[int, str]


class RecordStore(ABC):
    """
    Per-entity persistence used by the habit service

    update() is last-write-wins for the fields supplied; nothing else is
    assumed about transactions.
    """

    @abstractmethod
    def list(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List records, newest first

        Args:
            owner_id: Only return records owned by this user; None for all

        Raises:
            DatabaseError: If the query fails
        """

    @abstractmethod
    def get(self, record_id: RecordId) -> Optional[Dict[str, Any]]:
        """Return one record or None if it does not exist"""

    @abstractmethod
    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it with its assigned id"""

    @abstractmethod
    def update(self, record_id: RecordId, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a field patch and return the updated record ({} if missing)"""

    @abstractmethod
    def delete(self, record_id: RecordId) -> Dict[str, Any]:
        """Delete a record and return it ({} if missing)"""


# ============================================================================
# SUPABASE
# ============================================================================

class SupabaseRecordStore(RecordStore):
    """Record store backed by a Supabase table"""

    def __init__(self, client, table: str = "habits"):
        self.client = client
        self.table = table

    def list(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            query = self.client.table(self.table).select("*")
            if owner_id is not None:
                query = query.eq("user_id", owner_id)
            result = query.order("created_at", desc=True).execute()
            return result.data
        except Exception as e:
            logger.error(f"Database error listing {self.table}: {e}")
            raise DatabaseError(f"Failed to list {self.table}: {e}")

    def get(self, record_id: RecordId) -> Optional[Dict[str, Any]]:
        try:
            result = self.client.table(self.table).select("*").eq("id", record_id).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Database error fetching {self.table} {record_id}: {e}")
            raise DatabaseError(f"Failed to fetch record: {e}")

    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.client.table(self.table).insert(record).execute()
            return result.data[0] if result.data else {}
        except Exception as e:
            logger.error(f"Database error creating {self.table} record: {e}")
            raise DatabaseError(f"Failed to create record: {e}")

    def update(self, record_id: RecordId, patch: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.client.table(self.table).update(patch).eq("id", record_id).execute()
            return result.data[0] if result.data else {}
        except Exception as e:
            logger.error(f"Database error updating {self.table} {record_id}: {e}")
            raise DatabaseError(f"Failed to update record: {e}")

    def delete(self, record_id: RecordId) -> Dict[str, Any]:
        try:
            result = self.client.table(self.table).delete().eq("id", record_id).execute()
            return result.data[0] if result.data else {}
        except Exception as e:
            logger.error(f"Database error deleting {self.table} {record_id}: {e}")
            raise DatabaseError(f"Failed to delete record: {e}")


# ============================================================================
# IN-MEMORY
# ============================================================================

class InMemoryRecordStore(RecordStore):
    """Dict-backed record store; records are copied in and out"""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self.create(record)

    def list(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            records = [
                deepcopy(r) for r in self._records.values()
                if owner_id is None or r.get("user_id") == owner_id
            ]
        return sorted(records, key=lambda r: r.get("created_at") or "", reverse=True)

    def get(self, record_id: RecordId) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(str(record_id))
            return deepcopy(record) if record is not None else None

    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        created = deepcopy(record)
        created.setdefault("id", str(uuid.uuid4()))
        created.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        with self._lock:
            self._records[str(created["id"])] = created
        return deepcopy(created)

    def update(self, record_id: RecordId, patch: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            record = self._records.get(str(record_id))
            if record is None:
                return {}
            record.update(deepcopy(patch))
            return deepcopy(record)

    def delete(self, record_id: RecordId) -> Dict[str, Any]:
        with self._lock:
            return self._records.pop(str(record_id), {})
