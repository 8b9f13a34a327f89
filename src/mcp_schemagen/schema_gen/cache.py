"""
Process-wide cache of derived root schemas, keyed by type identity.
"""
import threading
from typing import Optional

from ..models.schema import InputSchema


class SchemaCache:
    """
    Thread-safe mapping from a type identity key to its completed InputSchema.

    Entries are only stored once fully built, so a lookup racing a store sees
    either a miss or the finished schema. Concurrent first callers may each
    reflect the same type; the last store wins with an equivalent value.
    There is no eviction.

    Each entry holds a reference to the record type it was derived from. This
    keeps the type alive, so an id-based key is never reused by another class,
    and lets a lookup reject an entry stored for a different class.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[type, InputSchema]] = {}
        self._lock = threading.Lock()

    def lookup(self, key: str, record: Optional[type] = None) -> Optional[InputSchema]:
        """
        Returns the schema stored under ``key``, or None.

        When ``record`` is given, an entry stored for another class is a miss.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        owner, schema = entry
        if record is not None and owner is not record:
            return None
        return schema

    def store(self, key: str, schema: InputSchema, record: type) -> None:
        with self._lock:
            self._entries[key] = (record, schema)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


DEFAULT_CACHE = SchemaCache()
