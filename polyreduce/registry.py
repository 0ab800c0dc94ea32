"""Registry of the live polygons of a reduction, keyed by content id."""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .core.types import PolygonRecord

logger = logging.getLogger(__name__)


class MergeRegistry:
    """Mapping from content id to the current (non-superseded) records.

    A registry belongs to exactly one reduction pass. Records superseded by
    a union leave the registry in the same :meth:`replace` call that inserts
    the union, so no caller ever observes both.

    Example:
        ```python
        registry = MergeRegistry()
        registry.insert(record)
        registry.replace([a.id, b.id], merged)
        live = registry.values()
        ```
    """

    def __init__(self, records: Optional[Iterable[PolygonRecord]] = None):
        self._records: Dict[str, PolygonRecord] = {}
        for record in records or ():
            self.insert(record)

    def insert(self, record: PolygonRecord) -> None:
        """Add a record; an identical ring structure replaces the earlier one."""
        if record.id in self._records:
            logger.debug("Record %s already registered, replacing", record.id)
        self._records[record.id] = record

    def get(self, record_id: str) -> Optional[PolygonRecord]:
        return self._records.get(record_id)

    def values(self) -> List[PolygonRecord]:
        """Snapshot of the live records."""
        return list(self._records.values())

    def replace(self, remove_ids: Iterable[str], record: PolygonRecord) -> None:
        """Remove ``remove_ids`` and insert ``record`` as one step.

        Raises:
            KeyError: If any id is not live; the registry is left untouched
        """
        remove_ids = list(remove_ids)
        missing = [record_id for record_id in remove_ids if record_id not in self._records]
        if missing:
            raise KeyError(f"Records not in registry: {missing}")

        for record_id in remove_ids:
            del self._records[record_id]
        self._records[record.id] = record

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PolygonRecord]:
        return iter(self.values())

    def __repr__(self) -> str:
        return f"MergeRegistry({len(self._records)} records)"


__all__ = ['MergeRegistry']
