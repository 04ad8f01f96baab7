from __future__ import annotations
import bisect
import os
from typing import Dict, Iterator, List, Optional

from .models import DirectoryGroup

class AggregationStore:
    """Ordered key -> DirectoryGroup map, one group per grouping key.

    Keys are ordered byte-wise (by their filesystem encoding), the same order
    a C strcmp over the raw path bytes would give.
    """

    def __init__(self):
        self._groups: Dict[str, DirectoryGroup] = {}
        self._order: List[bytes] = []

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, key: str) -> bool:
        return key in self._groups

    def accumulate(self, key: str, level: int, size: int, is_stale: bool) -> DirectoryGroup:
        group = self._groups.get(key)
        if group is None:
            # level is fixed by whichever entry creates the group
            group = DirectoryGroup(key=key, level=level)
            self._groups[key] = group
            bisect.insort(self._order, os.fsencode(key))
        group.total_bytes += size
        if is_stale:
            group.stale_bytes += size
        return group

    def find(self, key: str) -> Optional[DirectoryGroup]:
        return self._groups.get(key)

    def remove(self, key: str) -> Optional[DirectoryGroup]:
        group = self._groups.pop(key, None)
        if group is not None:
            raw = os.fsencode(key)
            i = bisect.bisect_left(self._order, raw)
            del self._order[i]
        return group

    def iter_sorted(self) -> Iterator[DirectoryGroup]:
        for raw in self._order:
            yield self._groups[os.fsdecode(raw)]

    def copy(self) -> "AggregationStore":
        other = AggregationStore()
        for key, g in self._groups.items():
            other._groups[key] = DirectoryGroup(key=g.key, level=g.level,
                                                total_bytes=g.total_bytes,
                                                stale_bytes=g.stale_bytes)
        other._order = list(self._order)
        return other

    @property
    def total_bytes(self) -> int:
        return sum(g.total_bytes for g in self._groups.values())

    @property
    def stale_bytes(self) -> int:
        return sum(g.stale_bytes for g in self._groups.values())
