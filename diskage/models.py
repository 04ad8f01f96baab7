from __future__ import annotations
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

SECONDS_IN_DAY = 60 * 60 * 24

# Binary powers of 1024, in display order.
UNITS = ["B", "kB", "MB", "GB", "TB", "PB", "EB"]

class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"

@dataclass
class DirectoryGroup:
    key: str
    level: int
    total_bytes: int = 0
    stale_bytes: int = 0

    @property
    def stale_percent(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.stale_bytes / self.total_bytes * 100.0

@dataclass(frozen=True)
class WalkEntry:
    path: str
    kind: EntryKind
    size: int
    atime: float

@dataclass
class ScanStats:
    files: int = 0
    dirs: int = 0
    links: int = 0
    bytes_scanned: int = 0
    elapsed_sec: float = 0.0
    fd_budget: int = 0

def normalize_root(path: str) -> str:
    path = os.path.abspath(path)
    if len(path) > 1 and path.endswith(os.sep):
        path = path[:-1]
    return path

@dataclass(frozen=True)
class ScanContext:
    root: str
    max_depth: int
    atime_cutoff: float
    atime_days: int
    unit: str = "GB"
    cost_rate: float = 0.0

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max depth must be at least 1, got {self.max_depth}")
        if self.atime_days < 0:
            raise ValueError(f"access time days must not be negative, got {self.atime_days}")
        if self.cost_rate < 0:
            raise ValueError(f"cost rate must not be negative, got {self.cost_rate}")
        if self.unit not in UNITS:
            raise ValueError(f"unknown units: {self.unit}")
        object.__setattr__(self, "root", normalize_root(self.root))

    @classmethod
    def from_days(cls,
                  root: str,
                  days: int,
                  max_depth: int = 2,
                  unit: str = "GB",
                  cost_rate: float = 0.0,
                  now: Optional[float] = None) -> "ScanContext":
        if now is None:
            now = time.time()
        return cls(root=root,
                   max_depth=max_depth,
                   atime_cutoff=now - days * SECONDS_IN_DAY,
                   atime_days=days,
                   unit=unit,
                   cost_rate=cost_rate)

    @property
    def unit_scale(self) -> int:
        return 1024 ** UNITS.index(self.unit)

    @property
    def cost_mode(self) -> bool:
        return self.cost_rate > 0
