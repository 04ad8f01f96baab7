from __future__ import annotations
from typing import Optional

class DiskAgeError(Exception):
    """Base class for errors that abort a scan."""

class ResourceLimitError(DiskAgeError):
    pass

class TraversalError(DiskAgeError):
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
