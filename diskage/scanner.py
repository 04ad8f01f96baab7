from __future__ import annotations
import logging
import os
import stat as statmod
import time
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import ResourceLimitError, TraversalError
from .grouping import resolve_group_key
from .limits import probe_fd_budget
from .models import EntryKind, ScanContext, ScanStats, WalkEntry
from .store import AggregationStore

logger = logging.getLogger(__name__)

ProgressCb = Callable[[str, int, int, int], None]  # (current_path, files, dirs, bytes_scanned)

def _kind_of(mode: int) -> EntryKind:
    if statmod.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if statmod.S_ISLNK(mode):
        return EntryKind.SYMLINK
    # fifos, sockets and device nodes count as plain files
    return EntryKind.FILE

def _entry(path: str, st: os.stat_result) -> WalkEntry:
    return WalkEntry(path=path, kind=_kind_of(st.st_mode),
                     size=int(st.st_size), atime=st.st_atime)

class _Frame:
    __slots__ = ("path", "entries", "handle")

    def __init__(self, path: str, entries: Iterator[os.DirEntry], handle=None):
        self.path = path
        self.entries = entries
        self.handle = handle

def _open_dir(path: str) -> _Frame:
    try:
        handle = os.scandir(path)
    except OSError as e:
        raise TraversalError(f"walking {path} failed: {e.strerror or e}", path) from e
    return _Frame(path, handle, handle)

def _buffer(frame: _Frame) -> None:
    # read what is left of the listing so its descriptor can be released
    handle = frame.handle
    try:
        with handle:
            frame.entries = iter(list(handle))
    except OSError as e:
        raise TraversalError(f"walking {frame.path} failed: {e.strerror or e}", frame.path) from e
    frame.handle = None

def walk_entries(root: str, fd_budget: int) -> Iterator[WalkEntry]:
    """Yield every entry under ``root`` depth-first, directories before their contents.

    Symlinks are not followed and entries on another filesystem than ``root``
    are skipped. At most ``fd_budget`` directories are held open at once; when
    the budget is used up the shallowest open directory is read in full and
    closed before the next one is opened.
    Any OSError aborts the walk with TraversalError.
    """
    if fd_budget < 1:
        raise ResourceLimitError(f"invalid file descriptor budget: {fd_budget}")
    try:
        st = os.lstat(root)
    except OSError as e:
        raise TraversalError(f"walking {root} failed: {e.strerror or e}", root) from e
    if not statmod.S_ISDIR(st.st_mode):
        raise TraversalError(f"walking {root} failed: not a directory", root)
    device = st.st_dev

    yield _entry(root, st)

    stack: List[_Frame] = []
    open_handles = 0
    try:
        stack.append(_open_dir(root))
        open_handles += 1
        while stack:
            frame = stack[-1]
            try:
                de = next(frame.entries)
                st = de.stat(follow_symlinks=False)
            except StopIteration:
                stack.pop()
                if frame.handle is not None:
                    frame.handle.close()
                    open_handles -= 1
                continue
            except OSError as e:
                raise TraversalError(f"walking {frame.path} failed: {e.strerror or e}",
                                     frame.path) from e

            if st.st_dev != device:
                continue
            entry = _entry(de.path, st)
            yield entry

            if entry.kind is EntryKind.DIRECTORY:
                if open_handles >= fd_budget:
                    oldest = next(f for f in stack if f.handle is not None)
                    _buffer(oldest)
                    open_handles -= 1
                stack.append(_open_dir(de.path))
                open_handles += 1
    finally:
        for frame in stack:
            if frame.handle is not None:
                frame.handle.close()

def scan_tree(ctx: ScanContext,
              fd_budget: int,
              store: Optional[AggregationStore] = None,
              progress: Optional[ProgressCb] = None) -> Tuple[AggregationStore, ScanStats]:
    if store is None:
        store = AggregationStore()
    t0 = time.time()
    stats = ScanStats(fd_budget=fd_budget)

    last_emit = 0.0
    def emit(cur: str):
        nonlocal last_emit
        if not progress:
            return
        now = time.time()
        if now - last_emit >= 0.10:
            last_emit = now
            progress(cur, stats.files, stats.dirs, stats.bytes_scanned)

    for entry in walk_entries(ctx.root, fd_budget):
        if entry.kind is EntryKind.DIRECTORY:
            stats.dirs += 1
        elif entry.kind is EntryKind.SYMLINK:
            stats.links += 1
        else:
            stats.files += 1
        stats.bytes_scanned += entry.size

        key, level = resolve_group_key(entry.path, entry.kind, ctx)
        store.accumulate(key, level, entry.size, entry.atime < ctx.atime_cutoff)
        emit(entry.path)

    stats.elapsed_sec = time.time() - t0
    logger.debug("scanned %d files, %d dirs, %d links in %.2fs (%d groups)",
                 stats.files, stats.dirs, stats.links, stats.elapsed_sec, len(store))
    return store, stats

def run_scan(ctx: ScanContext,
             progress: Optional[ProgressCb] = None) -> Tuple[AggregationStore, ScanStats]:
    fd_budget = probe_fd_budget()
    logger.debug("walking %s with a budget of %d descriptors", ctx.root, fd_budget)
    return scan_tree(ctx, fd_budget, AggregationStore(), progress)
