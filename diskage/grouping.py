from __future__ import annotations
import os
from typing import Tuple

from .models import EntryKind, ScanContext

def resolve_group_key(path: str, kind: EntryKind, ctx: ScanContext) -> Tuple[str, int]:
    """Return (key, level) for an entry below ``ctx.root``.

    Files and symlinks are grouped under their parent directory. The key is the
    candidate path cut after ``ctx.max_depth`` components below the root, so
    subtrees that only differ deeper than that share one group. Level is the
    number of components kept and is only used for indentation.
    """
    sep = os.sep
    root = ctx.root
    if kind is EntryKind.DIRECTORY:
        candidate = path
    else:
        candidate = os.path.dirname(path)
    if len(candidate) > 1 and candidate.endswith(sep):
        candidate = candidate[:-1]

    prefix_len = len(root.rstrip(sep))
    if candidate == root or len(candidate) <= prefix_len:
        return root, 0

    seps = 0
    stop = len(candidate)
    for i in range(prefix_len, len(candidate)):
        if candidate[i] == sep:
            seps += 1
            if seps > ctx.max_depth:
                stop = i
                break

    level = min(seps, ctx.max_depth)
    return candidate[:stop], level
