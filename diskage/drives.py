from __future__ import annotations
import os
from typing import Dict, Optional

import psutil

def filesystem_for(path: str) -> Optional[Dict[str, object]]:
    """Describe the mounted filesystem holding ``path``, or None if psutil finds none."""
    path = os.path.abspath(path)
    best = None
    for p in psutil.disk_partitions(all=True):
        mp = p.mountpoint
        if not mp:
            continue
        mp_norm = os.path.abspath(mp)
        prefix = mp_norm if mp_norm.endswith(os.sep) else mp_norm + os.sep
        if path != mp_norm and not path.startswith(prefix):
            continue
        if best is None or len(mp_norm) > len(best["mountpoint"]):
            best = {"mountpoint": mp_norm, "device": p.device, "fstype": p.fstype}
    if best is None:
        return None
    try:
        u = psutil.disk_usage(best["mountpoint"])
    except OSError:
        return best
    best.update({
        "total": int(u.total),
        "used": int(u.used),
        "free": int(u.free),
        "percent": float(u.percent),
    })
    return best
