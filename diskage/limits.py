from __future__ import annotations
import logging
import resource
import select

from .errors import ResourceLimitError

logger = logging.getLogger(__name__)

# Used when the soft limit is RLIM_INFINITY, so the probe stays finite.
MAX_PROBED_FDS = 65536

def open_files_limit() -> int:
    try:
        soft, _hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    except (OSError, ValueError) as e:
        raise ResourceLimitError(f"unable to obtain the limit for open files: {e}") from e
    if soft == resource.RLIM_INFINITY or soft > MAX_PROBED_FDS:
        return MAX_PROBED_FDS
    return int(soft)

def probe_fd_budget() -> int:
    """Count the file descriptors still free for this process.

    Every descriptor number below the RLIMIT_NOFILE soft limit is polled once
    with no events and a zero timeout; numbers reported POLLNVAL are not open.
    """
    limit = open_files_limit()
    try:
        poller = select.poll()
        for fd in range(limit):
            poller.register(fd, 0)
        events = poller.poll(0)
    except (AttributeError, OSError, ValueError) as e:
        raise ResourceLimitError(f"unable to poll file descriptors: {e}") from e

    available = sum(1 for _fd, ev in events if ev & select.POLLNVAL)
    logger.debug("open file limit %d, %d descriptors free", limit, available)
    if available <= 0:
        raise ResourceLimitError("no file descriptors available for the walk")
    return available
