from __future__ import annotations

import resource

import pytest

from diskage import limits
from diskage.errors import ResourceLimitError


def test_probe_returns_positive_budget() -> None:
    budget = limits.probe_fd_budget()
    assert 0 < budget <= limits.open_files_limit()


def test_unlimited_soft_limit_is_capped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(resource, "getrlimit", lambda _which: (resource.RLIM_INFINITY, resource.RLIM_INFINITY))
    assert limits.open_files_limit() == limits.MAX_PROBED_FDS


def test_getrlimit_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(_which):
        raise OSError("no limits here")

    monkeypatch.setattr(resource, "getrlimit", boom)
    with pytest.raises(ResourceLimitError, match="limit for open files"):
        limits.probe_fd_budget()


def test_poll_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def no_poll():
        raise OSError("cannot allocate")

    monkeypatch.setattr(limits.select, "poll", no_poll)
    with pytest.raises(ResourceLimitError, match="poll"):
        limits.probe_fd_budget()


def test_no_free_descriptors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(limits, "open_files_limit", lambda: 3)
    # 0, 1 and 2 are stdin/stdout/stderr under pytest
    with pytest.raises(ResourceLimitError, match="no file descriptors"):
        limits.probe_fd_budget()
