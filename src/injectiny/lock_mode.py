from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for orchestrator registration and propagation.

    ``inject`` itself is never synchronized. Pick ``THREAD`` when producers or
    targets are registered from several threads and the orchestrator has to
    serialize fan-out; the default ``NONE`` leaves serialization to the caller.
    """

    THREAD = "thread"
    """Guard registrations with a reentrant ``threading.RLock``."""

    NONE = "none"
    """Disable locking; callers serialize access themselves."""
