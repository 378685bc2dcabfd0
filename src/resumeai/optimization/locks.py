"""
Per-profile serialization of optimize-and-merge runs.

merge() itself is pure and lock-free. A lock only orders the runs; it does
not refresh their input. Two serialized runs that both merge the snapshot
read before the lock was taken still lose each other's skills (last merge
wins). Callers therefore read the current profile after taking the lock,
which optimize_resume() does through a ProfileStore
(resumeai.optimization.store), and write the merged result back before
releasing it.

CLASSES:
    ProfileLocks
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class ProfileLocks:
    """One asyncio.Lock per profile id, created on first use.

    Must be used from a single event loop.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        # Tasks holding or waiting for each lock
        self._users: Dict[str, int] = {}

    def get(self, profile_id: str) -> asyncio.Lock:
        lock = self._locks.get(profile_id)
        if lock is None:
            lock = self._locks[profile_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, profile_id: str) -> AsyncIterator[None]:
        lock = self.get(profile_id)
        self._users[profile_id] = self._users.get(profile_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[profile_id] -= 1
            # Idle locks are dropped so the map only holds profiles in use
            if not self._users[profile_id]:
                del self._users[profile_id]
                del self._locks[profile_id]

    def __len__(self) -> int:
        return len(self._locks)
