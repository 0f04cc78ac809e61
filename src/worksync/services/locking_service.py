"""Per-employee locks for settlement."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class EmployeeLocks:
    """Registry of asyncio locks keyed by employee email.

    Settlements for the same employee run one at a time inside this
    process; different employees never wait on each other. Locks are
    dropped once nobody holds or waits on them. Cross-process exclusion
    comes from the row locks and the settled-once constraint in the
    database.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, employee_email: str) -> AsyncIterator[None]:
        lock = self._locks.get(employee_email)
        if lock is None:
            lock = self._locks[employee_email] = asyncio.Lock()
        self._users[employee_email] = self._users.get(employee_email, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[employee_email] -= 1
            if self._users[employee_email] == 0:
                del self._users[employee_email]
                del self._locks[employee_email]

    def is_locked(self, employee_email: str) -> bool:
        lock = self._locks.get(employee_email)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
