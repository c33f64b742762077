import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import AsyncExitStack, asynccontextmanager
from uuid import UUID

from clinicops.core.config import settings
from clinicops.core.exceptions import ScheduleBusyError

# One lock per professional calendar or treatment-plan procedure. Held from the
# first overlap/quota read until the commit, so two requests in this process
# cannot both pass the check for the same slot or the same session budget.
# Across processes the SELECT ... FOR UPDATE on those rows does the same job.
# A key is dropped once no request holds or waits for it.
_locks: dict[UUID, asyncio.Lock] = {}
_users: dict[UUID, int] = {}


def _checkout(key: UUID) -> asyncio.Lock:
    lock = _locks.get(key)
    if lock is None:
        lock = _locks[key] = asyncio.Lock()
    _users[key] = _users.get(key, 0) + 1
    return lock


def _checkin(key: UUID) -> None:
    _users[key] -= 1
    if _users[key] == 0:
        del _users[key]
        del _locks[key]


@asynccontextmanager
async def schedule_lock(keys: Iterable[UUID | None]) -> AsyncIterator[None]:
    """Hold the lock of every given key, acquired in sorted order so callers cannot deadlock."""
    timeout = settings.schedule_lock_timeout_seconds
    async with AsyncExitStack() as stack:
        for key in sorted({k for k in keys if k is not None}, key=str):
            lock = _checkout(key)
            stack.callback(_checkin, key)
            try:
                await asyncio.wait_for(lock.acquire(), timeout=timeout)
            except TimeoutError:
                raise ScheduleBusyError(key) from None
            stack.callback(lock.release)
        yield
