import asyncio
import uuid

import pytest

from clinicops.core.config import settings
from clinicops.core.exceptions import ScheduleBusyError
from clinicops.services import locks
from clinicops.services.locks import schedule_lock

pytestmark = pytest.mark.asyncio


async def test_keys_are_released_after_use():
    professional_id, procedure_id = uuid.uuid4(), uuid.uuid4()
    async with schedule_lock([professional_id, procedure_id, None]):
        assert locks._locks[professional_id].locked()
        assert locks._locks[procedure_id].locked()
    assert professional_id not in locks._locks
    assert procedure_id not in locks._locks
    assert professional_id not in locks._users


async def test_key_kept_while_another_request_waits():
    key = uuid.uuid4()
    entered = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with schedule_lock([key]):
            entered.set()
            await release.wait()

    async def waiter():
        async with schedule_lock([key]):
            pass

    holder_task = asyncio.create_task(holder())
    await entered.wait()
    waiter_task = asyncio.create_task(waiter())
    await asyncio.sleep(0)
    assert locks._users[key] == 2
    release.set()
    await asyncio.gather(holder_task, waiter_task)
    assert key not in locks._locks


async def test_timeout_raises_busy_and_releases_key(monkeypatch):
    monkeypatch.setattr(settings, "schedule_lock_timeout_seconds", 0.05)
    key = uuid.uuid4()
    async with schedule_lock([key]):
        with pytest.raises(ScheduleBusyError):
            async with schedule_lock([key]):
                pass
        assert locks._users[key] == 1
    assert key not in locks._locks
