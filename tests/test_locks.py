# ---------- TESTS FOR PROFILE LOCKS ----------

import asyncio

from resumeai.optimization.locks import ProfileLocks


def test_same_profile_is_serialized():
    """Test that two holders of one profile never overlap."""
    locks = ProfileLocks()
    events = []

    async def worker(name):
        async with locks.hold("p1"):
            events.append(f"{name}-start")
            await asyncio.sleep(0.05)
            events.append(f"{name}-end")

    async def main():
        await asyncio.gather(worker("first"), worker("second"))

    asyncio.run(main())

    assert events == ["first-start", "first-end", "second-start", "second-end"]


def test_different_profiles_run_concurrently():
    """Test that locks of different profiles are independent."""
    locks = ProfileLocks()
    events = []

    async def worker(profile_id):
        async with locks.hold(profile_id):
            events.append(f"{profile_id}-start")
            await asyncio.sleep(0.05)
            events.append(f"{profile_id}-end")

    async def main():
        await asyncio.gather(worker("p1"), worker("p2"))

    asyncio.run(main())

    assert events[:2] == ["p1-start", "p2-start"]


def test_idle_locks_are_dropped():
    """Test that a lock is removed once nobody holds or waits for it."""
    locks = ProfileLocks()

    async def main():
        async with locks.hold("p1"):
            assert len(locks) == 1
        assert len(locks) == 0

    asyncio.run(main())


def test_lock_released_on_error():
    """Test that an exception inside the block releases the lock."""
    locks = ProfileLocks()

    async def failing():
        async with locks.hold("p1"):
            raise ValueError("boom")

    async def main():
        try:
            await failing()
        except ValueError:
            pass
        async with locks.hold("p1"):
            return "reacquired"

    assert asyncio.run(main()) == "reacquired"
    assert len(locks) == 0
