"""Tests for the keyed lock registry."""

import asyncio

import pytest

from cosign_wallet.utils.locks import KeyedLockRegistry, LockTimeoutError, keyed_lock


class TestKeyedLocks:
    """Tests for per-key locking."""

    @pytest.mark.asyncio
    async def test_same_key_same_lock(self):
        """The registry returns one lock per key."""
        registry = KeyedLockRegistry()

        lock1 = await registry.get(1)
        lock2 = await registry.get(1)

        assert lock1 is lock2
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_different_keys_different_locks(self):
        """Different keys get different locks."""
        registry = KeyedLockRegistry()

        assert await registry.get(1) is not await registry.get(2)

    @pytest.mark.asyncio
    async def test_context_manager_releases(self):
        """The lock is held inside the block and released after."""
        registry = KeyedLockRegistry()

        async with keyed_lock(registry, "k", operation="test"):
            lock = await registry.get("k")
            assert lock.locked()

        assert not lock.locked()

    @pytest.mark.asyncio
    async def test_released_on_error(self):
        """An exception inside the block still releases the lock."""
        registry = KeyedLockRegistry()

        with pytest.raises(RuntimeError):
            async with keyed_lock(registry, "k"):
                raise RuntimeError("boom")

        assert not (await registry.get("k")).locked()

    @pytest.mark.asyncio
    async def test_serializes_same_key(self):
        """Two holders of one key run one after the other."""
        registry = KeyedLockRegistry()
        results = []

        async def task(name):
            async with keyed_lock(registry, 0, timeout=10.0, operation=f"task_{name}"):
                results.append(f"{name}_start")
                await asyncio.sleep(0.05)
                results.append(f"{name}_end")

        await asyncio.gather(task("A"), task("B"))

        assert results in [
            ["A_start", "A_end", "B_start", "B_end"],
            ["B_start", "B_end", "A_start", "A_end"],
        ]

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Waiting past the timeout raises LockTimeoutError."""
        registry = KeyedLockRegistry()
        lock = await registry.get(5)
        await lock.acquire()

        try:
            with pytest.raises(LockTimeoutError):
                async with keyed_lock(registry, 5, timeout=0.05):
                    pass
        finally:
            lock.release()

    @pytest.mark.asyncio
    async def test_clear(self):
        """clear drops every lock."""
        registry = KeyedLockRegistry()
        await registry.get(1)
        registry.clear()

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_zero_timeout_does_not_wait_forever(self):
        """A zero timeout on a held lock fails instead of blocking."""
        registry = KeyedLockRegistry()
        lock = await registry.get(9)
        await lock.acquire()

        try:
            with pytest.raises(LockTimeoutError):
                await asyncio.wait_for(self._enter(registry, 9, 0), timeout=1.0)
        finally:
            lock.release()

    @staticmethod
    async def _enter(registry, key, timeout):
        async with keyed_lock(registry, key, timeout=timeout):
            pass


class TestRegistryCleanup:
    """Tests that unused locks are dropped."""

    @pytest.mark.asyncio
    async def test_dropped_after_block(self):
        """A lock is removed once its only holder leaves."""
        registry = KeyedLockRegistry()

        async with keyed_lock(registry, "k"):
            assert len(registry) == 1

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_dropped_after_error(self):
        """A lock is removed even when the block raises."""
        registry = KeyedLockRegistry()

        with pytest.raises(RuntimeError):
            async with keyed_lock(registry, "k"):
                raise RuntimeError("boom")

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_dropped_after_timeout(self):
        """A waiter that times out does not leave its lock behind."""
        registry = KeyedLockRegistry()
        entered = asyncio.Event()
        leave = asyncio.Event()

        async def holder():
            async with keyed_lock(registry, 3):
                entered.set()
                await leave.wait()

        task = asyncio.create_task(holder())
        await entered.wait()

        with pytest.raises(LockTimeoutError):
            async with keyed_lock(registry, 3, timeout=0.05):
                pass

        assert len(registry) == 1
        leave.set()
        await task
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_kept_while_waiter_queued(self):
        """The lock survives the holder leaving while another caller waits."""
        registry = KeyedLockRegistry()
        order = []

        async def task(name):
            async with keyed_lock(registry, 0, timeout=10.0):
                order.append(name)
                await asyncio.sleep(0.02)

        await asyncio.gather(task("A"), task("B"), task("C"))

        assert sorted(order) == ["A", "B", "C"]
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_many_keys_do_not_accumulate(self):
        """Locking many distinct keys leaves the registry empty."""
        registry = KeyedLockRegistry()

        for key in range(100):
            async with keyed_lock(registry, key):
                pass

        assert len(registry) == 0
