# tests/core/behavior/test_behavior_bus.py
"""
Testes do BehaviorBus.

Os testes asseguram que:
- callbacks de um mesmo nome disparam na ordem de registro
- ids são únicos e monotônicos, mesmo com registros concorrentes
- falhas de registro retornam o sentinela em vez de levantar
- `trigger()` nunca levanta
"""

import asyncio
import logging

import pytest

from sysboot.core.behavior import BEHAVIOR_CREATION_ERROR, BehaviorBus
from sysboot.core.sync import AsyncFifoLock


@pytest.mark.asyncio
async def test_trigger_fires_in_registration_order():
    bus = BehaviorBus()
    calls = []

    for tag in ("first", "second", "third"):
        await bus.register("ready", lambda tag=tag: calls.append(tag))

    bus.trigger("ready")

    assert calls == ["first", "second", "third"]


@pytest.mark.asyncio
async def test_trigger_passes_arguments():
    bus = BehaviorBus()
    received = []

    await bus.register("ready", lambda system: received.append(system))
    bus.trigger("ready", "the-system")

    assert received == ["the-system"]


@pytest.mark.asyncio
async def test_ids_are_unique_and_indexed_both_ways():
    bus = BehaviorBus()

    a = await bus.register("alpha", lambda: None)
    b = await bus.register("beta", lambda: None)
    c = await bus.register("alpha", lambda: None)

    assert (a, b, c) == ("0", "1", "2")
    assert bus.ids_for("alpha") == ["0", "2"]
    assert bus.ids_for("missing") == []
    assert bus.name_for("1") == "beta"
    assert bus.name_for("9") is None


@pytest.mark.asyncio
async def test_concurrent_registrations_never_duplicate_ids():
    """
    Registros concorrentes são serializados pelo lock: todos os ids são
    distintos e cobrem exatamente o intervalo do contador.
    """
    bus = BehaviorBus(max_behaviors=500)

    ids = await asyncio.gather(*(bus.register(f"b{i % 7}", lambda: None) for i in range(500)))

    assert sorted(ids, key=int) == [str(i) for i in range(500)]
    assert bus.counter == 500
    assert len(bus) == 500


@pytest.mark.asyncio
async def test_register_uses_injected_lock():
    lock = AsyncFifoLock()
    bus = BehaviorBus(lock=lock)

    await lock.acquire()
    pending = asyncio.ensure_future(bus.register("x", lambda: None))
    await asyncio.sleep(0)
    assert not pending.done()

    lock.release()
    assert await pending == "0"


@pytest.mark.asyncio
@pytest.mark.parametrize("name,callback", [(42, lambda: None), (None, lambda: None), ("ok", "not callable")])
async def test_invalid_registration_returns_sentinel(name, callback):
    bus = BehaviorBus()

    assert await bus.register(name, callback) == BEHAVIOR_CREATION_ERROR
    assert bus.counter == 0


@pytest.mark.asyncio
async def test_capacity_exhaustion_returns_sentinel():
    bus = BehaviorBus(max_behaviors=2)

    assert await bus.register("a", lambda: None) == "0"
    assert await bus.register("a", lambda: None) == "1"
    assert await bus.register("a", lambda: None) == BEHAVIOR_CREATION_ERROR
    assert bus.ids_for("a") == ["0", "1"]


@pytest.mark.asyncio
async def test_add_behaviors_in_declaration_order():
    bus = BehaviorBus()
    calls = []

    results = await bus.add_behaviors(
        [
            {"load": lambda: calls.append("one")},
            {"load": lambda: calls.append("two"), "stop": lambda: calls.append("stop")},
        ]
    )
    bus.trigger("load")

    assert results == ["0", "1", "2"]
    assert calls == ["one", "two"]


def test_trigger_unknown_name_is_noop():
    bus = BehaviorBus()

    bus.trigger("never-registered")
    bus.trigger(123)


@pytest.mark.asyncio
async def test_trigger_logs_callback_failures_and_continues(caplog):
    bus = BehaviorBus()
    calls = []

    def boom():
        raise RuntimeError("boom")

    await bus.register("ready", boom)
    await bus.register("ready", lambda: calls.append("after"))

    with caplog.at_level(logging.ERROR, logger="sysboot.core.behavior.bus"):
        bus.trigger("ready")

    assert calls == ["after"]
    assert any("ready" in r.getMessage() for r in caplog.records)
