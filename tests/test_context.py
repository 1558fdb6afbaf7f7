from __future__ import annotations

import asyncio

import pytest

from tracegraph.core import TraceEngine, clear_context, get_current_node_id
from tracegraph.core.context import push_current_node_id, reset_current_node_id


def test_push_and_reset_current_node_id() -> None:
    token = push_current_node_id("node_a")
    assert get_current_node_id() == "node_a"

    reset_current_node_id(token)
    assert get_current_node_id() is None


def test_clear_context() -> None:
    push_current_node_id("node_a")
    clear_context()
    assert get_current_node_id() is None


def test_current_node_id_is_visible_only_during_the_call() -> None:
    engine = TraceEngine()
    seen: list[str | None] = []

    result = engine.run(lambda: seen.append(get_current_node_id()))

    assert seen == [result.id]
    assert get_current_node_id() is None


@pytest.mark.asyncio
async def test_current_node_id_follows_async_tasks() -> None:
    engine = TraceEngine()
    seen: dict[str, str | None] = {}

    async def leaf(name: str) -> None:
        await asyncio.sleep(0)
        seen[name] = get_current_node_id()

    async def fan_out() -> str | None:
        parent_id = get_current_node_id()
        await asyncio.gather(*(engine.run(leaf, [name], {"trace": {"parent": parent_id}}) for name in "ab"))
        return get_current_node_id()

    result = await engine.run(fan_out)

    assert result.outputs == result.id
    leaves = {node.data.inputs[0]: node.id for node in engine.get_trace_nodes() if node.data.parent}
    assert seen == leaves
    assert get_current_node_id() is None
