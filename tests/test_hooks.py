"""Hook dispatch: order, data, and resilience to broken hooks."""

from __future__ import annotations

import warnings
from collections.abc import Sequence

from tracegraph.core import NullHook, TraceEngine, TraceHook, get_current_node_id
from tracegraph.models import TraceEdge, TraceNode


class _RecordingHook:
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def on_node_recorded(self, node: TraceNode) -> None:
        self.events.append(("node", node.data.label))

    def on_edge_recorded(self, edge: TraceEdge) -> None:
        self.events.append(("edge", edge.id))

    def on_narrative_added(self, node: TraceNode, texts: Sequence[str]) -> None:
        self.events.append(("narrative", f"{node.data.label}: {', '.join(texts)}"))


class _BrokenHook:
    def on_node_recorded(self, node: TraceNode) -> None:
        raise RuntimeError("hook crashed!")

    def on_edge_recorded(self, edge: TraceEdge) -> None:
        raise RuntimeError("hook crashed!")

    def on_narrative_added(self, node: TraceNode, texts: Sequence[str]) -> None:
        raise RuntimeError("hook crashed!")


class _PartialHook:
    def __init__(self) -> None:
        self.nodes = 0

    def on_node_recorded(self, node: TraceNode) -> None:
        self.nodes += 1


def child(value: str) -> str:
    return value


def test_hook_dispatch_order_and_data() -> None:
    hook = _RecordingHook()
    engine = TraceEngine(hooks=[hook])

    def parent() -> str:
        return engine.call(child, ["x"], {"trace": {"parent": get_current_node_id(), "label": "kid"}})

    result = engine.run(parent)
    engine.push_narrative(result.id, "done")
    engine.push_narrative("missing", "ignored")

    assert hook.events == [
        ("node", "kid"),
        ("node", "parent"),
        ("edge", f"{result.id}->{engine.get_trace_nodes()[0].id}"),
        ("narrative", "parent: done"),
    ]


def test_broken_hook_does_not_break_recording() -> None:
    engine = TraceEngine(hooks=[_BrokenHook()])

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        root = engine.run(child, ["a"])
        engine.run(child, ["b"], {"trace": {"parent": root.id}})
        engine.push_narrative(root.id, "still works")

    assert len(engine.get_trace()) == 3
    assert engine.get_ordered_narratives() == ["still works"]
    messages = [str(w.message) for w in caught]
    assert any("hook error in on_node_recorded" in msg for msg in messages)
    assert any("hook error in on_edge_recorded" in msg for msg in messages)
    assert any("hook error in on_narrative_added" in msg for msg in messages)


def test_hooks_may_implement_a_subset() -> None:
    hook = _PartialHook()
    engine = TraceEngine(hooks=[hook, NullHook()])

    root = engine.run(child, ["a"])
    engine.run(child, ["b"], {"trace": {"parent": root.id}})

    assert hook.nodes == 2
    assert isinstance(NullHook(), TraceHook)
    assert isinstance(_RecordingHook(), TraceHook)
