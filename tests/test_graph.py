from __future__ import annotations

import warnings

import pytest
from pydantic import ValidationError

from tracegraph.core import TraceGraphStore
from tracegraph.models import EdgeData, NodeData, TraceEdge, TraceNode


def _node(node_id: str, narratives: list[str] | None = None) -> TraceNode:
    return TraceNode(data=NodeData(id=node_id, label=node_id, narratives=narratives))


def test_edge_id_is_derived_from_endpoints() -> None:
    edge = TraceEdge(data=EdgeData(source="a", target="b"))
    assert edge.id == "a->b"
    assert edge.group == "edges"


def test_seed_entries_accept_models_and_camel_case_dicts() -> None:
    store = TraceGraphStore(
        [
            _node("seed_1"),
            {"group": "nodes", "data": {"id": "seed_2", "label": "Seed 2", "elapsedTime": "1.0s"}},
            {"group": "edges", "data": {"source": "seed_1", "target": "seed_2"}},
        ]
    )

    assert len(store) == 3
    assert [node.id for node in store.get_trace_nodes()] == ["seed_1", "seed_2"]
    assert store.get_node("seed_2").data.elapsed_time == "1.0s"
    assert store.get_trace_edges()[0].id == "seed_1->seed_2"
    assert store.last_node_id == "seed_2"


def test_seed_entry_with_unknown_group_is_rejected() -> None:
    with pytest.raises(ValidationError):
        TraceGraphStore([{"group": "clusters", "data": {"id": "x"}}])


def test_get_trace_returns_a_copy_in_insertion_order() -> None:
    store = TraceGraphStore()
    store.add_node(_node("a"))
    store.add_edge(TraceEdge(data=EdgeData(source="a", target="b")))
    store.add_node(_node("b"))

    trace = store.get_trace()
    trace.clear()

    assert [entry.id for entry in store.get_trace()] == ["a", "a->b", "b"]
    assert store.has_node("b")
    assert not store.has_node("a->b")


def test_push_then_append_narratives_preserves_order() -> None:
    store = TraceGraphStore([_node("a", ["existing"]), _node("b")])

    assert store.push_narrative("a", "pushed")
    assert store.append_narratives("a", ["x", "y"])
    assert store.push_narrative("b", "first for b")

    node = store.get_node("a")
    assert node.data.narratives == ["existing", "pushed", "x", "y"]
    assert node.data.update_time is not None
    assert store.get_ordered_narratives() == ["existing", "pushed", "x", "y", "first for b"]


def test_narratives_for_unknown_node_are_a_no_op() -> None:
    store = TraceGraphStore([_node("a")])

    assert store.push_narrative("missing", "text") is False
    assert store.append_narratives("missing", ["text"]) is False
    assert store.get_node("a").data.narratives is None
    assert store.get_node("a").data.update_time is None


def test_duplicate_node_id_warns_and_resolves_to_newest() -> None:
    store = TraceGraphStore([_node("a")])
    newer = _node("a")

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        store.add_node(newer)

    assert any("duplicate node id" in str(w.message) for w in caught)
    assert store.get_node("a") is newer
    assert len(store.get_trace_nodes()) == 2


def test_seed_dicts_accept_iso_timestamps() -> None:
    store = TraceGraphStore(
        [
            {
                "group": "nodes",
                "data": {
                    "id": "n",
                    "label": "n",
                    "createTime": "2024-01-01T00:00:00+00:00",
                    "startTime": "2024-01-01T00:00:00+00:00",
                    "duration": 12,
                },
            }
        ]
    )

    data = store.get_node("n").data
    assert data.create_time.year == 2024
    assert data.start_time is not None
    assert data.duration == 12.0
