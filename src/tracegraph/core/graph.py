"""Append-only store of trace nodes and edges."""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import TypeAdapter

from ..models import TraceEdge, TraceEntry, TraceNode

_entry_adapter: TypeAdapter[TraceEntry] = TypeAdapter(TraceEntry)


class TraceGraphStore:
    """Ordered nodes and edges of one graph, with O(1) node lookup by id.

    Entries are only ever appended. The sole in-place mutation is appending
    narratives to an existing node.
    """

    def __init__(self, initial_trace: Sequence[TraceEntry | dict[str, Any]] | None = None) -> None:
        self._entries: list[TraceEntry] = []
        self._node_index: dict[str, int] = {}
        self._last_node_id: str | None = None
        for entry in initial_trace or []:
            if isinstance(entry, dict):
                entry = _entry_adapter.validate_python(entry)
            if isinstance(entry, TraceNode):
                self.add_node(entry)
            else:
                self.add_edge(entry)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def last_node_id(self) -> str | None:
        return self._last_node_id

    def add_node(self, node: TraceNode) -> None:
        if node.id in self._node_index:
            warnings.warn(
                f"tracegraph: duplicate node id {node.id!r}; lookups now resolve to the newest node",
                stacklevel=2,
            )
        self._node_index[node.id] = len(self._entries)
        self._entries.append(node)
        self._last_node_id = node.id

    def add_edge(self, edge: TraceEdge) -> None:
        self._entries.append(edge)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_index

    def get_node(self, node_id: str) -> TraceNode | None:
        position = self._node_index.get(node_id)
        if position is None:
            return None
        node = self._entries[position]
        assert isinstance(node, TraceNode)
        return node

    def get_trace(self) -> list[TraceEntry]:
        return list(self._entries)

    def get_trace_nodes(self) -> list[TraceNode]:
        return [entry for entry in self._entries if isinstance(entry, TraceNode)]

    def get_trace_edges(self) -> list[TraceEdge]:
        return [entry for entry in self._entries if isinstance(entry, TraceEdge)]

    def push_narrative(self, node_id: str, text: str) -> bool:
        return self.append_narratives(node_id, [text])

    def append_narratives(self, node_id: str, texts: Iterable[str]) -> bool:
        """Append ``texts`` in order to a node's narratives.

        Unknown ids are ignored. Returns whether the node was found.
        """
        node = self.get_node(node_id)
        if node is None:
            return False
        if node.data.narratives is None:
            node.data.narratives = []
        node.data.narratives.extend(texts)
        node.data.touch()
        return True

    def get_ordered_narratives(self) -> list[str]:
        return [text for node in self.get_trace_nodes() for text in node.data.narratives or []]
