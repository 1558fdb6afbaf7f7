"""Event hook protocol for observing graph growth."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models import TraceEdge, TraceNode


@runtime_checkable
class TraceHook(Protocol):
    """Protocol for receiving graph events.

    Hook methods must not raise; exceptions are swallowed by the dispatcher.
    """

    def on_node_recorded(self, node: TraceNode) -> None: ...
    def on_edge_recorded(self, edge: TraceEdge) -> None: ...
    def on_narrative_added(self, node: TraceNode, texts: Sequence[str]) -> None: ...


class NullHook:
    """No-op hook. Useful as a reference implementation and in tests."""

    def on_node_recorded(self, node: TraceNode) -> None:
        pass

    def on_edge_recorded(self, edge: TraceEdge) -> None:
        pass

    def on_narrative_added(self, node: TraceNode, texts: Sequence[str]) -> None:
        pass
