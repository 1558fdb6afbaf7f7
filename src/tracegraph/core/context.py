"""Context propagation of the node currently being executed."""

from __future__ import annotations

import contextvars

_current_node_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tracegraph_current_node_id",
    default=None,
)


def get_current_node_id() -> str | None:
    """Id of the traced call whose function body is running, if any."""
    return _current_node_id.get()


def push_current_node_id(node_id: str | None) -> contextvars.Token[str | None]:
    return _current_node_id.set(node_id)


def reset_current_node_id(token: contextvars.Token[str | None]) -> None:
    _current_node_id.reset(token)


def clear_context() -> None:
    _current_node_id.set(None)
