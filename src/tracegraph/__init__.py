"""tracegraph: record function calls as a graph of trace nodes and edges.

Convenience API (delegates to a default TraceEngine instance):
    tracegraph.configure(...)    -> set up the default engine
    tracegraph.run(fn, args)     -> run and record one call
    tracegraph.traceable(...)    -> decorator for function-level tracing

DI API (construct your own engine):
    from tracegraph.core import EngineConfig, TraceEngine
    engine = TraceEngine(initial_trace=seed, config=EngineConfig(...))
    engine.run(fetch, ["Paris"], {"config": {"errors": "catch"}})
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine, Mapping, Sequence
from typing import Any

from .core import EngineConfig, NullHook, TraceEngine, TraceHook, get_current_node_id, traceable
from .core.engine_config import DanglingParentPolicy
from .exceptions import DanglingParentError, TracegraphError, TracegraphLoadError
from .models import ExecutionTrace, TraceConfig, TraceOptions

_default_engine: TraceEngine | None = None


def configure(
    *,
    dangling_parent: DanglingParentPolicy = "ignore",
    auto_parent: bool = False,
    link_sequential: bool = False,
    default_trace_config: TraceConfig | Mapping[str, Any] | None = None,
    hooks: list[TraceHook] | None = None,
) -> TraceEngine:
    """Configure and return the default global TraceEngine instance."""
    global _default_engine
    config = EngineConfig(
        dangling_parent=dangling_parent,
        auto_parent=auto_parent,
        link_sequential=link_sequential,
        default_trace_config=TraceConfig.model_validate(default_trace_config or {}),
    )
    _default_engine = TraceEngine(config=config, hooks=hooks)
    return _default_engine


def get_default_engine() -> TraceEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = TraceEngine()
    return _default_engine


def run(
    fn: Callable[..., Any],
    args: Sequence[Any] | None = None,
    options: TraceOptions | Mapping[str, Any] | None = None,
    *,
    kwargs: Mapping[str, Any] | None = None,
) -> ExecutionTrace | Coroutine[Any, Any, ExecutionTrace]:
    """Run and record one call using the default TraceEngine."""
    return get_default_engine().run(fn, args, options, kwargs=kwargs)


def _reset_default_engine() -> None:
    """Reset the default engine. Used by test fixtures."""
    global _default_engine
    _default_engine = None


__all__ = [
    "DanglingParentError",
    "EngineConfig",
    "ExecutionTrace",
    "NullHook",
    "TraceConfig",
    "TraceEngine",
    "TraceHook",
    "TraceOptions",
    "TracegraphError",
    "TracegraphLoadError",
    "configure",
    "get_current_node_id",
    "get_default_engine",
    "run",
    "traceable",
]
