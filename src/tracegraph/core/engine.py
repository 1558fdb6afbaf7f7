"""TraceEngine: runs functions and records every call in a trace graph."""

from __future__ import annotations

import copy
import warnings
from collections import defaultdict
from collections.abc import Callable, Coroutine, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ..exceptions import DanglingParentError
from ..models import (
    EdgeData,
    ErrorPolicy,
    ExecutionTrace,
    NodeData,
    TraceConfig,
    TraceEdge,
    TraceEntry,
    TraceNode,
    TraceOptions,
    TraceOverrides,
)
from .context import get_current_node_id, push_current_node_id, reset_current_node_id
from .engine_config import EngineConfig
from .execute import Invocation, describe_error, invoke, settle
from .extraction import RawRecord, apply_overrides, resolve
from .graph import TraceGraphStore
from .hooks import TraceHook
from .identifiers import IdentifierGenerator, sibling_label
from .timer import ExecutionTimer, TimerHandle

Options = TraceOptions | Mapping[str, Any] | None


@dataclass
class _PendingCall:
    node_id: str
    label: str
    parent: str | None
    overrides: TraceOverrides
    config: TraceConfig
    inputs: list[Any]
    create_time: datetime
    timer_handle: TimerHandle
    invocation: Invocation


class TraceEngine:
    """Owns one trace graph and records each ``run`` into it.

    Error-handling contract
    ----------------------
    - Invalid options raise ``pydantic.ValidationError`` before the function
      runs; these are programming errors the caller should fix.
    - An error raised by the function (or by a custom extractor) is recorded
      and re-raised under the ``"throw"`` policy, embedded in the returned
      trace under ``"catch"``.
    - Hook failures are swallowed with ``warnings.warn``.

    Recording a finished call never suspends, so concurrent deferred calls
    on one event loop cannot interleave their writes to the graph.
    """

    def __init__(
        self,
        initial_trace: Sequence[TraceEntry | dict[str, Any]] | None = None,
        config: EngineConfig | None = None,
        hooks: list[TraceHook] | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.hooks: list[TraceHook] = hooks or []
        self.graph = TraceGraphStore(initial_trace)
        self._ids = IdentifierGenerator()
        self._timer = ExecutionTimer()
        self._in_flight: set[str] = set()
        self._held_edges: defaultdict[str, list[str]] = defaultdict(list)

    def run(
        self,
        fn: Callable[..., Any],
        args: Sequence[Any] | None = None,
        options: Options = None,
        *,
        kwargs: Mapping[str, Any] | None = None,
    ) -> ExecutionTrace | Coroutine[Any, Any, ExecutionTrace]:
        """Call ``fn(*args, **kwargs)`` and record it.

        Returns the ``ExecutionTrace`` directly, or a coroutine resolving to it
        when ``fn`` produced an awaitable. A coroutine that is never awaited
        leaves its node id marked as running, so edges from children naming it
        as parent stay held; a cancelled await drops them.
        """
        call = self._start(fn, args, options, kwargs)
        if call.invocation.is_deferred:
            return self._run_deferred(call)
        trace, _ = self._complete(call, call.invocation)
        return trace

    def call(
        self,
        fn: Callable[..., Any],
        args: Sequence[Any] | None = None,
        options: Options = None,
        *,
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        """Like ``run`` but hands back ``fn``'s own result.

        A caught error yields ``None``.
        """
        call = self._start(fn, args, options, kwargs)
        if call.invocation.is_deferred:
            return self._call_deferred(call)
        _, invocation = self._complete(call, call.invocation)
        return invocation.result

    def get_trace(self) -> list[TraceEntry]:
        return self.graph.get_trace()

    def get_trace_nodes(self) -> list[TraceNode]:
        return self.graph.get_trace_nodes()

    def get_trace_edges(self) -> list[TraceEdge]:
        return self.graph.get_trace_edges()

    def push_narrative(self, node_id: str, text: str) -> None:
        self.append_narratives(node_id, [text])

    def append_narratives(self, node_id: str, texts: Iterable[str]) -> None:
        texts = list(texts)
        if self.graph.append_narratives(node_id, texts):
            node = self.graph.get_node(node_id)
            self._dispatch("on_narrative_added", node, texts)

    def get_ordered_narratives(self) -> list[str]:
        return self.graph.get_ordered_narratives()

    def _start(
        self,
        fn: Callable[..., Any],
        args: Sequence[Any] | None,
        options: Options,
        kwargs: Mapping[str, Any] | None,
    ) -> _PendingCall:
        if not isinstance(options, TraceOptions):
            options = TraceOptions.model_validate(options or {})
        overrides = options.trace
        config = self.config.default_trace_config.merged(options.config)

        parent = overrides.parent
        if parent is None and self.config.auto_parent:
            parent = get_current_node_id()
        if parent is not None:
            self._check_parent(parent)

        name = _function_name(fn)
        node_id = overrides.id or self._ids.allocate(name)
        inputs = list(args or [])
        if kwargs:
            inputs.append(dict(kwargs))
        create_time = datetime.now(UTC)

        self._in_flight.add(node_id)
        timer_handle = self._timer.start()
        token = push_current_node_id(node_id)
        try:
            invocation = invoke(fn, args or (), kwargs)
        finally:
            reset_current_node_id(token)

        return _PendingCall(
            node_id=node_id,
            label=overrides.label or name,
            parent=parent,
            overrides=overrides,
            config=config,
            inputs=inputs,
            create_time=create_time,
            timer_handle=timer_handle,
            invocation=invocation,
        )

    async def _settle(self, call: _PendingCall) -> tuple[ExecutionTrace, Invocation]:
        token = push_current_node_id(call.node_id)
        try:
            invocation = await settle(call.invocation)
        except BaseException:
            self._abandon(call.node_id)
            raise
        finally:
            reset_current_node_id(token)
        return self._complete(call, invocation)

    async def _run_deferred(self, call: _PendingCall) -> ExecutionTrace:
        trace, _ = await self._settle(call)
        return trace

    async def _call_deferred(self, call: _PendingCall) -> Any:
        _, invocation = await self._settle(call)
        return invocation.result

    def _complete(self, call: _PendingCall, invocation: Invocation) -> tuple[ExecutionTrace, Invocation]:
        timing = self._timer.stop(call.timer_handle)
        raw = RawRecord(
            inputs=call.inputs,
            outputs=invocation.result if invocation.error is None else None,
            errors=[describe_error(invocation.error)] if invocation.error is not None else None,
            start_time=timing.start_time,
            end_time=timing.end_time,
            duration=timing.duration,
            elapsed_time=timing.elapsed_time,
        )
        label = self._resolve_label(call)
        catching = call.config.errors == ErrorPolicy.CATCH
        try:
            facets = resolve(call.config.trace_execution, apply_overrides(raw, call.overrides))
            trace = self._build_trace(call, label, facets)
        except Exception as exc:
            if not catching:
                self._abandon(call.node_id)
                raise
            warnings.warn(
                f"tracegraph: trace extraction failed for {call.node_id!r}: {exc}",
                stacklevel=2,
            )
            trace = self._build_trace(call, label, {"errors": [describe_error(exc)]})

        self._record(call, trace)
        if invocation.error is not None and not catching:
            raise invocation.error
        return trace, invocation

    def _resolve_label(self, call: _PendingCall) -> str:
        """Count the call as a child of its parent; prefix the ordinal when parallel."""
        if call.parent is None:
            return call.label
        parallel = call.config.parallel
        group = parallel if isinstance(parallel, str) else None
        ordinal = self._ids.next_sibling_ordinal(call.parent, group)
        if parallel and call.overrides.label is None:
            return sibling_label(ordinal, call.label)
        return call.label

    def _build_trace(self, call: _PendingCall, label: str, facets: Mapping[str, Any]) -> ExecutionTrace:
        return ExecutionTrace(
            id=call.node_id,
            label=label,
            parent=call.parent,
            parallel=bool(call.config.parallel),
            abstract=call.overrides.abstract,
            create_time=call.create_time,
            is_deferred=call.invocation.is_deferred,
            **facets,
        )

    def _record(self, call: _PendingCall, trace: ExecutionTrace) -> None:
        fields = {name: getattr(trace, name) for name in NodeData.model_fields}
        for name in ("inputs", "outputs", "errors", "narratives"):
            fields[name] = _detached(fields[name])
        node = TraceNode(data=NodeData(**fields))
        previous_id = self.graph.last_node_id

        self._in_flight.discard(call.node_id)
        self.graph.add_node(node)
        self._dispatch("on_node_recorded", node)

        if call.parent is not None:
            if call.parent in self._in_flight:
                self._held_edges[call.parent].append(node.id)
            elif self.graph.has_node(call.parent):
                self._add_edge(call.parent, node.id)
        elif self.config.link_sequential and previous_id is not None:
            self._add_edge(previous_id, node.id)

        for child_id in self._held_edges.pop(node.id, []):
            self._add_edge(node.id, child_id)

    def _add_edge(self, source: str, target: str) -> None:
        edge = TraceEdge(data=EdgeData(source=source, target=target))
        self.graph.add_edge(edge)
        self._dispatch("on_edge_recorded", edge)

    def _abandon(self, node_id: str) -> None:
        """Forget a call that will never be recorded, and the edges held for it."""
        self._in_flight.discard(node_id)
        orphans = self._held_edges.pop(node_id, [])
        if orphans and self.config.dangling_parent != "ignore":
            warnings.warn(
                f"tracegraph: parent {node_id!r} was not recorded; "
                f"dropped edges to {', '.join(orphans)}",
                stacklevel=3,
            )

    def _check_parent(self, parent: str) -> None:
        if parent in self._in_flight or self.graph.has_node(parent):
            return
        if self.config.dangling_parent == "raise":
            raise DanglingParentError(parent)
        if self.config.dangling_parent == "warn":
            warnings.warn(
                f"tracegraph: parent {parent!r} is not in the trace; no edge will be drawn",
                stacklevel=4,
            )

    def _dispatch(self, event: str, *args: Any) -> None:
        for hook in self.hooks:
            handler = getattr(hook, event, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception:
                warnings.warn(f"tracegraph: hook error in {event}", stacklevel=2)


def _function_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", None) or fn.__class__.__name__


def _detached(value: Any) -> Any:
    """Deep copy a captured value so the caller's trace and the graph share nothing.

    Values that cannot be copied are stored by reference.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error) as exc:
        warnings.warn(f"tracegraph: storing uncopyable value by reference: {exc}", stacklevel=2)
        return value
