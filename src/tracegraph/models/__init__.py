"""Graph entry models and per-call trace options."""

from typing import Annotated

from pydantic import Field

from .edge import EdgeData, TraceEdge, edge_id
from .execution_trace import (
    ErrorPolicy,
    ExecutionTrace,
    ExecutionTraceExtractor,
    TraceConfig,
    TraceExecutionPolicy,
    TraceOptions,
    TraceOverrides,
)
from .node import NodeData, TraceNode

TraceEntry = Annotated[TraceNode | TraceEdge, Field(discriminator="group")]

__all__ = [
    "EdgeData",
    "ErrorPolicy",
    "ExecutionTrace",
    "ExecutionTraceExtractor",
    "NodeData",
    "TraceConfig",
    "TraceEdge",
    "TraceEntry",
    "TraceExecutionPolicy",
    "TraceNode",
    "TraceOptions",
    "TraceOverrides",
    "edge_id",
]
