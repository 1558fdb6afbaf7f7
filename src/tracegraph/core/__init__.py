"""Core tracing runtime."""

from .context import clear_context, get_current_node_id
from .decorators import traceable
from .engine import TraceEngine
from .engine_config import EngineConfig
from .execute import Invocation, describe_error, invoke, settle
from .extraction import (
    CaptureAll,
    CaptureFields,
    CaptureNone,
    CaptureTransform,
    RawRecord,
    apply_overrides,
    resolve,
    to_capture,
)
from .graph import TraceGraphStore
from .hooks import NullHook, TraceHook
from .identifiers import IdentifierGenerator, sibling_label
from .timer import ExecutionTimer, Timing, format_elapsed

__all__ = [
    "CaptureAll",
    "CaptureFields",
    "CaptureNone",
    "CaptureTransform",
    "EngineConfig",
    "ExecutionTimer",
    "IdentifierGenerator",
    "Invocation",
    "NullHook",
    "RawRecord",
    "TraceEngine",
    "TraceGraphStore",
    "TraceHook",
    "Timing",
    "apply_overrides",
    "clear_context",
    "describe_error",
    "format_elapsed",
    "get_current_node_id",
    "invoke",
    "resolve",
    "settle",
    "sibling_label",
    "to_capture",
    "traceable",
]
