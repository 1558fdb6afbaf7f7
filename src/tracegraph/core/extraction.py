"""Resolve an extraction policy against the raw facts of one execution."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from ..models import ExecutionTraceExtractor, TraceExecutionPolicy, TraceOverrides
from ..models.execution_trace import TRACE_FIELD_ALIASES, TRACE_FIELDS

RECORD_FIELDS = TRACE_FIELDS
OVERRIDABLE_FIELDS = ("inputs", "outputs", "narratives")


@dataclass(frozen=True)
class CaptureAll:
    pass


@dataclass(frozen=True)
class CaptureNone:
    pass


@dataclass(frozen=True)
class CaptureFields:
    names: tuple[str, ...]


@dataclass(frozen=True)
class CaptureTransform:
    fn: Callable[..., Any]


Capture = CaptureAll | CaptureNone | CaptureFields | CaptureTransform


@dataclass(frozen=True)
class RawRecord:
    """Everything observed about one call, before any policy is applied."""

    inputs: Any = None
    outputs: Any = None
    errors: list[dict[str, str]] | None = None
    narratives: list[str] | None = None
    start_time: Any = None
    end_time: Any = None
    duration: float | None = None
    elapsed_time: str | None = None


def to_capture(value: object) -> Capture:
    if value is None or value is False:
        return CaptureNone()
    if value is True:
        return CaptureAll()
    if callable(value):
        return CaptureTransform(value)
    if isinstance(value, (list, tuple)):
        return CaptureFields(tuple(value))
    raise TypeError(f"Unsupported field policy: {value!r}")


def apply_overrides(record: RawRecord, overrides: TraceOverrides) -> RawRecord:
    """Replace raw values with caller-supplied ones, before any transform runs."""
    update = {
        name: getattr(overrides, name) for name in OVERRIDABLE_FIELDS if name in overrides.model_fields_set
    }
    return replace(record, **update)


def resolve(policy: TraceExecutionPolicy | None, record: RawRecord) -> dict[str, Any]:
    """Return the facets of ``record`` that ``policy`` keeps, keyed by field name.

    Facets that are not kept come back as ``None``.
    """
    if isinstance(policy, ExecutionTraceExtractor):
        return _resolve_extractor(policy, record)
    if policy is None or policy is False:
        kept: set[str] = set()
    elif policy is True:
        kept = set(RECORD_FIELDS)
    else:
        kept = {TRACE_FIELD_ALIASES.get(name, name) for name in policy}
    resolved: dict[str, Any] = dict.fromkeys(RECORD_FIELDS)
    for name in RECORD_FIELDS:
        if name in kept:
            resolved[name] = getattr(record, name)
    resolved["narratives"] = _copy_narratives(resolved["narratives"])
    return resolved


def project(value: Any, names: Sequence[str]) -> Any:
    """Keep only ``names`` of a mapping or object; lists are projected element-wise."""
    if isinstance(value, Mapping):
        return {name: value[name] for name in names if name in value}
    if isinstance(value, (list, tuple)):
        return [project(item, names) for item in value]
    if value is None or isinstance(value, (str, bytes, int, float, bool)):
        return None
    return {name: getattr(value, name) for name in names if hasattr(value, name)}


def apply_capture(capture: Capture, value: Any) -> Any:
    if isinstance(capture, CaptureNone):
        return None
    if isinstance(capture, CaptureAll):
        return value
    if isinstance(capture, CaptureFields):
        return project(value, capture.names)
    return capture.fn(value)


def _resolve_extractor(extractor: ExecutionTraceExtractor, record: RawRecord) -> dict[str, Any]:
    resolved: dict[str, Any] = dict.fromkeys(RECORD_FIELDS)
    for name in ("inputs", "outputs", "errors"):
        value = getattr(record, name)
        if name == "errors" and value is None:
            continue
        resolved[name] = apply_capture(to_capture(getattr(extractor, name)), value)

    if extractor.start_time:
        resolved["start_time"] = record.start_time
    if extractor.end_time:
        resolved["end_time"] = record.end_time
    if extractor.start_time and extractor.end_time:
        resolved["duration"] = record.duration
        resolved["elapsed_time"] = record.elapsed_time

    # narratives resolve after every other field
    resolved["narratives"] = _resolve_narratives(to_capture(extractor.narratives), record)
    return resolved


def _resolve_narratives(capture: Capture, record: RawRecord) -> list[str] | None:
    if isinstance(capture, CaptureNone):
        return None
    if not isinstance(capture, CaptureTransform):
        return _copy_narratives(record.narratives)
    produced = capture.fn(record)
    if isinstance(produced, str):
        produced = [produced]
    return [*(record.narratives or []), *(produced or [])]


def _copy_narratives(narratives: list[str] | None) -> list[str] | None:
    return list(narratives) if narratives is not None else None
