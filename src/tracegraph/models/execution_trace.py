"""Per-call options and the execution record returned by ``run``."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .node import NodeData

FieldPolicy = bool | list[str] | Callable[..., Any] | None

TRACE_FIELDS = (
    "inputs",
    "outputs",
    "errors",
    "narratives",
    "start_time",
    "end_time",
    "duration",
    "elapsed_time",
)
TRACE_FIELD_ALIASES = {to_camel(name): name for name in TRACE_FIELDS if to_camel(name) != name}


class ErrorPolicy(StrEnum):
    THROW = "throw"
    CATCH = "catch"


class ExecutionTrace(NodeData):
    """What ``run`` hands back: the recorded node data plus call facts."""

    is_deferred: bool = False


class ExecutionTraceExtractor(BaseModel):
    """Per-field extraction policy.

    ``inputs``, ``outputs``, ``errors`` and ``narratives`` each take ``True``
    (keep verbatim), a list of property names (project), or a callable
    (transform). Fields left unset are not captured.
    """

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    inputs: FieldPolicy = None
    outputs: FieldPolicy = None
    errors: FieldPolicy = None
    narratives: FieldPolicy = None
    start_time: bool | None = None
    end_time: bool | None = None


TraceExecutionPolicy = bool | list[str] | ExecutionTraceExtractor


class TraceOverrides(BaseModel):
    """Caller-supplied node values that win over computed ones."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    label: str | None = None
    parent: str | None = None
    abstract: bool = False
    narratives: list[str] | None = None
    inputs: Any = None
    outputs: Any = None


class TraceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    trace_execution: TraceExecutionPolicy | None = True
    parallel: bool | str = False
    errors: ErrorPolicy = ErrorPolicy.THROW

    @field_validator("trace_execution")
    @classmethod
    def check_field_names(cls, value: TraceExecutionPolicy | None) -> TraceExecutionPolicy | None:
        if isinstance(value, list):
            unknown = [name for name in value if TRACE_FIELD_ALIASES.get(name, name) not in TRACE_FIELDS]
            if unknown:
                raise ValueError(f"Unknown trace fields: {', '.join(unknown)}")
        return value

    def merged(self, other: TraceConfig | None) -> TraceConfig:
        """Return a copy with every field explicitly set on ``other`` applied."""
        if other is None:
            return self
        return self.model_copy(update={name: getattr(other, name) for name in other.model_fields_set})


class TraceOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    trace: TraceOverrides = Field(default_factory=TraceOverrides)
    config: TraceConfig | None = None
