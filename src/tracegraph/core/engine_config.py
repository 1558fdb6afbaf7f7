"""Configuration for a TraceEngine instance."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ..models import TraceConfig

DanglingParentPolicy = Literal["ignore", "warn", "raise"]


class EngineConfig(BaseModel):
    """Validated configuration for a TraceEngine. Passed via DI at construction."""

    dangling_parent: DanglingParentPolicy = "ignore"
    auto_parent: bool = False
    link_sequential: bool = False
    default_trace_config: TraceConfig = Field(default_factory=TraceConfig)
