"""Node model for one recorded execution."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NodeData(BaseModel):
    """Identity, captured facets and bookkeeping timestamps of a node.

    Facets the extraction policy did not request stay ``None``.
    """

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    id: str
    label: str
    parent: str | None = None
    parallel: bool = False
    abstract: bool = False
    inputs: Any = None
    outputs: Any = None
    errors: Any = None
    narratives: list[str] | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: float | None = None
    elapsed_time: str | None = None
    create_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    update_time: datetime | None = None

    def touch(self) -> None:
        self.update_time = datetime.now(UTC)


class TraceNode(BaseModel):
    """Graph entry wrapping a node, tagged with the ``nodes`` group."""

    model_config = ConfigDict(extra="ignore")

    group: Literal["nodes"] = "nodes"
    data: NodeData

    @property
    def id(self) -> str:
        return self.data.id
