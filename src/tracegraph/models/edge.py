"""Edge model linking a parent node to the node it caused."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def edge_id(source: str, target: str) -> str:
    return f"{source}->{target}"


class EdgeData(BaseModel):
    """Directional relationship between two node ids."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    source: str
    target: str

    @model_validator(mode="after")
    def derive_id(self) -> EdgeData:
        if not self.id:
            self.id = edge_id(self.source, self.target)
        return self


class TraceEdge(BaseModel):
    """Graph entry wrapping an edge, tagged with the ``edges`` group."""

    model_config = ConfigDict(extra="ignore")

    group: Literal["edges"] = "edges"
    data: EdgeData

    @property
    def id(self) -> str:
        return self.data.id
