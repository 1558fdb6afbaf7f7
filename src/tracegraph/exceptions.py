"""Public exception types for tracegraph."""

from __future__ import annotations


class TracegraphError(Exception):
    """Base class for all tracegraph exceptions."""


class TracegraphLoadError(TracegraphError):
    """Raised when a serialized trace cannot be parsed."""


class DanglingParentError(TracegraphError):
    """Raised when ``trace.parent`` names no recorded or running node.

    Only raised when the engine is configured with ``dangling_parent="raise"``.
    """

    def __init__(self, parent_id: str) -> None:
        super().__init__(f"Unknown parent node id: {parent_id}")
        self.parent_id = parent_id
