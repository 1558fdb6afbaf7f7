"""JSON encoding of graph entries, for export and for seeding new engines."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime

from pydantic import TypeAdapter

from ..exceptions import TracegraphLoadError
from ..models import TraceEntry

_entries_adapter: TypeAdapter[list[TraceEntry]] = TypeAdapter(list[TraceEntry])


def trace_to_dicts(entries: Sequence[TraceEntry]) -> list[dict[str, object]]:
    """Dump entries to plain dicts using the camelCase wire names."""
    return [entry.model_dump(by_alias=True) for entry in entries]


def trace_to_json(entries: Sequence[TraceEntry], *, indent: int | None = 2) -> str:
    """Encode entries as JSON.

    Captured values that JSON cannot represent are replaced by their repr,
    marked ``[NON-SERIALIZABLE]``.
    """
    return json.dumps(trace_to_dicts(entries), indent=indent, default=_encode_fallback)


def trace_from_json(payload: str) -> list[TraceEntry]:
    """Parse a JSON array of entries, e.g. to seed ``TraceEngine(initial_trace=...)``.

    Raises ``TracegraphLoadError`` on invalid or unparseable input.
    """
    try:
        return _entries_adapter.validate_json(payload)
    except ValueError as exc:
        raise TracegraphLoadError(f"Failed to parse trace JSON: {exc}") from exc


def _encode_fallback(value: object) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return f"{value!r} [NON-SERIALIZABLE]"
