"""Node id allocation and sibling ordinals for parallel children."""

from __future__ import annotations

import itertools
from collections import defaultdict
from uuid import uuid4

_process_counter = itertools.count(1)


class IdentifierGenerator:
    """Allocates ``<label>_<n>_<hex>`` ids and counts children per parent.

    The numeric part comes from a process-wide counter, so ids never repeat
    within one process even across generator instances.
    """

    def __init__(self) -> None:
        self._sibling_counts: defaultdict[tuple[str, str | None], int] = defaultdict(int)

    def allocate(self, label: str) -> str:
        return f"{label}_{next(_process_counter)}_{uuid4().hex[:8]}"

    def next_sibling_ordinal(self, parent_id: str, group: str | None = None) -> int:
        """Register one more child under ``parent_id`` and return its ordinal.

        Counts start at 1 and are never reused. ``group`` selects a separately
        counted set of siblings under the same parent.
        """
        key = (parent_id, group)
        self._sibling_counts[key] += 1
        return self._sibling_counts[key]


def sibling_label(ordinal: int, label: str) -> str:
    return f"{ordinal} - {label}"
