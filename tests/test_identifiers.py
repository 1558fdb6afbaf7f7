from __future__ import annotations

import re

import pytest

from tracegraph.core import ExecutionTimer, IdentifierGenerator, format_elapsed, sibling_label


def test_allocate_prefixes_label_and_never_repeats() -> None:
    generator = IdentifierGenerator()

    ids = [generator.allocate("fetch") for _ in range(500)]

    assert all(re.fullmatch(r"fetch_\d+_[0-9a-f]{8}", node_id) for node_id in ids)
    assert len(set(ids)) == 500


def test_ids_stay_unique_across_generators() -> None:
    assert IdentifierGenerator().allocate("fn") != IdentifierGenerator().allocate("fn")


def test_sibling_ordinals_count_per_parent_and_group() -> None:
    generator = IdentifierGenerator()

    assert generator.next_sibling_ordinal("p1") == 1
    assert generator.next_sibling_ordinal("p1") == 2
    assert generator.next_sibling_ordinal("p2") == 1
    assert generator.next_sibling_ordinal("p1", "fetch") == 1
    assert generator.next_sibling_ordinal("p1") == 3


def test_sibling_label_format() -> None:
    assert sibling_label(3, "fetchX") == "3 - fetchX"


@pytest.mark.parametrize(
    ("duration_ms", "expected"),
    [(0.4, "0.4ms"), (850, "850.0ms"), (1200, "1.2s"), (59_940, "59.9s"), (123_400, "2m 3.4s")],
)
def test_format_elapsed(duration_ms: float, expected: str) -> None:
    assert format_elapsed(duration_ms) == expected


def test_timer_bounds_a_span() -> None:
    timer = ExecutionTimer()

    timing = timer.stop(timer.start())

    assert timing.end_time >= timing.start_time
    assert timing.duration >= 0
    assert timing.elapsed_time.endswith("ms")
