"""Example 1: Parallel fan-out.

An agent that: receives a query -> spawns 3 parallel search tasks via
asyncio.gather() -> merges results.

Validates: parent edges written after the running parent completes,
sibling ordinals assigned in completion order.
"""

from __future__ import annotations

import asyncio

from tracegraph.core import TraceEngine, get_current_node_id


async def main() -> None:
    engine = TraceEngine()

    async def search(source: str) -> dict[str, str]:
        await asyncio.sleep(0.01 if source == "web" else 0)
        return {"source": source, "summary": f"{source} results here"}

    async def research(query: str) -> list[str]:
        options = {"trace": {"parent": get_current_node_id()}, "config": {"parallel": True}}
        results = await asyncio.gather(
            engine.run(search, ["web"], options),
            engine.run(search, ["docs"], options),
            engine.run(search, ["arxiv"], options),
        )
        return [result.outputs["source"] for result in results]

    root = await engine.run(research, ["Compare Python, Rust, and Go"])

    # -- Assertions --
    nodes = engine.get_trace_nodes()
    assert len(nodes) == 4, f"Expected 4 nodes, got {len(nodes)}"
    assert nodes[-1].id == root.id, "The parent finishes last"

    labels = [node.data.label for node in nodes[:3]]
    assert labels == ["1 - search", "2 - search", "3 - search"]
    assert nodes[2].data.inputs == ["web"], "The slowest search completes last"

    edges = engine.get_trace_edges()
    assert len(edges) == 3
    assert all(edge.data.source == root.id for edge in edges)

    print("Example 1 PASSED: Parallel fan-out")


if __name__ == "__main__":
    asyncio.run(main())
