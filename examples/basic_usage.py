"""Basic usage example using the convenience API."""

from __future__ import annotations

import tracegraph
from tracegraph.serializers import trace_to_json


def classify(query: str) -> str:
    return "weather_api" if "weather" in query else "search"


def call_weather_api(location: str, api_key: str) -> dict[str, object]:
    return {"location": location, "temperature_f": 62, "condition": "foggy"}


def main() -> None:
    engine = tracegraph.configure()

    plan = tracegraph.run(classify, ["What is the weather in San Francisco?"])
    engine.push_narrative(plan.id, "Classified user intent as weather lookup")

    tracegraph.run(
        call_weather_api,
        ["San Francisco", "sk-not-for-logs"],
        {
            "trace": {"parent": plan.id},
            "config": {
                "trace_execution": {
                    "inputs": lambda inputs: inputs[:1],
                    "outputs": ["temperature_f", "condition"],
                    "narratives": lambda record: [f"Fetched weather for {record.inputs[0]}"],
                }
            },
        },
    )

    print(trace_to_json(engine.get_trace()))
    print("\n".join(engine.get_ordered_narratives()))


if __name__ == "__main__":
    main()
