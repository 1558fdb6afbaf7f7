"""Serialization helpers."""

from .json import trace_from_json, trace_to_dicts, trace_to_json

__all__ = ["trace_from_json", "trace_to_dicts", "trace_to_json"]
