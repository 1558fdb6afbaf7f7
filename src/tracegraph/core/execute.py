"""Invoke a callable and capture its result or error without re-raising."""

from __future__ import annotations

import inspect
import traceback
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, cast


@dataclass(frozen=True)
class Invocation:
    """Outcome of calling the target function.

    ``is_deferred`` marks an awaitable result that has not settled yet.
    """

    result: Any = None
    error: Exception | None = None
    is_deferred: bool = False


def invoke(
    fn: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> Invocation:
    try:
        result = fn(*args, **(kwargs or {}))
    except Exception as exc:
        return Invocation(error=exc)
    if inspect.isawaitable(result):
        return Invocation(result=result, is_deferred=True)
    return Invocation(result=result)


async def settle(invocation: Invocation) -> Invocation:
    """Await a deferred invocation, folding a rejection into ``error``."""
    if not invocation.is_deferred or invocation.error is not None:
        return invocation
    try:
        result = await cast(Awaitable[Any], invocation.result)
    except Exception as exc:
        return replace(invocation, result=None, error=exc)
    return replace(invocation, result=result)


def describe_error(exc: BaseException) -> dict[str, str]:
    return {
        "type": exc.__class__.__name__,
        "message": str(exc),
        "traceback": "".join(traceback.format_exception(exc)),
    }
