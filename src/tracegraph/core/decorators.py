"""Function decorators that record every call through a TraceEngine."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

if TYPE_CHECKING:
    from .engine import TraceEngine

P = ParamSpec("P")
R = TypeVar("R")

_BOUND_PARAMETERS = ("self", "cls")


def traceable(
    engine: TraceEngine | None = None,
    *,
    trace: Mapping[str, Any] | None = None,
    config: Mapping[str, Any] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Record each call of the decorated function as a trace node.

    ``trace`` and ``config`` take the same shape as the ``options`` of
    ``TraceEngine.run``. Without an explicit ``engine`` the default engine is
    looked up at call time. For methods, ``self``/``cls`` is dropped from the
    recorded inputs. Under ``errors="catch"`` a failing call returns ``None``.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        skip_first = _binds_instance(func)

        def prepare(args: tuple[Any, ...]) -> tuple[Callable[..., Any], tuple[Any, ...], dict[str, Any]]:
            options: dict[str, Any] = {"trace": dict(trace or {})}
            if config is not None:
                options["config"] = dict(config)
            if skip_first and args:
                instance, rest = args[0], args[1:]

                def bound(*call_args: Any, **call_kwargs: Any) -> Any:
                    return func(instance, *call_args, **call_kwargs)  # type: ignore[arg-type]

                bound.__name__ = func.__name__
                return bound, rest, options
            return func, args, options

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                target, call_args, options = prepare(args)
                result = _resolve_engine(engine).call(target, call_args, options, kwargs=kwargs)
                return await cast(Awaitable[R], result)

            return cast(Callable[P, R], async_wrapper)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            target, call_args, options = prepare(args)
            return cast(R, _resolve_engine(engine).call(target, call_args, options, kwargs=kwargs))

        return wrapper

    return decorator


def _binds_instance(func: Callable[..., Any]) -> bool:
    """Whether the first parameter is ``self`` or ``cls``."""
    try:
        parameters = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        return False
    return bool(parameters) and parameters[0] in _BOUND_PARAMETERS


def _resolve_engine(engine: TraceEngine | None) -> TraceEngine:
    if engine is not None:
        return engine
    from .. import get_default_engine

    return get_default_engine()
