from __future__ import annotations

import inspect
import logging
import reprlib
from dataclasses import fields, is_dataclass
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence, Set, Tuple, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxstring = 60
_repr.maxdict = 8
_repr.maxlist = 8
_repr.maxtuple = 8

# Collections summarised by length instead of listing every item.
_SUMMARY_FIELDS = {"categories", "segments", "bars", "ticks", "legend", "labels", "names", "colors"}


def _brackets(value: Sequence[Any]) -> Tuple[str, str]:
    if isinstance(value, tuple):
        return "(", ")"
    if isinstance(value, (set, frozenset)):
        return "{", "}"
    return "[", "]"


def _summarize_dataclass(value: Any, max_items: int) -> str:
    parts = []
    for item in fields(value):
        attr = getattr(value, item.name)
        if item.name in _SUMMARY_FIELDS and isinstance(attr, (list, tuple)):
            parts.append(f"{item.name}=<{len(attr)} items>")
        elif attr is None:
            continue
        else:
            parts.append(f"{item.name}={_safe_repr(attr, max_items=max_items)}")
        if len(parts) >= max_items:
            parts.append("...")
            break
    return f"{type(value).__name__}(" + ", ".join(parts) + ")"


def _safe_repr(value: Any, *, max_items: int = 5, max_length: int = 300) -> str:
    if isinstance(value, np.ndarray):
        summary = f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype})"
        if value.size == 0:
            return summary
        if value.size <= max_items:
            return f"{summary}, values={_repr.repr(value.tolist())}"
        return f"{summary}, min={float(value.min()):.6g}, max={float(value.max()):.6g}"

    if is_dataclass(value) and not isinstance(value, type):
        rendered = _summarize_dataclass(value, max_items)
    elif isinstance(value, dict):
        items = []
        for idx, (key, val) in enumerate(value.items()):
            if idx >= max_items:
                items.append("...")
                break
            items.append(f"{_safe_repr(key)}: {_safe_repr(val)}")
        rendered = "{" + ", ".join(items) + "}"
    elif isinstance(value, (list, tuple, set, frozenset)):
        open_br, close_br = _brackets(value)
        items = []
        for idx, item in enumerate(value):
            if idx >= max_items:
                items.append(f"... ({len(value)} total)")
                break
            items.append(_safe_repr(item))
        rendered = f"{open_br}{', '.join(items)}{close_br}"
    else:
        rendered = _repr.repr(value)

    if len(rendered) > max_length:
        return rendered[:max_length] + "... (truncated)"
    return rendered


def _format_arguments(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = []
    if args:
        parts.append("args=[" + ", ".join(_safe_repr(arg) for arg in args) + "]")
    if kwargs:
        parts.append(
            "kwargs={" + ", ".join(f"{key}={_safe_repr(value)}" for key, value in kwargs.items()) + "}"
        )
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Return a decorator that traces calls at DEBUG level.

    Nothing is formatted unless ``logger`` is enabled for DEBUG, so wrapped
    layout functions cost a single level check in normal runs.
    """

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func

        qualname = name or getattr(func, "__qualname__", getattr(func, "__name__", "<callable>"))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            enabled = logger.isEnabledFor(logging.DEBUG)
            if enabled:
                logger.debug("Entering %s (%s)", qualname, _format_arguments(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                if enabled:
                    logger.debug("Exception in %s", qualname, exc_info=True)
                raise
            if enabled:
                if log_result:
                    logger.debug("Exiting %s -> %s", qualname, _safe_repr(result))
                else:
                    logger.debug("Exiting %s", qualname)
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public module-level functions of ``namespace`` with tracing.

    Private helpers (leading underscore) are left alone to keep traces short.
    """

    module_name = namespace.get("__name__")
    if not isinstance(module_name, str):
        module_name = None
    logger = logger or logging.getLogger(module_name or __name__)
    skip_set: Set[str] = set(skip or [])

    for attr_name, value in list(namespace.items()):
        if attr_name in skip_set or attr_name.startswith("_"):
            continue
        if inspect.isfunction(value) and getattr(value, "__module__", None) == module_name:
            namespace[attr_name] = debug_log_call(logger, name=attr_name)(value)
