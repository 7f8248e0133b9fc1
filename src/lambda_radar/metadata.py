"""
Out-of-band metadata attached to handlers.

Metadata is kept in a side table keyed by the callable itself rather than on the
callable's attributes. Wrappers produced by the instrumentation decorators copy the
table entry of the callable they wrap, so annotations survive any number of stacked
wrappers.
"""

import weakref
from typing import Any, Callable, Dict, List, TypeVar

F = TypeVar('F', bound=Callable[..., Any])

_registry: 'weakref.WeakKeyDictionary[Callable[..., Any], Dict[str, Any]]' = weakref.WeakKeyDictionary()

_MISSING = object()


def _key(target: Callable[..., Any]) -> Callable[..., Any]:
    # Bound methods are created on every attribute access; key on the function
    return getattr(target, '__func__', target)


def define_metadata(key: str, value: Any, target: Callable[..., Any]) -> None:
    """Attach ``value`` under ``key`` to ``target``."""
    _registry.setdefault(_key(target), {})[key] = value


def get_metadata(key: str, target: Callable[..., Any], default: Any = None) -> Any:
    """Return the value stored under ``key`` for ``target``, or ``default``."""
    return _registry.get(_key(target), {}).get(key, default)


def has_metadata(key: str, target: Callable[..., Any]) -> bool:
    return get_metadata(key, target, _MISSING) is not _MISSING


def get_metadata_keys(target: Callable[..., Any]) -> List[str]:
    return list(_registry.get(_key(target), {}))


def copy_metadata(source: Callable[..., Any], target: Callable[..., Any]) -> None:
    """
    Copy every entry of ``source`` onto ``target``.

    Entries already defined on ``target`` are kept, so the result is the union of both.
    """
    entries = _registry.get(_key(source))
    if not entries:
        return
    merged = dict(entries)
    merged.update(_registry.get(_key(target), {}))
    _registry[_key(target)] = merged


def annotate(key: str, value: Any) -> Callable[[F], F]:
    """Decorator form of :func:`define_metadata`."""

    def decorator(func: F) -> F:
        define_metadata(key, value, func)
        return func

    return decorator
