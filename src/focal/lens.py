"""
Lens System

A lens is a focal point that has been separated from the operation that
will use it. Define it once:

    two = lens_from_path(["nest", "two"])

then read, write or update through it:

    view(two, data)            -> 2
    set_(two, "Dos", data)     -> {"one": 1, "nest": {"two": "Dos"}}
    over(two, negate, data)    -> {"one": 1, "nest": {"two": -2}}

ARCHITECTURAL RULE:
    A Lens holds no data.
    It is a pair of pure functions and can be shared freely,
    applied to any number of values, from any number of threads.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Optional

from focal.paths import (
    ABSENT,
    ConflictPolicy,
    Path,
    as_path,
    assoc_path,
    get_path,
)


@dataclass(frozen=True, eq=False)
class Lens:
    """
    A getter/setter pair focused on one location.

    Properties:
        getter: data -> focused value (ABSENT when missing)
        setter: (data, new focused value) -> new data
        path: The focal point, for lenses built from paths.
              None for lenses built from arbitrary accessors.
        on_conflict: The ConflictPolicy the setter writes with, for
              lenses built from paths. None when unknown.

    IMPORTANT:
        The setter must not mutate its input.
        Getter and setter consistency is the caller's responsibility
        for lenses built with lens_from_accessors.

    Lenses compare by identity. Compare `.path` to ask whether two
    path lenses focus on the same location.
    """

    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], Any]
    path: Optional[Path] = None
    on_conflict: Optional[ConflictPolicy] = None

    def then(self, other: Lens) -> Lens:
        """Focus through this lens, then through `other`."""
        return compose(self, other)


def lens_from_path(path, on_conflict: ConflictPolicy = ConflictPolicy.OVERWRITE) -> Lens:
    """
    Build a lens focused on `path`.

    Args:
        path: Path, list/tuple of keys, or a single key
        on_conflict: Passed to assoc_path for every write

    Returns:
        Lens whose getter is get_path and whose setter is assoc_path
    """
    focal = as_path(path)
    return Lens(
        getter=lambda data: get_path(focal, data),
        setter=lambda data, value: assoc_path(focal, value, data, on_conflict=on_conflict),
        path=focal,
        on_conflict=on_conflict,
    )


def lens_from_accessors(getter: Callable[[Any], Any], setter: Callable[[Any, Any], Any]) -> Lens:
    """Build a lens from an arbitrary getter and setter. No validation is done."""
    return Lens(getter=getter, setter=setter)


def lens_prop(key) -> Lens:
    return lens_from_path(Path.of(key))


def lens_index(index: int) -> Lens:
    if not isinstance(index, int) or isinstance(index, bool):
        raise TypeError(f"lens_index expects an int, got {type(index).__name__}")
    return lens_from_path(Path.of(index))


def identity_lens() -> Lens:
    """The lens focused on the whole value."""
    return Lens(getter=lambda data: data, setter=lambda data, value: value, path=Path())


def view(lens: Lens, data: Any) -> Any:
    return lens.getter(data)


def set_(lens: Lens, value: Any, data: Any) -> Any:
    return lens.setter(data, value)


def over(lens: Lens, fn: Callable[[Any], Any], data: Any) -> Any:
    """
    Replace the focused value with `fn(focused value)`.

    Always equal to set_(lens, fn(view(lens, data)), data).
    When the focus is missing, `fn` is called with ABSENT; wrap it with
    with_default() to substitute a starting value instead.
    """
    return lens.setter(data, fn(lens.getter(data)))


def with_default(fn: Callable[[Any], Any], default: Any) -> Callable[[Any], Any]:
    """
    Wrap `fn` so that ABSENT is replaced by `default` before `fn` runs.

    Example:
        over(counter, with_default(increment, 0), {})  -> {"count": 1}
    """
    def wrapped(value):
        return fn(default if value is ABSENT else value)
    return wrapped


def _compose_pair(outer: Lens, inner: Lens) -> Lens:
    def getter(data):
        focused = outer.getter(data)
        if focused is ABSENT:
            return ABSENT
        return inner.getter(focused)

    def setter(data, value):
        return outer.setter(data, inner.setter(outer.getter(data), value))

    path = None
    if outer.path is not None and inner.path is not None:
        path = outer.path + inner.path

    # The identity lens has no policy; differing policies leave it unknown
    policies = {lens.on_conflict for lens in (outer, inner) if lens.on_conflict is not None}
    on_conflict = policies.pop() if len(policies) == 1 else None
    return Lens(getter=getter, setter=setter, path=path, on_conflict=on_conflict)


def compose(*lenses: Lens) -> Lens:
    """
    Combine lenses left to right: compose(a, b) focuses through a, then b.

    compose() is the identity lens. Composition is associative:
        compose(compose(a, b), c) behaves like compose(a, compose(b, c))

    When every part is a path lens, the result carries the concatenated
    path, and behaves like lens_from_path on that path.
    """
    if not lenses:
        return identity_lens()
    return reduce(_compose_pair, lenses)


__all__ = [
    "Lens",
    "compose",
    "identity_lens",
    "lens_from_accessors",
    "lens_from_path",
    "lens_index",
    "lens_prop",
    "over",
    "set_",
    "view",
    "with_default",
]
