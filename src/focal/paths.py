"""
Focal Points and Raw Path Operations

A focal point (Path) names a single location inside a nested value built from:
    - mappings (dict and other Mapping types)
    - sequences (list, tuple; str and bytes are scalars)
    - dataclass records (field names act as keys)
    - scalars

This module is the "plain" way of working with such locations:
    - get_path     read a value, never raises
    - assoc_path   write a value, returning new data
    - dissoc_path  remove a value, returning new data
    - update_path  read, apply a function, write back
    - evolve       apply a nested mapping of functions

ARCHITECTURAL RULE:
    Data is never mutated.
    Every write rebuilds the containers on the way from the root to the focus
    and shares everything else with the original by reference.
"""
from __future__ import annotations

import dataclasses
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Iterator, List, Tuple, Union


class Absent(Enum):
    """
    Result of reading a location that does not exist.

    There is exactly one member, ABSENT. It is falsy, so
    `view(lens, data) or default` reads naturally, but identity
    (`value is ABSENT`) is the reliable test because 0, "" and None
    are real values.
    """

    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = Absent.ABSENT


class ConflictPolicy(Enum):
    """
    What a write does when the path has to pass through a scalar.

    Example:
        assoc_path(["a", "b"], 1, {"a": 5})

    OVERWRITE: replace the scalar with a new container -> {"a": {"b": 1}}
    WARN:      same as OVERWRITE, but emit a UserWarning
    RAISE:     raise TypeConflictError
    """

    OVERWRITE = "overwrite"
    WARN = "warn"
    RAISE = "raise"


class PathError(Exception):
    """Raised when a write or removal cannot be expressed on the data."""
    pass


class TypeConflictError(PathError):
    """Raised when a path step does not fit the container found there."""
    pass


Key = Hashable


@dataclass(frozen=True)
class Path:
    """
    An ordered, immutable sequence of keys.

    Examples:
        Path(("one",))           -> data["one"]
        Path.of("nest", "two")   -> data["nest"]["two"]
        Path.of("items", 0)      -> data["items"][0]
        Path()                   -> data itself (the root)

    Properties:
        keys: Tuple of keys. Strings address mapping keys and dataclass
              fields, integers address sequence positions (negative
              positions count from the end). Other hashable values are
              used as mapping keys verbatim.

    IMPORTANT:
        A Path knows nothing about any particular data value.
        It does NOT check that its keys exist anywhere.
    """

    keys: Tuple[Key, ...] = ()

    def __post_init__(self):
        if isinstance(self.keys, (str, bytes)):
            raise TypeError("Path expects a sequence of keys; use Path.of(key) for a single key")
        keys = tuple(self.keys)
        for key in keys:
            try:
                hash(key)
            except TypeError:
                raise TypeError(f"Path keys must be hashable, got {type(key).__name__}")
        object.__setattr__(self, "keys", keys)

    @classmethod
    def of(cls, *keys: Key) -> Path:
        return cls(keys)

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys)

    def __add__(self, other: Union[Path, Sequence]) -> Path:
        return Path(self.keys + as_path(other).keys)

    def child(self, key: Key) -> Path:
        return Path(self.keys + (key,))

    @property
    def parent(self) -> Path:
        if not self.keys:
            raise PathError("The root path has no parent")
        return Path(self.keys[:-1])

    @property
    def is_root(self) -> bool:
        return not self.keys


def as_path(value: Union[Path, Sequence, Key]) -> Path:
    """
    Coerce a Path, a list/tuple of keys, or a single key into a Path.

    A string is always ONE key. Use path_parser.parse_path for the
    "nest.two[0]" notation.
    """
    if isinstance(value, Path):
        return value
    if isinstance(value, (list, tuple)):
        return Path(value)
    return Path((value,))


# =========================================================================
# Container primitives
# =========================================================================

def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray))


def _is_record(obj: Any) -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def _is_fixed_tuple(obj: Any) -> bool:
    return isinstance(obj, tuple) and hasattr(obj, "_fields")


def _is_container(obj: Any) -> bool:
    return isinstance(obj, Mapping) or _is_record(obj) or _is_sequence(obj)


def _record_fields(obj: Any) -> List[str]:
    return [f.name for f in dataclasses.fields(obj)]


def _get_step(obj: Any, key: Key) -> Any:
    """Read one step. Anything that does not fit yields ABSENT."""
    if isinstance(obj, Mapping):
        if key in obj:
            return obj[key]
        return ABSENT
    if _is_record(obj):
        if isinstance(key, str) and key in _record_fields(obj):
            return getattr(obj, key)
        return ABSENT
    if _is_sequence(obj):
        if _is_index(key) and -len(obj) <= key < len(obj):
            return obj[key]
        return ABSENT
    return ABSENT


def _rebuild_mapping(original: Mapping, items: dict) -> Mapping:
    # Mapping types that cannot be built from a plain dict come back as dicts
    if type(original) is dict:
        return items
    try:
        return type(original)(items)
    except TypeError:
        return items


def _rebuild_sequence(original: Sequence, items: list) -> Sequence:
    if isinstance(original, list):
        return items
    if hasattr(original, "_make"):
        return original._make(items)
    if isinstance(original, tuple):
        return type(original)(items)
    return items


def _with_step(obj: Any, key: Key, value: Any) -> Any:
    """Return a shallow copy of `obj` with `key` set to `value`."""
    if isinstance(obj, Mapping):
        items = dict(obj)
        items[key] = value
        return _rebuild_mapping(obj, items)

    if _is_record(obj):
        settable = [f.name for f in dataclasses.fields(obj) if f.init]
        if not isinstance(key, str) or key not in settable:
            raise TypeConflictError(
                f"{type(obj).__name__} has no settable field {key!r}"
            )
        return dataclasses.replace(obj, **{key: value})

    items = list(obj)
    if key < 0:
        if key < -len(items):
            raise PathError(f"Index {key} is before the start of a sequence of length {len(items)}")
        key += len(items)
    if key >= len(items):
        if _is_fixed_tuple(obj):
            raise TypeConflictError(
                f"Index {key} is past the end of {type(obj).__name__}, which has {len(items)} fields"
            )
        items.extend([None] * (key - len(items) + 1))
    items[key] = value
    return _rebuild_sequence(obj, items)


def _without_step(obj: Any, key: Key) -> Any:
    """Return a shallow copy of `obj` with `key` removed. `key` must exist."""
    if isinstance(obj, Mapping):
        items = {k: v for k, v in obj.items() if k != key}
        return _rebuild_mapping(obj, items)
    if _is_record(obj):
        raise PathError(f"Cannot remove field {key!r} from {type(obj).__name__}")
    if _is_fixed_tuple(obj):
        raise PathError(f"Cannot remove position {key!r} from {type(obj).__name__}")
    items = list(obj)
    del items[key]
    return _rebuild_sequence(obj, items)


def _fresh_container(key: Key) -> Any:
    return [] if _is_index(key) else {}


def _conflict(policy: ConflictPolicy, keys: Tuple[Key, ...], depth: int, found: Any) -> None:
    where = list(keys[:depth]) or "the root"
    message = (
        f"Cannot write key {keys[depth]!r} into {type(found).__name__} at {where}"
    )
    if policy is ConflictPolicy.RAISE:
        raise TypeConflictError(message)
    if policy is ConflictPolicy.WARN:
        warnings.warn(f"{message}; replacing it", UserWarning)


def _writable(obj: Any, keys: Tuple[Key, ...], depth: int, policy: ConflictPolicy) -> Any:
    """Return a container that can take keys[depth], applying the conflict policy."""
    key = keys[depth]

    # Missing and None both mean "nothing here yet"
    if obj is ABSENT or obj is None:
        return _fresh_container(key)

    if isinstance(obj, Mapping) or _is_record(obj):
        return obj

    if _is_sequence(obj):
        if _is_index(key):
            return obj
        if isinstance(key, bool):
            # True == 1, so a mapping of positions would collide with index 1
            raise TypeConflictError(
                f"Cannot write bool key {key!r} into {type(obj).__name__} at {list(keys[:depth]) or 'the root'}"
            )
        _conflict(policy, keys, depth, obj)
        return dict(enumerate(obj))

    _conflict(policy, keys, depth, obj)
    return _fresh_container(key)


# =========================================================================
# Public operations
# =========================================================================

def get_path(path: Union[Path, Sequence, Key], data: Any, default: Any = ABSENT) -> Any:
    """
    Read the value at `path` inside `data`.

    Returns `default` (ABSENT unless given) when any step is missing:
    unknown key, index out of range, non-integer key into a sequence,
    or any key into a scalar.

    Never raises for missing data.
    """
    current = data
    for key in as_path(path):
        current = _get_step(current, key)
        if current is ABSENT:
            return default
    return current


def assoc_path(
    path: Union[Path, Sequence, Key],
    value: Any,
    data: Any,
    on_conflict: ConflictPolicy = ConflictPolicy.OVERWRITE,
) -> Any:
    """
    Return a copy of `data` with `value` stored at `path`.

    Missing intermediate containers are created: a list when the next key
    is an integer, a dict otherwise. Writing past the end of a sequence
    pads it with None, except for namedtuples, which have a fixed size.
    The empty path replaces the whole value.

    Args:
        path: Where to write
        value: What to write
        data: The original value (left untouched)
        on_conflict: What to do when a scalar sits on the path

    Raises:
        TypeConflictError: Scalar on the path under ConflictPolicy.RAISE,
            an unknown field on a dataclass record, an index past the end
            of a namedtuple, or a bool key into a sequence
        PathError: Negative index before the start of a sequence
    """
    keys = as_path(path).keys
    return _assoc(keys, 0, value, data, on_conflict)


def _assoc(keys: Tuple[Key, ...], depth: int, value: Any, obj: Any, policy: ConflictPolicy) -> Any:
    if depth == len(keys):
        return value
    key = keys[depth]
    container = _writable(obj, keys, depth, policy)
    child = _get_step(container, key)
    return _with_step(container, key, _assoc(keys, depth + 1, value, child, policy))


def dissoc_path(path: Union[Path, Sequence, Key], data: Any) -> Any:
    """
    Return a copy of `data` without the entry at `path`.

    Mapping keys are deleted and sequence elements are removed (later
    elements shift down). When nothing exists at `path`, `data` itself
    is returned.

    Raises:
        PathError: For the root path, a dataclass field, or a namedtuple position
    """
    keys = as_path(path).keys
    if not keys:
        raise PathError("Cannot remove the root")
    return _dissoc(keys, 0, data)


def _dissoc(keys: Tuple[Key, ...], depth: int, obj: Any) -> Any:
    key = keys[depth]
    child = _get_step(obj, key)
    if child is ABSENT:
        return obj
    if depth == len(keys) - 1:
        return _without_step(obj, key)
    new_child = _dissoc(keys, depth + 1, child)
    if new_child is child:
        return obj
    return _with_step(obj, key, new_child)


def update_path(
    fn: Callable[[Any], Any],
    path: Union[Path, Sequence, Key],
    data: Any,
    on_conflict: ConflictPolicy = ConflictPolicy.OVERWRITE,
) -> Any:
    """
    Apply `fn` to the value at `path` and store the result there.

    `fn` receives ABSENT when nothing exists at `path`.
    """
    current = get_path(path, data)
    return assoc_path(path, fn(current), data, on_conflict=on_conflict)


def evolve(transformations: Mapping, data: Any) -> Any:
    """
    Apply a nested mapping of functions to `data`.

    Example:
        evolve({"nest": {"two": negate}}, {"one": 1, "nest": {"two": 2}})
        -> {"one": 1, "nest": {"two": -2}}

    Rules:
        - A callable is applied to the value under the same key
        - A nested mapping recurses into the value under the same key
        - Anything else is ignored
        - Keys missing from `data` stay missing
        - Non-container `data` is returned unchanged
    """
    if not _is_container(data):
        return data

    result = data
    for key, transform in transformations.items():
        current = _get_step(data, key)
        if current is ABSENT:
            continue
        if callable(transform):
            new_value = transform(current)
        elif isinstance(transform, Mapping):
            new_value = evolve(transform, current)
        else:
            continue
        result = _with_step(result, key, new_value)
    return result


__all__ = [
    "ABSENT",
    "Absent",
    "ConflictPolicy",
    "Key",
    "Path",
    "PathError",
    "TypeConflictError",
    "as_path",
    "assoc_path",
    "dissoc_path",
    "evolve",
    "get_path",
    "update_path",
]
