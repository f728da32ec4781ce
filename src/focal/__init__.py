"""
Focal — path-based lenses over immutable nested data.

A focal point (Path) is defined once, separately from what will be done
with it. A Lens built from it can then read (view), replace (set_) or
transform (over) that location in any nested value of mappings,
sequences and dataclass records.

ARCHITECTURAL GUARANTEE:
------------------------
Nothing in this package mutates the data it is given.

Every write returns a new value that shares all untouched branches with
the original. Lenses hold no data and can be reused across values and
threads.

The raw path functions (get_path, assoc_path, update_path, evolve) are
the same operations without the lens abstraction; both styles always
agree.
"""

from focal.lens import (
    Lens,
    compose,
    identity_lens,
    lens_from_accessors,
    lens_from_path,
    lens_index,
    lens_prop,
    over,
    set_,
    view,
    with_default,
)
from focal.path_parser import PathParseError, format_path, parse_path
from focal.paths import (
    ABSENT,
    Absent,
    ConflictPolicy,
    Path,
    PathError,
    TypeConflictError,
    as_path,
    assoc_path,
    dissoc_path,
    evolve,
    get_path,
    update_path,
)

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "Absent",
    "ConflictPolicy",
    "Lens",
    "Path",
    "PathError",
    "PathParseError",
    "TypeConflictError",
    "as_path",
    "assoc_path",
    "compose",
    "dissoc_path",
    "evolve",
    "format_path",
    "get_path",
    "identity_lens",
    "lens_from_accessors",
    "lens_from_path",
    "lens_index",
    "lens_prop",
    "over",
    "parse_path",
    "set_",
    "update_path",
    "view",
    "with_default",
]
