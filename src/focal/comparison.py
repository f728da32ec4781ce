"""
Style Comparison — raw path functions vs. lenses.

Runs the same read, write and update through both styles and reports
whether they agree:

    raw style:   get_path / assoc_path / update_path (+ evolve where it applies)
    lens style:  view / set_ / over on lens_from_path

IMPORTANT: This module does NOT modify the data it is given.
It only produces read-only reports.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from focal.lens import Lens, lens_from_path, over, set_, view
from focal.paths import ABSENT, ConflictPolicy, Path, as_path, assoc_path, evolve, get_path, update_path


@dataclass
class StyleComparison:
    """Results of one focal point exercised through both styles."""

    path: Path

    # Reading
    raw_read: Any = ABSENT
    lens_read: Any = ABSENT

    # Setting
    raw_set: Any = None
    lens_set: Any = None

    # Updating (evolve_update stays ABSENT when evolve cannot express it)
    raw_update: Any = None
    evolve_update: Any = ABSENT
    lens_update: Any = None

    mismatches: List[str] = field(default_factory=list)

    def add_mismatch(self, msg: str) -> None:
        """Add a mismatch to the report."""
        if msg not in self.mismatches:
            self.mismatches.append(msg)

    @property
    def agrees(self) -> bool:
        return not self.mismatches


def _same(a: Any, b: Any) -> bool:
    return a is b or a == b


def _evolve_spec(path: Path, fn: Callable[[Any], Any]) -> Dict[Any, Any]:
    """Turn ("nest", "two") into {"nest": {"two": fn}}."""
    spec: Any = fn
    for key in reversed(path.keys):
        spec = {key: spec}
    return spec


def compare_styles(
    data: Any,
    path,
    value: Any,
    fn: Callable[[Any], Any],
    on_conflict: ConflictPolicy = ConflictPolicy.OVERWRITE,
) -> StyleComparison:
    """
    Read, set and update `path` in `data` with both styles.

    Args:
        data: Value to work on (never modified)
        path: Focal point (Path, list of keys, or single key)
        value: Value used for the set comparison
        fn: Pure function used for the update comparison
        on_conflict: Policy for writes in both styles

    Returns:
        StyleComparison with every result and any mismatches
    """
    focal = as_path(path)
    lens = lens_from_path(focal, on_conflict=on_conflict)
    report = StyleComparison(path=focal)

    # =========================================================================
    # 1. READ
    # =========================================================================

    report.raw_read = get_path(focal, data)
    report.lens_read = view(lens, data)
    if not _same(report.raw_read, report.lens_read):
        report.add_mismatch(
            f"Read differs at {list(focal.keys)}: raw={report.raw_read!r} lens={report.lens_read!r}"
        )

    # =========================================================================
    # 2. SET
    # =========================================================================

    report.raw_set = assoc_path(focal, value, data, on_conflict=on_conflict)
    report.lens_set = set_(lens, value, data)
    if not _same(report.raw_set, report.lens_set):
        report.add_mismatch(f"Set differs at {list(focal.keys)}")

    # =========================================================================
    # 3. UPDATE
    # =========================================================================

    report.raw_update = update_path(fn, focal, data, on_conflict=on_conflict)
    report.lens_update = over(lens, fn, data)
    if not _same(report.raw_update, report.lens_update):
        report.add_mismatch(f"Update differs at {list(focal.keys)}")

    # evolve only touches keys that already exist
    if not focal.is_root and report.raw_read is not ABSENT:
        report.evolve_update = evolve(_evolve_spec(focal, fn), data)
        if not _same(report.evolve_update, report.lens_update):
            report.add_mismatch(f"Evolve update differs at {list(focal.keys)}")

    return report


def compare_catalog(data: Any, entries: Mapping, value: Any, fn: Callable[[Any], Any]) -> Dict[str, StyleComparison]:
    """
    Run compare_styles for every named focal point.

    `entries` values may be Paths, lists of keys, or path lenses
    (for example the result of serialization.catalog_from_yaml).
    Lens entries are compared under their own on_conflict policy.
    """
    reports: Dict[str, StyleComparison] = {}
    for name, entry in entries.items():
        policy = ConflictPolicy.OVERWRITE
        if isinstance(entry, Lens):
            if entry.path is None:
                raise ValueError(f"Lens '{name}' has no path to compare")
            policy = entry.on_conflict or ConflictPolicy.OVERWRITE
            entry = entry.path
        reports[name] = compare_styles(data, entry, value, fn, on_conflict=policy)
    return reports


__all__ = [
    "StyleComparison",
    "compare_catalog",
    "compare_styles",
]
