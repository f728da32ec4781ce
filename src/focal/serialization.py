"""
Serialization helpers for focal points and lens catalogs.

A catalog is a named set of focal points kept in a YAML or JSON document:

    on_conflict: overwrite      # optional: overwrite | warn | raise
    lenses:
      one: [one]
      two: nest.two             # path notation is accepted too
      first_item: [items, 0]

Also provides plain JSON/YAML load/dump for the data lenses are applied to.
This module intentionally keeps the document structure small and explicit.
"""
from __future__ import annotations

import json
import os
import warnings
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml

from focal.lens import Lens, lens_from_path
from focal.path_parser import PathParseError, parse_path
from focal.paths import ConflictPolicy, Path, as_path


class CatalogError(Exception):
    """Raised when a catalog document is malformed."""
    pass


class DataFormat(Enum):
    """Document formats understood by load_data/dump_data."""
    JSON = "json"
    YAML = "yaml"


def format_for_file(filepath: str) -> DataFormat:
    ext = os.path.splitext(filepath)[1].lower()
    if ext == ".json":
        return DataFormat.JSON
    return DataFormat.YAML


def path_to_list(path) -> List[Any]:
    return list(as_path(path).keys)


def path_from_list(items: Any) -> Path:
    if not isinstance(items, (list, tuple)):
        raise CatalogError(f"Path must be a list of keys, got {type(items).__name__}")
    for key in items:
        if isinstance(key, bool) or not isinstance(key, (str, int)):
            raise CatalogError(f"Path keys must be strings or integers, got {key!r}")
    return Path(items)


def _path_from_entry(entry: Any) -> Path:
    if isinstance(entry, str):
        return parse_path(entry)
    return path_from_list(entry)


def _policy_from_dict(d: Mapping) -> ConflictPolicy:
    raw = d.get("on_conflict")
    if raw is None:
        return ConflictPolicy.OVERWRITE
    try:
        return ConflictPolicy(str(raw).lower())
    except ValueError:
        choices = ", ".join(p.value for p in ConflictPolicy)
        raise CatalogError(f"Unknown on_conflict policy {raw!r} (expected one of: {choices})")


def catalog_from_dict(d: Any, strict: bool = False) -> Dict[str, Lens]:
    """
    Build named lenses from a catalog dict.

    Args:
        d: Parsed catalog document (None means an empty catalog)
        strict: Raise on invalid entries instead of skipping them

    Returns:
        Dict of lens name -> Lens, in document order

    Raises:
        CatalogError: If the document shape is wrong, or an entry is
            invalid and `strict` is set
    """
    if d is None:
        return {}
    if not isinstance(d, Mapping) or "lenses" not in d:
        raise CatalogError("Catalog must be a mapping with a 'lenses' section")

    policy = _policy_from_dict(d)
    section = d["lenses"]
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise CatalogError(f"'lenses' must be a mapping, got {type(section).__name__}")

    lenses: Dict[str, Lens] = {}
    for name, entry in section.items():
        try:
            path = _path_from_entry(entry)
        except (CatalogError, PathParseError) as e:
            if strict:
                raise CatalogError(f"Invalid lens '{name}': {str(e)}") from e
            warnings.warn(f"Invalid lens {name}: {str(e)}", UserWarning)
            continue
        lenses[str(name)] = lens_from_path(path, on_conflict=policy)
    return lenses


def catalog_to_dict(entries: Mapping, on_conflict: Optional[ConflictPolicy] = None) -> Dict[str, Any]:
    """
    Describe named focal points as a catalog dict.

    `entries` values may be Paths, lists of keys, or path lenses.
    Without an explicit `on_conflict`, the policy the lenses write with
    is recorded; lenses with differing policies cannot share one catalog.

    Raises:
        CatalogError: If a lens has no path, or the lens policies differ
    """
    lenses: Dict[str, Any] = {}
    policies = set()
    for name, entry in entries.items():
        if isinstance(entry, Lens):
            if entry.path is None:
                raise CatalogError(f"Lens '{name}' has no path and cannot be serialized")
            if entry.on_conflict is not None:
                policies.add(entry.on_conflict)
            entry = entry.path
        lenses[name] = path_to_list(entry)

    if on_conflict is None and policies:
        if len(policies) > 1:
            found = ", ".join(sorted(p.value for p in policies))
            raise CatalogError(f"Lenses use different on_conflict policies: {found}")
        on_conflict = policies.pop()

    d: Dict[str, Any] = {"lenses": lenses}
    if on_conflict is not None:
        d["on_conflict"] = on_conflict.value
    return d


def catalog_to_json(entries: Mapping, on_conflict: Optional[ConflictPolicy] = None) -> str:
    return json.dumps(catalog_to_dict(entries, on_conflict), sort_keys=True)


def catalog_from_json(s: str, strict: bool = False) -> Dict[str, Lens]:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog is not valid JSON: {str(e)}") from e
    return catalog_from_dict(d, strict=strict)


def catalog_to_yaml(entries: Mapping, on_conflict: Optional[ConflictPolicy] = None) -> str:
    return yaml.safe_dump(catalog_to_dict(entries, on_conflict), sort_keys=False)


def catalog_from_yaml(s: str, strict: bool = False) -> Dict[str, Lens]:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise CatalogError(f"Catalog is not valid YAML: {str(e)}") from e
    return catalog_from_dict(d, strict=strict)


def load_catalog_file(filepath: str, strict: bool = False) -> Dict[str, Lens]:
    """
    Load a catalog from a .json file, or from YAML for any other extension.

    Raises:
        FileNotFoundError: If file doesn't exist
        CatalogError: If the catalog is malformed
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Catalog file not found: {filepath}")

    if format_for_file(filepath) is DataFormat.JSON:
        return catalog_from_json(content, strict=strict)
    return catalog_from_yaml(content, strict=strict)


def load_data(text: str, fmt: DataFormat = DataFormat.YAML) -> Any:
    if fmt is DataFormat.JSON:
        return json.loads(text)
    return yaml.safe_load(text)


def dump_data(data: Any, fmt: DataFormat = DataFormat.YAML) -> str:
    if fmt is DataFormat.JSON:
        return json.dumps(data, indent=2)
    text = yaml.safe_dump(data, sort_keys=False)
    # Bare scalars get a document end marker
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text


__all__ = [
    "CatalogError",
    "DataFormat",
    "catalog_from_dict",
    "catalog_from_json",
    "catalog_from_yaml",
    "catalog_to_dict",
    "catalog_to_json",
    "catalog_to_yaml",
    "dump_data",
    "format_for_file",
    "load_catalog_file",
    "load_data",
    "path_from_list",
    "path_to_list",
]
