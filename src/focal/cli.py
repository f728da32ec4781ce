"""
Command line access to lenses.

    focal view nest.two data.json
    focal set nest.two Dos data.yaml
    cat data.json | focal --catalog lenses.yaml --format json view two

The path argument is looked up in --catalog first, then parsed as
path notation. Values for `set` are read as YAML scalars, so `2`, `true`
and `null` keep their types. Data comes from FILE, or stdin without one.
"""
import argparse
import json
import sys
from typing import List, Optional

import yaml

from focal.lens import Lens, lens_from_path, set_, view
from focal.path_parser import PathParseError, parse_path
from focal.paths import ABSENT, PathError
from focal.serialization import (
    CatalogError,
    DataFormat,
    dump_data,
    format_for_file,
    load_catalog_file,
    load_data,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="focal", description="Read and write nested JSON/YAML data through lenses")
    parser.add_argument("--catalog", help="YAML/JSON catalog of named lenses")
    parser.add_argument("--format", choices=[f.value for f in DataFormat], help="Data format (default: from file extension, YAML for stdin)")

    sub = parser.add_subparsers(dest="command", required=True)

    p_view = sub.add_parser("view", help="Print the focused value")
    p_view.add_argument("path", help="Lens name or path notation, e.g. nest.two")
    p_view.add_argument("file", nargs="?", help="Data file (default: stdin)")

    p_set = sub.add_parser("set", help="Print the data with the focused value replaced")
    p_set.add_argument("path", help="Lens name or path notation, e.g. nest.two")
    p_set.add_argument("value", help="New value, read as YAML")
    p_set.add_argument("file", nargs="?", help="Data file (default: stdin)")

    return parser


def _resolve_lens(name: str, catalog_path: Optional[str]) -> Lens:
    if catalog_path:
        catalog = load_catalog_file(catalog_path)
        if name in catalog:
            return catalog[name]
    return lens_from_path(parse_path(name))


def _read_input(filepath: Optional[str]) -> str:
    if filepath is None:
        return sys.stdin.read()
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Data file not found: {filepath}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.format:
        fmt = DataFormat(args.format)
    elif args.file:
        fmt = format_for_file(args.file)
    else:
        fmt = DataFormat.YAML

    try:
        lens = _resolve_lens(args.path, args.catalog)
        data = load_data(_read_input(args.file), fmt)

        if args.command == "view":
            result = view(lens, data)
            if result is ABSENT:
                print(f"error: nothing at {args.path}", file=sys.stderr)
                return 1
        else:
            result = set_(lens, yaml.safe_load(args.value), data)
    except (PathParseError, PathError, CatalogError, FileNotFoundError, yaml.YAMLError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(dump_data(result, fmt).rstrip("\n"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
