#!/usr/bin/env python3
"""
Demo: the same reads, writes and updates with and without lenses.

Without lenses the focal point is repeated in every call.
With lenses it is defined once and the operation is chosen separately.
"""

from focal import assoc_path, evolve, get_path, lens_from_path, over, set_, update_path, view
from focal.comparison import compare_catalog
from focal.examples import EXAMPLE_PATHS, build_example_catalog, build_example_data, negate


def main():
    data = build_example_data()
    one_path = EXAMPLE_PATHS["one"].keys
    two_path = EXAMPLE_PATHS["two"].keys

    print("=" * 70)
    print(f"DATA: {data}")
    print("=" * 70)

    print("\nWITHOUT LENSES")
    print("-" * 70)
    print(f"  get_path(one)            -> {get_path(one_path, data)!r}")
    print(f"  get_path(two)            -> {get_path(two_path, data)!r}")
    print(f"  assoc_path(one, 'Uno')   -> {assoc_path(one_path, 'Uno', data)}")
    print(f"  assoc_path(two, 'Dos')   -> {assoc_path(two_path, 'Dos', data)}")
    print(f"  evolve(one: negate)      -> {evolve({'one': negate}, data)}")
    print(f"  evolve(nest.two: negate) -> {evolve({'nest': {'two': negate}}, data)}")
    print(f"  update_path(negate, one) -> {update_path(negate, one_path, data)}")
    print(f"  update_path(negate, two) -> {update_path(negate, two_path, data)}")

    one_lens = lens_from_path(one_path)
    two_lens = lens_from_path(two_path)

    print("\nWITH LENSES")
    print("-" * 70)
    print(f"  view(one)                -> {view(one_lens, data)!r}")
    print(f"  view(two)                -> {view(two_lens, data)!r}")
    print(f"  set_(one, 'Uno')         -> {set_(one_lens, 'Uno', data)}")
    print(f"  set_(two, 'Dos')         -> {set_(two_lens, 'Dos', data)}")
    print(f"  over(one, negate)        -> {over(one_lens, negate, data)}")
    print(f"  over(two, negate)        -> {over(two_lens, negate, data)}")

    print("\nCOMPARISON")
    print("-" * 70)
    reports = compare_catalog(data, build_example_catalog(), "X", negate)
    for name, report in reports.items():
        status = "agree" if report.agrees else "DIFFER: " + "; ".join(report.mismatches)
        print(f"  {name}: {status}")

    print(f"\nOriginal data untouched: {data}")


if __name__ == "__main__":
    main()
