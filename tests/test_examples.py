"""
Test the example data and focal points used by the demo.
"""

from focal.examples import (
    EXAMPLE_PATHS,
    build_example_catalog,
    build_example_data,
    negate,
)
from focal.lens import over, set_, view
from focal.paths import Path


def test_example_data_is_fresh():
    first = build_example_data()
    first["one"] = "changed"
    assert build_example_data() == {"one": 1, "nest": {"two": 2}}


def test_example_catalog_matches_paths():
    catalog = build_example_catalog()
    assert {name: lens.path for name, lens in catalog.items()} == EXAMPLE_PATHS
    assert EXAMPLE_PATHS["two"] == Path.of("nest", "two")


def test_example_walkthrough():
    data = build_example_data()
    catalog = build_example_catalog()

    assert view(catalog["one"], data) == 1
    assert view(catalog["two"], data) == 2
    assert set_(catalog["one"], "Uno", data) == {"one": "Uno", "nest": {"two": 2}}
    assert set_(catalog["two"], "Dos", data) == {"one": 1, "nest": {"two": "Dos"}}
    assert over(catalog["one"], negate, data) == {"one": -1, "nest": {"two": 2}}
    assert over(catalog["two"], negate, data) == {"one": 1, "nest": {"two": -2}}
