"""
Example data and focal points for demos and tests.

The canonical example is a two-level record:

    {"one": 1, "nest": {"two": 2}}

with one focal point at the top level and one nested.
"""
from typing import Dict

from focal.lens import Lens
from focal.paths import Path
from focal.serialization import catalog_from_yaml


EXAMPLE_PATHS = {
    "one": Path.of("one"),
    "two": Path.of("nest", "two"),
}

EXAMPLE_CATALOG_YAML = """\
lenses:
  one: [one]
  two: nest.two
"""


def build_example_data() -> dict:
    return {"one": 1, "nest": {"two": 2}}


def build_example_catalog() -> Dict[str, Lens]:
    return catalog_from_yaml(EXAMPLE_CATALOG_YAML, strict=True)


def negate(x):
    return -x
