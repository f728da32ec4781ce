"""
Tests for the Lens system.

These tests verify:
    - view / set_ / over on the canonical example
    - The lens laws (get-set round trip, set idempotence, over = set . f . view)
    - Structural sharing and immutability
    - Lenses built from accessors, props and indices
    - Composition, identity and associativity
    - Agreement with the raw path functions
"""

from dataclasses import dataclass, field

import pytest

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
from focal.paths import (
    ABSENT,
    ConflictPolicy,
    Path,
    TypeConflictError,
    assoc_path,
    evolve,
    get_path,
    update_path,
)


def example_data():
    return {"one": 1, "nest": {"two": 2}}


def negate(x):
    return -x


ONE = lens_from_path(["one"])
TWO = lens_from_path(["nest", "two"])


class TestView:
    """Test reading through lenses."""

    def test_view_top_level(self):
        assert view(ONE, example_data()) == 1

    def test_view_nested(self):
        assert view(TWO, example_data()) == 2

    def test_view_missing_is_absent(self):
        """A missing focus is reported, never raised."""
        assert view(lens_from_path(["nest", "three"]), example_data()) is ABSENT
        assert view(lens_from_path(["one", "deeper"]), example_data()) is ABSENT

    def test_lens_reused_across_values(self):
        """A lens holds no data."""
        assert view(TWO, {"nest": {"two": "a"}}) == "a"
        assert view(TWO, {"nest": {"two": "b"}}) == "b"


class TestSet:
    """Test writing through lenses."""

    def test_set_top_level(self):
        assert set_(ONE, "Uno", example_data()) == {"one": "Uno", "nest": {"two": 2}}

    def test_set_nested(self):
        assert set_(TWO, "Dos", example_data()) == {"one": 1, "nest": {"two": "Dos"}}

    def test_original_unchanged(self):
        data = example_data()
        set_(TWO, "Dos", data)
        assert data == {"one": 1, "nest": {"two": 2}}

    def test_untouched_branch_shared(self):
        data = {"one": {"big": list(range(5))}, "nest": {"two": 2}}
        result = set_(TWO, "Dos", data)
        assert result["one"] is data["one"]

    def test_set_creates_missing_containers(self):
        assert set_(lens_from_path(["a", "b"]), 1, {}) == {"a": {"b": 1}}

    def test_conflict_policy_passed_through(self):
        strict = lens_from_path(["one", "deeper"], on_conflict=ConflictPolicy.RAISE)
        with pytest.raises(TypeConflictError):
            set_(strict, 1, example_data())


class TestOver:
    """Test updating through lenses."""

    def test_over_top_level(self):
        assert over(ONE, negate, example_data()) == {"one": -1, "nest": {"two": 2}}

    def test_over_nested(self):
        assert over(TWO, negate, example_data()) == {"one": 1, "nest": {"two": -2}}

    def test_over_missing_receives_absent(self):
        received = []

        def record(value):
            received.append(value)
            return "filled"

        result = over(lens_prop("x"), record, {})
        assert received == [ABSENT]
        assert result == {"x": "filled"}

    def test_with_default(self):
        count = lens_prop("count")
        increment = with_default(lambda n: n + 1, 0)
        assert over(count, increment, {}) == {"count": 1}
        assert over(count, increment, {"count": 4}) == {"count": 5}


class TestLensLaws:
    """Laws every path lens satisfies."""

    LENSES = [
        identity_lens(),
        ONE,
        TWO,
        lens_from_path(["nest", "three"]),
        lens_from_path(["list", 2, "deep"]),
        compose(lens_prop("nest"), lens_prop("two")),
    ]

    def test_view_after_set(self):
        for lens in self.LENSES:
            assert view(lens, set_(lens, "V", example_data())) == "V"

    def test_set_idempotent(self):
        for lens in self.LENSES:
            once = set_(lens, "V", example_data())
            assert set_(lens, "V", once) == once

    def test_set_what_you_view_changes_nothing(self):
        data = example_data()
        for lens in [ONE, TWO]:
            assert set_(lens, view(lens, data), data) == data

    def test_over_is_set_of_fn_of_view(self):
        def fn(value):
            return "fresh" if value is ABSENT else [value]

        for lens in self.LENSES:
            data = example_data()
            assert over(lens, fn, data) == set_(lens, fn(view(lens, data)), data)


class TestAgreementWithRawStyle:
    """The raw path functions and lenses give the same answers."""

    def test_reads_agree(self):
        data = example_data()
        assert get_path(["one"], data) == view(ONE, data)
        assert get_path(["nest", "two"], data) == view(TWO, data)

    def test_sets_agree(self):
        data = example_data()
        assert assoc_path(["one"], "Uno", data) == set_(ONE, "Uno", data)
        assert assoc_path(["nest", "two"], "Dos", data) == set_(TWO, "Dos", data)

    def test_updates_agree(self):
        data = example_data()
        assert evolve({"one": negate}, data) == update_path(negate, ["one"], data) == over(ONE, negate, data)
        assert evolve({"nest": {"two": negate}}, data) == update_path(negate, ["nest", "two"], data) == over(TWO, negate, data)


class TestLensConstruction:
    """Test the lens constructors."""

    def test_path_lens_records_path(self):
        assert TWO.path == Path.of("nest", "two")

    def test_path_lens_records_policy(self):
        assert TWO.on_conflict is ConflictPolicy.OVERWRITE
        strict = lens_from_path(["one"], on_conflict=ConflictPolicy.RAISE)
        assert strict.on_conflict is ConflictPolicy.RAISE
        assert lens_from_accessors(lambda d: d, lambda d, v: v).on_conflict is None

    def test_lens_immutable(self):
        with pytest.raises(AttributeError):
            ONE.path = Path.of("two")

    def test_accessor_lens(self):
        """Lenses can focus on computed views."""
        fahrenheit = lens_from_accessors(
            lambda d: d["temp_c"] * 9 / 5 + 32,
            lambda d, f: {**d, "temp_c": (f - 32) * 5 / 9},
        )
        data = {"temp_c": 100, "city": "Oslo"}
        assert fahrenheit.path is None
        assert view(fahrenheit, data) == 212
        assert set_(fahrenheit, 32, data) == {"temp_c": 0, "city": "Oslo"}
        assert data["temp_c"] == 100

    def test_lens_prop(self):
        assert view(lens_prop("one"), example_data()) == 1
        assert lens_prop("one").path == Path.of("one")

    def test_lens_index(self):
        assert view(lens_index(-1), [1, 2, 3]) == 3
        assert set_(lens_index(0), "a", ["x", "y"]) == ["a", "y"]

    def test_lens_index_requires_int(self):
        with pytest.raises(TypeError):
            lens_index("0")
        with pytest.raises(TypeError):
            lens_index(True)

    def test_identity_lens(self):
        data = example_data()
        assert view(identity_lens(), data) is data
        assert set_(identity_lens(), "all", data) == "all"
        assert identity_lens().path == Path()

    def test_dataclass_focus(self):
        @dataclass(frozen=True)
        class Settings:
            name: str
            options: dict = field(default_factory=dict)

        settings = Settings(name="prod", options={"depth": 1})
        depth = lens_from_path(["options", "depth"])
        result = over(depth, lambda d: d + 1, settings)
        assert result == Settings(name="prod", options={"depth": 2})
        assert settings.options == {"depth": 1}


class TestCompose:
    """Test lens composition."""

    def test_compose_path_lenses(self):
        two = compose(lens_prop("nest"), lens_prop("two"))
        assert two.path == Path.of("nest", "two")
        assert view(two, example_data()) == 2
        assert set_(two, "Dos", example_data()) == {"one": 1, "nest": {"two": "Dos"}}

    def test_then_method(self):
        two = lens_prop("nest").then(lens_prop("two"))
        assert over(two, negate, example_data()) == {"one": 1, "nest": {"two": -2}}

    def test_compose_through_missing(self):
        deep = compose(lens_prop("a"), lens_from_path(["b", 0]))
        assert view(deep, {}) is ABSENT
        assert set_(deep, "x", {}) == {"a": {"b": ["x"]}}

    def test_compose_empty_is_identity(self):
        data = example_data()
        assert view(compose(), data) is data
        assert compose().path == Path()

    def test_compose_single_is_same_lens(self):
        assert compose(ONE) is ONE

    def test_compose_with_identity(self):
        data = example_data()
        for lens in [compose(identity_lens(), TWO), compose(TWO, identity_lens())]:
            assert view(lens, data) == 2
            assert set_(lens, "Dos", data) == set_(TWO, "Dos", data)

    def test_compose_associative(self):
        a, b, c = lens_prop("x"), lens_prop("y"), lens_index(1)
        left = compose(compose(a, b), c)
        right = compose(a, compose(b, c))
        data = {"x": {"y": [10, 20]}, "z": 0}
        assert view(left, data) == view(right, data) == 20
        assert set_(left, "V", data) == set_(right, "V", data) == {"x": {"y": [10, "V"]}, "z": 0}
        assert left.path == right.path == Path.of("x", "y", 1)

    def test_compose_with_accessor_lens(self):
        upper = lens_from_accessors(lambda s: s.upper(), lambda s, v: v.lower())
        name = compose(lens_prop("user"), lens_prop("name"), upper)
        data = {"user": {"name": "ada"}}
        assert name.path is None
        assert view(name, data) == "ADA"
        assert set_(name, "GRACE", data) == {"user": {"name": "grace"}}

    def test_compose_returns_lens(self):
        assert isinstance(compose(ONE, TWO), Lens)

    def test_compose_keeps_policy(self):
        strict = lens_from_path(["a"], on_conflict=ConflictPolicy.RAISE)
        assert compose(strict, lens_from_path(["b"], on_conflict=ConflictPolicy.RAISE)).on_conflict is ConflictPolicy.RAISE
        assert compose(identity_lens(), strict).on_conflict is ConflictPolicy.RAISE
        assert compose(strict, lens_prop("b")).on_conflict is None
