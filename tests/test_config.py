"""Tests for typed parameter sets and simulation settings."""

import math

import pytest

from pendulab.core.config import PhysicsSettings, SimulationMeta
from pendulab.core.errors import InvalidParameterError
from pendulab.simulation import DoublePendulumParams, NPendulumParams, SimplePendulumParams


def test_defaults() -> None:
    p = SimplePendulumParams.from_mapping()
    assert p.length == 2.0
    assert p.mass == 1.0
    assert p.gravity == 9.81
    assert p.damping == 0.0
    assert p.initial_angle == pytest.approx(math.pi / 4)
    assert p.initial_velocity == 0.0
    assert SimplePendulumParams.defaults() == p.to_dict()


def test_from_mapping_merges_over_defaults() -> None:
    p = DoublePendulumParams.from_mapping({"mass2": 2}, length1=0.5)
    assert p.mass2 == 2.0 and isinstance(p.mass2, float)
    assert p.length1 == 0.5
    assert p.length2 == 1.5


def test_unknown_key_rejected() -> None:
    with pytest.raises(InvalidParameterError, match="lenght"):
        SimplePendulumParams.from_mapping({"lenght": 3.0})


@pytest.mark.parametrize(
    "values",
    [
        {"length": 0.0},
        {"length": -1.0},
        {"mass": 0.0},
        {"damping": -0.1},
        {"gravity": float("nan")},
        {"initial_angle": float("inf")},
        {"mass": "heavy"},
    ],
)
def test_invalid_simple_params(values) -> None:
    with pytest.raises(InvalidParameterError):
        SimplePendulumParams.from_mapping(values)


@pytest.mark.parametrize("n", [0, 1, 11, 2.5])
def test_segment_count_outside_range_rejected(n) -> None:
    with pytest.raises(InvalidParameterError):
        NPendulumParams.from_mapping({"n": n})


def test_segment_count_coerced_to_int() -> None:
    p = NPendulumParams.from_mapping({"n": 4.0})
    assert p.n == 4 and isinstance(p.n, int)


def test_boolean_parameter() -> None:
    p = NPendulumParams.from_mapping({"track_phase_space": 0})
    assert p.track_phase_space is False


def test_schema_metadata() -> None:
    schema = SimplePendulumParams.schema()
    assert list(schema) == ["length", "mass", "gravity", "damping", "initial_angle", "initial_velocity"]
    assert schema["length"].unit == "m"
    assert schema["length"].minimum == 0.1
    assert schema["length"].maximum == 10.0
    assert schema["length"].constraint == "positive"
    assert schema["damping"].constraint == "nonnegative"


def test_bounds_are_advisory_for_unconstrained_values() -> None:
    p = SimplePendulumParams.from_mapping({"length": 50.0, "gravity": 0.0})
    assert p.length == 50.0
    assert p.gravity == 0.0


def test_replace_revalidates() -> None:
    p = SimplePendulumParams.from_mapping()
    q = p.replace(length=3.0)
    assert q.length == 3.0 and p.length == 2.0
    with pytest.raises(InvalidParameterError):
        p.replace(mass=-2.0)


def test_params_are_frozen() -> None:
    p = SimplePendulumParams.from_mapping()
    with pytest.raises(Exception):
        p.length = 3.0


def test_physics_settings_validation() -> None:
    assert PhysicsSettings().integration_method == "rk4"
    with pytest.raises(ValueError):
        PhysicsSettings(integration_method="midpoint")
    with pytest.raises(ValueError):
        PhysicsSettings(fixed_timestep=0.0)


def test_meta_to_dict() -> None:
    meta = SimulationMeta(id="x", name="X", tags=("a", "b"))
    d = meta.to_dict()
    assert d["tags"] == ["a", "b"]
    assert d["category"] == "pendulum"


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), (False, False), (1, True), (0, False), ("false", False), ("0", False), ("Yes", True), ("off", False)],
)
def test_boolean_coercion(value, expected) -> None:
    p = NPendulumParams.from_mapping({"track_phase_space": value})
    assert p.track_phase_space is expected


@pytest.mark.parametrize("value", ["maybe", "", 2, 0.5, None])
def test_boolean_rejects_ambiguous_values(value) -> None:
    with pytest.raises(InvalidParameterError):
        NPendulumParams.from_mapping({"track_phase_space": value})
