"""
Typed configuration: parameter schema, model parameter sets, simulation settings.

Each model declares its parameters as a frozen dataclass deriving from ModelParams.
Fields are declared with param(), which attaches a ParameterSpec (label, unit,
bounds, step) for UI collaborators and the physical constraint checked at
construction. Bounds are advisory unless the constraint is "bounded".
"""

import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pendulab.core.errors import InvalidParameterError

ParamValue = Union[float, int, bool]

INTEGRATION_METHODS = ("euler", "verlet", "rk4")

_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    elif isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    raise InvalidParameterError(f"Parameter '{name}' must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ParameterSpec:
    """Specifica di un parametro: default, etichetta, unità, limiti e vincolo."""

    default: ParamValue
    label: str = ""
    unit: str = ""
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    constraint: Optional[str] = None
    description: str = ""

    def coerce(self, name: str, value: Any) -> ParamValue:
        """Convert value to the type of the default and check the constraint."""
        if isinstance(self.default, bool):
            return _to_bool(name, value)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidParameterError(f"Parameter '{name}' must be numeric, got {value!r}")
        if not math.isfinite(number):
            raise InvalidParameterError(f"Parameter '{name}' must be finite, got {number}")
        if isinstance(self.default, int):
            if number != int(number):
                raise InvalidParameterError(f"Parameter '{name}' must be an integer, got {value!r}")
            number = int(number)
        if self.constraint == "positive" and number <= 0:
            raise InvalidParameterError(f"Parameter '{name}' must be > 0, got {number}")
        if self.constraint == "nonnegative" and number < 0:
            raise InvalidParameterError(f"Parameter '{name}' must be >= 0, got {number}")
        if self.constraint == "bounded":
            if (self.minimum is not None and number < self.minimum) or (
                self.maximum is not None and number > self.maximum
            ):
                raise InvalidParameterError(
                    f"Parameter '{name}' must be in [{self.minimum}, {self.maximum}], got {number}"
                )
        return number


def param(
    default: ParamValue,
    label: str = "",
    unit: str = "",
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    step: Optional[float] = None,
    constraint: Optional[str] = None,
    description: str = "",
) -> Any:
    """Dataclass field carrying a ParameterSpec in its metadata."""
    spec = ParameterSpec(
        default=default,
        label=label,
        unit=unit,
        minimum=minimum,
        maximum=maximum,
        step=step,
        constraint=constraint,
        description=description,
    )
    return field(default=default, metadata={"spec": spec})


@dataclass(frozen=True)
class ModelParams:
    """
    Base class for per-model parameter sets.
    Values are coerced and validated once, at construction.
    """

    def __post_init__(self) -> None:
        for f in fields(self):
            spec = f.metadata.get("spec")
            if spec is None:
                continue
            object.__setattr__(self, f.name, spec.coerce(f.name, getattr(self, f.name)))
        self.validate()

    def validate(self) -> None:
        """Cross-field checks; override in subclasses."""

    @classmethod
    def from_mapping(
        cls,
        values: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> "ModelParams":
        """
        Merge values (and keyword overrides) over the defaults.

        Raises:
            InvalidParameterError: unknown key or constraint violated.
        """
        merged: Dict[str, Any] = dict(values or {})
        merged.update(overrides)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(merged) - known)
        if unknown:
            raise InvalidParameterError(
                f"Unknown parameters for {cls.__name__}: {', '.join(unknown)}"
            )
        return cls(**merged)

    @classmethod
    def schema(cls) -> Dict[str, ParameterSpec]:
        """Parameter name -> ParameterSpec, in declaration order."""
        return {f.name: f.metadata["spec"] for f in fields(cls) if "spec" in f.metadata}

    @classmethod
    def defaults(cls) -> Dict[str, ParamValue]:
        return {name: spec.default for name, spec in cls.schema().items()}

    def to_dict(self) -> Dict[str, ParamValue]:
        return asdict(self)

    def replace(self, **changes: Any) -> "ModelParams":
        """New parameter set with some values changed (validated again)."""
        return self.from_mapping(self.to_dict(), **changes)


@dataclass(frozen=True)
class SimulationMeta:
    """Metadati descrittivi della simulazione (inclusi nell'export)."""

    id: str
    name: str
    description: str = ""
    category: str = "pendulum"
    version: str = "0.1.0"
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["tags"] = list(self.tags)
        return d


@dataclass(frozen=True)
class PhysicsSettings:
    """Integration method and fixed timestep (None = use the caller's dt)."""

    integration_method: str = "rk4"
    fixed_timestep: Optional[float] = None

    def __post_init__(self) -> None:
        if self.integration_method not in INTEGRATION_METHODS:
            raise ValueError(
                f"integration_method must be one of {INTEGRATION_METHODS}, "
                f"got {self.integration_method!r}"
            )
        if self.fixed_timestep is not None and not self.fixed_timestep > 0:
            raise ValueError(f"fixed_timestep must be > 0, got {self.fixed_timestep}")


@dataclass(frozen=True)
class SimulationConfig:
    """Static configuration of a model: metadata and physics settings."""

    meta: SimulationMeta
    physics: PhysicsSettings = field(default_factory=PhysicsSettings)
