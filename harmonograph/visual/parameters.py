"""
Harmonograph parameter set.

Four damped oscillators (two per axis), the sampling domain, stroke style and
the optional noise perturbation. A ParameterSet is a value: changing a field
means building a new instance.
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping
import math


OSCILLATOR_COUNT = 4

# Wire names used by the browser controls that differ from the field names
FIELD_ALIASES: Dict[str, str] = {
    'strokeWidth': 'stroke_width',
    'xMultiplier': 'x_multiplier',
    'yMultiplier': 'y_multiplier',
}


@dataclass(frozen=True)
class ParameterSet:
    """
    Full set of harmonograph parameters.

    Oscillator i contributes a_i * sin(t * f_i + p_i) * exp(-d_i * t).
    Oscillators 1 and 2 drive x, oscillators 3 and 4 drive y.

    Attributes:
        a1..a4: Amplitudes in px
        f1..f4: Angular frequencies
        p1..p4: Phases in radians
        d1..d4: Damping coefficients
        t_max: End of the sampling domain (exclusive)
        t_incr: Sampling step
        stroke_width: Stroke width in px
        noise: Whether the noise perturbation is applied
        seed: Noise seed (used as the third noise coordinate)
        smoothing: Spatial scale divisor for the noise query
        x_multiplier: Horizontal noise displacement in px
        y_multiplier: Vertical noise displacement in px
    """
    a1: float = 160.0
    f1: float = 2.01
    p1: float = 0.0
    d1: float = 0.0
    a2: float = 160.0
    f2: float = 3.0
    p2: float = 7 * math.pi / 16
    d2: float = 0.0
    a3: float = 160.0
    f3: float = 3.0
    p3: float = 0.0
    d3: float = 0.0
    a4: float = 160.0
    f4: float = 2.0
    p4: float = 0.0
    d4: float = 0.0
    t_max: float = 100.0
    t_incr: float = 0.02
    stroke_width: float = 1.0
    noise: bool = False
    seed: float = 0.0
    smoothing: float = 100.0
    x_multiplier: float = 0.0
    y_multiplier: float = 0.0

    def oscillator(self, index: int) -> tuple:
        """Return (amplitude, frequency, phase, damping) of oscillator 1..4."""
        if not 1 <= index <= OSCILLATOR_COUNT:
            raise IndexError(f"oscillator index out of range: {index}")
        return (
            getattr(self, f'a{index}'),
            getattr(self, f'f{index}'),
            getattr(self, f'p{index}'),
            getattr(self, f'd{index}'),
        )

    @property
    def noise_enabled(self) -> bool:
        return bool(self.noise)

    def with_values(self, **values: Any) -> 'ParameterSet':
        """Copy with some fields replaced."""
        return replace(self, **values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ParameterSet':
        """
        Build a parameter set from a mapping.

        Missing fields take their defaults. Camel-case wire names are
        accepted; unknown keys are ignored.
        """
        known = field_names()
        values = {}
        for key, value in data.items():
            name = FIELD_ALIASES.get(key, key)
            if name in known:
                values[name] = value
        return cls(**values)


DEFAULT_PARAMETERS = ParameterSet()


def field_names() -> tuple:
    """Names of every ParameterSet field, in declaration order."""
    return tuple(f.name for f in fields(ParameterSet))


def resolve_name(name: str) -> str:
    """Map a wire name to a field name. Returns the name unchanged if unknown."""
    return FIELD_ALIASES.get(name, name)
