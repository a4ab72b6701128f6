"""
Control definitions for the harmonograph canvas.

Every slider the frontend shows is described here with its range and folder.
The control layer clamps incoming values to these ranges; the curve
generator itself never validates. The randomize policy draws new values
from a separate range table.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple
import math

import numpy as np

from harmonograph.core.exceptions import ValidationError
from harmonograph.core.logging import get_logger
from harmonograph.visual.parameters import (
    DEFAULT_PARAMETERS,
    OSCILLATOR_COUNT,
    ParameterSet,
    field_names,
    resolve_name,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ControlSpec:
    """
    A numeric slider.

    Attributes:
        name: ParameterSet field the slider drives
        min: Lowest accepted value
        max: Highest accepted value
        step: Slider increment
        folder: Group the slider is shown in ('root', 'params', 'style', 'noise')
        label: Display label
    """
    name: str
    min: float
    max: float
    step: float
    folder: str = 'root'
    label: str = ''

    def clamp(self, value: float) -> float:
        return float(np.clip(value, self.min, self.max))

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'min': self.min,
            'max': self.max,
            'step': self.step,
            'folder': self.folder,
            'label': self.label or self.name,
            'default': getattr(DEFAULT_PARAMETERS, self.name),
        }


def _build_controls() -> Dict[str, ControlSpec]:
    controls = [
        ControlSpec('t_max', 0.0, 1000.0, 1.0, 'root', 'Duration'),
        ControlSpec('t_incr', 0.01, 1.0, 0.01, 'root', 'Step'),
    ]

    for i in range(1, OSCILLATOR_COUNT + 1):
        controls.extend([
            ControlSpec(f'a{i}', 0.0, 500.0, 1.0, 'params'),
            ControlSpec(f'f{i}', 0.0, 10.0, 0.01, 'params'),
            ControlSpec(f'p{i}', 0.0, 2 * math.pi, 0.01, 'params'),
            ControlSpec(f'd{i}', 0.0, 0.1, 0.001, 'params'),
        ])

    controls.extend([
        ControlSpec('stroke_width', 0.5, 5.0, 0.1, 'style', 'Stroke width'),
        ControlSpec('seed', 0.0, 1000.0, 1.0, 'noise', 'Seed'),
        ControlSpec('smoothing', 1.0, 1000.0, 1.0, 'noise', 'Smoothing'),
        ControlSpec('x_multiplier', 0.0, 200.0, 1.0, 'noise', 'X multiplier'),
        ControlSpec('y_multiplier', 0.0, 200.0, 1.0, 'noise', 'Y multiplier'),
    ])

    return {c.name: c for c in controls}


CONTROLS: Dict[str, ControlSpec] = _build_controls()

# (min, max, decimal places) for the Randomize button
RANDOM_RANGES: Dict[str, Tuple[float, float, int]] = {}
for _i in range(1, OSCILLATOR_COUNT + 1):
    RANDOM_RANGES[f'a{_i}'] = (50.0, 250.0, 0)
    RANDOM_RANGES[f'f{_i}'] = (1.0, 6.0, 2)
    RANDOM_RANGES[f'p{_i}'] = (0.0, 2 * math.pi, 2)
    RANDOM_RANGES[f'd{_i}'] = (0.0, 0.02, 4)
RANDOM_RANGES['seed'] = (0.0, 1000.0, 0)
del _i


def controls_by_folder() -> Dict[str, List[Dict]]:
    """Group control descriptions by folder, preserving declaration order."""
    grouped: Dict[str, List[Dict]] = {}
    for control in CONTROLS.values():
        grouped.setdefault(control.folder, []).append(control.to_dict())
    return grouped


def clamp_value(name: str, value) -> float:
    """
    Clamp a single value to its control range.

    Args:
        name: Field or wire name
        value: Raw value from the frontend

    Returns:
        The clamped value (booleans for the 'noise' toggle)

    Raises:
        ValidationError: If the name is not a parameter or the value is not numeric
    """
    name = resolve_name(name)
    if name not in field_names():
        raise ValidationError(f"Unknown parameter: {name}")

    if name == 'noise':
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)) and value in (0, 1):
            return bool(value)
        raise ValidationError(f"Parameter noise must be a boolean, got {value!r}")

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Parameter {name} must be numeric, got {value!r}")

    control = CONTROLS[name]
    if not math.isfinite(number):
        logger.warning("non_finite_parameter", name=name, value=str(value))
        return control.max if number > 0 else control.min

    clamped = control.clamp(number)
    if clamped != number:
        logger.debug("parameter_clamped", name=name, value=number, clamped=clamped)
    return clamped


def clamp_parameters(params: ParameterSet) -> ParameterSet:
    """Return params with every numeric field clamped to its control range."""
    values = params.to_dict()
    clamped = {name: clamp_value(name, value) for name, value in values.items()}
    return ParameterSet(**clamped)


def apply_values(params: ParameterSet, values: Mapping) -> ParameterSet:
    """
    Apply control changes to a parameter set.

    Args:
        params: Current parameters
        values: Field or wire name -> raw value

    Returns:
        New parameter set with the clamped values applied
    """
    changes = {resolve_name(name): clamp_value(name, value) for name, value in values.items()}
    return params.with_values(**changes)


def _quantize_bounds(low: float, high: float, decimals: int) -> Tuple[float, float]:
    """Tighten [low, high] to the nearest values representable at the precision."""
    scale = 10 ** decimals
    q_low = math.ceil(round(low * scale, 6)) / scale
    q_high = math.floor(round(high * scale, 6)) / scale
    if q_low > q_high:
        # No representable value inside the range; fall back to the midpoint
        mid = round((low + high) / 2, decimals)
        return mid, mid
    return q_low, q_high


def randomize(
    params: ParameterSet,
    ranges: Optional[Mapping[str, Tuple[float, float, int]]] = None,
    rng: Optional[np.random.Generator] = None
) -> ParameterSet:
    """
    Draw new values for every parameter that has a range entry.

    Each value is uniform in [min, max], rounded to the declared number of
    decimal places. Parameters without an entry keep their value. Draws are
    independent.

    Args:
        params: Parameters to start from
        ranges: name -> (min, max, decimal_places); defaults to RANDOM_RANGES
        rng: Random generator (a fresh unseeded one if omitted)

    Returns:
        New parameter set
    """
    if ranges is None:
        ranges = RANDOM_RANGES
    if rng is None:
        rng = np.random.default_rng()

    known = field_names()
    changes = {}
    for name, (low, high, decimals) in ranges.items():
        name = resolve_name(name)
        if name not in known:
            raise ValidationError(f"Unknown parameter in range table: {name}")

        value = round(float(rng.uniform(low, high)), decimals)
        q_low, q_high = _quantize_bounds(low, high, decimals)
        value = min(max(value, q_low), q_high)
        if decimals == 0:
            value = float(int(value))
        changes[name] = value

    logger.debug("parameters_randomized", count=len(changes))
    return params.with_values(**changes)
