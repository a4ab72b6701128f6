"""
Interactive canvas session.

Owns the current parameter set of one canvas and re-renders the curve on
every change. The session is the only writer of its parameters.
"""

from typing import Dict, Mapping, Optional, Tuple
import numpy as np

from harmonograph.core.logging import get_logger
from harmonograph.visual.algorithms import HarmonographGenerator
from harmonograph.visual.controls import apply_values, clamp_parameters, randomize
from harmonograph.visual.parameters import DEFAULT_PARAMETERS, ParameterSet
from harmonograph.visual.path import CurvePath
from harmonograph.visual.renderer import export_filename, render_payload, render_svg

logger = get_logger(__name__)


class CanvasSession:
    """
    Parameter state and render loop for a single canvas.
    """

    def __init__(
        self,
        params: Optional[ParameterSet] = None,
        generator: Optional[HarmonographGenerator] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize canvas session.

        Args:
            params: Starting parameters (defaults if omitted)
            generator: Curve generator (configured canvas if omitted)
            rng: Random generator for randomize()
        """
        self.params = clamp_parameters(params or DEFAULT_PARAMETERS)
        self.generator = generator or HarmonographGenerator()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.path: Optional[CurvePath] = None
        self.render_count = 0

    def render(self) -> CurvePath:
        """Rebuild the path from the current parameters."""
        self.path = self.generator.generate(self.params)
        self.render_count += 1
        return self.path

    def set_parameter(self, name: str, value) -> CurvePath:
        """Set one control value (clamped) and re-render."""
        self.params = apply_values(self.params, {name: value})
        logger.debug("parameter_set", name=name, value=value)
        return self.render()

    def update(self, values: Mapping) -> CurvePath:
        """Set several control values at once and re-render."""
        self.params = apply_values(self.params, values)
        logger.debug("parameters_updated", names=list(values.keys()))
        return self.render()

    def randomize(self) -> CurvePath:
        """Draw new random parameters and re-render."""
        self.params = randomize(self.params, rng=self.rng)
        logger.info("session_randomized")
        return self.render()

    def reset(self) -> CurvePath:
        """Restore the default parameters and re-render."""
        self.params = DEFAULT_PARAMETERS
        logger.info("session_reset")
        return self.render()

    def state(self) -> Dict:
        """Current parameters plus the drawable path of the last render."""
        if self.path is None:
            self.render()
        payload = render_payload(self.path, self.params)
        payload['parameters'] = self.params.to_dict()
        return payload

    def export_svg(self) -> Tuple[str, str]:
        """
        Export the current curve.

        Returns:
            (filename, svg_text)
        """
        if self.path is None:
            self.render()
        return export_filename(self.params), render_svg(self.path, self.params)
