"""
Harmonograph curve generation.

Closed-form damped sinusoid sums sampled on a fixed time grid, with an
optional coherent-noise displacement. Produces the point data that the
renderer smooths and the frontend draws.
"""

from typing import Dict, Optional, Tuple
import numpy as np

from harmonograph.core.config import settings
from harmonograph.core.logging import get_logger
from harmonograph.visual.noise import coherent_noise_3d, linear_remap
from harmonograph.visual.parameters import ParameterSet
from harmonograph.visual.path import CurvePath

logger = get_logger(__name__)


class HarmonographGenerator:
    """
    Harmonograph generator (four damped pendulums, two per axis).

    Generates curves:
    x(t) = a1 * sin(f1 * t + p1) * exp(-d1 * t) + a2 * sin(f2 * t + p2) * exp(-d2 * t)
    y(t) = a3 * sin(f3 * t + p3) * exp(-d3 * t) + a4 * sin(f4 * t + p4) * exp(-d4 * t)
    """

    def __init__(self, center: Optional[Tuple[float, float]] = None, max_points: Optional[int] = None):
        """
        Initialize harmonograph generator.

        Args:
            center: Canvas center in px (defaults to the configured canvas)
            max_points: Upper bound on samples per pass (defaults to settings)
        """
        self.center = center if center is not None else settings.canvas_center
        self.max_points = max_points if max_points is not None else settings.max_points

    def sample_times(self, params: ParameterSet) -> np.ndarray:
        """Fixed-step sweep over [0, t_max)."""
        if params.t_incr <= 0 or params.t_max <= 0:
            return np.empty(0, dtype=np.float64)

        t = np.arange(0.0, params.t_max, params.t_incr, dtype=np.float64)
        # arange can land a sample on t_max itself
        t = t[t < params.t_max]
        if len(t) > self.max_points:
            logger.warning(
                "sample_count_truncated",
                requested=len(t),
                max_points=self.max_points
            )
            t = t[:self.max_points]
        return t

    @staticmethod
    def _axis(t: np.ndarray, first: tuple, second: tuple) -> np.ndarray:
        a_1, f_1, p_1, d_1 = first
        a_2, f_2, p_2, d_2 = second
        return (
            a_1 * np.sin(t * f_1 + p_1) * np.exp(-d_1 * t) +
            a_2 * np.sin(t * f_2 + p_2) * np.exp(-d_2 * t)
        )

    def generate(self, params: ParameterSet) -> CurvePath:
        """
        Generate the curve for a parameter set.

        Args:
            params: Harmonograph parameters

        Returns:
            CurvePath in canvas coordinates
        """
        t = self.sample_times(params)

        x = self._axis(t, params.oscillator(1), params.oscillator(2))
        y = self._axis(t, params.oscillator(3), params.oscillator(4))

        # Translate to canvas center
        cx, cy = self.center
        x = x + cx
        y = y + cy

        if params.noise_enabled:
            x, y = self._perturb(x, y, params)

        path = CurvePath.from_arrays(x, y)

        logger.debug(
            "curve_generated",
            num_points=len(path),
            noise=params.noise_enabled
        )

        return path

    @staticmethod
    def _perturb(x: np.ndarray, y: np.ndarray, params: ParameterSet) -> Tuple[np.ndarray, np.ndarray]:
        """
        Displace every point by coherent noise.

        Both axes read the same noise sample.
        """
        n = coherent_noise_3d(x / params.smoothing, y / params.smoothing, params.seed)
        offset = linear_remap(n, -1.0, 1.0, 0.0, 1.0)
        return x + offset * params.x_multiplier, y + offset * params.y_multiplier

    def generate_formula(self, params: ParameterSet) -> Dict:
        """
        Generate formula strings for frontend.

        Args:
            params: Harmonograph parameters

        Returns:
            Dictionary with formula strings
        """
        def term(index: int) -> str:
            a, f, p, d = params.oscillator(index)
            return f"{a:.2f} * sin({f:.3f} * t + {p:.3f}) * exp(-{d:.4f} * t)"

        formula = {
            'x': f"{term(1)} + {term(2)}",
            'y': f"{term(3)} + {term(4)}",
            'type': 'harmonograph',
            'num_samples': len(self.sample_times(params)),
            'noise': params.noise_enabled,
        }

        if params.noise_enabled:
            formula['noise_offset'] = (
                f"remap(noise(x / {params.smoothing:.1f}, y / {params.smoothing:.1f}, "
                f"{params.seed:.0f}), -1, 1, 0, 1) * ({params.x_multiplier:.1f}, {params.y_multiplier:.1f})"
            )

        return formula


def generate(params: ParameterSet) -> CurvePath:
    """Generate a curve with the configured canvas."""
    return HarmonographGenerator().generate(params)
