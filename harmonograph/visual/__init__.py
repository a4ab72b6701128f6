"""
Harmonograph curve generation.

Generates the curve point data, smooths it into SVG path data and manages
the interactive controls. The frontend canvas only draws what it receives.
"""

from harmonograph.visual.parameters import ParameterSet, DEFAULT_PARAMETERS
from harmonograph.visual.path import CurvePath
from harmonograph.visual.algorithms import HarmonographGenerator, generate
from harmonograph.visual.controls import (
    CONTROLS,
    RANDOM_RANGES,
    clamp_parameters,
    randomize
)
from harmonograph.visual.noise import coherent_noise_3d, linear_remap
from harmonograph.visual.session import CanvasSession

__all__ = [
    'ParameterSet',
    'DEFAULT_PARAMETERS',
    'CurvePath',
    'HarmonographGenerator',
    'generate',
    'CONTROLS',
    'RANDOM_RANGES',
    'clamp_parameters',
    'randomize',
    'coherent_noise_3d',
    'linear_remap',
    'CanvasSession'
]
