"""
Harmonograph API endpoints.
"""

from typing import Dict, Optional
from urllib.parse import quote

import numpy as np
from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel, Field

from harmonograph.core.logging import get_logger
from harmonograph.visual.algorithms import HarmonographGenerator
from harmonograph.visual.controls import (
    RANDOM_RANGES,
    clamp_parameters,
    controls_by_folder,
    randomize,
)
from harmonograph.visual.parameters import DEFAULT_PARAMETERS, ParameterSet
from harmonograph.visual.renderer import export_filename, render_payload, render_svg

logger = get_logger(__name__)

router = APIRouter()


# Request/Response models
class ParametersRequest(BaseModel):
    """Harmonograph parameters; missing fields take their defaults."""
    parameters: Dict = Field(default_factory=dict, description="Harmonograph parameters")
    include_points: bool = Field(True, description="Return raw sample points")

    model_config = {
        "json_schema_extra": {
            "example": {
                "parameters": {
                    "a1": 160, "f1": 2.01, "p1": 0, "d1": 0,
                    "a2": 160, "f2": 3, "p2": 1.3744, "d2": 0,
                    "t_max": 100, "t_incr": 0.02
                },
                "include_points": False
            }
        }
    }


class RandomizeRequest(BaseModel):
    """Randomize request."""
    parameters: Dict = Field(default_factory=dict, description="Parameters to start from")
    seed: Optional[int] = Field(None, description="Seed for reproducible draws")

    model_config = {
        "json_schema_extra": {
            "example": {
                "parameters": {"t_max": 200},
                "seed": 42
            }
        }
    }


def _controlled(parameters: Dict) -> ParameterSet:
    """Parse request parameters and clamp them like the controls would."""
    return clamp_parameters(ParameterSet.from_dict(parameters))


@router.get("/defaults")
async def get_default_parameters():
    """
    Get the default parameter set.

    Returns:
        Default parameters
    """
    return {
        "parameters": DEFAULT_PARAMETERS.to_dict()
    }


@router.get("/controls")
async def get_controls():
    """
    Get slider definitions grouped by folder.

    Returns:
        Controls with min, max, step and default
    """
    return {
        "folders": controls_by_folder()
    }


@router.get("/random_ranges")
async def get_random_ranges():
    """
    Get the ranges used by Randomize.

    Returns:
        name -> {min, max, decimals}
    """
    return {
        "ranges": {
            name: {"min": low, "max": high, "decimals": decimals}
            for name, (low, high, decimals) in RANDOM_RANGES.items()
        }
    }


@router.post("/generate")
async def generate_curve(request: ParametersRequest):
    """
    Generate the harmonograph curve.

    Args:
        request: Parameters

    Returns:
        Smoothed path data, optional raw points and formula
    """
    params = _controlled(request.parameters)

    generator = HarmonographGenerator()
    path = generator.generate(params)

    response = render_payload(path, params)
    response["parameters"] = params.to_dict()
    response["formula"] = generator.generate_formula(params)
    if request.include_points:
        response["points"] = path.to_list()

    logger.info(
        "curve_points_generated",
        num_points=len(path),
        noise=params.noise_enabled
    )

    return response


@router.post("/randomize")
async def randomize_parameters(request: RandomizeRequest):
    """
    Draw random parameters.

    Args:
        request: Base parameters and optional seed

    Returns:
        Randomized parameters
    """
    params = _controlled(request.parameters)
    rng = np.random.default_rng(request.seed)

    randomized = clamp_parameters(randomize(params, rng=rng))

    logger.info("parameters_randomized", seed=request.seed)

    return {
        "parameters": randomized.to_dict()
    }


@router.post("/formula")
async def get_formula(request: ParametersRequest):
    """
    Get the curve formula for a parameter set.

    Args:
        request: Parameters

    Returns:
        Formula strings
    """
    params = _controlled(request.parameters)
    formula = HarmonographGenerator().generate_formula(params)

    return {
        "formula": formula
    }


@router.post("/export")
async def export_svg(request: ParametersRequest):
    """
    Export the curve as an SVG download.

    Args:
        request: Parameters

    Returns:
        SVG document as an attachment named after the parameters
    """
    params = _controlled(request.parameters)
    path = HarmonographGenerator().generate(params)

    svg = render_svg(path, params)
    filename = export_filename(params)

    logger.info("svg_exported", num_points=len(path), filename_length=len(filename))

    return Response(
        content=svg,
        media_type="image/svg+xml; charset=utf-8",
        headers={
            "Content-Disposition": (
                f"attachment; filename=\"harmonograph.svg\"; "
                f"filename*=UTF-8''{quote(filename)}"
            )
        }
    )
