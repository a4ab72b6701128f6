"""
Path smoothing and SVG export.

The generator produces raw samples; this module interpolates a continuous
curve through them (Catmull-Rom splines written as cubic Bezier segments)
and wraps the result in an SVG document for download.
"""

from typing import Any, Dict, Optional
import json

import numpy as np
import svgwrite

from harmonograph.core.config import settings
from harmonograph.core.exceptions import RenderError
from harmonograph.core.logging import get_logger
from harmonograph.visual.parameters import FIELD_ALIASES, ParameterSet
from harmonograph.visual.path import CurvePath

logger = get_logger(__name__)

COORDINATE_DECIMALS = 3

_WIRE_NAMES = {field: alias for alias, field in FIELD_ALIASES.items()}


def _fmt(value: float) -> str:
    text = f"{value:.{COORDINATE_DECIMALS}f}".rstrip('0').rstrip('.')
    if text in ('-0', ''):
        return '0'
    return text


def _pair(point) -> str:
    return f"{_fmt(point[0])},{_fmt(point[1])}"


def bezier_segments(points: np.ndarray) -> np.ndarray:
    """
    Convert a polyline into cubic Bezier control points.

    Uses uniform Catmull-Rom tangents with the end points repeated, so the
    curve passes through every sample.

    Args:
        points: (N, 2) array with N >= 2

    Returns:
        (N - 1, 3, 2) array of [control1, control2, end] per segment
    """
    n = len(points)
    padded = np.vstack([points[:1], points, points[-1:]])

    start = padded[1:n]
    end = padded[2:n + 1]
    control1 = start + (end - padded[0:n - 1]) / 6.0
    control2 = end - (padded[3:n + 2] - start) / 6.0

    return np.stack([control1, control2, end], axis=1)


def smooth_path_data(path: CurvePath) -> str:
    """
    Build SVG path data that passes smoothly through every point.

    Args:
        path: Sampled curve

    Returns:
        Path data string ('' for an empty path)

    Raises:
        RenderError: If the path contains non-finite coordinates
    """
    points = path.points
    if len(points) == 0:
        return ''

    if not np.all(np.isfinite(points)):
        raise RenderError("Path contains non-finite coordinates")

    head = f"M {_pair(points[0])}"
    if len(points) == 1:
        return head
    if len(points) == 2:
        return f"{head} L {_pair(points[1])}"

    segments = bezier_segments(points)
    body = " ".join(
        f"C {_pair(c1)} {_pair(c2)} {_pair(end)}"
        for c1, c2, end in segments
    )
    return f"{head} {body}"


def _js_number(value: Any) -> Any:
    """Integral floats print without a fraction, like JSON.stringify."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def export_filename(params: ParameterSet) -> str:
    """Download name: 'harmonograph' + the JSON parameter set (wire names) + '.svg'."""
    payload = {
        _WIRE_NAMES.get(key, key): _js_number(value)
        for key, value in params.to_dict().items()
    }
    return 'harmonograph' + json.dumps(payload, separators=(',', ':')) + '.svg'


def render_svg(
    path: CurvePath,
    params: ParameterSet,
    width: Optional[int] = None,
    height: Optional[int] = None,
    stroke_color: Optional[str] = None
) -> str:
    """
    Render a curve to an SVG document.

    Args:
        path: Sampled curve in canvas coordinates
        params: Parameters the curve was generated from (stroke width)
        width: Canvas width in px (defaults to settings)
        height: Canvas height in px (defaults to settings)
        stroke_color: Stroke color (defaults to settings)

    Returns:
        SVG document text
    """
    if width is None:
        width = settings.canvas_width
    if height is None:
        height = settings.canvas_height
    if stroke_color is None:
        stroke_color = settings.stroke_color

    try:
        dwg = svgwrite.Drawing(size=(f"{width}px", f"{height}px"), debug=False)
        dwg.viewbox(0, 0, width, height)

        data = smooth_path_data(path)
        if data:
            dwg.add(dwg.path(
                d=data,
                stroke=stroke_color,
                fill='none',
                stroke_width=params.stroke_width,
                stroke_linecap='round',
                stroke_linejoin='round'
            ))

        dwg.set_desc(desc="Generated by Harmonograph Studio")
        svg = dwg.tostring()
    except (TypeError, ValueError) as e:
        raise RenderError(f"SVG export failed: {e}")

    logger.info(
        "svg_rendered",
        num_points=len(path),
        size_bytes=len(svg)
    )

    return svg


def render_payload(path: CurvePath, params: ParameterSet) -> Dict:
    """Data the frontend canvas needs to draw one pass."""
    return {
        'num_points': len(path),
        'path_data': smooth_path_data(path),
        'stroke_width': params.stroke_width,
        'stroke_color': settings.stroke_color,
        'width': settings.canvas_width,
        'height': settings.canvas_height,
    }
