"""
Tests for path smoothing and SVG export.
"""

import json

import pytest
import numpy as np

from harmonograph.core.exceptions import RenderError
from harmonograph.visual.algorithms import HarmonographGenerator
from harmonograph.visual.parameters import DEFAULT_PARAMETERS
from harmonograph.visual.path import CurvePath
from harmonograph.visual.renderer import (
    bezier_segments,
    export_filename,
    render_payload,
    render_svg,
    smooth_path_data,
)


class TestCurvePath:
    """Test the point container."""

    def test_append(self):
        """Test points are appended in order."""
        path = CurvePath()
        path.add((1.0, 2.0))
        path.add((3.0, 4.0))

        assert len(path) == 2
        assert path.to_list() == [(1.0, 2.0), (3.0, 4.0)]
        assert path[-1] == (3.0, 4.0)

    def test_points_read_only(self):
        """Test the exposed array cannot be edited in place."""
        path = CurvePath.from_arrays(np.array([0.0, 1.0]), np.array([2.0, 3.0]))

        with pytest.raises(ValueError):
            path.points[0, 0] = 5.0

    def test_bounds(self):
        """Test bounding box."""
        path = CurvePath(np.array([[1.0, 5.0], [-2.0, 3.0], [4.0, -1.0]]))

        assert path.bounds() == (-2.0, -1.0, 4.0, 5.0)
        assert CurvePath().bounds() == (0.0, 0.0, 0.0, 0.0)


class TestSmoothing:
    """Test Catmull-Rom smoothing."""

    def test_segments_end_on_samples(self):
        """Test each segment ends on the next sample."""
        points = np.array([[0.0, 0.0], [1.0, 2.0], [3.0, 1.0], [4.0, 4.0]])
        segments = bezier_segments(points)

        assert segments.shape == (3, 3, 2)
        np.testing.assert_array_equal(segments[:, 2], points[1:])

    def test_straight_line_stays_straight(self):
        """Test collinear samples give collinear control points."""
        points = np.column_stack([np.arange(6, dtype=float), np.zeros(6)])
        segments = bezier_segments(points)

        np.testing.assert_array_equal(segments[:, :, 1], 0.0)

    def test_interior_tangent(self):
        """Test control points follow the neighbour chord."""
        points = np.array([[0.0, 0.0], [6.0, 0.0], [12.0, 6.0]])
        segments = bezier_segments(points)

        # Second segment starts at points[1]; tangent is (points[2] - points[0]) / 6
        np.testing.assert_allclose(segments[1, 0], [8.0, 1.0])

    def test_path_data_commands(self):
        """Test one cubic command per segment."""
        path = CurvePath(np.array([[0.0, 0.0], [1.0, 2.0], [3.0, 1.0], [4.0, 4.0]]))
        data = smooth_path_data(path)

        assert data.startswith('M 0,0 ')
        assert data.count('C ') == 3
        assert data.endswith('4,4')

    def test_short_paths(self):
        """Test degenerate paths."""
        assert smooth_path_data(CurvePath()) == ''
        assert smooth_path_data(CurvePath(np.array([[1.5, 2.0]]))) == 'M 1.5,2'
        assert smooth_path_data(CurvePath(np.array([[0.0, 0.0], [1.0, 1.0]]))) == 'M 0,0 L 1,1'

    def test_non_finite_rejected(self):
        """Test NaN coordinates raise."""
        path = CurvePath(np.array([[0.0, 0.0], [np.nan, 1.0], [2.0, 2.0]]))

        with pytest.raises(RenderError):
            smooth_path_data(path)


class TestSvgExport:
    """Test SVG export."""

    @pytest.fixture
    def path(self):
        return HarmonographGenerator(center=(400.0, 400.0)).generate(DEFAULT_PARAMETERS)

    def test_render_svg(self, path):
        """Test the document contains the styled path."""
        svg = render_svg(path, DEFAULT_PARAMETERS.with_values(stroke_width=2.5), width=800, height=800)

        assert '<svg' in svg
        assert 'viewBox="0,0,800,800"' in svg or 'viewBox="0 0 800 800"' in svg
        assert 'stroke-width="2.5"' in svg
        assert 'fill="none"' in svg
        assert 'stroke="black"' in svg
        assert svg.count('C ') == len(path) - 1
        assert 'Generated by Harmonograph Studio' in svg

    def test_render_empty_path(self):
        """Test an empty curve still exports a document."""
        svg = render_svg(CurvePath(), DEFAULT_PARAMETERS, width=100, height=100)

        assert '<svg' in svg
        assert '<path' not in svg

    def test_render_explicit_size(self):
        """Test an explicit zero size is kept."""
        svg = render_svg(CurvePath(), DEFAULT_PARAMETERS, width=0, height=0)

        assert 'width="0px"' in svg
        assert 'height="0px"' in svg

    def test_export_filename(self):
        """Test the download name embeds the parameters."""
        filename = export_filename(DEFAULT_PARAMETERS)

        assert filename.startswith('harmonograph{')
        assert filename.endswith('}.svg')

        data = json.loads(filename[len('harmonograph'):-len('.svg')])
        assert data['a1'] == 160
        assert data['f1'] == 2.01
        assert data['t_incr'] == 0.02
        assert data['noise'] is False
        assert data['strokeWidth'] == 1
        assert 'stroke_width' not in data
        assert '"a1":160,' in filename

    def test_render_payload(self, path):
        """Test the canvas payload."""
        payload = render_payload(path, DEFAULT_PARAMETERS)

        assert payload['num_points'] == 5000
        assert payload['stroke_width'] == 1.0
        assert payload['path_data'].startswith('M ')
