"""
Tests for harmonograph curve generation, controls and sessions.
"""

import math

import pytest
import numpy as np

from harmonograph.core.exceptions import ValidationError
from harmonograph.visual.algorithms import HarmonographGenerator
from harmonograph.visual.controls import (
    CONTROLS,
    RANDOM_RANGES,
    apply_values,
    clamp_parameters,
    clamp_value,
    controls_by_folder,
    randomize,
)
from harmonograph.visual.parameters import DEFAULT_PARAMETERS, ParameterSet, field_names
from harmonograph.visual.path import CurvePath
from harmonograph.visual.session import CanvasSession


CENTER = (400.0, 300.0)


class TestParameterSet:
    """Test the parameter value object."""

    def test_defaults(self):
        """Test default values match the classic figure."""
        params = ParameterSet()

        assert params.a1 == 160
        assert params.f1 == 2.01
        assert params.p2 == pytest.approx(7 * math.pi / 16)
        assert params.t_max == 100
        assert params.t_incr == 0.02
        assert params.stroke_width == 1
        assert params.noise is False

    def test_oscillator(self):
        """Test oscillator tuples."""
        params = ParameterSet(a3=10, f3=1.5, p3=0.25, d3=0.01)

        assert params.oscillator(3) == (10, 1.5, 0.25, 0.01)

        with pytest.raises(IndexError):
            params.oscillator(5)

    def test_from_dict_accepts_wire_names(self):
        """Test camel-case names and unknown keys."""
        params = ParameterSet.from_dict({
            'strokeWidth': 2.5,
            'xMultiplier': 12,
            'a1': 99,
            'unknown': 1
        })

        assert params.stroke_width == 2.5
        assert params.x_multiplier == 12
        assert params.a1 == 99
        assert params.f1 == DEFAULT_PARAMETERS.f1

    def test_with_values_is_a_copy(self):
        """Test that changes produce a new value."""
        changed = DEFAULT_PARAMETERS.with_values(a1=10)

        assert changed.a1 == 10
        assert DEFAULT_PARAMETERS.a1 == 160
        assert changed != DEFAULT_PARAMETERS

    def test_round_trip_dict(self):
        """Test dict conversion keeps every field."""
        data = DEFAULT_PARAMETERS.to_dict()

        assert set(data) == set(field_names())
        assert ParameterSet.from_dict(data) == DEFAULT_PARAMETERS


class TestHarmonographGenerator:
    """Test harmonograph generator."""

    @pytest.fixture
    def generator(self):
        return HarmonographGenerator(center=CENTER)

    @pytest.fixture
    def params(self):
        return ParameterSet()

    def test_example_point_count(self, generator, params):
        """Test the classic parameters give 5000 samples."""
        path = generator.generate(params)

        assert isinstance(path, CurvePath)
        assert len(path) == 5000

    def test_first_point(self, generator, params):
        """Test t = 0 evaluates the phases only."""
        x, y = generator.generate(params)[0]

        assert x == pytest.approx(CENTER[0] + 160 * math.sin(7 * math.pi / 16))
        assert y == pytest.approx(CENTER[1])

    def test_deterministic(self, generator, params):
        """Test identical parameters give identical points."""
        first = generator.generate(params)
        second = HarmonographGenerator(center=CENTER).generate(params)

        assert first == second
        assert np.array_equal(first.points, second.points)

    @pytest.mark.parametrize("t_max,t_incr", [
        (100, 0.02),
        (10, 0.3),
        (1, 0.07),
        (500, 0.9),
        (37.5, 0.01),
    ])
    def test_point_count(self, generator, t_max, t_incr):
        """Test sample count tracks t_max / t_incr."""
        path = generator.generate(ParameterSet(t_max=t_max, t_incr=t_incr))

        assert abs(len(path) - math.ceil(t_max / t_incr)) <= 1

    @pytest.mark.parametrize("t_max,t_incr,expected", [
        (2.1, 0.3, 7),
        (10.5, 0.7, 15),
    ])
    def test_sweep_excludes_t_max(self, generator, t_max, t_incr, expected):
        """Test a step landing exactly on t_max is not sampled."""
        t = generator.sample_times(ParameterSet(t_max=t_max, t_incr=t_incr))

        assert len(t) == expected
        assert t[-1] < t_max

    @pytest.mark.parametrize("t_incr", [0.1, 0.3, 0.7, 0.01, 0.03, 0.07])
    def test_sweep_is_half_open(self, generator, t_incr):
        """Test every sample lies in [0, t_max)."""
        for t_max in np.arange(0.1, 20.0, 0.1):
            t = generator.sample_times(ParameterSet(t_max=float(t_max), t_incr=t_incr))

            assert t[0] == 0.0
            assert np.all(t < t_max)

    def test_undamped_bounds(self, generator):
        """Test zero damping stays within the amplitude sums."""
        params = ParameterSet(
            a1=120, a2=80, a3=50, a4=150,
            f1=1.3, f2=2.7, f3=3.1, f4=0.4,
            d1=0, d2=0, d3=0, d4=0,
            t_max=300, t_incr=0.05
        )
        path = generator.generate(params)

        assert np.max(np.abs(path.x - CENTER[0])) <= 200 + 1e-9
        assert np.max(np.abs(path.y - CENTER[1])) <= 200 + 1e-9

    def test_damping_effect(self, generator):
        """Test that damping reduces amplitude over time."""
        params = ParameterSet(d1=0.05, d2=0.05, d3=0.05, d4=0.05, t_max=100)
        path = generator.generate(params)

        early_amp = np.max(np.abs(path.x[:500] - CENTER[0]))
        late_amp = np.max(np.abs(path.x[-500:] - CENTER[0]))

        assert early_amp > late_amp

    def test_zero_multipliers_match_plain_curve(self, generator, params):
        """Test noise with zero displacement changes nothing."""
        plain = generator.generate(params)
        noisy = generator.generate(params.with_values(
            noise=True, seed=17, smoothing=50, x_multiplier=0, y_multiplier=0
        ))

        assert np.array_equal(plain.points, noisy.points)

    def test_noise_displacement(self, generator, params):
        """Test noise offsets stay in [0, multiplier] and share one sample."""
        plain = generator.generate(params)
        noisy = generator.generate(params.with_values(
            noise=True, seed=3, smoothing=40, x_multiplier=30, y_multiplier=10
        ))

        dx = noisy.x - plain.x
        dy = noisy.y - plain.y

        assert np.all(dx >= -1e-9) and np.all(dx <= 30 + 1e-9)
        assert np.all(dy >= -1e-9) and np.all(dy <= 10 + 1e-9)
        assert np.allclose(dx / 30, dy / 10)
        assert not np.allclose(dx, dx[0])

    def test_noise_seed_changes_curve(self, generator, params):
        """Test different seeds give different perturbations."""
        base = params.with_values(noise=True, smoothing=40, x_multiplier=25, y_multiplier=25)

        first = generator.generate(base.with_values(seed=1.5))
        second = generator.generate(base.with_values(seed=7.25))

        assert first != second

    def test_empty_domain(self, generator):
        """Test t_max of zero gives an empty path."""
        path = generator.generate(ParameterSet(t_max=0))

        assert len(path) == 0

    def test_max_points(self, params):
        """Test the sample cap."""
        generator = HarmonographGenerator(center=CENTER, max_points=1000)
        path = generator.generate(params)

        assert len(path) == 1000

    def test_generate_formula(self, generator, params):
        """Test formula generation."""
        formula = generator.generate_formula(params)

        assert 'x' in formula
        assert 'y' in formula
        assert formula['type'] == 'harmonograph'
        assert formula['num_samples'] == 5000
        assert formula['noise'] is False
        assert 'noise_offset' not in formula

        noisy = generator.generate_formula(params.with_values(noise=True))
        assert 'noise_offset' in noisy


class TestControls:
    """Test control ranges and clamping."""

    def test_every_numeric_field_has_a_control(self):
        """Test the control table covers the parameter set."""
        numeric = set(field_names()) - {'noise'}

        assert numeric == set(CONTROLS)

    def test_folders(self):
        """Test controls are grouped like the panel."""
        folders = controls_by_folder()

        assert [c['name'] for c in folders['root']] == ['t_max', 't_incr']
        assert len(folders['params']) == 16
        assert folders['style'][0]['name'] == 'stroke_width'
        assert {c['name'] for c in folders['noise']} == {
            'seed', 'smoothing', 'x_multiplier', 'y_multiplier'
        }
        assert folders['params'][0]['default'] == 160

    def test_clamp_value(self):
        """Test values are clamped to the slider range."""
        assert clamp_value('a1', 1000) == 500
        assert clamp_value('a1', -5) == 0
        assert clamp_value('t_incr', 0) == 0.01
        assert clamp_value('p1', 10) == pytest.approx(2 * math.pi)
        assert clamp_value('strokeWidth', 0.1) == 0.5
        assert clamp_value('d2', 0.05) == 0.05
        assert clamp_value('noise', 1) is True

    def test_clamp_noise_toggle(self):
        """Test the noise toggle only takes booleans or 0/1."""
        assert clamp_value('noise', True) is True
        assert clamp_value('noise', 0) is False

        for value in ('false', '0', 'off', 2, None):
            with pytest.raises(ValidationError):
                clamp_value('noise', value)

    def test_clamp_non_finite(self):
        """Test infinities land on the range ends."""
        assert clamp_value('a1', float('inf')) == 500
        assert clamp_value('a1', float('-inf')) == 0

    def test_clamp_rejects_unknown(self):
        """Test unknown names and non-numeric values."""
        with pytest.raises(ValidationError):
            clamp_value('a5', 1)

        with pytest.raises(ValidationError):
            clamp_value('a1', 'loud')

    def test_clamp_parameters(self):
        """Test a whole parameter set is brought into range."""
        params = clamp_parameters(ParameterSet(a1=900, t_incr=-1, smoothing=0, d4=1))

        assert params.a1 == 500
        assert params.t_incr == 0.01
        assert params.smoothing == 1
        assert params.d4 == 0.1
        assert params.f1 == DEFAULT_PARAMETERS.f1

    def test_apply_values(self):
        """Test control changes build a new parameter set."""
        params = apply_values(DEFAULT_PARAMETERS, {'a1': 42, 'strokeWidth': 3})

        assert params.a1 == 42
        assert params.stroke_width == 3
        assert DEFAULT_PARAMETERS.a1 == 160


class TestRandomize:
    """Test the randomize policy."""

    def test_values_in_range_and_precision(self):
        """Test every draw respects range and decimal places."""
        rng = np.random.default_rng(1234)

        for _ in range(200):
            params = randomize(DEFAULT_PARAMETERS, rng=rng)

            for name, (low, high, decimals) in RANDOM_RANGES.items():
                value = getattr(params, name)
                assert low <= value <= high
                assert round(value, decimals) == value

    def test_unranged_fields_unchanged(self):
        """Test parameters without a range keep their value."""
        base = DEFAULT_PARAMETERS.with_values(t_max=321, stroke_width=2.5)
        params = randomize(base, rng=np.random.default_rng(5))

        assert params.t_max == 321
        assert params.t_incr == base.t_incr
        assert params.stroke_width == 2.5
        assert params.x_multiplier == base.x_multiplier

    def test_custom_ranges(self):
        """Test only the listed parameters change."""
        ranges = {'a1': (10.0, 20.0, 1)}
        params = randomize(DEFAULT_PARAMETERS, ranges=ranges, rng=np.random.default_rng(9))

        assert 10.0 <= params.a1 <= 20.0
        assert params.f1 == DEFAULT_PARAMETERS.f1
        assert params.a2 == DEFAULT_PARAMETERS.a2

    def test_precision_tightens_bounds(self):
        """Test rounding never escapes a range narrower than the precision."""
        ranges = {'d1': (0.004, 0.006, 2)}
        rng = np.random.default_rng(0)

        for _ in range(50):
            value = randomize(DEFAULT_PARAMETERS, ranges=ranges, rng=rng).d1
            assert round(value, 2) == value

    def test_seeded_draws_repeat(self):
        """Test the same seed gives the same parameters."""
        first = randomize(DEFAULT_PARAMETERS, rng=np.random.default_rng(77))
        second = randomize(DEFAULT_PARAMETERS, rng=np.random.default_rng(77))

        assert first == second

    def test_unknown_range_name(self):
        """Test range tables must name real parameters."""
        with pytest.raises(ValidationError):
            randomize(DEFAULT_PARAMETERS, ranges={'z9': (0, 1, 0)})


class TestCanvasSession:
    """Test the interactive session."""

    @pytest.fixture
    def session(self):
        return CanvasSession(
            generator=HarmonographGenerator(center=CENTER),
            rng=np.random.default_rng(2024)
        )

    def test_initial_state(self, session):
        """Test the session starts on the defaults."""
        state = session.state()

        assert state['parameters'] == DEFAULT_PARAMETERS.to_dict()
        assert state['num_points'] == 5000
        assert state['path_data'].startswith('M ')
        assert session.render_count == 1

    def test_set_parameter_rebuilds_path(self, session):
        """Test each change re-renders from scratch."""
        session.render()
        path = session.set_parameter('t_max', 10)

        assert session.params.t_max == 10
        assert len(path) == 500
        assert session.render_count == 2

    def test_set_parameter_clamps(self, session):
        """Test out-of-range values are clamped."""
        session.set_parameter('a1', 10_000)

        assert session.params.a1 == 500

    def test_unknown_parameter_keeps_state(self, session):
        """Test invalid changes leave the parameters untouched."""
        with pytest.raises(ValidationError):
            session.set_parameter('volume', 1)

        assert session.params == DEFAULT_PARAMETERS

    def test_update(self, session):
        """Test several changes at once."""
        session.update({'a1': 10, 'a2': 20, 'strokeWidth': 4})

        assert (session.params.a1, session.params.a2) == (10, 20)
        assert session.params.stroke_width == 4

    def test_randomize_and_reset(self, session):
        """Test randomize changes ranged values and reset restores defaults."""
        session.randomize()
        low, high, _ = RANDOM_RANGES['a1']

        assert low <= session.params.a1 <= high
        assert session.params.t_max == DEFAULT_PARAMETERS.t_max

        session.reset()
        assert session.params == DEFAULT_PARAMETERS

    def test_export_svg(self, session):
        """Test SVG export of the current curve."""
        session.set_parameter('stroke_width', 2)
        filename, svg = session.export_svg()

        assert filename.startswith('harmonograph{')
        assert filename.endswith('.svg')
        assert '"strokeWidth":2' in filename
        assert '<svg' in svg
        assert 'stroke-width="2' in svg
