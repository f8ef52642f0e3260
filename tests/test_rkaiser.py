"""Tests for root-Nyquist Kaiser filter design."""

import numpy as np
import pytest

from pulsetools import (
    FilterSpec,
    InvalidDelayError,
    InvalidExcessBandwidthError,
    InvalidFractionalDelayError,
    InvalidOversamplingError,
    SearchConfig,
    filter_isi,
    rkaiser,
)

# Reference design for sps=2, span=3, rolloff=0.3, frac_delay=0.0
GOLDEN_RHO = 0.743204014813
GOLDEN_TAPS = np.array(
    [
        -0.037128392592,
        0.068309404777,
        0.056723393167,
        -0.170900599494,
        -0.071249150367,
        0.618760520747,
        1.071064634819,
        0.618760520747,
        -0.071249150367,
        -0.170900599494,
        0.056723393167,
        0.068309404777,
        -0.037128392592,
    ]
)


class TestApproximateRho:
    @pytest.mark.parametrize("span", range(1, 21))
    def test_in_unit_interval(self, span):
        for rolloff in np.linspace(0.01, 0.99, 25):
            rho = rkaiser.approximate_rho(span, rolloff)
            assert 0.0 <= rho <= 1.0

    @pytest.mark.parametrize(
        "span, rolloff, expected",
        [
            (3, 0.3, 0.7424384172),
            (1, 0.2, 0.3225038276),
            (7, 0.25, 0.7977566733),
            (10, 0.25, 0.8306728307),
            (20, 0.5, 0.9348286317),
        ],
    )
    def test_reference_values(self, span, rolloff, expected):
        assert rkaiser.approximate_rho(span, rolloff) == pytest.approx(expected, abs=1e-9)

    def test_closed_interval_endpoints(self):
        assert rkaiser.approximate_rho(3, 0.0) == 0.0
        rho = rkaiser.approximate_rho(3, 1.0)
        assert np.isfinite(rho) and 0.0 <= rho <= 1.0

    def test_invalid_span(self):
        with pytest.raises(InvalidDelayError):
            rkaiser.approximate_rho(0, 0.3)

    @pytest.mark.parametrize("rolloff", [-0.1, 1.1, float("nan")])
    def test_invalid_rolloff(self, rolloff):
        with pytest.raises(InvalidExcessBandwidthError) as excinfo:
            rkaiser.approximate_rho(3, rolloff)
        assert not excinfo.value.open_interval


class TestISIObjective:
    def test_prototype_parameters(self, spec):
        cutoff, attenuation = rkaiser.ISIObjective(spec).prototype(0.8)

        gamma = 0.8 * 0.3
        assert cutoff == pytest.approx((1 + 0.3 - gamma) / 2)
        assert attenuation == pytest.approx(14.26 * (gamma / 2) * 13 + 7.95)

    def test_returns_rms_isi(self, spec):
        objective = rkaiser.ISIObjective(spec)

        isi = objective.metric(0.75)

        assert objective(0.75) == isi.mse
        assert isi.mse == pytest.approx(filter_isi(objective.taps(0.75), 2, 3).mse)

    def test_taps_are_independent_of_scratch(self, spec):
        objective = rkaiser.ISIObjective(spec)

        taps = objective.taps(0.7)
        snapshot = taps.copy()
        objective(0.2)
        objective(0.9)

        np.testing.assert_array_equal(taps, snapshot)
        assert objective.evaluations == 2

    def test_injected_collaborators(self, spec):
        calls = []

        def synthesizer(num_taps, cutoff, attenuation_db, frac_delay, out=None):
            calls.append((num_taps, cutoff, attenuation_db, frac_delay))
            out[:] = 0.0
            out[num_taps // 2] = 1.0
            return out

        def evaluator(taps, sps, span):
            return filter_isi(taps, sps, span)

        objective = rkaiser.ISIObjective(spec, synthesizer, evaluator)

        assert objective(0.5) == 0.0
        assert calls[0][0] == 13
        assert calls[0][3] == 0.0


class TestDesign:
    def test_tap_count(self, design_params):
        sps, span, rolloff, dt = design_params

        exact = rkaiser.rkaiser_taps(sps, span, rolloff, dt)
        approx = rkaiser.arkaiser_taps(sps, span, rolloff, dt)

        assert exact.shape == approx.shape == (2 * sps * span + 1,)

    def test_energy(self, design_params, energy):
        sps, span, rolloff, dt = design_params

        exact = rkaiser.rkaiser_taps(sps, span, rolloff, dt)
        approx = rkaiser.arkaiser_taps(sps, span, rolloff, dt)

        assert energy(exact) == pytest.approx(sps, rel=1e-5)
        assert energy(approx) == pytest.approx(sps, rel=1e-5)

    def test_exact_not_worse_than_approximate(self, design_params):
        sps, span, rolloff, dt = design_params

        exact = rkaiser.rkaiser_taps(sps, span, rolloff, dt)
        approx = rkaiser.arkaiser_taps(sps, span, rolloff, dt)

        assert filter_isi(exact, sps, span).mse <= filter_isi(approx, sps, span).mse

    def test_rho_in_unit_interval(self, design_params):
        _, rho = rkaiser.rkaiser_taps_with_rho(*design_params)

        assert 0.0 <= rho <= 1.0

    def test_symmetric_without_delay(self):
        taps = rkaiser.rkaiser_taps(4, 5, 0.35)

        np.testing.assert_allclose(taps, taps[::-1], atol=1e-12)
        assert np.argmax(taps) == 20

    @pytest.mark.parametrize("rolloff", [1e-4, 1e-3, 0.999, 0.9999])
    def test_rolloff_limits(self, rolloff, energy):
        for design in (rkaiser.rkaiser_taps, rkaiser.arkaiser_taps):
            taps = design(2, 3, rolloff)

            assert np.all(np.isfinite(taps))
            assert energy(taps) == pytest.approx(2.0, rel=1e-5)

    def test_golden_vector(self):
        taps, rho = rkaiser.rkaiser_taps_with_rho(2, 3, 0.3, 0.0)

        assert rho == pytest.approx(GOLDEN_RHO, abs=1e-4)
        np.testing.assert_allclose(taps, GOLDEN_TAPS, atol=1e-6)

    def test_taps_match_with_rho_variant(self):
        taps, _ = rkaiser.rkaiser_taps_with_rho(3, 4, 0.25, 0.1)

        np.testing.assert_array_equal(rkaiser.rkaiser_taps(3, 4, 0.25, 0.1), taps)

    def test_callback_invoked(self):
        steps = []

        rkaiser.rkaiser_taps(2, 3, 0.3, callback=steps.append)

        assert 0 < len(steps) <= 10
        assert all(step.isi >= 0 for step in steps)

    def test_search_config_budget(self):
        steps = []

        rkaiser.rkaiser_taps(2, 3, 0.3, search=SearchConfig(max_iterations=2), callback=steps.append)

        assert len(steps) <= 2


class TestLowLevelDesign:
    def test_accepts_single_sample_per_symbol(self):
        design = rkaiser.design_rkaiser(FilterSpec(sps=1, span=3, rolloff=0.3))

        assert design.taps.shape == (7,)
        assert np.sum(design.taps**2) == pytest.approx(1.0, rel=1e-5)
        assert 0.0 <= design.rho <= 1.0

    @pytest.mark.parametrize("rolloff", [0.0, 1.0])
    def test_accepts_closed_rolloff_interval(self, rolloff):
        design = rkaiser.design_rkaiser(FilterSpec(sps=2, span=3, rolloff=rolloff))

        assert np.all(np.isfinite(design.taps))

    def test_reports_isi_of_result(self, spec):
        design = rkaiser.design_rkaiser(spec)

        measured = filter_isi(design.taps, spec.sps, spec.span)
        assert design.isi.mse == pytest.approx(measured.mse)
        assert design.isi.max == pytest.approx(measured.max)

    def test_matches_public_design(self, spec):
        design = rkaiser.design_rkaiser(spec)
        taps, rho = rkaiser.rkaiser_taps_with_rho(2, 3, 0.3)

        assert design.rho == rho
        np.testing.assert_array_equal(design.taps, taps)

    def test_rejects_zero_sps(self):
        with pytest.raises(InvalidOversamplingError):
            rkaiser.design_rkaiser(FilterSpec(sps=0, span=3, rolloff=0.3))


class TestValidation:
    @pytest.mark.parametrize(
        "design", [rkaiser.rkaiser_taps, rkaiser.rkaiser_taps_with_rho, rkaiser.arkaiser_taps]
    )
    @pytest.mark.parametrize(
        "args, error",
        [
            ((1, 3, 0.3, 0.0), InvalidOversamplingError),
            ((2, 0, 0.3, 0.0), InvalidDelayError),
            ((2, 3, 0.0, 0.0), InvalidExcessBandwidthError),
            ((2, 3, 1.0, 0.0), InvalidExcessBandwidthError),
            ((2, 3, 0.3, 1.5), InvalidFractionalDelayError),
            ((2, 3, 0.3, -1.01), InvalidFractionalDelayError),
        ],
    )
    def test_rejects_invalid_parameters(self, design, args, error):
        with pytest.raises(error):
            design(*args)

    def test_oversampling_error_details(self):
        with pytest.raises(InvalidOversamplingError) as excinfo:
            rkaiser.rkaiser_taps(1, 3, 0.3, 0.0)

        err = excinfo.value
        assert isinstance(err, ValueError)
        assert err.parameter == "sps"
        assert err.value == 1
        assert err.minimum == 2
        assert "rkaiser_taps" in str(err)

    @pytest.mark.parametrize("dt", [-1.0, 1.0])
    def test_fractional_delay_bounds_inclusive(self, dt):
        assert rkaiser.rkaiser_taps(2, 3, 0.3, dt).shape == (13,)
