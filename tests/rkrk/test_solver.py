"""
Tests for rkrk.solve() and the CPU backend.

Tests the complete pipeline: design validation, backend selection,
the coupled iteration, and the error trace.
"""

import warnings

import numpy as np
import pytest

import pykaczmarz
from pykaczmarz.core.compute.norms import VectorMath
from pykaczmarz.core.compute.tolerances import ITERATE_CONVERGED
from pykaczmarz.core.exceptions import (
    ConfigurationError,
    DimensionError,
    NumericDegeneracyError,
    SamplingError,
)
from pykaczmarz.core.protocols import Backend
from pykaczmarz.rkrk import RKRKSolution, solve
from pykaczmarz.rkrk.backends.cpu import CPURKRKBackend, project_onto_row


# ═══════════════════════════════════════════════════════════════════════
# Convergence
# ═══════════════════════════════════════════════════════════════════════


class TestConvergence:

    def test_identity_system(self, identity_system):
        U, V, y, B = identity_system
        result = solve(U, V, y, B, 5000, track_errors=True, seed=42)

        assert isinstance(result, RKRKSolution)
        np.testing.assert_allclose(result.x, [1.0, 2.0, 3.0], atol=ITERATE_CONVERGED.atol)
        np.testing.assert_allclose(result.b, [1.0, 2.0, 3.0], atol=ITERATE_CONVERGED.atol)
        assert result.errors.shape == (5000,)
        assert result.errors[-1] < result.errors[0]

    def test_identity_system_unseeded(self, identity_system):
        result = solve(*identity_system, 5000, track_errors=True)
        np.testing.assert_allclose(result.b, [1.0, 2.0, 3.0], atol=ITERATE_CONVERGED.atol)

    def test_consistent_system(self, consistent_system):
        U, V, y, b_true, x_true = consistent_system
        result = solve(U, V, y, b_true, 3000, track_errors=True, seed=3)

        np.testing.assert_allclose(result.x, x_true, atol=ITERATE_CONVERGED.atol)
        np.testing.assert_allclose(result.b, b_true, atol=ITERATE_CONVERGED.atol)
        assert result.final_error < 1e-4

    def test_single_norm_worker(self, consistent_system):
        U, V, y, b_true, x_true = consistent_system
        result = solve(U, V, y, b_true, 3000, seed=3, n_workers=1)
        np.testing.assert_allclose(result.b, b_true, atol=ITERATE_CONVERGED.atol)

    def test_error_is_squared_distance_to_B(self, consistent_system):
        U, V, y, b_true, _ = consistent_system
        result = solve(U, V, y, b_true, 50, track_errors=True, seed=0)
        assert result.errors[-1] == pytest.approx(
            float(np.sum((result.b - b_true) ** 2)), rel=1e-9, abs=1e-15,
        )


# ═══════════════════════════════════════════════════════════════════════
# Cross-indexing: b targets x at V's row index
# ═══════════════════════════════════════════════════════════════════════


class TestCoupling:

    def test_b_tracks_leading_entries_of_x(self):
        """V = I(2): row j of V pulls b[j] toward x[j]."""
        U = np.eye(3)
        y = np.array([1.0, 2.0, 3.0])
        V = np.eye(2)
        result = solve(U, V, y, np.zeros(2), 3000, seed=5)
        np.testing.assert_allclose(result.b, [1.0, 2.0], atol=ITERATE_CONVERGED.atol)

    def test_permuted_V(self):
        """Row 0 of V is e1, so b[1] → x[0]; row 1 is e0, so b[0] → x[1]."""
        U = np.eye(3)
        y = np.array([1.0, 2.0, 3.0])
        V = np.array([[0.0, 1.0], [1.0, 0.0]])
        result = solve(U, V, y, np.zeros(2), 3000, seed=5)
        np.testing.assert_allclose(result.b, [2.0, 1.0], atol=ITERATE_CONVERGED.atol)

    def test_V_row_beyond_x_raises_index_error(self):
        U = np.eye(2)
        V = np.ones((4, 3))
        with pytest.warns(RuntimeWarning, match="V has 4 rows"):
            with pytest.raises(IndexError):
                solve(U, V, np.ones(2), np.ones(3), 500, seed=1)

    def test_unreachable_V_rows_only_warn(self):
        """Zero rows are never sampled, so an out-of-range zero row is harmless."""
        U = np.eye(2)
        V = np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
        with pytest.warns(RuntimeWarning, match="V has 3 rows"):
            result = solve(U, V, [1.0, 2.0], [1.0, 2.0], 2000, seed=2)
        assert result.warnings
        assert "IndexError" in result.warnings[0]
        assert result.v_probabilities[2] == 0.0
        np.testing.assert_allclose(result.b, [1.0, 2.0], atol=ITERATE_CONVERGED.atol)


# ═══════════════════════════════════════════════════════════════════════
# Edge cases
# ═══════════════════════════════════════════════════════════════════════


class TestEdgeCases:

    def test_zero_iterations(self, identity_system):
        result = solve(*identity_system, 0, track_errors=True)
        np.testing.assert_array_equal(result.x, np.zeros(3))
        np.testing.assert_array_equal(result.b, np.zeros(3))
        assert result.errors.shape == (0,)
        assert result.error_trace() == []
        assert result.final_error is None

    def test_zero_iterations_untracked(self, identity_system):
        result = solve(*identity_system, 0)
        assert result.errors is None

    def test_untracked_errors(self, identity_system):
        result = solve(*identity_system, 100, seed=1)
        assert result.errors is None
        assert result.final_error is None

    def test_rectangular_shapes(self, rng):
        U = rng.standard_normal((7, 5))
        V = rng.standard_normal((4, 2))
        result = solve(U, V, rng.standard_normal(7), np.zeros(2), 20, True, seed=0)
        assert result.x.shape == (5,)
        assert result.b.shape == (2,)
        assert result.errors.shape == (20,)

    def test_overflow_gives_non_finite_warning(self):
        with pytest.warns(RuntimeWarning, match="non-finite"):
            result = solve([[1e-150]], [[1.0]], [1e300], [0.0], 3, True, seed=0)
        assert not np.all(np.isfinite(result.x))
        assert not np.all(np.isfinite(result.b))
        assert result.has_warning("non-finite")
        assert any("x contains non-finite" in w for w in result.warnings)
        assert any("b contains non-finite" in w for w in result.warnings)

    def test_zero_row_never_sampled_under_raise_policy(self):
        U = np.array([[1.0, 0.0], [0.0, 0.0]])
        V = np.eye(2)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = solve(U, V, [2.0, 0.0], [0.0, 0.0], 500,
                           on_zero_row='raise', seed=3)
        assert result.u_probabilities[1] == 0.0
        assert np.all(np.isfinite(result.x))
        assert result.warnings == ()

    def test_inputs_not_mutated(self, consistent_system):
        U, V, y, b_true, _ = consistent_system
        copies = [a.copy() for a in (U, V, y, b_true)]
        solve(U, V, y, b_true, 200, track_errors=True, seed=0)
        for original, copy in zip((U, V, y, b_true), copies):
            np.testing.assert_array_equal(original, copy)


# ═══════════════════════════════════════════════════════════════════════
# Setup errors are raised before any sampling
# ═══════════════════════════════════════════════════════════════════════


class TestSetupErrors:

    def test_dimension_mismatch_before_sampling(self, identity_system, monkeypatch):
        calls = []

        def _tracking_sampler(*args, **kwargs):
            calls.append(args)
            return 0

        monkeypatch.setattr("pykaczmarz.rkrk.backends.cpu.sample_row", _tracking_sampler)

        U, V, _, B = identity_system
        with pytest.raises(DimensionError):
            solve(U, V, np.ones(4), B, 100)
        assert calls == []

    def test_configuration_error_catches_all_setup_problems(self, identity_system):
        U, V, y, B = identity_system
        for kwargs in ({'iterations': -1}, {'iterations': 5, 'n_workers': 0}):
            with pytest.raises(ConfigurationError):
                solve(U, V, y, B, **kwargs)

    def test_unknown_backend(self, identity_system):
        with pytest.raises(ValueError, match="Unknown backend"):
            solve(*identity_system, 10, backend='gpu')


# ═══════════════════════════════════════════════════════════════════════
# Reproducibility
# ═══════════════════════════════════════════════════════════════════════


class TestReproducibility:

    def test_same_seed_same_run(self, consistent_system):
        U, V, y, b_true, _ = consistent_system
        r1 = solve(U, V, y, b_true, 300, track_errors=True, seed=123)
        r2 = solve(U, V, y, b_true, 300, track_errors=True, seed=123)
        np.testing.assert_array_equal(r1.x, r2.x)
        np.testing.assert_array_equal(r1.b, r2.b)
        np.testing.assert_array_equal(r1.errors, r2.errors)

    def test_different_seeds_differ(self, consistent_system):
        U, V, y, b_true, _ = consistent_system
        r1 = solve(U, V, y, b_true, 10, track_errors=True, seed=1)
        r2 = solve(U, V, y, b_true, 10, track_errors=True, seed=2)
        assert not np.array_equal(r1.errors, r2.errors)

    def test_pool_size_does_not_change_path(self, consistent_system):
        """Row draws depend only on the seed, not on the norm pool."""
        U, V, y, b_true, _ = consistent_system
        r1 = solve(U, V, y, b_true, 200, seed=9, n_workers=1)
        r2 = solve(U, V, y, b_true, 200, seed=9, n_workers=10)
        np.testing.assert_allclose(r1.x, r2.x, rtol=1e-9, atol=1e-12)
        np.testing.assert_allclose(r1.b, r2.b, rtol=1e-9, atol=1e-12)


# ═══════════════════════════════════════════════════════════════════════
# Bounded sampling
# ═══════════════════════════════════════════════════════════════════════


class TestMaxAttempts:

    def test_generous_bound_completes(self, identity_system):
        result = solve(*identity_system, 500, seed=4, max_attempts=10_000)
        np.testing.assert_allclose(result.x, [1.0, 2.0, 3.0], atol=ITERATE_CONVERGED.atol)

    def test_tight_bound_gives_up(self, identity_system):
        """Each identity row is accepted with probability 1/3, so one attempt soon fails."""
        with pytest.raises(SamplingError) as exc_info:
            solve(*identity_system, 200, seed=4, max_attempts=1)
        assert exc_info.value.attempts == 1
        assert exc_info.value.n_rows == 3


# ═══════════════════════════════════════════════════════════════════════
# Single Kaczmarz step
# ═══════════════════════════════════════════════════════════════════════


class TestProjectOntoRow:

    def test_projection_satisfies_row(self):
        estimate = np.zeros(2)
        row = np.array([3.0, 4.0])
        with VectorMath(2) as vm:
            project_onto_row(estimate, row, 5.0, vm)
        np.testing.assert_allclose(estimate, [0.6, 0.8])
        assert row @ estimate == pytest.approx(5.0)

    def test_zero_row_propagates_non_finite(self):
        estimate = np.zeros(3)
        with VectorMath(2) as vm:
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                project_onto_row(estimate, np.zeros(3), 1.0, vm)
        assert not np.any(np.isfinite(estimate))

    def test_zero_row_raises_when_asked(self):
        estimate = np.array([1.0, 2.0])
        with VectorMath(2) as vm:
            with pytest.raises(NumericDegeneracyError) as exc_info:
                project_onto_row(
                    estimate, np.zeros(2), 1.0, vm, 'raise',
                    iteration=4, matrix_name='V', row_index=1,
                )
        err = exc_info.value
        assert (err.iteration, err.matrix_name, err.row) == (4, 'V', 1)
        np.testing.assert_array_equal(estimate, [1.0, 2.0])


# ═══════════════════════════════════════════════════════════════════════
# Backend and metadata
# ═══════════════════════════════════════════════════════════════════════


class TestBackend:

    def test_implements_protocol(self):
        assert isinstance(CPURKRKBackend(), Backend)

    def test_backend_name(self, identity_system):
        result = solve(*identity_system, 5, backend='cpu')
        assert result.backend_name == 'cpu_rkrk'

    def test_info(self, identity_system):
        result = solve(*identity_system, 25, track_errors=True, seed=8, n_workers=3)
        info = result.info
        assert info['method'] == 'rkrk'
        assert info['iterations'] == 25
        assert info['n_workers'] == 3
        assert info['seed'] == 8
        assert (info['urows'], info['ucols'], info['vrows'], info['vcols']) == (3, 3, 3, 3)
        assert info['u_frobenius_squared'] == pytest.approx(3.0)

    def test_timing_sections(self, identity_system):
        result = solve(*identity_system, 5)
        assert {'total_seconds', 'setup', 'probabilities', 'iterations'} <= set(result.timing)

    def test_top_level_export(self, identity_system):
        result = pykaczmarz.solve(*identity_system, 5)
        assert isinstance(result, RKRKSolution)
