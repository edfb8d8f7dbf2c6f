import numpy as np
import pytest
from linalg import DegenerateSystemError, gauss_jordan, solve_normal_equations


class TestGaussJordan:
    def test_identity(self):
        x = gauss_jordan(np.eye(3), [1.0, 2.0, 3.0])
        np.testing.assert_allclose(x, [1.0, 2.0, 3.0])

    def test_small_system(self):
        a = [[2.0, 1.0, -1.0], [-3.0, -1.0, 2.0], [-2.0, 1.0, 2.0]]
        b = [8.0, -11.0, -3.0]
        np.testing.assert_allclose(gauss_jordan(a, b), [2.0, 3.0, -1.0])

    def test_zero_on_diagonal_needs_pivot(self):
        x = gauss_jordan([[0.0, 1.0], [1.0, 0.0]], [2.0, 3.0])
        np.testing.assert_allclose(x, [3.0, 2.0])

    def test_matches_numpy_on_symmetric_6x6(self):
        rng = np.random.default_rng(7)
        m = rng.normal(size=(6, 6))
        a = m @ m.T + 6 * np.eye(6)
        b = rng.normal(size=6)
        np.testing.assert_allclose(gauss_jordan(a, b), np.linalg.solve(a, b), atol=1e-10)

    def test_inputs_not_modified(self):
        a = np.array([[0.0, 1.0], [1.0, 0.0]])
        b = np.array([2.0, 3.0])
        gauss_jordan(a, b)
        np.testing.assert_array_equal(a, [[0.0, 1.0], [1.0, 0.0]])
        np.testing.assert_array_equal(b, [2.0, 3.0])

    def test_singular_raises(self):
        with pytest.raises(DegenerateSystemError, match="degenerate"):
            gauss_jordan([[1.0, 2.0], [2.0, 4.0]], [1.0, 2.0])

    def test_zero_column_raises(self):
        a = np.zeros((6, 6))
        a[0, 0] = 1.0
        with pytest.raises(DegenerateSystemError):
            gauss_jordan(a, np.ones(6))

    def test_pivot_below_tolerance_raises(self):
        with pytest.raises(DegenerateSystemError):
            gauss_jordan([[1e-13, 0.0], [0.0, 1.0]], [1.0, 1.0])

    def test_custom_tolerance(self):
        x = gauss_jordan([[1e-13, 0.0], [0.0, 1.0]], [1e-13, 1.0], tolerance=1e-15)
        np.testing.assert_allclose(x, [1.0, 1.0])

    def test_nan_raises(self):
        with pytest.raises(DegenerateSystemError):
            gauss_jordan([[np.nan, 0.0], [0.0, 1.0]], [1.0, 1.0])

    def test_is_value_error(self):
        assert issubclass(DegenerateSystemError, ValueError)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="Expected a 2x2"):
            gauss_jordan(np.eye(3), [1.0, 2.0])


class TestSolveNormalEquations:
    def test_matches_numpy_on_badly_scaled_system(self):
        rng = np.random.default_rng(3)
        m = rng.normal(size=(6, 6))
        d = np.diag([1e4, 1e4, 1.0, 1e4, 1e4, 1.0])
        a = d @ (m @ m.T + 6 * np.eye(6)) @ d
        b = rng.normal(size=6)
        np.testing.assert_allclose(solve_normal_equations(a, b), np.linalg.solve(a, b), rtol=1e-6)

    def test_zero_diagonal_raises(self):
        a = np.eye(3)
        a[1, 1] = 0.0
        with pytest.raises(DegenerateSystemError, match="degenerate"):
            solve_normal_equations(a, np.ones(3))

    def test_rank_deficient_large_entries_raises(self):
        # columns 0 and 1 proportional; entries far above the pivot tolerance
        x = np.array([1729.0, 3458.0, 5187.0, 12103.0]) * 2.3
        a = np.column_stack([x, 3 * x, np.ones(4)])
        with pytest.raises(DegenerateSystemError):
            solve_normal_equations(a.T @ a, a.T @ np.arange(4.0))

    def test_inputs_not_modified(self):
        a = np.array([[4.0, 1.0], [1.0, 9.0]])
        b = np.array([1.0, 2.0])
        solve_normal_equations(a, b)
        np.testing.assert_array_equal(a, [[4.0, 1.0], [1.0, 9.0]])
        np.testing.assert_array_equal(b, [1.0, 2.0])
