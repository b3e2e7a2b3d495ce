import numpy as np
import pytest
from numpy.testing import assert_array_equal
from fdm import Mesh, shift, forward_diff, backward_jump, backward_average, InvalidAxis
from .conftest import to_grid


def _dense(A) -> np.ndarray:
    return A.toarray()


class TestShift:

    def test_identity(self, mesh2d):
        for k in range(2):
            assert_array_equal(_dense(shift(mesh2d, k, 0)), np.eye(mesh2d.npoints))

    def test_1d(self, mesh1d):
        S = _dense(shift(mesh1d, 0, 1))
        assert_array_equal(S, np.eye(5, k=1))
        # no point beyond the last one
        assert np.all(S[-1] == 0.0)
        S = _dense(shift(mesh1d, 0, -1))
        assert np.all(S[0] == 0.0)

    @pytest.mark.parametrize("axis", [0, 1, 2])
    def test_shift_along_axis(self, mesh3d, axis):
        u = np.arange(mesh3d.npoints, dtype=np.float64) ** 1.5
        U = to_grid(u, mesh3d)
        expected = np.zeros_like(U)
        src = [slice(None)] * 3
        dst = [slice(None)] * 3
        src[axis], dst[axis] = slice(1, None), slice(None, -1)
        expected[tuple(dst)] = U[tuple(src)]
        V = to_grid(shift(mesh3d, axis, 1) @ u, mesh3d)
        assert_array_equal(V, expected)

    def test_invalid(self, mesh2d):
        with pytest.raises(InvalidAxis):
            shift(mesh2d, 2, 1)
        with pytest.raises(ValueError):
            shift(mesh2d, 0, 2)


class TestDifferences:

    @pytest.mark.parametrize("axis", [0, 1, 2])
    def test_shift_identity(self, mesh3d, axis):
        # shift(0) + diff == shift(1), exactly
        lhs = shift(mesh3d, axis, 0) + forward_diff(mesh3d, axis)
        assert_array_equal(_dense(lhs), _dense(shift(mesh3d, axis, 1)))

    def test_forward_diff_1d(self, mesh1d):
        u = np.array((0.0, 1.0, 4.0, 9.0, 16.0))
        assert_array_equal(forward_diff(mesh1d, 0) @ u, (1.0, 3.0, 5.0, 7.0, -16.0))

    @pytest.mark.parametrize("axis", [0, 1])
    def test_jump_is_minus_transposed_diff(self, mesh2d, axis):
        assert_array_equal(_dense(backward_jump(mesh2d, axis)), -_dense(forward_diff(mesh2d, axis)).T)

    def test_average_1d(self, mesh1d):
        u = np.array((2.0, 4.0, 6.0, 8.0, 10.0))
        assert_array_equal(backward_average(mesh1d, 0) @ u, (1.0, 3.0, 5.0, 7.0, 9.0))

    def test_forward_diff_is_topological(self, mesh1d):
        # the difference matrix does not depend on the spacing
        other = Mesh(np.array((0.0, 0.1, 0.5, 0.6, 3.0)))
        assert_array_equal(_dense(forward_diff(mesh1d, 0)), _dense(forward_diff(other, 0)))
