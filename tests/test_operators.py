import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from fdm import (Mesh, gridspace, element, elements, get_diff_matrix, restrict, diff, average, jump, divided_diff, grad,
                 shift, VectorElement, MatrixElement, InvalidAxis)
from .conftest import to_grid


class TestDiff:

    def test_end_to_end_1d(self, space1d):
        assert_array_equal(space1d.innerh_weights, (0.125, 0.25, 0.25, 0.25, 0.125))
        u = element(space1d, np.array((0.0, 1.0, 4.0, 9.0, 16.0)))
        v = diff(u)
        assert isinstance(v, VectorElement)
        assert_array_equal(v.values, (1.0, 3.0, 5.0, 7.0, -16.0))

    def test_space_1d_is_single(self, space1d):
        D = diff(space1d)
        assert isinstance(D, MatrixElement)
        assert D is get_diff_matrix(space1d, 0)

    def test_space_tuple(self, space3d):
        D = diff(space3d)
        assert isinstance(D, tuple) and len(D) == 3
        for k in range(3):
            assert D[k] is get_diff_matrix(space3d, k)
        assert diff(space3d, 1) is D[1]

    @pytest.mark.parametrize("axis", [0, 1])
    def test_shift_identity(self, space2d, axis):
        lhs = elements(space2d) + diff(space2d, axis)
        assert_array_equal(lhs.toarray(), shift(space2d.mesh, axis, 1).toarray())

    def test_vector_2d(self, space2d, mesh2d):
        u = restrict(space2d, lambda x, y: np.sin(3.0 * x) + x * y**2)
        U = to_grid(u, mesh2d)
        dx, dy = diff(u)
        ex = np.empty_like(U)
        ex[:-1] = U[1:] - U[:-1]
        ex[-1] = -U[-1]
        ey = np.empty_like(U)
        ey[:, :-1] = U[:, 1:] - U[:, :-1]
        ey[:, -1] = -U[:, -1]
        assert_allclose(to_grid(dx, mesh2d), ex, atol=1e-15)
        assert_allclose(to_grid(dy, mesh2d), ey, atol=1e-15)

    def test_matrix(self, space2d):
        U = elements(space2d)
        DU = diff(U, 0)
        assert isinstance(DU, MatrixElement)
        assert_array_equal(DU.toarray(), get_diff_matrix(space2d, 0).toarray())
        assert len(diff(U)) == 2

    def test_linearity(self, space2d):
        rng = np.random.default_rng(7)
        u = element(space2d, rng.standard_normal(30))
        v = element(space2d, rng.standard_normal(30))
        a, b = 1.7, -0.3
        for k in range(2):
            assert_allclose(diff(a * u + b * v, k), a * diff(u, k) + b * diff(v, k), atol=1e-13)

    def test_invalid_axis(self, space2d):
        with pytest.raises(InvalidAxis):
            diff(space2d, 2)
        with pytest.raises(InvalidAxis):
            diff(element(space2d), 4)

    def test_unsupported(self):
        with pytest.raises(TypeError):
            diff(np.ones(3))


class TestOtherOperators:

    def test_jump(self, space2d):
        for k in range(2):
            assert_array_equal(jump(space2d, k).toarray(), -diff(space2d, k).toarray().T)

    def test_average_1d(self, space1d):
        u = element(space1d, np.array((2.0, 4.0, 6.0, 8.0, 10.0)))
        assert_array_equal(average(u).values, (1.0, 3.0, 5.0, 7.0, 9.0))

    def test_divided_diff_of_linear(self, space2d, mesh2d):
        u = restrict(space2d, lambda x, y: 2.0 * x - 3.0 * y)
        gx, gy = grad(u)
        assert_allclose(to_grid(gx, mesh2d)[1:, :], 2.0)
        assert_allclose(to_grid(gy, mesh2d)[:, 1:], -3.0)

    def test_divided_diff_1d(self):
        x = np.array((0.0, 0.1, 0.35, 0.7, 1.0))
        Wh = gridspace(Mesh(x))
        u = element(Wh, x**2)
        d = divided_diff(u)
        assert_allclose(d.values[1:], x[1:] + x[:-1])
        # no point before the first one
        assert d.values[0] == 0.0

    def test_grad_is_always_a_tuple(self, space1d):
        g = grad(space1d)
        assert isinstance(g, tuple) and len(g) == 1
        assert isinstance(g[0], MatrixElement)
