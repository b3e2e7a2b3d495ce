"""
The operators assembled into the Laplacian, on a refined family of non-uniform meshes.
"""
import numpy as np
from scipy.sparse.linalg import spsolve
from fdm import Mesh, gridspace, element, restrict, grad, norm_h


def _solve(mesh: Mesh) -> float:
    Wh = gridspace(mesh)
    (D, ) = grad(Wh)
    A = D.T @ (element(Wh, Wh.innerplus_weights[0]) * D)
    b = element(Wh, Wh.innerh_weights) * restrict(Wh, lambda x: np.pi**2 * np.sin(np.pi * x))
    u = element(Wh)
    free = np.arange(1, Wh.ndofs - 1)
    u[free] = spsolve(A.values.tocsr()[free][:, free].tocsc(), b.values[free])
    return norm_h(u - restrict(Wh, lambda x: np.sin(np.pi * x)))


def test_second_order_convergence():
    t = np.linspace(0.0, 1.0, 9)
    mesh = Mesh(t + 0.4 * np.sin(np.pi * t) * (1.0 - t) / np.pi)
    errors = []
    for _ in range(3):
        errors.append(_solve(mesh))
        mesh = mesh.refine()
    rates = np.log2(np.array(errors[:-1]) / np.array(errors[1:]))
    assert np.all(rates > 1.7)
    assert errors[-1] < 5e-3


def test_symmetric_positive_definite():
    Wh = gridspace(Mesh(np.array((0.0, 0.1, 0.35, 0.7, 1.0))))
    (D, ) = grad(Wh)
    A = (D.T @ (element(Wh, Wh.innerplus_weights[0]) * D)).toarray()[1:-1, 1:-1]
    np.testing.assert_allclose(A, A.T, atol=1e-14)
    assert np.all(np.linalg.eigvalsh(A) > 0.0)
