"""
Sparse shift and difference matrices built from the topology of a structured mesh.

The shift by `offset` along `axis` maps a grid function u to
    (S u)(j) = u(j + offset * e_axis),
and a shifted index that leaves the grid contributes zero.
Hence the last row (along the axis) of shift(+1) and the first row of shift(-1) are empty.
"""
import numpy as np
from scipy import sparse
from scipy.sparse import csc_array
from .mesh import Mesh, check_axis

def _kron_axis(mesh: Mesh, axis: int, mat_1d) -> csc_array:
    # column-major ordering: the first axis is the innermost Kronecker factor
    res = None
    for k in range(mesh.dim):
        factor = mat_1d if k == axis else sparse.identity(mesh.shape[k], dtype=mesh.dtype, format="csc")
        res = factor if res is None else sparse.kron(factor, res, format="csc")
    return csc_array(res)

def shift(mesh: Mesh, axis: int, offset: int) -> csc_array:
    axis = check_axis(axis, mesh.dim)
    if offset not in (-1, 0, 1):
        raise ValueError(f"Only shifts by -1, 0 or 1 are supported, got {offset}. ")
    n = mesh.shape[axis]
    s = sparse.eye(n, n, k=offset, dtype=mesh.dtype, format="csc")
    return _kron_axis(mesh, axis, s)

def forward_diff(mesh: Mesh, axis: int) -> csc_array:
    """
    u(j+1) - u(j) along the axis.
    """
    return shift(mesh, axis, 1) - shift(mesh, axis, 0)

def backward_jump(mesh: Mesh, axis: int) -> csc_array:
    """
    u(j) - u(j-1) along the axis; equals -forward_diff(mesh, axis).T.
    """
    return shift(mesh, axis, 0) - shift(mesh, axis, -1)

def backward_average(mesh: Mesh, axis: int) -> csc_array:
    """
    (u(j) + u(j-1)) / 2 along the axis.
    """
    return 0.5 * (shift(mesh, axis, 0) + shift(mesh, axis, -1))

def inverse_spacing(mesh: Mesh, axis: int) -> np.ndarray:
    """
    1 / h_axis(j_axis) for every grid point, in the canonical order.
    """
    axis = check_axis(axis, mesh.dim)
    h = mesh.spacing(axis)
    shape = [1] * mesh.dim
    shape[axis] = h.size
    inv = np.broadcast_to(1.0 / h.reshape(shape, order="F"), mesh.shape)
    return inv.reshape(-1, order="F")
