from typing import Callable, Optional
import numpy as np
from scipy import integrate
from .element import VectorElement, element
from .errors import IncompatibleSpace

def _assign(space, vals: np.ndarray, out: Optional[VectorElement]) -> VectorElement:
    if out is None:
        return element(space, vals)
    if out.space is not space:
        raise IncompatibleSpace("The output element is defined on a different space. ")
    out[:] = vals
    return out

def restrict(space, f: Callable, out: Optional[VectorElement] = None) -> VectorElement:
    """
    Evaluate f at the grid points of the space.
    f is called as f(x) in 1D, f(x, y) in 2D and f(x, y, z) in 3D, on arrays of coordinates.
    """
    x = space.mesh.points() # (npoints, dim)
    vals = np.asarray(f(*x.T), dtype=space.dtype)
    vals = np.broadcast_to(vals, (space.ndofs, ))
    return _assign(space, vals, out)

def restrict_average(space, f: Callable, out: Optional[VectorElement] = None) -> VectorElement:
    """
    The mean value of f over the cell of every grid point,
        u(p) = 1/|cell_p| int_{cell_p} f,
    where the cell of the point j along each axis is [x_{j-1/2}, x_{j+1/2}], cut at the ends of the mesh.
    Unlike restrict, f is called on scalar coordinates.
    """
    mesh = space.mesh
    edges = [mesh.cell_edges(k) for k in range(mesh.dim)]
    measure = mesh.cell_measure()
    vals = np.empty((space.ndofs, ), dtype=space.dtype)
    for p, idx in enumerate(mesh.indices()):
        ranges = [(e[j], e[j+1]) for e, j in zip(edges, idx)]
        vals[p] = integrate.nquad(f, ranges)[0] / measure[p]
    return _assign(space, vals, out)
