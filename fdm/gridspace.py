import logging
import numpy as np
from .mesh import Mesh, check_axis
from .element import MatrixElement
from .difference import forward_diff
from .errors import DimensionMismatch

logger = logging.getLogger(__name__)

direction = ("x", "y", "z")

class GridSpace:
    """
    The space of grid functions on a structured mesh.

    innerh_weights holds the weights of the standard discrete L2 inner product,
        (u, v)_h = sum_p h_{x,i+1/2} h_{y,j+1/2} h_{z,l+1/2} u(p) v(p),
    i.e. the cell measure of every grid point.

    innerplus_weights[k] holds the weights of the modified inner product associated with the k-th axis,
    where the half spacing of axis k is replaced by its spacing, e.g. in 2D
        (u, v)_{+x} = sum_p h_{x,i} h_{y,j+1/2} u(p) v(p).
    The weights vanish on the first layer of points along axis k,
    and on the two boundary layers of the other axes.

    The forward difference matrices are built once and cached per axis,
    with their sparse arrays frozen.
    The underlying mesh is available as space.mesh, or get_mesh(space).
    """

    mesh: Mesh
    innerh_weights: np.ndarray # (npoints, )
    innerplus_weights: tuple[np.ndarray] # dim arrays of shape (npoints, )
    diff_matrix_cache: tuple[MatrixElement] # indexed by axis

    def __init__(self, mesh: Mesh) -> None:
        self.mesh = mesh
        npts = mesh.npoints
        if any(n == 0 for n in mesh.shape):
            raise DimensionMismatch("Cannot build a grid space on a mesh with no points along some axis. ")

        # 1. the standard inner product
        self.innerh_weights = _build_innerh_weights(mesh)
        if self.innerh_weights.size != npts:
            raise DimensionMismatch(f"The mesh reports {self.innerh_weights.size} cell measures for {npts} points. ")

        # 2. the modified inner products, one for each axis
        innerplus = []
        for i in range(mesh.dim):
            per_axis = tuple(_innerplus_weights(mesh, k) if k == i else _innerplus_mean_weights(mesh, k) \
                             for k in range(mesh.dim))
            w = _tensor_weights(per_axis)
            if w.size != npts:
                raise DimensionMismatch(f"The weights along axis {i} have {w.size} entries for {npts} points. ")
            innerplus.append(w)
        self.innerplus_weights = tuple(innerplus)
        self.innerh_weights.setflags(write=False)
        for w in self.innerplus_weights:
            w.setflags(write=False)

        # 3. the forward difference matrices
        cache = []
        for i in range(mesh.dim):
            D = forward_diff(mesh, i)
            if D.shape != (npts, npts):
                raise DimensionMismatch(f"The difference matrix along axis {i} has shape {D.shape} for {npts} points. ")
            D = MatrixElement(self, D, read_only=True)
            for a in (D.values.data, D.values.indices, D.values.indptr):
                a.setflags(write=False)
            cache.append(D)
        self.diff_matrix_cache = tuple(cache)
        logger.debug("Built a grid space on a %dD mesh of shape %s. ", mesh.dim, mesh.shape)

    @property
    def dim(self) -> int:
        return self.mesh.dim

    @property
    def ndofs(self) -> int:
        return self.mesh.npoints

    @property
    def dtype(self) -> np.dtype:
        return self.mesh.dtype

    def get_diff_matrix(self, axis: int) -> MatrixElement:
        return self.diff_matrix_cache[check_axis(axis, self.dim)]

    def __str__(self) -> str:
        lines = [f"Gridspace defined on a {self.dim}D Mesh", f"nPoints: {self.ndofs}", "", "Submeshes:"]
        lines += [f"  {direction[k]} direction | nPoints: {n}" for k, n in enumerate(self.mesh.shape)]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"GridSpace(mesh={self.mesh!r})"


def _build_innerh_weights(mesh: Mesh) -> np.ndarray:
    return np.array(mesh.cell_measure(), dtype=mesh.dtype)

def _innerplus_weights(mesh: Mesh, k: int) -> np.ndarray:
    """
    The spacings along axis k, with the first entry set to zero.
    """
    w = mesh.spacing(k)
    w[0] = 0.0
    return w

def _innerplus_mean_weights(mesh: Mesh, k: int) -> np.ndarray:
    """
    The half spacings along axis k, with both end entries set to zero.
    """
    w = mesh.half_spacing(k)
    w[0] = 0.0
    w[-1] = 0.0
    return w

def _tensor_weights(per_axis: tuple[np.ndarray]) -> np.ndarray:
    """
    w[p] = prod_k per_axis[k][j_k] for the point p = (j_0, ..., j_{D-1}), in the canonical order.
    """
    w = per_axis[0]
    for v in per_axis[1:]:
        w = np.multiply.outer(w, v)
    return np.array(w.reshape(-1, order="F"))


# ===============================================================================


def gridspace(mesh: Mesh) -> GridSpace:
    return GridSpace(mesh)

def get_mesh(space: GridSpace) -> Mesh:
    return space.mesh

def ndofs(space: GridSpace) -> int:
    return space.ndofs

def element_type(space: GridSpace) -> np.dtype:
    return space.dtype

def get_diff_matrix(space: GridSpace, axis: int) -> MatrixElement:
    """
    The cached forward difference matrix of the space along the axis.
    """
    return space.get_diff_matrix(axis)
