from typing import Iterator, Sequence, Union
import logging
import numpy as np
from matplotlib import pyplot
from .errors import DimensionMismatch, InvalidAxis

logger = logging.getLogger(__name__)

def check_axis(axis: int, dim: int) -> int:
    if isinstance(axis, (bool, np.bool_)) or not isinstance(axis, (int, np.integer)):
        raise InvalidAxis(f"Axis must be an integer, got {axis!r}. ")
    if not 0 <= axis < dim:
        raise InvalidAxis(f"Axis {axis} is out of range for a {dim}D mesh. ")
    return int(axis)

class Mesh:
    """
    A structured, possibly non-uniform, Cartesian grid of dimension 1, 2 or 3.
    The grid points are enumerated in column-major order,
    i.e. the point (j_0, ..., j_{D-1}) has the index j_0 + N_0 * j_1 + N_0 * N_1 * j_2.
    """

    dim: int
    shape: tuple[int]
    coord: tuple[np.ndarray] # coord[k] is the (N_k, ) array of coordinates along axis k
    dtype: np.dtype

    def __init__(self, *coord: np.ndarray, dtype = np.float64) -> None:
        if not 1 <= len(coord) <= 3:
            raise ValueError(f"Only 1D, 2D and 3D meshes are supported, got {len(coord)} axes. ")
        self.dtype = np.dtype(dtype)
        coord = tuple(np.array(x, dtype=self.dtype) for x in coord)
        for k, x in enumerate(coord):
            if x.ndim != 1:
                raise ValueError(f"The coordinates along axis {k} must be a 1D array. ")
            if x.size == 0:
                raise DimensionMismatch(f"The mesh has zero points along axis {k}. ")
            if x.size < 2:
                raise ValueError(f"At least two points are needed along axis {k}. ")
            if not np.all(np.isfinite(x)):
                raise ValueError(f"Non-finite coordinates along axis {k}. ")
            if np.any(np.diff(x) <= 0):
                raise ValueError(f"The coordinates along axis {k} must be strictly increasing. ")
        for x in coord:
            x.setflags(write=False)
        self.coord = coord
        self.dim = len(coord)
        self.shape = tuple(x.size for x in coord)

    @staticmethod
    def uniform(bounds: Sequence[tuple[float, float]], n: Union[int, Sequence[int]], dtype = np.float64) -> "Mesh":
        """
        Build a uniform mesh on the box given by bounds, with n points per axis.
        """
        bounds = tuple(bounds)
        n = (n, ) * len(bounds) if isinstance(n, (int, np.integer)) else tuple(n)
        if len(n) != len(bounds):
            raise DimensionMismatch("The number of point counts does not match the number of axes. ")
        return Mesh(*(np.linspace(a, b, m) for (a, b), m in zip(bounds, n)), dtype=dtype)

    @property
    def npoints(self) -> int:
        return int(np.prod(self.shape))

    def axis(self, k: int) -> "Mesh":
        """
        The 1D mesh along axis k.
        """
        k = check_axis(k, self.dim)
        return Mesh(self.coord[k], dtype=self.dtype)

    def spacing(self, k: int = 0) -> np.ndarray:
        """
        h_j = x_j - x_{j-1} for j >= 1, and h_0 = x_1 - x_0.
        """
        x = self.coord[check_axis(k, self.dim)]
        h = np.empty_like(x)
        h[1:] = x[1:] - x[:-1]
        h[0] = h[1]
        return h

    def half_spacing(self, k: int = 0) -> np.ndarray:
        """
        h_{j+1/2} = (x_{j+1} - x_{j-1}) / 2 in the interior,
        and half of the adjacent spacing at the two ends.
        """
        x = self.coord[check_axis(k, self.dim)]
        hm = np.empty_like(x)
        hm[1:-1] = 0.5 * (x[2:] - x[:-2])
        hm[0] = 0.5 * (x[1] - x[0])
        hm[-1] = 0.5 * (x[-1] - x[-2])
        return hm

    def cell_edges(self, k: int = 0) -> np.ndarray:
        """
        The (N_k + 1, ) edges of the cells along axis k: the midpoints between neighboring points,
        and the two end points. The cell of point j is [e_j, e_{j+1}], of length h_{j+1/2}.
        """
        x = self.coord[check_axis(k, self.dim)]
        e = np.empty((x.size + 1, ), dtype=self.dtype)
        e[1:-1] = 0.5 * (x[1:] + x[:-1])
        e[0] = x[0]
        e[-1] = x[-1]
        return e

    def cell_measure(self) -> np.ndarray:
        """
        The product of the half spacings of all the axes, for every grid point.
        """
        w = self.half_spacing(0)
        for k in range(1, self.dim):
            w = np.multiply.outer(w, self.half_spacing(k))
        return w.reshape(-1, order="F")

    def indices(self) -> Iterator[tuple[int]]:
        """
        Iterate over the multi-indices of the grid points, in the canonical order.
        """
        for idx in np.ndindex(*self.shape[::-1]):
            yield idx[::-1]

    def points(self) -> np.ndarray:
        """
        The coordinates of all the grid points, (npoints, dim).
        """
        grids = np.meshgrid(*self.coord, indexing="ij")
        return np.stack([g.reshape(-1, order="F") for g in grids], axis=1)

    def hmax(self) -> float:
        return max(float(np.max(np.diff(x))) for x in self.coord)

    def refine(self) -> "Mesh":
        """
        Insert the midpoint of every cell, along every axis.
        """
        fine = []
        for x in self.coord:
            y = np.empty((2 * x.size - 1, ), dtype=self.dtype)
            y[::2] = x
            y[1::2] = 0.5 * (x[1:] + x[:-1])
            fine.append(y)
        logger.debug("Refined mesh %s -> %s", self.shape, tuple(y.size for y in fine))
        return Mesh(*fine, dtype=self.dtype)

    def draw(self) -> None:
        if self.dim == 3:
            print("Unable to visualize 3D mesh. ")
            return
        if self.dim == 1:
            x = self.coord[0]
            pyplot.plot(x, np.zeros_like(x), 'o-')
        else:
            x, y = self.coord
            pyplot.vlines(x, y[0], y[-1], linewidths=0.5)
            pyplot.hlines(y, x[0], x[-1], linewidths=0.5)
            pyplot.axis("equal")

    def __repr__(self) -> str:
        return f"Mesh(dim={self.dim}, shape={self.shape})"
