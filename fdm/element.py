from numbers import Number
from typing import Any, Optional
import warnings
import numpy as np
from scipy import sparse
from scipy.sparse import csc_array
from .errors import DimensionMismatch, IncompatibleSpace, OutOfBounds, PatternMismatch

def _common_space(objs) -> Any:
    space = None
    for x in objs:
        if isinstance(x, VectorElement) and x.space is not None:
            if space is None:
                space = x.space
            elif x.space is not space:
                raise IncompatibleSpace("The vector elements are defined on different spaces. ")
    return space

def _strip(x):
    return x.view(np.ndarray) if isinstance(x, VectorElement) else x


class VectorElement(np.ndarray):
    """
    A grid function: one value per grid point, following the order of the mesh points.
    """
    space: Any # type: GridSpace

    def __new__(cls, space, values: Optional[np.ndarray] = None):
        n = space.ndofs
        if values is None:
            obj = np.zeros((n, ), dtype=space.dtype).view(cls)
        else:
            values = np.asarray(values)
            if values.shape != (n, ):
                raise DimensionMismatch(f"Expected {n} values, got an array of shape {values.shape}. ")
            obj = np.array(values, dtype=space.dtype).view(cls)
        obj.space = space
        return obj

    def __array_finalize__(self, obj) -> None:
        if obj is None:
            return
        self.space = getattr(obj, "space", None)

    def __array_ufunc__(self, ufunc, method, *inputs, out=None, **kwargs):
        space = _common_space(inputs + (out or ()))
        args = tuple(_strip(x) for x in inputs)
        if out is not None:
            kwargs["out"] = tuple(_strip(x) for x in out)
        result = getattr(ufunc, method)(*args, **kwargs)
        if out is not None:
            return out[0] if len(out) == 1 else out
        if method != "__call__" or space is None:
            return result
        if isinstance(result, tuple):
            return tuple(_wrap(r, space) for r in result)
        return _wrap(result, space)

    @property
    def values(self) -> np.ndarray:
        return self.view(np.ndarray)

    def similar(self) -> "VectorElement":
        """
        A new element on the same space, with uninitialized values.
        """
        obj = np.empty((self.space.ndofs, ), dtype=self.space.dtype).view(VectorElement)
        obj.space = self.space
        return obj

def _wrap(r, space):
    if isinstance(r, np.ndarray) and r.shape == (space.ndofs, ) and r.dtype != np.bool_:
        r = r.view(VectorElement)
        r.space = space
    return r


# ===============================================================================


class MatrixElement:
    """
    A sparse (ndofs x ndofs) matrix attached to a grid space,
    e.g. a finite difference matrix or any matrix derived from it.

    Scalar operations (+, -, *, /, **) only act on the stored entries.
    In particular, A + 1.0 does not fill the structural zeros of A.
    """
    # numpy defers the binary operators with a vector element to this class
    __array_ufunc__ = None

    space: Any # type: GridSpace
    values: csc_array
    read_only: bool # set for the matrices cached by a space

    def __init__(self, space, values, read_only: bool = False) -> None:
        values = csc_array(values)
        n = space.ndofs
        if values.shape != (n, n):
            raise DimensionMismatch(f"Expected a ({n}, {n}) matrix, got {values.shape}. ")
        if not values.data.flags.writeable:
            # wrapping a frozen matrix, e.g. one cached by a space
            values = values.copy()
        if not values.has_canonical_format:
            values = values.copy()
            values.sum_duplicates()
        self.space = space
        self.values = values
        self.read_only = read_only

    @property
    def shape(self) -> tuple[int, int]:
        return self.values.shape

    @property
    def size(self) -> int:
        return self.shape[0] * self.shape[1]

    @property
    def nnz(self) -> int:
        return self.values.nnz

    @property
    def dtype(self) -> np.dtype:
        return self.values.dtype

    def __len__(self) -> int:
        return self.shape[0]

    def toarray(self) -> np.ndarray:
        return self.values.toarray()

    def copy(self) -> "MatrixElement":
        return MatrixElement(self.space, self.values.copy())

    def similar(self) -> "MatrixElement":
        """
        A new element with the same space and sparsity pattern, and uninitialized stored values.
        """
        res = self.values.copy()
        res.data = np.empty_like(res.data)
        return MatrixElement(self.space, res)

    def __repr__(self) -> str:
        return f"MatrixElement(shape={self.shape}, nnz={self.nnz}, dtype={self.dtype})"

    def __str__(self) -> str:
        return str(self.values)

    # =================================================================
    # indexing

    def _index(self, key) -> tuple[int, int]:
        n, m = self.shape
        if isinstance(key, tuple):
            if len(key) != 2 or not all(isinstance(k, (int, np.integer)) for k in key):
                raise TypeError(f"Invalid index {key!r} for a matrix element. ")
            i, j = key
            if not (-n <= i < n and -m <= j < m):
                raise OutOfBounds(f"Index {key} is out of bounds for a matrix of shape {self.shape}. ")
            return int(i) % n, int(j) % m
        if isinstance(key, (int, np.integer)):
            if not -n * m <= key < n * m:
                raise OutOfBounds(f"Linear index {key} is out of bounds for a matrix of size {n * m}. ")
            # linear indices run down the columns, as the CSC storage does
            j, i = divmod(int(key) % (n * m), n)
            return i, j
        raise TypeError(f"Invalid index {key!r} for a matrix element. ")

    def __getitem__(self, key):
        i, j = self._index(key)
        return self.values[i, j]

    def __setitem__(self, key, v) -> None:
        i, j = self._index(key)
        A = self.values
        if self.read_only:
            raise ValueError("The matrix element is read-only. ")
        start, end = A.indptr[j], A.indptr[j+1]
        loc = np.nonzero(A.indices[start:end] == i)[0]
        if loc.size > 0:
            A.data[start + loc[0]] = v
            return
        warnings.warn("Assigning to a structural zero changes the sparsity pattern. ")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", sparse.SparseEfficiencyWarning)
            A[i, j] = v

    # =================================================================
    # algebra

    def _check_space(self, other: "MatrixElement") -> None:
        if other.space is not self.space:
            raise IncompatibleSpace("The matrix elements are defined on different spaces. ")

    def _check_vector(self, u: VectorElement) -> None:
        if u.space is not self.space:
            raise IncompatibleSpace("The vector element is defined on a different space. ")
        if u.shape != (self.space.ndofs, ):
            raise DimensionMismatch(f"Expected a vector element of shape ({self.space.ndofs}, ), got {u.shape}. ")

    def _map(self, f) -> "MatrixElement":
        res = self.values.copy()
        res.data = np.asarray(f(res.data))
        return MatrixElement(self.space, res)

    def _scale_rows(self, u: VectorElement) -> "MatrixElement":
        r = self.values.tocsr(copy=True)
        r.data = r.data * np.repeat(u.values, np.diff(r.indptr))
        return MatrixElement(self.space, r)

    def _scale_cols(self, u: VectorElement) -> "MatrixElement":
        r = self.values.copy()
        r.data = r.data * np.repeat(u.values, np.diff(r.indptr))
        return MatrixElement(self.space, r)

    def __neg__(self) -> "MatrixElement":
        return self._map(np.negative)

    def __add__(self, other):
        if isinstance(other, MatrixElement):
            self._check_space(other)
            return MatrixElement(self.space, self.values + other.values)
        if isinstance(other, Number):
            return self._map(lambda a: a + other)
        return NotImplemented

    def __radd__(self, other):
        if isinstance(other, Number):
            return self._map(lambda a: other + a)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, MatrixElement):
            self._check_space(other)
            return MatrixElement(self.space, self.values - other.values)
        if isinstance(other, Number):
            return self._map(lambda a: a - other)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, Number):
            return self._map(lambda a: other - a)
        return NotImplemented

    def __mul__(self, other):
        """
        Hadamard product with a matrix element, column scaling by a vector element,
        or scaling of the stored entries by a number.
        """
        if isinstance(other, MatrixElement):
            self._check_space(other)
            return MatrixElement(self.space, self.values.multiply(other.values))
        if isinstance(other, VectorElement):
            self._check_vector(other)
            return self._scale_cols(other)
        if isinstance(other, Number):
            return self._map(lambda a: a * other)
        return NotImplemented

    def __rmul__(self, other):
        """
        Row scaling by a vector element, or scaling of the stored entries by a number.
        """
        if isinstance(other, VectorElement):
            self._check_vector(other)
            return self._scale_rows(other)
        if isinstance(other, Number):
            return self._map(lambda a: other * a)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Number):
            return self._map(lambda a: a / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, Number):
            return self._map(lambda a: other / a)
        return NotImplemented

    def __pow__(self, other):
        if isinstance(other, Number):
            return self._map(lambda a: a ** other)
        return NotImplemented

    def __rpow__(self, other):
        if isinstance(other, Number):
            return self._map(lambda a: other ** a)
        return NotImplemented

    def __matmul__(self, other):
        if isinstance(other, MatrixElement):
            self._check_space(other)
            return MatrixElement(self.space, self.values @ other.values)
        if isinstance(other, VectorElement):
            self._check_vector(other)
            return VectorElement(self.space, self.values @ other.values)
        if isinstance(other, np.ndarray):
            if other.shape[0] != self.shape[1]:
                raise DimensionMismatch(f"Cannot apply a {self.shape} matrix to an array of shape {other.shape}. ")
            return self.values @ other
        return NotImplemented

    @property
    def T(self) -> "MatrixElement":
        return MatrixElement(self.space, self.values.T)


# ===============================================================================


def element(space, values: Optional[np.ndarray] = None) -> VectorElement:
    """
    A vector element of the space, zero-initialized or holding a copy of values.
    """
    return VectorElement(space, values)

def elements(space, A = None) -> MatrixElement:
    """
    The identity matrix element of the space, or a matrix element wrapping the sparse matrix A.
    """
    if A is None:
        A = sparse.identity(space.ndofs, dtype=space.dtype, format="csc")
    return MatrixElement(space, A)

def copyto(dst: MatrixElement, src: MatrixElement) -> MatrixElement:
    """
    Copy the stored values of src into dst. Both must share the space and the sparsity pattern.
    """
    dst._check_space(src)
    if dst.read_only:
        raise ValueError("Cannot copy into a read-only matrix element. ")
    A, B = dst.values, src.values
    if A.shape != B.shape or not (np.array_equal(A.indptr, B.indptr) and np.array_equal(A.indices, B.indices)):
        raise PatternMismatch("The matrix elements do not share the same sparsity pattern. ")
    A.data[:] = B.data
    return dst
