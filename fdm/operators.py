"""
Finite difference operators acting on grid spaces, vector elements and matrix elements.

Applied to a GridSpace, an operator returns its matrix representation (a MatrixElement);
applied to a VectorElement u, it returns the VectorElement A @ u;
applied to a MatrixElement U, it returns the MatrixElement A @ U.
Without an axis, the result is a tuple over all the axes, or a single result for a 1D mesh.
"""
from functools import singledispatch
from typing import Callable
from .gridspace import GridSpace
from .element import VectorElement, MatrixElement, element, elements
from .difference import backward_average, backward_jump, inverse_spacing
from .mesh import check_axis

def _per_axis(dim: int, axis, f: Callable):
    if axis is not None:
        return f(check_axis(axis, dim))
    if dim == 1:
        return f(0)
    return tuple(f(i) for i in range(dim))

def _make_operator(build: Callable[[GridSpace, int], MatrixElement], doc: str):

    @singledispatch
    def op(x, axis = None):
        raise TypeError(f"Cannot apply a difference operator to an object of type {type(x).__name__}. ")

    @op.register(GridSpace)
    def _(x, axis = None):
        return _per_axis(x.dim, axis, lambda i: build(x, i))

    @op.register(VectorElement)
    def _(x, axis = None):
        return _per_axis(x.space.dim, axis, lambda i: build(x.space, i) @ x)

    @op.register(MatrixElement)
    def _(x, axis = None):
        return _per_axis(x.space.dim, axis, lambda i: build(x.space, i) @ x)

    op.__doc__ = doc
    return op

def _average_matrix(space: GridSpace, axis: int) -> MatrixElement:
    return elements(space, backward_average(space.mesh, axis))

def _jump_matrix(space: GridSpace, axis: int) -> MatrixElement:
    return elements(space, backward_jump(space.mesh, axis))

def _divided_diff_matrix(space: GridSpace, axis: int) -> MatrixElement:
    # scale the rows of the jump by 1/h
    return element(space, inverse_spacing(space.mesh, axis)) * _jump_matrix(space, axis)


diff = _make_operator(lambda space, axis: space.get_diff_matrix(axis),
"""
Forward difference, u(j+1) - u(j) along the axis.
At the last layer of points the value beyond the grid is taken as zero.
""")

average = _make_operator(_average_matrix,
"""
Backward average, (u(j) + u(j-1)) / 2 along the axis, with u(-1) taken as zero.
""")

jump = _make_operator(_jump_matrix,
"""
Backward jump, u(j) - u(j-1) along the axis, with u(-1) taken as zero.
""")

divided_diff = _make_operator(_divided_diff_matrix,
"""
Backward divided difference, (u(j) - u(j-1)) / h_j along the axis.
""")

def grad(x) -> tuple:
    """
    The tuple of the backward divided differences along all the axes, also for a 1D mesh.
    """
    space = x if isinstance(x, GridSpace) else x.space
    return tuple(divided_diff(x, i) for i in range(space.dim))
