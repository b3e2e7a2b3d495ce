"""
Discrete inner products and norms on the space of grid functions.
"""
from typing import Optional, Union
import numpy as np
from .element import VectorElement
from .errors import DimensionMismatch, IncompatibleSpace, InvalidAxis
from .mesh import check_axis
from .operators import grad

def _same_space(u: VectorElement, v: VectorElement):
    if u.space is not v.space:
        raise IncompatibleSpace("The vector elements are defined on different spaces. ")
    return u.space

def inner_h(u: VectorElement, v: VectorElement) -> float:
    """
    (u, v)_h = sum_p |cell_p| u(p) v(p)
    """
    space = _same_space(u, v)
    return float(np.dot(space.innerh_weights * u.values, v.values))

def inner_plus(u: Union[VectorElement, tuple], v: Union[VectorElement, tuple], axis: Optional[int] = None) -> float:
    """
    The modified inner product (u, v)_{+k} associated with an axis.
    For tuples of vector elements (one per axis), the sum of (u_k, v_k)_{+k} over all the axes.
    """
    if isinstance(u, tuple) or isinstance(v, tuple):
        if not (isinstance(u, tuple) and isinstance(v, tuple)) or len(u) != len(v) or len(u) == 0:
            raise DimensionMismatch("Expected two tuples of vector elements of the same length. ")
        if len(u) != _same_space(u[0], v[0]).dim:
            raise DimensionMismatch(f"Expected one vector element per axis, got {len(u)}. ")
        return sum(inner_plus(uk, vk, k) for k, (uk, vk) in enumerate(zip(u, v)))
    space = _same_space(u, v)
    if axis is None:
        if space.dim != 1:
            raise InvalidAxis("An axis is needed for the modified inner product on a multidimensional mesh. ")
        axis = 0
    w = space.innerplus_weights[check_axis(axis, space.dim)]
    return float(np.dot(w * u.values, v.values))

def norm_h(u: VectorElement) -> float:
    return float(np.sqrt(inner_h(u, u)))

def norm_plus(u: Union[VectorElement, tuple], axis: Optional[int] = None) -> float:
    return float(np.sqrt(inner_plus(u, u, axis)))

def snorm_1h(u: VectorElement) -> float:
    """
    The discrete H1 seminorm, built from the backward divided differences.
    """
    g = grad(u)
    return float(np.sqrt(inner_plus(g, g)))

def norm_1h(u: VectorElement) -> float:
    return float(np.sqrt(norm_h(u)**2 + snorm_1h(u)**2))
