"""
Grid spaces and finite difference operators on structured, non-uniform meshes.
"""
from .errors import IncompatibleSpace, InvalidAxis, DimensionMismatch, PatternMismatch, OutOfBounds
from .mesh import Mesh
from .difference import shift, forward_diff, backward_jump, backward_average
from .element import VectorElement, MatrixElement, element, elements, copyto
from .gridspace import GridSpace, gridspace, get_mesh, ndofs, element_type, get_diff_matrix
from .operators import diff, average, jump, divided_diff, grad
from .inner import inner_h, inner_plus, norm_h, norm_plus, snorm_1h, norm_1h
from .restriction import restrict, restrict_average
from .post import GridVisualizer, printConvergenceTable
