from math import log2
from typing import Optional
import numpy as np
from matplotlib import pyplot
from .gridspace import GridSpace
from .element import VectorElement
from .errors import IncompatibleSpace

class GridVisualizer:
    """
    Reshape the values of a grid function to the shape of the mesh,
    and visualize them.
    """

    space: GridSpace

    def __init__(self, space: GridSpace) -> None:
        self.space = space

    def remap(self, u: VectorElement) -> np.ndarray:
        if u.space is not self.space:
            raise IncompatibleSpace("The vector element is defined on a different space. ")
        return u.values.reshape(self.space.mesh.shape, order="F")

    def draw(self, u: VectorElement, ax: Optional[pyplot.Axes] = None) -> None:
        ax = pyplot.gca() if ax is None else ax
        mesh = self.space.mesh
        r = self.remap(u)
        if mesh.dim == 1:
            ax.plot(mesh.coord[0], r, 'o-')
        elif mesh.dim == 2:
            x, y = mesh.coord
            ax.pcolormesh(x, y, r.T, shading="nearest")
            ax.set_aspect("equal")
        else:
            print("Unable to visualize a grid function on a 3D mesh. ")

def printConvergenceTable(mesh_table, error_table) -> None:
    """
    Print the convergence table.
    mesh_table: a list of string for mesh sizes as table headers.
    error_table: a dict, "norm_type": [errors on each level].
    """
    m = len(mesh_table)
    # print the header
    header_str = "{0: <20}".format("")
    for i in range(m-1):
        header_str += "{0: <10}{1: <8}".format(mesh_table[i], "rate")
    header_str += "{0: <10}".format(mesh_table[-1])
    print(header_str)
    # print each norm
    for (norm_type, error_list) in error_table.items():
        error_str = "{0: <20}".format(norm_type)
        for i in range(m-1):
            error_str += "{0:<10.2e}{1:<8.2f}".format(error_list[i], log2(error_list[i]/error_list[i+1]))
        error_str += "{0:<10.2e}".format(error_list[-1])
        print(error_str)
