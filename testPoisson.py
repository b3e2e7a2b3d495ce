import argparse
from dataclasses import dataclass
import numpy as np
from scipy.sparse.linalg import spsolve
from matplotlib import pyplot
from colorama import Fore, Style
from fdm import *

@dataclass
class StudyParameters:
    dim: int = 2
    levels: int = 4
    n: int = 5 # initial number of points per axis
    stretch: float = 0.5 # in [0, 1), 0 for a uniform mesh
    vis: bool = False

def u_exact(*x) -> np.ndarray:
    return np.prod([np.sin(np.pi * xk) for xk in x], axis=0)

def f_rhs(*x) -> np.ndarray:
    return len(x) * np.pi**2 * u_exact(*x)

def stretched_mesh(solp: StudyParameters) -> Mesh:
    t = np.linspace(0.0, 1.0, solp.n)
    x = t + solp.stretch * np.sin(np.pi * t) * (1.0 - t) / np.pi
    return Mesh(*((x, ) * solp.dim))

def solve_poisson(mesh: Mesh) -> tuple[VectorElement, VectorElement]:
    """
    Solve -lap u = f in the unit box with u = 0 on the boundary, by the scheme
        sum_k (D_k u, D_k v)_{+k} = (f, v)_h
    for every grid function v vanishing on the boundary.
    """
    Wh = gridspace(mesh)
    A = None
    for k, Dk in enumerate(grad(Wh)):
        wk = element(Wh, Wh.innerplus_weights[k])
        Ak = Dk.T @ (wk * Dk)
        A = Ak if A is None else A + Ak
    b = element(Wh, Wh.innerh_weights) * restrict(Wh, f_rhs)
    # the interior points
    free = np.ones(mesh.shape, dtype=np.bool_)
    for k in range(mesh.dim):
        sl = [slice(None)] * mesh.dim
        sl[k] = [0, -1]
        free[tuple(sl)] = False
    free = np.nonzero(free.reshape(-1, order="F"))[0]
    u = element(Wh)
    A_free = A.values.tocsr()[free][:, free]
    u[free] = spsolve(A_free.tocsc(), b.values[free])
    return u, restrict(Wh, u_exact)

if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--dim", type=int, default=2, help="Dimension of the domain")
    parser.add_argument("--levels", type=int, default=4, help="Number of refinement levels")
    parser.add_argument("--n", type=int, default=5, help="Number of points per axis on the coarsest mesh")
    parser.add_argument("--stretch", type=float, default=0.5, help="Stretching of the coarsest mesh")
    parser.add_argument("--vis", help="Visualize the solution", action="store_true")
    solp = StudyParameters(**vars(parser.parse_args()))
    print(Fore.GREEN + "Poisson: {}".format(solp) + Style.RESET_ALL)

    mesh = stretched_mesh(solp)
    mesh_table = []
    error_table = {"infty": [], "L2": [], "H1": []}
    for level in range(solp.levels):
        u, ue = solve_poisson(mesh)
        e = u - ue
        error_table["infty"].append(np.max(np.abs(e)))
        error_table["L2"].append(norm_h(e))
        error_table["H1"].append(norm_1h(e))
        mesh_table.append("{:.2e}".format(mesh.hmax()))
        print("Level {}: {} points".format(level, mesh.npoints))
        if solp.vis and level == solp.levels - 1:
            GridVisualizer(u.space).draw(u)
            pyplot.show()
        mesh = mesh.refine()

    print(Fore.GREEN + "\nConvergence: " + Style.RESET_ALL)
    printConvergenceTable(mesh_table, error_table)
