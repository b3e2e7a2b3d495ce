import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest
from fdm import Mesh, gridspace

X_NONUNIFORM = np.array((0.0, 0.1, 0.35, 0.7, 1.0))
Y_NONUNIFORM = np.array((0.0, 0.2, 0.5, 0.6, 0.9, 1.0))
Z_NONUNIFORM = np.array((-1.0, -0.5, 0.25, 1.0))

@pytest.fixture
def mesh1d():
    return Mesh.uniform(((0.0, 1.0), ), 5)

@pytest.fixture
def space1d(mesh1d):
    return gridspace(mesh1d)

@pytest.fixture
def mesh2d():
    return Mesh(X_NONUNIFORM, Y_NONUNIFORM)

@pytest.fixture
def space2d(mesh2d):
    return gridspace(mesh2d)

@pytest.fixture
def mesh3d():
    return Mesh(X_NONUNIFORM, Y_NONUNIFORM, Z_NONUNIFORM)

@pytest.fixture
def space3d(mesh3d):
    return gridspace(mesh3d)

def to_grid(u, mesh) -> np.ndarray:
    return np.asarray(u).reshape(mesh.shape, order="F")
