"""
D2Q9 Lattice Constants and Utilities

Defines the D2Q9 lattice model used by the wind tunnel solver.

Populations are stored as a single float32 array of shape (Q, ydim, xdim),
so the row-major linear index of a cell is i = x + y * xdim.
"""
import numpy as np

# D2Q9 lattice velocities
#     6   2   5          NW  N  NE
#       \ | /              \ | /
#     3 - 0 - 1          W - 0 - E
#       / | \              / | \
#     7   4   8          SW  S  SE

REST = 0
EAST = 1
NORTH = 2
WEST = 3
SOUTH = 4
NORTHEAST = 5
NORTHWEST = 6
SOUTHWEST = 7
SOUTHEAST = 8

# Lattice velocity components (north is +y)
EX = np.array([0, 1, 0, -1, 0, 1, -1, -1, 1], dtype=np.int32)
EY = np.array([0, 0, 1, 0, -1, 1, 1, -1, -1], dtype=np.int32)

# Lattice weights
W = np.array([4/9, 1/9, 1/9, 1/9, 1/9, 1/36, 1/36, 1/36, 1/36], dtype=np.float64)

# Opposite direction indices (for bounce-back)
OPPOSITE = np.array([0, 3, 4, 1, 2, 7, 8, 5, 6], dtype=np.int32)

# Lattice sound speed squared
CS2 = 1.0 / 3.0

# Number of lattice velocities
Q = 9

# Storage precision for populations and macroscopic fields
DTYPE = np.float32

# Attribute names of the nine population views on FluidGrid, by direction index
POPULATION_NAMES = ("n0", "nE", "nN", "nW", "nS", "nNE", "nNW", "nSW", "nSE")


def linear_index(x, y, xdim):
    """Row-major linear index of cell (x, y)."""
    return x + y * xdim
