"""
Streaming Step Implementations

Propagation of populations one lattice step along their direction:

    n_k(x + e_k, t + 1) = n_k(x, t)

Only interior destinations are written; the border cells are owned by the
boundary conditions and act as sources.

Two schemes are provided:
- In-place sweep: no second buffer. Each direction pair is swept in the
  order that reads every source cell before it is overwritten
  (N/NW from the top row down, E/NE from the top-right corner,
  S/SE from the bottom-right corner, W/SW from the bottom-left corner).
  The four sweeps must run one after another in exactly this order.
- Double-buffered: every direction is shifted from a copy. Order does not
  matter, and the result is bit-for-bit identical to the in-place sweep.
"""

import numpy as np
from numba import njit
from .lattice import EX, EY, Q


def stream_double_buffered(f):
    """
    Streaming using a copy of each direction field.

    Pull scheme on the interior: n_k(x) = n_k(x - e_k).

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    """
    q, ny, nx = f.shape

    for k in range(1, Q):
        ex = int(EX[k])
        ey = int(EY[k])
        src = f[k].copy()
        f[k, 1:ny - 1, 1:nx - 1] = src[1 - ey:ny - 1 - ey, 1 - ex:nx - 1 - ex]


@njit(cache=True)
def stream_inplace_numba(f):
    """
    In-place directional sweep streaming.

    Direction indices: 1=E, 2=N, 3=W, 4=S, 5=NE, 6=NW, 7=SW, 8=SE.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    """
    q, ny, nx = f.shape

    # North and northwest
    for y in range(ny - 2, 0, -1):
        for x in range(1, nx - 1):
            f[2, y, x] = f[2, y - 1, x]
            f[6, y, x] = f[6, y - 1, x + 1]

    # East and northeast
    for y in range(ny - 2, 0, -1):
        for x in range(nx - 2, 0, -1):
            f[1, y, x] = f[1, y, x - 1]
            f[5, y, x] = f[5, y - 1, x - 1]

    # South and southeast
    for y in range(1, ny - 1):
        for x in range(nx - 2, 0, -1):
            f[4, y, x] = f[4, y + 1, x]
            f[8, y, x] = f[8, y + 1, x - 1]

    # West and southwest
    for y in range(1, ny - 1):
        for x in range(1, nx - 1):
            f[3, y, x] = f[3, y, x + 1]
            f[7, y, x] = f[7, y + 1, x + 1]
