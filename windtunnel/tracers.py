"""
Tracer Particles

Massless markers carried by the velocity field for flow visualization.
Tracers do not interact with barriers and do not affect the flow.
"""

import math

import numpy as np
from .lattice import DTYPE

DEFAULT_TRACERS = 144


def seed_tracers(n_tracers, nx, ny):
    """
    Lay tracers out on a regular grid covering the domain.

    Parameters
    ----------
    n_tracers : int
        Number of tracers
    nx, ny : int
        Grid dimensions

    Returns
    -------
    tracer_x, tracer_y : ndarray
        Tracer positions, shape (n_tracers,)
    """
    tracer_x = np.zeros(n_tracers, dtype=DTYPE)
    tracer_y = np.zeros(n_tracers, dtype=DTYPE)
    if n_tracers == 0:
        return tracer_x, tracer_y

    n_rows = math.ceil(math.sqrt(n_tracers))
    dx = nx / n_rows
    dy = ny / n_rows
    next_x = dx / 2
    next_y = dy / 2

    for t in range(n_tracers):
        tracer_x[t] = next_x
        tracer_y[t] = next_y
        next_x += dx
        if next_x > nx:
            next_x = dx / 2
            next_y += dy

    return tracer_x, tracer_y


def nearest_cell(pos, dim):
    """
    Index of the nearest cell, rounding halves up.

    Indices are clipped to [0, dim - 1] so that a position within half a
    cell of the far edge still samples the edge cell.
    """
    return np.clip(np.floor(pos + 0.5).astype(np.int64), 0, dim - 1)


def advect_tracers(tracer_x, tracer_y, ux, uy, rng):
    """
    Move every tracer by the velocity of its nearest cell (one Euler step).

    A tracer that passes the right edge re-enters at x = 0 with a random y.

    Parameters
    ----------
    tracer_x, tracer_y : ndarray
        Tracer positions. Modified in place.
    ux, uy : ndarray
        Velocity fields, shape (ny, nx)
    rng : numpy.random.Generator
        Source of the re-entry heights

    Returns
    -------
    wrapped : int
        Number of tracers re-seeded at the left edge
    """
    ny, nx = ux.shape
    ix = nearest_cell(tracer_x, nx)
    iy = nearest_cell(tracer_y, ny)

    tracer_x += ux[iy, ix]
    tracer_y += uy[iy, ix]

    out = tracer_x > nx - 1
    wrapped = int(np.count_nonzero(out))
    if wrapped:
        tracer_x[out] = 0.0
        tracer_y[out] = rng.random(wrapped) * ny

    return wrapped
