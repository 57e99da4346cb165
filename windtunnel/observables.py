"""
Macroscopic Observable Extraction

Compute density, velocity, and derived quantities from populations.

In LBM, macroscopic quantities are moments of the distribution function:
    - Density (0th moment): rho = sum_k(n_k)
    - Momentum (1st moment): rho*u = sum_k(n_k * e_k)
"""

import numpy as np
from .lattice import EX, EY, Q


def compute_density(f):
    """
    Compute density field from distribution functions.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho : ndarray
        Density field, shape (ny, nx)
    """
    return np.sum(f, axis=0)


def compute_macroscopic(f):
    """
    Compute density and velocity from distribution functions.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho, ux, uy : ndarray
        Density and velocity fields, shape (ny, nx)
    """
    rho = compute_density(f)

    rho_ux = np.zeros(rho.shape, dtype=np.float64)
    rho_uy = np.zeros(rho.shape, dtype=np.float64)
    for k in range(Q):
        rho_ux += f[k] * EX[k]
        rho_uy += f[k] * EY[k]

    with np.errstate(divide="ignore", invalid="ignore"):
        ux = rho_ux / rho
        uy = rho_uy / rho

    return rho, ux, uy


def compute_curl(ux, uy, curl):
    """
    Discrete curl of the velocity field on interior cells.

        curl = (uy[x+1] - uy[x-1]) - (ux[y+1] - ux[y-1])

    The border of ``curl`` is left untouched.

    Parameters
    ----------
    ux, uy : ndarray
        Velocity fields, shape (ny, nx)
    curl : ndarray
        Output curl field, shape (ny, nx). Interior is overwritten.
    """
    curl[1:-1, 1:-1] = ((uy[1:-1, 2:] - uy[1:-1, :-2])
                        - (ux[2:, 1:-1] - ux[:-2, 1:-1]))
    return curl


def is_stable(rho):
    """
    Cheap blow-up detector.

    Returns False if any density on the middle row (y = ny // 2) is not
    strictly positive. NaN densities count as unstable.
    """
    mid = rho.shape[0] >> 1
    return bool(np.all(rho[mid] > 0))


def compute_velocity_magnitude(ux, uy):
    """
    Compute velocity magnitude field.

    |u| = sqrt(ux^2 + uy^2)
    """
    return np.sqrt(ux * ux + uy * uy)


def total_mass(rho, interior=True):
    """Sum of density, over interior cells only by default."""
    if interior:
        return float(np.sum(rho[1:-1, 1:-1], dtype=np.float64))
    return float(np.sum(rho, dtype=np.float64))
