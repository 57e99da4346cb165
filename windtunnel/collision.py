"""
Collision Operator

Single-relaxation-time (BGK) collision for the wind tunnel lattice.

The collision step relaxes every population toward its local equilibrium:

    n_k <- n_k + omega * (n_k^eq(rho, u) - n_k)

The relaxation frequency follows from the kinematic viscosity:

    omega = 1 / (3 nu + 0.5)

omega close to 2 means low viscosity and a fragile simulation; omega
near 0 is very viscous and stable. Only interior cells are collided;
the one-cell border belongs to the boundary conditions.
"""

import warnings

import numpy as np
from numba import njit, prange
from .lattice import (
    REST, EAST, NORTH, WEST, SOUTH,
    NORTHEAST, NORTHWEST, SOUTHWEST, SOUTHEAST,
)
from .equilibrium import compute_equilibrium, FOUR_NINTHS, ONE_NINTH, ONE_36TH

# Above this omega the BGK scheme tends to blow up at typical tunnel speeds
OMEGA_WARN = 1.98


def omega_from_viscosity(nu):
    """
    Compute relaxation frequency from kinematic viscosity.

    omega = 1 / (3 * nu + 0.5)

    Parameters
    ----------
    nu : float
        Kinematic viscosity in lattice units (must be > 0)

    Returns
    -------
    omega : float
        Relaxation frequency
    """
    if nu <= 0:
        raise ValueError(f"viscosity must be > 0, got {nu}")
    return 1.0 / (3.0 * nu + 0.5)


def viscosity_from_omega(omega):
    """
    Compute kinematic viscosity from relaxation frequency.

    nu = (1 / omega - 0.5) / 3
    """
    if not 0.0 < omega < 2.0:
        raise ValueError(f"omega must be in (0, 2), got {omega}")
    return (1.0 / omega - 0.5) / 3.0


def validate_omega(omega, name="omega"):
    """
    Validate that a relaxation frequency is usable.

    Raises
    ------
    ValueError
        If omega is outside (0, 2)

    Returns
    -------
    omega : float
        Validated omega value
    """
    if not 0.0 < omega < 2.0:
        raise ValueError(
            f"{name} must be in (0, 2) (got {omega}). "
            f"This corresponds to nu > 0."
        )
    if omega > OMEGA_WARN:
        warnings.warn(
            f"{name} = {omega} is close to 2, the simulation will likely go unstable. "
            f"Consider a viscosity of at least 0.005."
        )
    return omega


def copy_outflow_column(f):
    """
    Zero-gradient outflow on the right edge.

    Copies the west-moving populations of column nx-2 onto column nx-1
    for rows 1 .. ny-3, so the right edge does not reflect waves.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    """
    q, ny, nx = f.shape
    for k in (WEST, NORTHWEST, SOUTHWEST):
        f[k, 1:ny - 2, nx - 1] = f[k, 1:ny - 2, nx - 2]


def bgk_collide(f, rho, ux, uy, omega):
    """
    BGK collision of all interior cells using vectorized NumPy.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho, ux, uy : ndarray
        Macroscopic fields, shape (ny, nx). Interior is overwritten.
    omega : float
        Relaxation frequency
    """
    n = f[:, 1:-1, 1:-1]

    with np.errstate(divide="ignore", invalid="ignore"):
        thisrho = (n[REST] + n[NORTH] + n[SOUTH] + n[EAST] + n[WEST]
                   + n[NORTHWEST] + n[NORTHEAST] + n[SOUTHWEST] + n[SOUTHEAST])
        thisux = (n[EAST] + n[NORTHEAST] + n[SOUTHEAST]
                  - n[WEST] - n[NORTHWEST] - n[SOUTHWEST]) / thisrho
        thisuy = (n[NORTH] + n[NORTHEAST] + n[NORTHWEST]
                  - n[SOUTH] - n[SOUTHEAST] - n[SOUTHWEST]) / thisrho

        f_eq = compute_equilibrium(thisrho, thisux, thisuy)
        n += omega * (f_eq - n)

    rho[1:-1, 1:-1] = thisrho
    ux[1:-1, 1:-1] = thisux
    uy[1:-1, 1:-1] = thisuy

    copy_outflow_column(f)


@njit(parallel=True, cache=True, error_model="numpy")
def bgk_collide_numba(f, rho, ux, uy, omega):
    """
    Numba-accelerated BGK collision of all interior cells.

    Rows are independent, so the outer loop runs in parallel.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho, ux, uy : ndarray
        Macroscopic fields, shape (ny, nx)
    omega : float
        Relaxation frequency
    """
    q, ny, nx = f.shape

    for y in prange(1, ny - 1):
        for x in range(1, nx - 1):
            n0 = f[0, y, x]
            nE = f[1, y, x]
            nN = f[2, y, x]
            nW = f[3, y, x]
            nS = f[4, y, x]
            nNE = f[5, y, x]
            nNW = f[6, y, x]
            nSW = f[7, y, x]
            nSE = f[8, y, x]

            thisrho = n0 + nN + nS + nE + nW + nNW + nNE + nSW + nSE
            thisux = (nE + nNE + nSE - nW - nNW - nSW) / thisrho
            thisuy = (nN + nNE + nNW - nS - nSE - nSW) / thisrho
            rho[y, x] = thisrho
            ux[y, x] = thisux
            uy[y, x] = thisuy

            ux2 = thisux * thisux
            uy2 = thisuy * thisuy
            u2 = ux2 + uy2
            u215 = 1.5 * u2
            one9thrho = ONE_NINTH * thisrho
            one36thrho = ONE_36TH * thisrho
            ux3 = 3.0 * thisux
            uy3 = 3.0 * thisuy
            uxuy2 = 2.0 * thisux * thisuy

            f[0, y, x] = n0 + omega * (FOUR_NINTHS * thisrho * (1.0 - u215) - n0)
            f[1, y, x] = nE + omega * (one9thrho * (1.0 + ux3 + 4.5 * ux2 - u215) - nE)
            f[2, y, x] = nN + omega * (one9thrho * (1.0 + uy3 + 4.5 * uy2 - u215) - nN)
            f[3, y, x] = nW + omega * (one9thrho * (1.0 - ux3 + 4.5 * ux2 - u215) - nW)
            f[4, y, x] = nS + omega * (one9thrho * (1.0 - uy3 + 4.5 * uy2 - u215) - nS)
            f[5, y, x] = nNE + omega * (one36thrho * (1.0 + ux3 + uy3 + 4.5 * (u2 + uxuy2) - u215) - nNE)
            f[6, y, x] = nNW + omega * (one36thrho * (1.0 - ux3 + uy3 + 4.5 * (u2 - uxuy2) - u215) - nNW)
            f[7, y, x] = nSW + omega * (one36thrho * (1.0 - ux3 - uy3 + 4.5 * (u2 + uxuy2) - u215) - nSW)
            f[8, y, x] = nSE + omega * (one36thrho * (1.0 + ux3 - uy3 + 4.5 * (u2 - uxuy2) - u215) - nSE)


def bgk_collide_fast(f, rho, ux, uy, omega):
    """
    Numba-accelerated BGK collision followed by the outflow correction.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho, ux, uy : ndarray
        Macroscopic fields, shape (ny, nx)
    omega : float
        Relaxation frequency
    """
    bgk_collide_numba(f, rho, ux, uy, float(omega))
    copy_outflow_column(f)
