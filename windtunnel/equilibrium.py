"""
Equilibrium Distribution Functions

Second-order Maxwell-Boltzmann equilibrium for the D2Q9 lattice:

    f_i^eq = w_i * rho * [1 + 3 (e_i . u) + 4.5 (e_i . u)^2 - 1.5 |u|^2]

Written out per direction this is

    n0       = 4/9  rho (1 - 1.5 u2)
    nE, nW   = 1/9  rho (1 +- 3 ux + 4.5 ux^2 - 1.5 u2)
    nN, nS   = 1/9  rho (1 +- 3 uy + 4.5 uy^2 - 1.5 u2)
    diagonal = 1/36 rho (1 +- 3 (ux +- uy) + 4.5 (u2 +- 2 ux uy) - 1.5 u2)

where u2 = ux^2 + uy^2. The same expansion is used for initialisation,
for the inflow boundary and for local fluid pushes.
"""

import numpy as np
from .lattice import EX, EY, W, Q, DTYPE

FOUR_NINTHS = 4.0 / 9.0
ONE_NINTH = 1.0 / 9.0
ONE_36TH = 1.0 / 36.0


def equilibrium_single_site(rho, ux, uy):
    """
    Compute the nine equilibrium populations of a single lattice site.

    Parameters
    ----------
    rho : float
        Density at the site
    ux : float
        X-velocity at the site
    uy : float
        Y-velocity at the site

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,), in direction-index order
    """
    ux3 = 3.0 * ux
    uy3 = 3.0 * uy
    ux2 = ux * ux
    uy2 = uy * uy
    u2 = ux2 + uy2
    u215 = 1.5 * u2
    uxuy2 = 2.0 * ux * uy
    one9thrho = ONE_NINTH * rho
    one36thrho = ONE_36TH * rho

    return np.array([
        FOUR_NINTHS * rho * (1.0 - u215),
        one9thrho * (1.0 + ux3 + 4.5 * ux2 - u215),                   # E
        one9thrho * (1.0 + uy3 + 4.5 * uy2 - u215),                   # N
        one9thrho * (1.0 - ux3 + 4.5 * ux2 - u215),                   # W
        one9thrho * (1.0 - uy3 + 4.5 * uy2 - u215),                   # S
        one36thrho * (1.0 + ux3 + uy3 + 4.5 * (u2 + uxuy2) - u215),   # NE
        one36thrho * (1.0 - ux3 + uy3 + 4.5 * (u2 - uxuy2) - u215),   # NW
        one36thrho * (1.0 - ux3 - uy3 + 4.5 * (u2 + uxuy2) - u215),   # SW
        one36thrho * (1.0 + ux3 - uy3 + 4.5 * (u2 - uxuy2) - u215),   # SE
    ], dtype=np.float64)


def compute_equilibrium(rho, ux, uy):
    """
    Compute equilibrium distribution for all lattice sites.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    ux : ndarray
        X-velocity field, shape (ny, nx)
    uy : ndarray
        Y-velocity field, shape (ny, nx)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx), same dtype as rho
    """
    ny, nx = rho.shape
    f_eq = np.empty((Q, ny, nx), dtype=rho.dtype)

    u215 = 1.5 * (ux * ux + uy * uy)

    for i in range(Q):
        eu = EX[i] * ux + EY[i] * uy
        f_eq[i] = W[i] * rho * (1.0 + 3.0 * eu + 4.5 * eu * eu - u215)

    return f_eq


def set_equilibrium(f, rho, ux, uy, x, y, new_ux, new_uy, new_rho):
    """
    Overwrite the populations at one site, or a slice of sites, with equilibrium.

    ``x`` and ``y`` may be integers or slices; every selected site receives
    the same equilibrium. The macroscopic fields are written alongside.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho, ux, uy : ndarray
        Macroscopic fields, shape (ny, nx). Modified in place.
    x, y : int or slice
        Target column(s) and row(s)
    new_ux, new_uy : float
        Target velocity
    new_rho : float
        Target density
    """
    f_eq = equilibrium_single_site(new_rho, new_ux, new_uy).astype(f.dtype)
    target = f[:, y, x]
    f[:, y, x] = f_eq.reshape((Q,) + (1,) * (np.ndim(target) - 1))
    rho[y, x] = new_rho
    ux[y, x] = new_ux
    uy[y, x] = new_uy


def uniform_equilibrium(ny, nx, u0, rho0=1.0, dtype=DTYPE):
    """
    Distribution for a uniform stream of speed u0 along +x.

    Returns
    -------
    f : ndarray
        Shape (Q, ny, nx)
    """
    f_eq = equilibrium_single_site(rho0, u0, 0.0).astype(dtype)
    return np.repeat(f_eq, ny * nx).reshape(Q, ny, nx)
