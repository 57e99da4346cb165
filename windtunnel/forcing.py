"""
Interactive Forcing

Local fluid pushes, and conversion of pointer drags into lattice velocities.
"""

import math

from .equilibrium import set_equilibrium

# Pushes must stay more than this many cells inside every edge
PUSH_MARGIN = 3

# Largest velocity component a drag may inject
PUSH_LIMIT = 0.1


def push_allowed(x, y, nx, ny):
    """True if a push centred on (x, y) keeps clear of the edges."""
    return PUSH_MARGIN < x < nx - 1 - PUSH_MARGIN and PUSH_MARGIN < y < ny - 1 - PUSH_MARGIN


def push_fluid(f, rho, ux, uy, x, y, push_ux, push_uy):
    """
    Overwrite a small patch around (x, y) with equilibrium at (push_ux, push_uy).

    The patch is a 5x3 block (dx in -2..2, dy in -1..1) plus three cells
    above and below it (dx in -1..1, dy = +-2). Each cell keeps its current
    density. Pushes too close to an edge are ignored.

    Returns
    -------
    pushed : bool
        True if the patch was written
    """
    q, ny, nx = f.shape
    if not push_allowed(x, y, nx, ny):
        return False

    for dx in range(-1, 2):
        set_equilibrium(f, rho, ux, uy, x + dx, y + 2, push_ux, push_uy, rho[y + 2, x + dx])
        set_equilibrium(f, rho, ux, uy, x + dx, y - 2, push_ux, push_uy, rho[y - 2, x + dx])

    for dx in range(-2, 3):
        for dy in range(-1, 2):
            set_equilibrium(f, rho, ux, uy, x + dx, y + dy, push_ux, push_uy, rho[y + dy, x + dx])

    return True


def push_velocity_from_drag(dx_px, dy_px, px_per_square, steps_per_frame, limit=PUSH_LIMIT):
    """
    Convert a pointer displacement over one frame into a push velocity.

    Screen y grows downward, lattice y grows upward. Each component is
    clamped to +-limit.

    Parameters
    ----------
    dx_px, dy_px : float
        Pointer displacement in pixels since the previous frame
    px_per_square : int
        Pixels per lattice cell
    steps_per_frame : int
        Steps the displacement is spread over

    Returns
    -------
    push_ux, push_uy : float
    """
    push_ux = dx_px / px_per_square / steps_per_frame
    push_uy = -dy_px / px_per_square / steps_per_frame

    if abs(push_ux) > limit:
        push_ux = math.copysign(limit, push_ux)
    if abs(push_uy) > limit:
        push_uy = math.copysign(limit, push_uy)

    return push_ux, push_uy


def canvas_to_grid(px, py, canvas_height, px_per_square):
    """
    Convert canvas pixel coordinates to lattice cell coordinates.

    The canvas origin is top-left; the lattice origin is bottom-left.

    Returns
    -------
    x, y : int
    """
    x = int(math.floor(px / px_per_square))
    y = int(math.floor((canvas_height - 1 - py) / px_per_square))
    return x, y
