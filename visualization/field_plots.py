"""
Field Visualization

Plotting functions for the wind tunnel fields: curl, speed, velocity
components and density, with barriers, tracers, the sensor and the net
barrier force drawn on top.
"""

from matplotlib.colors import ListedColormap
import matplotlib.pyplot as plt
import numpy as np

from windtunnel.observables import compute_velocity_magnitude

QUANTITIES = ("curl", "speed", "ux", "uy", "density")

# Colour half-ranges at contrast 1; higher contrast narrows them
_SCALES = {"curl": 0.1, "speed": 0.2, "ux": 0.2, "uy": 0.2, "density": 0.1}


def field_data(grid, quantity):
    """
    Array to plot for a quantity, and its colour limits.

    Returns
    -------
    data : ndarray
        Field, shape (ydim, xdim)
    vmin, vmax : float
    """
    scale = _SCALES[quantity]
    if quantity == "curl":
        return grid.curl, -scale, scale
    if quantity == "speed":
        return compute_velocity_magnitude(grid.ux, grid.uy), 0.0, scale
    if quantity == "ux":
        return grid.ux, -scale, scale
    if quantity == "uy":
        return grid.uy, -scale, scale
    return grid.rho, 1.0 - scale, 1.0 + scale


def plot_field(grid, quantity="curl", contrast=1.0, ax=None, show_tracers=False,
               show_force=False, show_sensor=False, title=None):
    """
    Plot one field of a FluidGrid.

    Parameters
    ----------
    grid : FluidGrid
        Grid to draw
    quantity : str
        One of "curl", "speed", "ux", "uy", "density"
    contrast : float
        Values are scaled by this before colour mapping
    ax : matplotlib.axes.Axes, optional
        Axes to draw into; a new figure is made if omitted
    show_tracers, show_force, show_sensor : bool
        Overlays

    Returns
    -------
    ax : matplotlib.axes.Axes
    """
    if quantity not in QUANTITIES:
        raise ValueError(f"quantity must be one of {QUANTITIES}, got {quantity!r}")

    if ax is None:
        width = max(4.0, grid.xdim * grid.px_per_square / 100.0)
        height = max(2.0, grid.ydim * grid.px_per_square / 100.0)
        fig, ax = plt.subplots(figsize=(width, height))

    data, vmin, vmax = field_data(grid, quantity)
    cmap = "RdBu_r" if quantity in ("curl", "ux", "uy") else "viridis"
    if quantity == "density":
        center = 1.0
        vmin = center + (vmin - center) / contrast
        vmax = center + (vmax - center) / contrast
    else:
        vmin /= contrast
        vmax /= contrast

    ax.imshow(data, origin="lower", cmap=cmap, vmin=vmin, vmax=vmax,
              interpolation="nearest")

    # Barriers in solid black
    solid = np.ma.masked_where(grid.barrier == 0, grid.barrier)
    ax.imshow(solid, origin="lower", cmap=ListedColormap(["black"]),
              interpolation="nearest")

    if show_tracers and grid.n_tracers:
        ax.plot(grid.tracer_x, grid.tracer_y, "k.", markersize=2)

    if show_force and grid.barrier_count > 0:
        cx, cy = grid.barrier_centroid()
        ax.quiver([cx], [cy], [grid.barrier_fx], [grid.barrier_fy],
                  color="orange", angles="xy", scale_units="xy", scale=0.05)

    if show_sensor:
        ax.plot([grid.sensor_x], [grid.sensor_y], "o", markersize=6,
                markerfacecolor="none", markeredgecolor="k")

    ax.set_xlim(-0.5, grid.xdim - 0.5)
    ax.set_ylim(-0.5, grid.ydim - 0.5)
    ax.set_title(title if title is not None else quantity.capitalize())
    ax.set_xticks([])
    ax.set_yticks([])
    return ax


def save_field_plot(grid, path, quantity="curl", dpi=100, **kwargs):
    """Plot a field and write it to ``path``."""
    ax = plot_field(grid, quantity, **kwargs)
    fig = ax.figure
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path


def plot_force_history(fx, fy, title="Barrier force"):
    """Plot Fx and Fy time series."""
    fig, ax = plt.subplots(figsize=(8, 3))
    ax.plot(fx, label="F_x")
    ax.plot(fy, label="F_y")
    ax.set_xlabel("step")
    ax.set_ylabel("force (lattice units)")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    return ax
