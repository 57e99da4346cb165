"""
FluidGrid: 2D Lattice-Boltzmann Wind Tunnel

Owns the D2Q9 populations of an xdim x ydim lattice and advances them
through collision and streaming, with bounce-back barriers, barrier force
accumulation, tracer advection and derived fields for rendering.

One step is

    set_boundaries(u0) -> collide(omega) -> stream() -> move_tracers() [-> push_fluid()]

All arrays are mutated in place. A renderer reads ``rho``, ``ux``, ``uy``,
``curl`` and ``barrier`` (shape (ydim, xdim)), or the flat views of the
same data indexed by ``x + y * xdim``.
"""

import numpy as np
from .lattice import Q, DTYPE, POPULATION_NAMES, linear_index
from .equilibrium import set_equilibrium, uniform_equilibrium
from .collision import bgk_collide, bgk_collide_fast
from .streaming import stream_double_buffered, stream_inplace_numba
from .boundary import (
    barrier_allowed, set_equilibrium_edges,
    apply_bounce_back, apply_bounce_back_numba,
)
from .observables import compute_curl, is_stable
from .forcing import push_fluid
from .tracers import DEFAULT_TRACERS, seed_tracers, advect_tracers
from .shapes import get_shape


def _population_view(k):
    def getter(self):
        return self.f[k].reshape(-1)
    getter.__doc__ = f"Flat view of population {POPULATION_NAMES[k]}, indexed by x + y * xdim."
    return property(getter)


class FluidGrid:
    """
    Lattice-Boltzmann wind tunnel.

    Parameters
    ----------
    xdim : int
        Number of cells in x (streamwise)
    ydim : int
        Number of cells in y
    px_per_square : int
        Pixels per cell, for renderers and pointer conversion
    n_tracers : int
        Number of tracer particles
    use_fast : bool
        Use Numba kernels (default True). The NumPy path streams with a
        double buffer and gives the same result.
    seed : int, optional
        Seed for tracer re-entry positions

    Attributes
    ----------
    f : ndarray
        Populations, shape (Q, ydim, xdim), float32
    rho, ux, uy, curl : ndarray
        Macroscopic fields, shape (ydim, xdim), float32
    barrier : ndarray
        Barrier flags, shape (ydim, xdim), uint8
    barrier_count, barrier_x_sum, barrier_y_sum : int
        Number of barrier cells and their coordinate sums, from the last stream()
    barrier_fx, barrier_fy : float
        Net force on all barriers, from the last stream()
    tracer_x, tracer_y : ndarray
        Tracer positions
    sensor_x, sensor_y : int
        Observation cell
    """

    n0 = _population_view(0)
    nE = _population_view(1)
    nN = _population_view(2)
    nW = _population_view(3)
    nS = _population_view(4)
    nNE = _population_view(5)
    nNW = _population_view(6)
    nSW = _population_view(7)
    nSE = _population_view(8)

    def __init__(self, xdim, ydim, px_per_square=1, n_tracers=DEFAULT_TRACERS,
                 use_fast=True, seed=None):
        for name, value in (("xdim", xdim), ("ydim", ydim), ("px_per_square", px_per_square)):
            if int(value) != value or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value}")
        if xdim < 3 or ydim < 3:
            raise ValueError(f"grid must be at least 3 x 3, got {xdim} x {ydim}")
        if n_tracers < 0:
            raise ValueError(f"n_tracers must be >= 0, got {n_tracers}")

        self.xdim = int(xdim)
        self.ydim = int(ydim)
        self.px_per_square = int(px_per_square)
        self.use_fast = use_fast
        self.rng = np.random.default_rng(seed)

        shape = (self.ydim, self.xdim)

        # Populations start at zero; call init_fluid before stepping
        self.f = np.zeros((Q,) + shape, dtype=DTYPE)

        self.rho = np.zeros(shape, dtype=DTYPE)
        self.ux = np.zeros(shape, dtype=DTYPE)
        self.uy = np.zeros(shape, dtype=DTYPE)
        self.curl = np.zeros(shape, dtype=DTYPE)
        self.barrier = np.zeros(shape, dtype=np.uint8)

        self._reset_barrier_force()

        self.sensor_x = self.xdim // 2
        self.sensor_y = self.ydim // 2

        self.n_tracers = int(n_tracers)
        self.tracer_x = np.zeros(self.n_tracers, dtype=DTYPE)
        self.tracer_y = np.zeros(self.n_tracers, dtype=DTYPE)

    @property
    def size(self):
        return self.xdim * self.ydim

    def index(self, x, y):
        """Linear index of cell (x, y)."""
        return linear_index(x, y, self.xdim)

    def _reset_barrier_force(self):
        self.barrier_count = 0
        self.barrier_x_sum = 0
        self.barrier_y_sum = 0
        self.barrier_fx = 0.0
        self.barrier_fy = 0.0

    # ------------------------------------------------------------------
    # Initialisation and equilibrium
    # ------------------------------------------------------------------

    def set_equil(self, x, y, ux, uy, rho=None):
        """
        Set the nine populations of cell (x, y) to equilibrium.

        If ``rho`` is omitted the cell keeps its current density. The
        macroscopic fields of the cell are updated too.
        """
        if rho is None:
            rho = self.rho[y, x]
        set_equilibrium(self.f, self.rho, self.ux, self.uy, x, y, ux, uy, rho)

    def init_fluid(self, u0):
        """
        Fill the whole grid with a uniform stream (u0, 0) at density 1.

        Also clears the curl and moves the sensor back to the grid centre.
        """
        self.f[:] = uniform_equilibrium(self.ydim, self.xdim, u0, 1.0, DTYPE)
        self.rho.fill(1.0)
        self.ux.fill(u0)
        self.uy.fill(0.0)
        self.curl.fill(0.0)
        self.sensor_x = self.xdim // 2
        self.sensor_y = self.ydim // 2

    def init_tracers(self, enabled=True):
        """Place tracers on a regular grid. Does nothing if not enabled."""
        if not enabled:
            return
        self.tracer_x, self.tracer_y = seed_tracers(self.n_tracers, self.xdim, self.ydim)

    # ------------------------------------------------------------------
    # Barriers
    # ------------------------------------------------------------------

    def add_barrier(self, x, y):
        """Mark (x, y) solid. Cells within two cells of an edge are ignored."""
        if barrier_allowed(x, y, self.xdim, self.ydim):
            self.barrier[y, x] = 1

    def remove_barrier(self, x, y):
        """Clear the barrier flag of (x, y). Cells outside the barrier region are ignored."""
        if barrier_allowed(x, y, self.xdim, self.ydim):
            self.barrier[y, x] = 0

    def clear_barriers(self):
        self.barrier.fill(0)

    def place_barrier_shape(self, index, shapes=None):
        """
        Replace all barriers with a predefined shape.

        Parameters
        ----------
        index : int
            1-based shape index. Unknown indices leave the barriers unchanged.
        shapes : list of BarrierShape, optional
            Shape list to use instead of the built-in one
        """
        shape = get_shape(index, shapes)
        if shape is None:
            return

        self.clear_barriers()
        for x, y in shape.pairs():
            self.add_barrier(x, y)

    # ------------------------------------------------------------------
    # Time stepping
    # ------------------------------------------------------------------

    def set_boundaries(self, u0):
        """Impose equilibrium at (u0, 0), density 1, on all four edges."""
        set_equilibrium_edges(self.f, self.rho, self.ux, self.uy, u0)

    def collide(self, omega):
        """BGK collision on interior cells, then the outflow correction."""
        if self.use_fast:
            bgk_collide_fast(self.f, self.rho, self.ux, self.uy, omega)
        else:
            bgk_collide(self.f, self.rho, self.ux, self.uy, omega)

    def stream(self):
        """
        Stream all populations one cell, then bounce back at barriers.

        Overwrites the barrier force accumulator.
        """
        if self.use_fast:
            stream_inplace_numba(self.f)
            result = apply_bounce_back_numba(self.f, self.barrier)
        else:
            stream_double_buffered(self.f)
            result = apply_bounce_back(self.f, self.barrier)

        count, x_sum, y_sum, fx, fy = result
        self.barrier_count = int(count)
        self.barrier_x_sum = int(x_sum)
        self.barrier_y_sum = int(y_sum)
        self.barrier_fx = float(fx)
        self.barrier_fy = float(fy)

    def move_tracers(self, enabled=True):
        """Advect tracers one step. Does nothing if not enabled."""
        if not enabled or self.n_tracers == 0:
            return
        advect_tracers(self.tracer_x, self.tracer_y, self.ux, self.uy, self.rng)

    def push_fluid(self, x, y, ux, uy):
        """
        Inject fluid moving at (ux, uy) around (x, y).

        Ignored unless (x, y) is more than three cells from every edge.
        """
        return push_fluid(self.f, self.rho, self.ux, self.uy, x, y, ux, uy)

    def step(self, params):
        """
        Advance one full time step.

        Parameters
        ----------
        params : StepParams
            Viscosity, inflow speed, tracer flag and optional push
        """
        self.set_boundaries(params.u0)
        self.collide(params.omega)
        self.stream()
        self.move_tracers(params.tracers)

        push = params.push
        if push is not None:
            self.push_fluid(push.x, push.y, push.ux, push.uy)

    def run(self, params, num_steps):
        """Advance ``num_steps`` steps with the same parameters."""
        for _ in range(num_steps):
            self.step(params)

    # ------------------------------------------------------------------
    # Diagnostics and derived fields
    # ------------------------------------------------------------------

    def check_stability(self):
        """False if any density on the middle row is not positive."""
        return is_stable(self.rho)

    def compute_curl(self):
        """Recompute the curl on interior cells. The border keeps its old values."""
        compute_curl(self.ux, self.uy, self.curl)
        return self.curl

    def read_sensor(self):
        """
        Density and velocity at the sensor cell.

        Returns
        -------
        rho, ux, uy : float
        """
        x, y = self.sensor_x, self.sensor_y
        return float(self.rho[y, x]), float(self.ux[y, x]), float(self.uy[y, x])

    def move_sensor(self, x, y):
        """Move the sensor; coordinates are clipped onto the grid."""
        self.sensor_x = min(max(int(x), 0), self.xdim - 1)
        self.sensor_y = min(max(int(y), 0), self.ydim - 1)

    def barrier_centroid(self):
        """
        Centre of the barrier cells seen by the last stream().

        Returns
        -------
        (x, y) : tuple of float, or None if there are no barriers
        """
        if self.barrier_count == 0:
            return None
        return (self.barrier_x_sum / self.barrier_count,
                self.barrier_y_sum / self.barrier_count)

    def resized(self, xdim, ydim, u0, tracers=False):
        """
        Build a new grid of a different size with fresh fluid.

        Barriers are not carried over.
        """
        new = FluidGrid(xdim, ydim, self.px_per_square, n_tracers=self.n_tracers,
                        use_fast=self.use_fast)
        new.rng = self.rng
        new.init_fluid(u0)
        new.init_tracers(tracers)
        return new

    def __repr__(self):
        return f"FluidGrid(xdim={self.xdim}, ydim={self.ydim}, px_per_square={self.px_per_square})"
