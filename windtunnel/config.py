"""
Per-step simulation parameters.

The solver never reads UI state; a driver builds a StepParams from its
controls and passes it to FluidGrid.step / TunnelSession.
"""

from .collision import omega_from_viscosity

DEFAULT_VISCOSITY = 0.02
DEFAULT_SPEED = 0.1
DEFAULT_STEPS_PER_FRAME = 20


class PushCommand:
    """
    Local fluid injection at grid cell (x, y) with velocity (ux, uy).
    """

    def __init__(self, x, y, ux, uy):
        self.x = int(x)
        self.y = int(y)
        self.ux = float(ux)
        self.uy = float(uy)

    def __repr__(self):
        return f"PushCommand(x={self.x}, y={self.y}, ux={self.ux}, uy={self.uy})"


class StepParams:
    """
    Parameters consumed by one simulation step or frame.

    Parameters
    ----------
    viscosity : float
        Kinematic viscosity in lattice units (typically 0.005 - 0.2)
    u0 : float
        Inflow speed along +x (typically 0 - 0.12)
    steps_per_frame : int
        Number of steps run per rendered frame
    tracers : bool
        Advect tracer particles
    push : PushCommand, optional
        Fluid injection applied after every step of the frame
    """

    def __init__(self, viscosity=DEFAULT_VISCOSITY, u0=DEFAULT_SPEED,
                 steps_per_frame=DEFAULT_STEPS_PER_FRAME, tracers=False, push=None):
        if viscosity <= 0:
            raise ValueError(f"viscosity must be > 0, got {viscosity}")
        if steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be >= 1, got {steps_per_frame}")

        self.viscosity = float(viscosity)
        self.u0 = float(u0)
        self.steps_per_frame = int(steps_per_frame)
        self.tracers = bool(tracers)
        self.push = push

    @property
    def omega(self):
        """Relaxation frequency derived from the viscosity."""
        return omega_from_viscosity(self.viscosity)

    def __repr__(self):
        return (f"StepParams(viscosity={self.viscosity}, u0={self.u0}, "
                f"steps_per_frame={self.steps_per_frame}, tracers={self.tracers}, "
                f"push={self.push!r})")
