"""
windtunnel: a 2D Lattice-Boltzmann wind tunnel.
"""

from .grid import FluidGrid
from .config import StepParams, PushCommand
from .collision import omega_from_viscosity, viscosity_from_omega
from .shapes import BARRIER_SHAPES, BarrierShape
from .session import TunnelSession
from .recorder import DataRecorder, FyPeriodTracker

__version__ = "0.1.0"
