"""
Benchmark Suite

Performance of the wind tunnel step: Numba kernels against the NumPy
reference path, across grid sizes.
"""

import numpy as np
import time
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from windtunnel.grid import FluidGrid
from windtunnel.config import StepParams


def benchmark_grid(nx, ny, num_steps, warmup_steps=20, use_fast=True, shape_index=6):
    """
    Benchmark full wind tunnel steps.

    Returns
    -------
    mlups : float
        Million Lattice Updates Per Second
    """
    params = StepParams(viscosity=0.02, u0=0.1, tracers=True)

    grid = FluidGrid(nx, ny, use_fast=use_fast, seed=0)
    grid.init_fluid(params.u0)
    grid.init_tracers(True)
    grid.place_barrier_shape(shape_index)

    # Warmup (JIT compilation)
    for _ in range(warmup_steps):
        grid.step(params)

    start = time.perf_counter()
    for _ in range(num_steps):
        grid.step(params)
    elapsed = time.perf_counter() - start

    return num_steps * nx * ny / elapsed / 1e6


def run_benchmarks(grid_sizes=None, num_steps=500):
    """
    Compare the fast and reference paths.

    Returns
    -------
    results : dict
        {(nx, ny): (mlups_fast, mlups_reference)}
    """
    if grid_sizes is None:
        grid_sizes = [
            (100, 40),
            (200, 80),
            (400, 160),
            (800, 320),
        ]

    results = {}

    print("Wind Tunnel Benchmark")
    print("=" * 50)
    print(f"Steps: {num_steps}")
    print()

    for nx, ny in grid_sizes:
        print(f"Grid size: {nx} x {ny}")

        mlups_fast = benchmark_grid(nx, ny, num_steps, use_fast=True)
        # Reference path bounce-back is a Python loop, keep it short
        mlups_ref = benchmark_grid(nx, ny, max(num_steps // 10, 1), warmup_steps=2,
                                   use_fast=False)
        results[(nx, ny)] = (mlups_fast, mlups_ref)

        print(f"  Numba: {mlups_fast:8.2f} MLUPS")
        print(f"  NumPy: {mlups_ref:8.2f} MLUPS")
        print(f"  Speedup: {mlups_fast / mlups_ref:.1f}x")
        print()

    return results


if __name__ == "__main__":
    results = run_benchmarks()

    print("\nSummary")
    print("=" * 50)
    for (nx, ny), (fast, ref) in results.items():
        print(f"{nx:4d} x {ny:4d}: {fast:8.2f} MLUPS (numba), {ref:8.2f} MLUPS (numpy)")
    print(f"\nBest: {np.max([fast for fast, _ in results.values()]):.2f} MLUPS")
