# run_test.py - quick wind tunnel check with each barrier shape
from windtunnel import FluidGrid, StepParams, BARRIER_SHAPES
import numpy as np

# Parameters
xdim, ydim = 200, 80
u0 = 0.1
viscosity = 0.02
steps = 2000

params = StepParams(viscosity=viscosity, u0=u0)
print(f"Parameters: omega={params.omega:.4f}, nu={viscosity}, u0={u0}, Ma={u0*np.sqrt(3):.4f}")

for index, shape in enumerate(BARRIER_SHAPES, start=1):
    grid = FluidGrid(xdim, ydim)
    grid.init_fluid(u0)
    grid.place_barrier_shape(index)

    fx_history = []
    for step in range(steps):
        grid.step(params)
        fx_history.append(grid.barrier_fx)
        if not grid.check_stability():
            break

    status = "stable" if grid.check_stability() else f"UNSTABLE at step {step + 1}"
    fx_mean = np.mean(fx_history[-500:])
    print(f"{index:2d} {shape.name:20s} cells={grid.barrier_count:4d} "
          f"Fx(mean)={fx_mean:8.4f}  {status}")
