"""
Headless Simulation Driver

TunnelSession plays the role of the animation loop: it runs batches of
steps ("frames") on a FluidGrid with the current StepParams, refreshes the
curl for rendering, feeds the data recorder, and recovers from blow-ups by
pausing and re-initialising the fluid.
"""

import time

from .config import StepParams
from .recorder import DataRecorder, FyPeriodTracker


class TunnelSession:
    """
    Drives a FluidGrid frame by frame.

    Parameters
    ----------
    grid : FluidGrid
        Initialised grid
    params : StepParams, optional
        Step parameters; defaults to StepParams()
    recorder : DataRecorder, optional
        Sensor and force recorder
    track_period : bool
        Track the Fy oscillation period after every step
    """

    def __init__(self, grid, params=None, recorder=None, track_period=False):
        self.grid = grid
        self.params = params if params is not None else StepParams()
        self.recorder = recorder if recorder is not None else DataRecorder()
        self.period_tracker = FyPeriodTracker() if track_period else None

        self.running = False
        self.time_step = 0
        self.step_count = 0
        self.start_time = time.perf_counter()
        self.unstable_events = 0

    def start(self):
        """Start running and reset the speed statistics."""
        self.running = True
        self.step_count = 0
        self.start_time = time.perf_counter()

    def stop(self):
        self.running = False

    def toggle_data(self):
        """
        Start or stop data collection.

        Starting resets the time step counter, so recorded times and the
        recorder's step limit count from the start of collection.

        Returns
        -------
        collecting : bool
        """
        if not self.recorder.collecting:
            self.time_step = 0
        return self.recorder.toggle(self.grid, self.time_step)

    @property
    def steps_per_second(self):
        elapsed = time.perf_counter() - self.start_time
        if elapsed <= 0:
            return 0.0
        return self.step_count / elapsed

    def run_frame(self, verbose=True):
        """
        Run one frame of ``steps_per_frame`` steps.

        Returns
        -------
        stable : bool
            False if the grid went unstable; it has then been paused and
            re-initialised
        """
        grid = self.grid
        params = self.params

        for _ in range(params.steps_per_frame):
            grid.step(params)
            self.time_step += 1
            if self.period_tracker is not None:
                period = self.period_tracker.update(self.time_step, grid.barrier_fy)
                if period is not None and verbose:
                    print(f"F_y period: {period:.2f}")

        grid.compute_curl()
        self.recorder.record(grid, self.time_step)

        if self.running:
            self.step_count += params.steps_per_frame

        if not grid.check_stability():
            self.unstable_events += 1
            if verbose:
                print(f"Simulation unstable at step {self.time_step}, resetting fluid.")
            self.stop()
            grid.init_fluid(params.u0)
            return False

        return True

    def single_step(self):
        """
        Advance one frame by hand: no pushes, no recording.

        Boundaries are set once, then ``steps_per_frame`` collide/stream
        pairs run, and tracers move once.
        """
        grid = self.grid
        params = self.params
        omega = params.omega

        grid.set_boundaries(params.u0)
        for _ in range(params.steps_per_frame):
            grid.collide(omega)
            grid.stream()
        grid.move_tracers(params.tracers)
        grid.compute_curl()

    def run(self, num_frames, verbose=True, report_interval=10):
        """
        Run frames until ``num_frames`` are done or the grid goes unstable.

        Returns
        -------
        frames : int
            Number of frames completed
        """
        self.start()
        frames = 0

        while self.running and frames < num_frames:
            stable = self.run_frame(verbose=verbose)
            frames += 1

            if verbose and stable and frames % report_interval == 0:
                rho, ux, uy = self.grid.read_sensor()
                print(f"Frame {frames}/{num_frames}, step {self.time_step}: "
                      f"rho={rho:.4f}, ux={ux:.4f}, uy={uy:.4f}, "
                      f"Fx={self.grid.barrier_fx:.4f}, Fy={self.grid.barrier_fy:.4f}, "
                      f"{self.steps_per_second:.0f} steps/s")

        self.stop()
        return frames

    def resize(self, xdim, ydim):
        """Swap in a freshly initialised grid of a new size. Barriers are dropped."""
        self.grid = self.grid.resized(xdim, ydim, self.params.u0, tracers=self.params.tracers)
        return self.grid
