"""
Data Collection

Time series of sensor readings and barrier forces, exported as a
tab-separated table, plus detection of the lift oscillation period.
"""

DATA_HEADER = "Time \tDensity\tVel_x \tVel_y \tForce_x\tForce_y\n"

# Collection switches itself off at this time step
MAX_STEPS = 10000


class DataRecorder:
    """
    Records (time_step, rho, ux, uy, Fx, Fy) at the sensor of a FluidGrid.

    Parameters
    ----------
    max_steps : int
        Recording stops once a row at or beyond this time step is taken
    """

    def __init__(self, max_steps=MAX_STEPS):
        self.max_steps = max_steps
        self.collecting = False
        self.rows = []

    def start(self):
        self.collecting = True
        self.rows = []

    def stop(self):
        self.collecting = False

    def toggle(self, grid=None, time_step=0):
        """
        Start or stop collection.

        When starting with a grid, the current state is recorded at once.
        """
        if self.collecting:
            self.stop()
        else:
            self.start()
            if grid is not None:
                self.record(grid, time_step)
        return self.collecting

    def record(self, grid, time_step):
        """
        Append one row for the current grid state.

        Returns
        -------
        recorded : bool
            False if collection is not active
        """
        if not self.collecting:
            return False

        rho, ux, uy = grid.read_sensor()
        self.rows.append((int(time_step), rho, ux, uy, grid.barrier_fx, grid.barrier_fy))

        if time_step >= self.max_steps:
            self.stop()
        return True

    def to_text(self):
        """Tab-separated table with a header line."""
        lines = [DATA_HEADER]
        for t, rho, ux, uy, fx, fy in self.rows:
            lines.append(f"{t:05d}\t{rho:.4f}\t{ux:.4f}\t{uy:.4f}\t{fx:.4f}\t{fy:.4f}\n")
        return "".join(lines)

    def save(self, path):
        with open(path, "w") as fh:
            fh.write(self.to_text())

    def __len__(self):
        return len(self.rows)


class FyPeriodTracker:
    """
    Period of the transverse force oscillation (vortex shedding).

    Feed the barrier force after every step. Each upward zero crossing of
    Fy is located by linear interpolation between the two steps that
    bracket it, and the time between successive crossings is a period.
    """

    def __init__(self):
        self.last_fy = 1.0
        self.last_crossing = 0.0
        self.periods = []

    def update(self, time_step, fy):
        """
        Register the force at ``time_step``.

        Returns
        -------
        period : float or None
            The new period, if this step completed one
        """
        period = None
        if fy > 0 and self.last_fy <= 0:
            crossing = time_step - fy / (fy - self.last_fy)
            if self.last_crossing > 0:
                period = crossing - self.last_crossing
                self.periods.append(period)
            self.last_crossing = crossing
        self.last_fy = fy
        return period

    @property
    def mean_period(self):
        if not self.periods:
            return None
        return sum(self.periods) / len(self.periods)
