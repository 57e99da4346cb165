"""
Tests for the BGK collision step.

Validates conservation per cell, the equilibrium fixed point, the outflow
correction and agreement between the NumPy and Numba kernels.
"""

import warnings

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from windtunnel.lattice import EX, EY, Q, DTYPE, WEST, NORTHWEST, SOUTHWEST, EAST
from windtunnel.equilibrium import compute_equilibrium, uniform_equilibrium
from windtunnel.collision import (
    bgk_collide, bgk_collide_fast, copy_outflow_column,
    omega_from_viscosity, viscosity_from_omega, validate_omega,
)


def make_fields(ny, nx):
    rho = np.zeros((ny, nx), dtype=DTYPE)
    return rho, np.zeros_like(rho), np.zeros_like(rho)


@pytest.fixture
def perturbed_f():
    """Distribution near equilibrium with random non-equilibrium parts."""
    rng = np.random.default_rng(1)
    ny, nx = 24, 32
    rho = (1.0 + 0.05 * rng.standard_normal((ny, nx))).astype(DTYPE)
    ux = (0.05 * rng.standard_normal((ny, nx))).astype(DTYPE)
    uy = (0.05 * rng.standard_normal((ny, nx))).astype(DTYPE)

    f = compute_equilibrium(rho, ux, uy)
    f += (0.002 * rng.standard_normal(f.shape)).astype(DTYPE)
    return f


class TestOmegaViscosity:
    """Test viscosity-omega relationship."""

    def test_omega_from_viscosity(self):
        assert omega_from_viscosity(0.02) == pytest.approx(1.0 / 0.56)

    def test_roundtrip(self):
        omega = omega_from_viscosity(0.05)
        assert viscosity_from_omega(omega) == pytest.approx(0.05)

    def test_nonpositive_viscosity_raises(self):
        with pytest.raises(ValueError):
            omega_from_viscosity(0.0)
        with pytest.raises(ValueError):
            omega_from_viscosity(-0.01)

    def test_validate_omega_range(self):
        with pytest.raises(ValueError):
            validate_omega(2.0)
        with pytest.raises(ValueError):
            validate_omega(0.0)

    def test_validate_omega_warns_near_two(self):
        with pytest.warns(UserWarning):
            validate_omega(1.99)

    def test_validate_omega_quiet_in_range(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert validate_omega(1.5) == 1.5


class TestCollisionConservation:
    """Collision conserves mass and momentum at every interior cell."""

    @pytest.mark.parametrize("collide", [bgk_collide, bgk_collide_fast])
    def test_mass_per_cell(self, perturbed_f, collide):
        f = perturbed_f
        ny, nx = f.shape[1:]
        mass_before = np.sum(f, axis=0, dtype=np.float64)

        collide(f, *make_fields(ny, nx), 1.7)

        mass_after = np.sum(f, axis=0, dtype=np.float64)
        np.testing.assert_allclose(mass_after[1:-1, 1:-1], mass_before[1:-1, 1:-1],
                                   rtol=1e-5)

    @pytest.mark.parametrize("collide", [bgk_collide, bgk_collide_fast])
    def test_momentum_per_cell(self, perturbed_f, collide):
        f = perturbed_f
        ny, nx = f.shape[1:]
        ex = EX[:, None, None]
        ey = EY[:, None, None]
        mom_x_before = np.sum(f * ex, axis=0, dtype=np.float64)
        mom_y_before = np.sum(f * ey, axis=0, dtype=np.float64)

        collide(f, *make_fields(ny, nx), 1.7)

        mom_x_after = np.sum(f * ex, axis=0, dtype=np.float64)
        mom_y_after = np.sum(f * ey, axis=0, dtype=np.float64)
        np.testing.assert_allclose(mom_x_after[1:-1, 1:-1], mom_x_before[1:-1, 1:-1], atol=1e-6)
        np.testing.assert_allclose(mom_y_after[1:-1, 1:-1], mom_y_before[1:-1, 1:-1], atol=1e-6)

    @pytest.mark.parametrize("collide", [bgk_collide, bgk_collide_fast])
    def test_macroscopic_fields_written(self, perturbed_f, collide):
        f = perturbed_f
        ny, nx = f.shape[1:]
        n = f[:, 1:-1, 1:-1].astype(np.float64)
        rho_expected = np.sum(n, axis=0)
        ux_expected = np.sum(n * EX[:, None, None], axis=0) / rho_expected

        rho, ux, uy = make_fields(ny, nx)
        collide(f, rho, ux, uy, 1.0)

        np.testing.assert_allclose(rho[1:-1, 1:-1], rho_expected, rtol=1e-5)
        np.testing.assert_allclose(ux[1:-1, 1:-1], ux_expected, atol=1e-6)
        # Border is not collided
        assert np.all(rho[0] == 0) and np.all(rho[:, 0] == 0)


class TestCollisionBehaviour:
    """Relaxation and boundary handling."""

    @pytest.mark.parametrize("collide", [bgk_collide, bgk_collide_fast])
    def test_equilibrium_is_fixed_point(self, collide):
        """Collision leaves a uniform equilibrium unchanged."""
        f = uniform_equilibrium(12, 20, 0.1)
        f_before = f.copy()

        collide(f, *make_fields(12, 20), 1.786)

        np.testing.assert_allclose(f, f_before, atol=1e-6)

    def test_omega_one_gives_equilibrium(self, perturbed_f):
        """omega = 1 replaces interior populations with their equilibrium."""
        f = perturbed_f
        ny, nx = f.shape[1:]
        rho, ux, uy = make_fields(ny, nx)

        bgk_collide(f, rho, ux, uy, 1.0)

        f_eq = compute_equilibrium(rho[1:-1, 1:-1], ux[1:-1, 1:-1], uy[1:-1, 1:-1])
        np.testing.assert_allclose(f[:, 1:-1, 1:-1], f_eq, atol=1e-6)

    def test_outflow_column_copy(self, perturbed_f):
        """West-moving populations of the last column copy from one column in."""
        f = perturbed_f
        ny, nx = f.shape[1:]
        east_before = f[EAST, :, nx - 1].copy()
        row_before = f[:, ny - 2, nx - 1].copy()

        copy_outflow_column(f)

        for k in (WEST, NORTHWEST, SOUTHWEST):
            np.testing.assert_array_equal(f[k, 1:ny - 2, nx - 1], f[k, 1:ny - 2, nx - 2])
        np.testing.assert_array_equal(f[EAST, :, nx - 1], east_before)
        # Row ny - 2 is outside the copied range
        np.testing.assert_array_equal(f[:, ny - 2, nx - 1], row_before)

    def test_fast_equals_standard(self, perturbed_f):
        """Numba collision matches the NumPy collision."""
        f_std = perturbed_f.copy()
        f_fast = perturbed_f.copy()
        ny, nx = f_std.shape[1:]
        fields_std = make_fields(ny, nx)
        fields_fast = make_fields(ny, nx)

        bgk_collide(f_std, *fields_std, 1.6)
        bgk_collide_fast(f_fast, *fields_fast, 1.6)

        np.testing.assert_allclose(f_fast, f_std, rtol=1e-5, atol=1e-7)
        for a, b in zip(fields_fast, fields_std):
            np.testing.assert_allclose(a, b, rtol=1e-5, atol=1e-7)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
