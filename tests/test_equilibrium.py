"""
Tests for equilibrium distribution functions.

Validates mass and momentum of the equilibrium, and that setting a cell
to equilibrium reproduces the requested macroscopic state.
"""

import pytest
import numpy as np
import sys
import os

# Add repository root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from windtunnel.lattice import EX, EY, W, CS2, Q, DTYPE
from windtunnel.equilibrium import (
    compute_equilibrium,
    equilibrium_single_site,
    set_equilibrium,
    uniform_equilibrium,
)
from windtunnel.observables import compute_macroscopic
from windtunnel.grid import FluidGrid


class TestEquilibriumSingleSite:
    """Test equilibrium distribution at a single lattice site."""

    def test_mass_conservation_rest(self):
        """Verify sum of f_eq equals rho for rest fluid."""
        f_eq = equilibrium_single_site(1.0, 0.0, 0.0)

        assert np.isclose(np.sum(f_eq), 1.0, rtol=1e-14)

    def test_mass_conservation_moving(self):
        """Verify sum of f_eq equals rho for moving fluid."""
        rho = 1.5
        f_eq = equilibrium_single_site(rho, 0.1, -0.05)

        assert np.isclose(np.sum(f_eq), rho, rtol=1e-14)

    def test_momentum_conservation_moving(self):
        """Verify momentum of f_eq equals rho*u for moving fluid."""
        rho = 1.2
        ux, uy = 0.15, 0.08

        f_eq = equilibrium_single_site(rho, ux, uy)

        assert np.isclose(np.sum(f_eq * EX), rho * ux, rtol=1e-12)
        assert np.isclose(np.sum(f_eq * EY), rho * uy, rtol=1e-12)

    def test_positivity_low_velocity(self):
        """Verify all f_eq are positive at tunnel speeds."""
        f_eq = equilibrium_single_site(1.0, 0.12, 0.05)

        assert np.all(f_eq > 0), f"Negative equilibrium values: {f_eq}"

    def test_symmetry_at_rest(self):
        """Verify equilibrium at rest equals the lattice weights."""
        f_eq = equilibrium_single_site(1.0, 0.0, 0.0)

        np.testing.assert_allclose(f_eq, W, rtol=1e-14)

    def test_matches_general_formula(self):
        """The written-out formula equals w_i rho (1 + 3 eu + 4.5 eu^2 - 1.5 u^2)."""
        rho, ux, uy = 0.9, 0.07, -0.04
        f_eq = equilibrium_single_site(rho, ux, uy)

        for k in range(Q):
            eu = EX[k] * ux + EY[k] * uy
            expected = W[k] * rho * (1 + 3 * eu + 4.5 * eu * eu - 1.5 * (ux * ux + uy * uy))
            assert np.isclose(f_eq[k], expected, rtol=1e-13)

    def test_stress_tensor_isotropy_at_rest(self):
        """Verify stress tensor is isotropic for rest fluid."""
        f_eq = equilibrium_single_site(1.0, 0.0, 0.0)

        assert np.isclose(np.sum(f_eq * EX * EX), CS2, rtol=1e-12)
        assert np.isclose(np.sum(f_eq * EY * EY), CS2, rtol=1e-12)
        assert np.isclose(np.sum(f_eq * EX * EY), 0.0, atol=1e-14)


class TestEquilibriumField:
    """Test equilibrium distribution for entire field."""

    @pytest.fixture
    def varying_field(self):
        """Create spatially varying field."""
        nx, ny = 32, 16
        X, Y = np.meshgrid(np.arange(nx), np.arange(ny))

        rho = 1.0 + 0.1 * np.sin(2 * np.pi * X / nx)
        ux = 0.1 * np.cos(2 * np.pi * Y / ny)
        uy = 0.05 * np.sin(2 * np.pi * X / nx)

        return rho, ux, uy

    def test_field_matches_single_site(self, varying_field):
        """Field equilibrium agrees with the per-site version."""
        rho, ux, uy = varying_field
        f_eq = compute_equilibrium(rho, ux, uy)

        for (j, i) in [(0, 0), (5, 7), (15, 31)]:
            expected = equilibrium_single_site(rho[j, i], ux[j, i], uy[j, i])
            np.testing.assert_allclose(f_eq[:, j, i], expected, rtol=1e-12)

    def test_moments_reproduce_field(self, varying_field):
        """Density and velocity moments give back the input field."""
        rho, ux, uy = varying_field
        f_eq = compute_equilibrium(rho, ux, uy)

        rho_c, ux_c, uy_c = compute_macroscopic(f_eq)

        np.testing.assert_allclose(rho_c, rho, rtol=1e-14)
        np.testing.assert_allclose(ux_c, ux, rtol=1e-12, atol=1e-15)
        np.testing.assert_allclose(uy_c, uy, rtol=1e-12, atol=1e-15)

    def test_output_shape_and_dtype(self):
        """Output follows the dtype of the density field."""
        rho = np.ones((4, 6), dtype=DTYPE)
        f_eq = compute_equilibrium(rho, np.zeros_like(rho), np.zeros_like(rho))

        assert f_eq.shape == (Q, 4, 6)
        assert f_eq.dtype == DTYPE

    def test_uniform_equilibrium(self):
        """Uniform stream has the same populations everywhere."""
        f = uniform_equilibrium(5, 7, 0.1)
        expected = equilibrium_single_site(1.0, 0.1, 0.0).astype(DTYPE)

        assert f.shape == (Q, 5, 7)
        for k in range(Q):
            assert np.all(f[k] == expected[k])


class TestSetEquilibrium:
    """Writing equilibrium into lattice cells."""

    def test_set_equilibrium_slice(self):
        """A slice of cells receives one equilibrium."""
        f = np.zeros((Q, 6, 8), dtype=DTYPE)
        rho = np.zeros((6, 8), dtype=DTYPE)
        ux = np.zeros_like(rho)
        uy = np.zeros_like(rho)

        set_equilibrium(f, rho, ux, uy, slice(None), 0, 0.05, 0.0, 1.0)

        expected = equilibrium_single_site(1.0, 0.05, 0.0).astype(DTYPE)
        np.testing.assert_array_equal(f[:, 0, :], np.repeat(expected[:, None], 8, axis=1))
        assert np.all(f[:, 1:, :] == 0)
        assert np.all(rho[0] == 1.0)
        assert np.allclose(ux[0], 0.05)

    def test_set_equil_idempotence(self):
        """Moments of a freshly set cell reproduce (rho, ux, uy)."""
        grid = FluidGrid(10, 10)
        grid.set_equil(4, 5, 0.05, -0.03, 1.1)

        n = grid.f[:, 5, 4].astype(np.float64)
        rho = np.sum(n)
        ux = np.sum(n * EX) / rho
        uy = np.sum(n * EY) / rho

        assert rho == pytest.approx(1.1, rel=1e-6)
        assert ux == pytest.approx(0.05, abs=1e-6)
        assert uy == pytest.approx(-0.03, abs=1e-6)
        assert grid.rho[5, 4] == pytest.approx(1.1, rel=1e-7)
        assert grid.ux[5, 4] == pytest.approx(0.05, rel=1e-7)
        assert grid.uy[5, 4] == pytest.approx(-0.03, rel=1e-7)

    def test_set_equil_keeps_current_density(self):
        """Without rho the cell keeps the density it had."""
        grid = FluidGrid(10, 10)
        grid.init_fluid(0.0)
        grid.rho[3, 3] = 1.25

        grid.set_equil(3, 3, 0.02, 0.01)

        assert np.sum(grid.f[:, 3, 3], dtype=np.float64) == pytest.approx(1.25, rel=1e-6)
        assert grid.rho[3, 3] == pytest.approx(1.25)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
