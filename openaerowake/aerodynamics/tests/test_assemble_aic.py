import unittest

import numpy as np
from numpy.testing import assert_allclose

from openaerowake.common.options import DimensionMismatchError, VMOptions
from openaerowake.geometry.collocation import generate_colocation_mesh
from openaerowake.geometry.normals import generate_surface_normals
from openaerowake.aerodynamics.assemble_aic import count_unknowns, assemble_aic, assemble_rhs
from openaerowake.aerodynamics.circulations import reconstruct_gamma, circulation_transfer
from openaerowake.utils.testing import get_default_problem
from openaerowake.wake import allocate_wake, init_horseshoe, to_discretised


def get_system():
    zeta, uext, wake, options, flight_conditions = get_default_problem()
    init_horseshoe(zeta, wake, flight_conditions)

    zeta_col = generate_colocation_mesh(zeta)
    uext_col = generate_colocation_mesh(uext)
    normals = generate_surface_normals(zeta)

    return zeta, zeta_col, uext_col, normals, wake, options, flight_conditions


class Test(unittest.TestCase):

    def test_count_unknowns(self):
        zeta, zeta_col, uext_col, normals, wake, options, flight_conditions = get_system()

        self.assertEqual(count_unknowns(uext_col, zeta), 2 * 6 + 1 * 4)

        with self.assertRaises(DimensionMismatchError):
            count_unknowns(uext_col[:1], zeta)
        with self.assertRaises(DimensionMismatchError):
            count_unknowns([uext_col[0][:1], uext_col[1]], zeta)

    def test_shapes(self):
        zeta, zeta_col, uext_col, normals, wake, options, flight_conditions = get_system()
        Ktotal = count_unknowns(uext_col, zeta)

        rhs, K = assemble_rhs(zeta_col, wake, uext_col, normals, options)
        aic = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, options, True)

        self.assertEqual(K, Ktotal)
        self.assertEqual(rhs.shape, (Ktotal,))
        self.assertEqual(aic.shape, (Ktotal, Ktotal))

        with self.assertRaises(DimensionMismatchError):
            assemble_aic(Ktotal + 1, zeta, zeta_col, wake, uext_col, normals, options, True)

    def test_self_influence_is_negative(self):
        # A ring induces velocity against its normal at its own centre
        zeta, zeta_col, uext_col, normals, wake, options, flight_conditions = get_system()
        Ktotal = count_unknowns(uext_col, zeta)

        aic = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, options, True)
        self.assertTrue(np.all(np.diag(aic) < 0.))

    def test_horseshoe_matches_long_wake(self):
        zeta, zeta_col, uext_col, normals, wake, options, flight_conditions = get_system()
        Ktotal = count_unknowns(uext_col, zeta)

        aic_horseshoe = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals,
                                     options, True)

        # Single-row finite wake reaching far downstream
        far_wake = allocate_wake(zeta, 1)
        init_horseshoe(zeta, far_wake, flight_conditions)
        to_discretised(far_wake, 1e5)

        aic_rings = assemble_aic(Ktotal, zeta, zeta_col, far_wake, uext_col, normals,
                                 options, False)

        assert_allclose(aic_rings, aic_horseshoe, atol=1e-6)

    def test_known_wake_rows(self):
        # With every wake row carrying the trailing-edge circulation, moving
        # the older rows to the right-hand side gives the same circulation.
        zeta, zeta_col, uext_col, normals, wake, options, flight_conditions = get_system()
        Ktotal = count_unknowns(uext_col, zeta)
        to_discretised(wake, 0.8)

        rhs, _ = assemble_rhs(zeta_col, wake, uext_col, normals, options)
        aic = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, options, False)
        gamma = reconstruct_gamma(np.linalg.solve(aic, rhs), zeta_col)

        circulation_transfer(gamma, wake.gamma_star)
        unsteady = VMOptions(NumSurfaces=2, Steady=False)

        rhs_known, _ = assemble_rhs(zeta_col, wake, uext_col, normals, unsteady)
        aic_first = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, unsteady,
                                 False)
        gamma_known = reconstruct_gamma(np.linalg.solve(aic_first, rhs_known), zeta_col)

        self.assertFalse(np.allclose(rhs_known, rhs))
        for grid, grid_known in zip(gamma, gamma_known):
            assert_allclose(grid_known, grid, rtol=1e-8, atol=1e-12)


if __name__ == '__main__':
    unittest.main()
