import unittest

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from openaerowake.common.options import DimensionMismatchError, FlightConditions
from openaerowake.geometry.utils import gen_rect_mesh
from openaerowake.wake import Wake, allocate_wake, init_horseshoe, to_discretised, convect, \
    displace, attach_to_trailing_edge, copy_grids, grids_norm, HORSESHOE, DISCRETISED, \
    HORSESHOE_FACTOR


def get_horseshoe_wake(mstar=4, c_ref=2.):
    zeta = [gen_rect_mesh(3, 5, 8., 1.), gen_rect_mesh(2, 3, 2., 0.5) + [4., 0., 1.]]
    wake = allocate_wake(zeta, mstar)
    flight_conditions = FlightConditions(uinf=10., uinf_direction=[2., 0., 0.], c_ref=c_ref)
    init_horseshoe(zeta, wake, flight_conditions)
    return zeta, wake


class Test(unittest.TestCase):

    def test_allocate(self):
        zeta = [gen_rect_mesh(3, 5, 8., 1.), gen_rect_mesh(2, 3, 2., 0.5)]
        wake = allocate_wake(zeta, [4, 2])

        self.assertEqual(wake.zeta_star[0].shape, (5, 5, 3))
        self.assertEqual(wake.gamma_star[1].shape, (2, 2))
        self.assertEqual(wake.n_rows, [4, 2])
        self.assertEqual(wake.phase, HORSESHOE)

        with self.assertRaises(ValueError):
            allocate_wake(zeta, 0)
        with self.assertRaises(DimensionMismatchError):
            allocate_wake(zeta, [4])

    def test_mismatched_containers(self):
        with self.assertRaises(DimensionMismatchError):
            Wake([np.zeros((3, 5, 3))], [np.zeros((2, 3))])
        with self.assertRaises(DimensionMismatchError):
            Wake([np.zeros((3, 5, 3))], [])

    def test_init_horseshoe(self):
        zeta, wake = get_horseshoe_wake()

        for mesh, zeta_star in zip(zeta, wake.zeta_star):
            assert_array_equal(zeta_star[0], mesh[-1])
            far = mesh[-1] + [HORSESHOE_FACTOR * 2., 0., 0.]
            for row in zeta_star[1:]:
                assert_allclose(row, far)

        for gamma_star in wake.gamma_star:
            assert_array_equal(gamma_star, 0.)

    def test_init_horseshoe_spanwise_mismatch(self):
        zeta = [gen_rect_mesh(3, 5, 8., 1.)]
        wake = allocate_wake([gen_rect_mesh(3, 4, 8., 1.)], 3)

        with self.assertRaises(DimensionMismatchError):
            init_horseshoe(zeta, wake, FlightConditions())

    def test_to_discretised(self):
        zeta, wake = get_horseshoe_wake(mstar=4)
        for gamma_star in wake.gamma_star:
            gamma_star[0, :] = np.arange(gamma_star.shape[1]) + 1.

        to_discretised(wake, 0.5)

        self.assertEqual(wake.phase, DISCRETISED)
        for mesh, zeta_star, gamma_star in zip(zeta, wake.zeta_star, wake.gamma_star):
            self.assertEqual(zeta_star.shape[0], 5)
            for i in range(5):
                assert_allclose(zeta_star[i], mesh[-1] + [0.5 * i, 0., 0.])
            for row in gamma_star:
                assert_array_equal(row, gamma_star[0])

        with self.assertRaises(ValueError):
            to_discretised(wake, 0.5)

    def test_displace_keeps_row_count(self):
        zeta, wake = get_horseshoe_wake(mstar=3)
        to_discretised(wake, 1.)
        for gamma_star in wake.gamma_star:
            gamma_star[:, :] = np.arange(gamma_star.size).reshape(gamma_star.shape)
        before = wake.copy()

        displace(wake)

        for i_surf in range(2):
            self.assertEqual(wake.zeta_star[i_surf].shape, before.zeta_star[i_surf].shape)
            assert_array_equal(wake.zeta_star[i_surf][0], before.zeta_star[i_surf][0])
            assert_array_equal(wake.zeta_star[i_surf][1:], before.zeta_star[i_surf][:-1])
            assert_array_equal(wake.gamma_star[i_surf][1:], before.gamma_star[i_surf][:-1])

    def test_convect_and_attach(self):
        zeta, wake = get_horseshoe_wake(mstar=2)
        to_discretised(wake, 1.)
        before = copy_grids(wake.zeta_star)

        u = [np.ones(zeta_star.shape) for zeta_star in wake.zeta_star]
        convect(wake, u, 0.1)
        for zeta_star, previous in zip(wake.zeta_star, before):
            assert_allclose(zeta_star, previous + 0.1)

        attach_to_trailing_edge(zeta, wake)
        for mesh, zeta_star in zip(zeta, wake.zeta_star):
            assert_array_equal(zeta_star[0], mesh[-1])

    def test_grids_norm(self):
        grid = np.zeros((2, 2, 3))
        grid[..., 0] = 1.
        grid[..., 2] = 2.

        self.assertAlmostEqual(grids_norm([grid]), 6.)
        self.assertAlmostEqual(grids_norm([grid, grid]), 12.)

    def test_copy_is_independent(self):
        zeta, wake = get_horseshoe_wake()
        other = wake.copy()
        other.zeta_star[0][:] = 0.

        self.assertFalse(np.all(wake.zeta_star[0] == 0.))


if __name__ == '__main__':
    unittest.main()
