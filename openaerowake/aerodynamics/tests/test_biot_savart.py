import unittest

import numpy as np
from numpy.testing import assert_allclose

from openaerowake.geometry.utils import gen_rect_mesh
from openaerowake.aerodynamics.biot_savart import segment_velocity, ring_influence, \
    horseshoe_influence, induced_velocity_at_points, total_induced_velocity_on_wake
from openaerowake.aerodynamics.biot_savart import _compute_semi_infinite_vortex
from openaerowake.utils.testing import get_default_problem
from openaerowake.wake import init_horseshoe, to_discretised


class Test(unittest.TestCase):

    def test_long_segment(self):
        # Close to an infinite line vortex: |v| = 1 / (2 pi h)
        start = np.array([-1e4, 0., 0.])
        end = np.array([1e4, 0., 0.])
        points = np.array([[0., 2., 0.]])

        vel = segment_velocity(points, start, end)
        assert_allclose(vel, [[0., 0., 1. / (4. * np.pi)]], rtol=1e-6)

    def test_points_on_segment(self):
        start = np.array([0., 0., 0.])
        end = np.array([1., 0., 0.])
        points = np.array([[0., 0., 0.], [1., 0., 0.], [0.5, 0., 0.], [3., 0., 0.]])

        vel = segment_velocity(points, start, end)
        self.assertTrue(np.all(np.isfinite(vel)))
        assert_allclose(vel, 0.)

    def test_semi_infinite(self):
        # Half of an infinite line vortex at the foot of the perpendicular
        u = np.array([[1., 0., 0.]])
        r = np.array([[0., 0., 0.5]])

        vel = _compute_semi_infinite_vortex(u, r, 1e-6)
        assert_allclose(vel, [[0., -1. / (2. * np.pi), 0.]])

    def test_ring_centre(self):
        mesh = gen_rect_mesh(2, 2, 1., 1.)
        points = np.array([[0.5, 0., 0.]])

        vel = ring_influence(points, mesh)

        self.assertEqual(vel.shape, (1, 1, 1, 3))
        assert_allclose(vel[0, 0, 0], [0., 0., -2. * np.sqrt(2.) / np.pi], atol=1e-12)

    def test_horseshoe_is_long_ring(self):
        mesh = gen_rect_mesh(2, 4, 3., 1.)
        points = np.array([[0.5, 0.2, 0.1], [-1., 1., 0.], [0.75, -0.5, 0.]])

        trailing_edge = mesh[-1]
        directions = np.zeros(trailing_edge.shape)
        directions[:, 0] = 1.

        far = np.array([trailing_edge, trailing_edge + [1e6, 0., 0.]])
        assert_allclose(horseshoe_influence(points, trailing_edge, directions),
                        ring_influence(points, far)[:, 0, :, :], atol=1e-9)

    def test_parallel_wake_velocity(self):
        zeta, uext, wake, options, flight_conditions = get_default_problem()
        init_horseshoe(zeta, wake, flight_conditions)
        to_discretised(wake, 0.5)

        gamma = [np.random.RandomState(i).rand(mesh.shape[0] - 1, mesh.shape[1] - 1)
                 for i, mesh in enumerate(zeta)]
        for gamma_star, grid in zip(wake.gamma_star, gamma):
            gamma_star[:, :] = grid[-1]

        serial = total_induced_velocity_on_wake(zeta, wake, gamma, 1e-6, 1)
        parallel = total_induced_velocity_on_wake(zeta, wake, gamma, 1e-6, 3)

        for u1, u3, zeta_star in zip(serial, parallel, wake.zeta_star):
            self.assertEqual(u1.shape, zeta_star.shape)
            assert_allclose(u3, u1, rtol=1e-12, atol=1e-14)

        points = wake.zeta_star[1][2]
        assert_allclose(induced_velocity_at_points(points, zeta, wake, gamma),
                        serial[1][2], rtol=1e-12, atol=1e-14)


if __name__ == '__main__':
    unittest.main()
