import unittest

import numpy as np
from numpy.testing import assert_allclose

from openaerowake.geometry.utils import gen_rect_mesh
from openaerowake.geometry.vortex_mesh import generate_vortex_mesh
from openaerowake.aerodynamics.forces import force_coefficients, total_forces, wind_axes
from openaerowake.aerodynamics.steady import SteadySolver
from openaerowake.utils.testing import get_default_problem


def solve_plate(alpha, num_y=41, span=200., v=10.):
    # Flat rectangular plate with a single chordwise panel
    mesh = generate_vortex_mesh(gen_rect_mesh(2, num_y, span, 1.))
    surfaces = [{'name': 'plate', 'mesh': mesh, 'num_wake': 1}]

    zeta, uext, wake, options, flight_conditions = get_default_problem(
        surfaces, v=v, alpha=alpha, horseshoe=True)
    result = SteadySolver(options, flight_conditions).solve(zeta, uext, wake)

    return result, flight_conditions


class Test(unittest.TestCase):

    def test_two_dimensional_circulation(self):
        alpha = 2.
        result, flight_conditions = solve_plate(alpha)
        gamma = result.gamma[0][0]

        # Thin aerofoil theory: Gamma = pi c V alpha
        expected = np.pi * 1. * 10. * np.sin(alpha * np.pi / 180.)
        mid = gamma.shape[0] // 2
        assert_allclose(0.5 * (gamma[mid - 1] + gamma[mid]), expected, rtol=0.05)

        assert_allclose(gamma, gamma[::-1], rtol=1e-6)

        quarter = gamma.shape[0] // 4
        central = gamma[quarter:-quarter]
        assert_allclose(central, central.max(), rtol=0.03)

        # Circulation falls off towards the tips
        self.assertLess(gamma[0], gamma[mid])

    def test_lift_coefficient(self):
        alpha = 3.
        result, flight_conditions = solve_plate(alpha)

        CL, CD, CY = force_coefficients(result.forces, result.zeta, flight_conditions)

        aspect_ratio = 200.
        expected = 2. * np.pi * alpha * np.pi / 180. * aspect_ratio / (aspect_ratio + 2.)
        assert_allclose(CL, expected, rtol=0.05)
        self.assertGreater(CD, 0.)
        self.assertLess(CD, 0.1 * CL)
        assert_allclose(CY, 0., atol=1e-10)

    def test_lift_sign(self):
        result, flight_conditions = solve_plate(-4., num_y=9, span=20.)

        self.assertTrue(np.all(result.gamma[0] < 0.))
        CL, CD, CY = force_coefficients(result.forces, result.zeta, flight_conditions)
        self.assertLess(CL, 0.)

    def test_nodal_forces(self):
        result, flight_conditions = solve_plate(5., num_y=9, span=20.)

        self.assertEqual(result.forces[0].shape, result.zeta[0].shape)

        drag_dir, side_dir, lift_dir = wind_axes(flight_conditions.direction)
        lift = total_forces(result.forces).dot(lift_dir)
        rho = flight_conditions['rho']
        uinf = flight_conditions['uinf']

        # Kutta-Joukowski on the bound vortex, ignoring the induced velocity
        spanwise = np.diff(result.zeta[0][0, :, 1])
        assert_allclose(lift, rho * uinf * np.sum(result.gamma[0][0] * spanwise), rtol=0.05)

    def test_wind_axes(self):
        drag_dir, side_dir, lift_dir = wind_axes(np.array([1., 0., 1.]))

        assert_allclose(drag_dir, [np.sqrt(0.5), 0., np.sqrt(0.5)])
        assert_allclose(lift_dir, [-np.sqrt(0.5), 0., np.sqrt(0.5)])
        assert_allclose(side_dir, [0., 1., 0.], atol=1e-12)


if __name__ == '__main__':
    unittest.main()
