import os
import shutil
import tempfile
import unittest

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from openaerowake.aerodynamics.steady import SteadySolver
from openaerowake.utils.plot_wake import plot_wake, disp_plot
from openaerowake.utils.testing import get_default_problem


class Test(unittest.TestCase):

    def setUp(self):
        zeta, uext, wake, vm_options, flight_conditions = get_default_problem(n_rollup=2)
        self.result = SteadySolver(vm_options, flight_conditions).solve(zeta, uext, wake)

    def tearDown(self):
        plt.close('all')

    def test_plot(self):
        result = self.result

        fig = plot_wake(result.zeta, result.zeta_star, result.gamma)
        ax = fig.axes[0]
        self.assertEqual(len(ax.collections), 2)

        fig = plot_wake(result.zeta, result.zeta_star, ax=ax)
        self.assertEqual(len(ax.collections), 4)

    def test_script(self):
        self.assertEqual(disp_plot(['plot_wake']), 1)

        tmpdir = tempfile.mkdtemp()
        try:
            filename = os.path.join(tmpdir, 'result.npz')
            self.result.save(filename)
            self.assertEqual(disp_plot(['plot_wake', filename]), 0)
        finally:
            shutil.rmtree(tmpdir)


if __name__ == '__main__':
    unittest.main()
