import numpy as np

from openmdao.api import ExplicitComponent

from openaerowake.common.options import VMOptions, FlightConditions
from openaerowake.geometry.utils import generate_uext
from openaerowake.aerodynamics.steady import SteadySolver
from openaerowake.aerodynamics.forces import force_coefficients
from openaerowake.wake import allocate_wake


class SteadyVLMComp(ExplicitComponent):
    """
    Steady VLM analysis with optional wake roll-up for a set of lifting
    surfaces.

    Parameters
    ----------
    def_mesh[nx, ny, 3] : numpy array
        Vortex lattice of each lifting surface, one input per surface named
        `<name>_def_mesh`.
    v : float
        Freestream speed.
    alpha : float
        Angle of attack in degrees.
    beta : float
        Sideslip angle in degrees.
    rho : float
        Air density.

    Returns
    -------
    circulations[nx-1, ny-1] : numpy array
        Bound ring circulations of each surface.
    wake_mesh[num_wake+1, ny, 3] : numpy array
        Final wake lattice of each surface.
    forces[nx, ny, 3] : numpy array
        Nodal forces on each surface.
    CL, CD, CY : float
        Force coefficients of the whole configuration, based on the summed
        projected area.
    """

    def initialize(self):
        self.options.declare('surfaces', types=list)
        self.options.declare('vm_options', types=VMOptions)
        self.options.declare('c_ref', default=1., types=float)

    def setup(self):
        surfaces = self.options['surfaces']

        self.add_input('v', val=1., units='m/s')
        self.add_input('alpha', val=0., units='deg')
        self.add_input('beta', val=0., units='deg')
        self.add_input('rho', val=1.225, units='kg/m**3')

        for surface in surfaces:
            mesh = surface['mesh']
            nx = mesh.shape[0]
            ny = mesh.shape[1]
            name = surface['name']
            num_wake = surface.get('num_wake', 1)

            self.add_input(name + '_def_mesh', val=mesh, units='m')
            self.add_output(name + '_circulations', shape=(nx - 1, ny - 1), units='m**2/s')
            self.add_output(name + '_wake_mesh', shape=(num_wake + 1, ny, 3), units='m')
            self.add_output(name + '_forces', shape=(nx, ny, 3), units='N')

        self.add_output('CL', val=0.)
        self.add_output('CD', val=0.)
        self.add_output('CY', val=0.)

        # The roll-up is a fixed-point iteration with no analytic Jacobian.
        self.declare_partials('*', '*', method='fd')

    def compute(self, inputs, outputs):
        surfaces = self.options['surfaces']

        v = inputs['v'][0]
        alpha = inputs['alpha'][0]
        beta = inputs['beta'][0]

        zeta = [inputs[surface['name'] + '_def_mesh'] for surface in surfaces]
        uext = [generate_uext(mesh, v, alpha, beta) for mesh in zeta]

        vm_options = self.options['vm_options']
        options = VMOptions(**{name: vm_options[name] for name in vm_options})
        options['NumSurfaces'] = len(surfaces)

        flight_conditions = FlightConditions(
            uinf=v,
            uinf_direction=uext[0][0, 0, :] / np.linalg.norm(uext[0][0, 0, :]),
            rho=inputs['rho'][0],
            c_ref=self.options['c_ref'])

        wake = allocate_wake(zeta, [surface.get('num_wake', 1) for surface in surfaces])

        result = SteadySolver(options, flight_conditions).solve(zeta, uext, wake)

        for i_surf, surface in enumerate(surfaces):
            name = surface['name']
            outputs[name + '_circulations'] = result.gamma[i_surf]
            outputs[name + '_wake_mesh'] = result.zeta_star[i_surf]
            outputs[name + '_forces'] = result.forces[i_surf]

        CL, CD, CY = force_coefficients(result.forces, zeta, flight_conditions)
        outputs['CL'] = CL
        outputs['CD'] = CD
        outputs['CY'] = CY
