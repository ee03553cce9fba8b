from openmdao.api import Problem
import numpy as np

from openaerowake.common.options import VMOptions, FlightConditions
from openaerowake.geometry.utils import generate_mesh, generate_uext
from openaerowake.geometry.vortex_mesh import generate_vortex_mesh
from openaerowake.wake import allocate_wake


def run_test(test_obj, comp, inputs=None):
    """
    Run a component on its own and return the problem for its outputs to be
    checked. `inputs` maps unpromoted input names to values.
    """
    prob = Problem()
    prob.model.add_subsystem('comp', comp)
    prob.setup()

    if inputs is not None:
        for name, val in inputs.items():
            prob['comp.' + name] = val

    prob.run_model()

    return prob

def get_default_surfaces():
    # Create a dictionary to store options about the mesh
    mesh_dict = {'num_y' : 7,
                 'num_x' : 3,
                 'span' : 10.,
                 'root_chord' : 1.,
                 'sweep' : 5.,
                 'taper' : 0.8}

    # Generate the aerodynamic mesh based on the previous dictionary
    mesh = generate_vortex_mesh(generate_mesh(mesh_dict))

    wing_dict = {'name' : 'wing',
                 'mesh' : mesh,
                 'num_wake' : 6,
                 }

    # Create a dictionary to store options about the mesh
    mesh_dict = {'num_y' : 5,
                 'num_x' : 2,
                 'span' : 3.,
                 'root_chord' : 0.6,
                 'offset' : np.array([5., 0., 0.5])}

    # Generate the aerodynamic mesh based on the previous dictionary
    mesh = generate_vortex_mesh(generate_mesh(mesh_dict))

    tail_dict = {'name' : 'tail',
                 'mesh' : mesh,
                 'num_wake' : 4,
                 }

    surfaces = [wing_dict, tail_dict]

    return surfaces

def get_default_problem(surfaces=None, v=10., alpha=5., rho=1.225, **options):
    """
    Build every input of a steady solve from a list of surface dicts.

    Returns
    -------
    zeta : list of numpy arrays [nx, ny, 3]
    uext : list of numpy arrays [nx, ny, 3]
    wake : Wake
    vm_options : VMOptions
    flight_conditions : FlightConditions
    """
    if surfaces is None:
        surfaces = get_default_surfaces()

    zeta = [surface['mesh'].copy() for surface in surfaces]
    uext = [generate_uext(mesh, v, alpha) for mesh in zeta]
    wake = allocate_wake(zeta, [surface['num_wake'] for surface in surfaces])

    options.setdefault('NumSurfaces', len(surfaces))
    vm_options = VMOptions(**options)

    alpha_rad = alpha * np.pi / 180.
    flight_conditions = FlightConditions(
        uinf=v,
        uinf_direction=np.array([np.cos(alpha_rad), 0., np.sin(alpha_rad)]),
        rho=rho)

    return zeta, uext, wake, vm_options, flight_conditions
