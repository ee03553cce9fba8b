"""
Steady aerodynamic forces from the converged circulation.

Each filament of the lattice carries the net circulation of the rings on
either side of it. The Kutta-Joukowski force on a filament is

    F = rho * Gamma * (V x l)

with `l` the filament vector and `V` the local velocity at its midpoint,
freestream plus induced. Half of each filament force goes to each of its end
nodes, so the result is a nodal force field with the shape of the mesh.
"""
import numpy as np

from openaerowake.aerodynamics.biot_savart import induced_velocity_at_points
from openaerowake.geometry.normals import projected_area


def _spanwise_strengths(gamma, gamma_star):
    # Net circulation of the spanwise filaments, running from node j to j+1,
    # on each of the nx rows of nodes.
    nx = gamma.shape[0] + 1
    strengths = np.zeros((nx, gamma.shape[1]))
    strengths[:-1, :] += gamma
    strengths[1:, :] -= gamma
    # The first wake ring shares the trailing-edge filament.
    strengths[-1, :] += gamma_star[0, :]
    return strengths


def _chordwise_strengths(gamma):
    # Net circulation of the chordwise filaments, running from row i to i+1,
    # on each of the ny columns of nodes.
    ny = gamma.shape[1] + 1
    strengths = np.zeros((gamma.shape[0], ny))
    strengths[:, 1:] += gamma
    strengths[:, :-1] -= gamma
    return strengths


def _filament_forces(start, end, strengths, zeta, uext_mid, wake, gamma, rho, cutoff):
    vectors = end - start
    midpoints = 0.5 * (start + end)

    shape = strengths.shape
    velocity = uext_mid.reshape(-1, 3) + \
        induced_velocity_at_points(midpoints.reshape(-1, 3), zeta, wake, gamma, cutoff)

    forces = rho * strengths.reshape(-1, 1) * np.cross(velocity, vectors.reshape(-1, 3))
    return forces.reshape(shape + (3,))


def calculate_static_forces(zeta, wake, gamma, uext, options, flight_conditions):
    """
    Compute the nodal forces on every lifting surface.

    Parameters
    ----------
    zeta : list of numpy arrays [nx, ny, 3]
        Vortex lattice of each surface.
    wake : Wake
        Wake of every surface, in either phase.
    gamma : list of numpy arrays [nx-1, ny-1]
        Bound ring circulations.
    uext : list of numpy arrays [nx, ny, 3]
        External velocity at the mesh nodes.
    options : VMOptions
    flight_conditions : FlightConditions
        Supplies the air density.

    Returns
    -------
    forces : list of numpy arrays [nx, ny, 3]
        Force acting at each node of each surface.
    """
    rho = flight_conditions['rho']
    cutoff = options['vortex_radius']

    forces = []
    for i_surf, mesh in enumerate(zeta):
        nodal = np.zeros(mesh.shape)
        u = uext[i_surf]

        # Spanwise filaments
        strengths = _spanwise_strengths(gamma[i_surf], wake.gamma_star[i_surf])
        seg_forces = _filament_forces(mesh[:, :-1, :], mesh[:, 1:, :], strengths,
            zeta, 0.5 * (u[:, :-1, :] + u[:, 1:, :]), wake, gamma, rho, cutoff)
        nodal[:, :-1, :] += 0.5 * seg_forces
        nodal[:, 1:, :] += 0.5 * seg_forces

        # Chordwise filaments
        strengths = _chordwise_strengths(gamma[i_surf])
        seg_forces = _filament_forces(mesh[:-1, :, :], mesh[1:, :, :], strengths,
            zeta, 0.5 * (u[:-1, :, :] + u[1:, :, :]), wake, gamma, rho, cutoff)
        nodal[:-1, :, :] += 0.5 * seg_forces
        nodal[1:, :, :] += 0.5 * seg_forces

        forces.append(nodal)

    return forces


def total_forces(forces):
    """ Sum of the nodal forces of every surface. """
    return np.sum([np.sum(nodal.reshape(-1, 3), axis=0) for nodal in forces], axis=0)


def wind_axes(direction):
    """
    Drag, side and lift unit vectors for a freestream direction.

    Drag is along the freestream, lift is normal to it in the plane that
    contains the freestream and the z axis, and side force completes the
    triad.
    """
    drag_dir = direction / np.linalg.norm(direction)
    lift_dir = np.array([0., 0., 1.]) - drag_dir[2] * drag_dir
    lift_dir /= np.linalg.norm(lift_dir)
    side_dir = np.cross(lift_dir, drag_dir)
    return drag_dir, side_dir, lift_dir


def force_coefficients(forces, zeta, flight_conditions, S_ref=None):
    """
    Lift, drag and side-force coefficients of the whole configuration.

    Parameters
    ----------
    forces : list of numpy arrays [nx, ny, 3]
        Nodal forces from `calculate_static_forces`.
    zeta : list of numpy arrays [nx, ny, 3]
        Mesh of each surface, used for the reference area.
    flight_conditions : FlightConditions
    S_ref : float (optional)
        Reference area; the summed projected area of the surfaces if not given.

    Returns
    -------
    CL, CD, CY : float
    """
    if S_ref is None:
        S_ref = np.sum([projected_area(mesh) for mesh in zeta])

    q = 0.5 * flight_conditions['rho'] * flight_conditions['uinf'] ** 2
    drag_dir, side_dir, lift_dir = wind_axes(flight_conditions.direction)

    force = total_forces(forces)
    CL = force.dot(lift_dir) / q / S_ref
    CD = force.dot(drag_dir) / q / S_ref
    CY = force.dot(side_dir) / q / S_ref

    return CL, CD, CY
