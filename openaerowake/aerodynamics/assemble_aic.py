"""
Assembly of the linear system that enforces flow tangency at the collocation
points.

The unknowns are the bound ring circulations of every surface, ordered by
surface, then chordwise row, then spanwise column. The wake is not a set of
unknowns: its rings either carry the trailing-edge circulation (and are folded
into the trailing-edge columns of the matrix) or carry a known circulation (and
go to the right-hand side).
"""
import numpy as np

from openaerowake.common.options import DimensionMismatchError
from openaerowake.aerodynamics.biot_savart import ring_influence, wake_influence


def count_unknowns(uext_col, zeta=None):
    """
    Total number of panels, from the collocation velocity grids.

    Parameters
    ----------
    uext_col : list of numpy arrays [nx-1, ny-1, 3]
        External velocity at the collocation points of each surface.
    zeta : list of numpy arrays [nx, ny, 3] (optional)
        If given, the count is checked against the panels of the mesh.

    Returns
    -------
    Ktotal : int
    """
    Ktotal = 0
    for grid in uext_col:
        Ktotal += grid.shape[0] * grid.shape[1]

    if zeta is not None:
        n_panels = 0
        for mesh in zeta:
            n_panels += (mesh.shape[0] - 1) * (mesh.shape[1] - 1)

        if n_panels != Ktotal or len(zeta) != len(uext_col):
            raise DimensionMismatchError(
                'The velocity grids define {} unknowns on {} surfaces but the mesh has '
                '{} panels on {} surfaces'.format(Ktotal, len(uext_col), n_panels, len(zeta)))

    return Ktotal


def _flatten_points(grids):
    return np.concatenate([grid.reshape(-1, 3) for grid in grids])


def _known_wake_rows(wake, options):
    # Rows whose circulation is an input to the solve rather than tied to the
    # trailing edge of the current solution.
    if wake.is_horseshoe or options['Steady']:
        return None
    return slice(1, None)


def assemble_rhs(zeta_col, wake, uext_col, normals, options):
    """
    Right-hand side of the tangency condition: the negative normal component
    of the external velocity, minus the normal velocity induced by wake rows
    of known circulation.

    Parameters
    ----------
    zeta_col : list of numpy arrays [nx-1, ny-1, 3]
        Collocation points of each surface.
    wake : Wake
        Wake in either phase; its `gamma_star` is read.
    uext_col : list of numpy arrays [nx-1, ny-1, 3]
        External velocity at the collocation points.
    normals : list of numpy arrays [nx-1, ny-1, 3]
        Panel unit normals.
    options : VMOptions

    Returns
    -------
    rhs[Ktotal] : numpy array
    Ktotal : int
    """
    Ktotal = count_unknowns(uext_col)

    points = _flatten_points(zeta_col)
    normals_flat = _flatten_points(normals)

    rhs = -np.einsum('ij,ij->i', _flatten_points(uext_col), normals_flat)

    known_rows = _known_wake_rows(wake, options)
    if known_rows is not None:
        cutoff = options['vortex_radius']
        for zeta_star, gamma_star in zip(wake.zeta_star, wake.gamma_star):
            if gamma_star.shape[0] < 2:
                continue
            vel = wake_influence(points, zeta_star[known_rows, :, :], False, cutoff)
            vel = np.einsum('pijk,ij->pk', vel, gamma_star[known_rows, :])
            rhs -= np.einsum('ij,ij->i', vel, normals_flat)

    return rhs, Ktotal


def assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, options, horseshoe):
    """
    Compute the aerodynamic influence coefficient (AIC) matrix: the normal
    velocity at every collocation point induced by a unit circulation of every
    bound ring.

    The wake rings that carry the trailing-edge circulation are added to the
    column of the trailing-edge panel they are attached to.

    Parameters
    ----------
    Ktotal : int
        Number of unknowns, from `count_unknowns`.
    zeta : list of numpy arrays [nx, ny, 3]
        Vortex lattice of each surface.
    zeta_col : list of numpy arrays [nx-1, ny-1, 3]
        Collocation points of each surface.
    wake : Wake
        Wake of every surface.
    uext_col : list of numpy arrays [nx-1, ny-1, 3]
        External velocity at the collocation points; only its size is used.
    normals : list of numpy arrays [nx-1, ny-1, 3]
        Panel unit normals.
    options : VMOptions
    horseshoe : bool
        Represent the wake with semi-infinite trailing legs (one horseshoe per
        trailing-edge panel) instead of its finite rings.

    Returns
    -------
    aic[Ktotal, Ktotal] : numpy array
    """
    if count_unknowns(uext_col, zeta) != Ktotal:
        raise DimensionMismatchError(
            'Expected {} unknowns, the surfaces define {}'.format(
                Ktotal, count_unknowns(uext_col)))

    cutoff = options['vortex_radius']

    points = _flatten_points(zeta_col)
    normals_flat = _flatten_points(normals)

    aic = np.zeros((Ktotal, Ktotal))

    i_panels = 0
    for i_surf, mesh in enumerate(zeta):
        nx = mesh.shape[0]
        ny = mesh.shape[1]
        n_panels = (nx - 1) * (ny - 1)

        block = np.einsum('pijk,pk->pij', ring_influence(points, mesh, cutoff), normals_flat)

        zeta_star = wake.zeta_star[i_surf]
        if horseshoe:
            wake_vel = wake_influence(points, zeta_star, True, cutoff)
        elif options['Steady']:
            wake_vel = wake_influence(points, zeta_star, False, cutoff)
        else:
            wake_vel = wake_influence(points, zeta_star[:2, :, :], False, cutoff)

        # Every wake row of a spanwise strip carries the circulation of the
        # trailing-edge panel of that strip.
        block[:, -1, :] += np.einsum('pijk,pk->pj', wake_vel, normals_flat)

        aic[:, i_panels:i_panels + n_panels] = block.reshape(Ktotal, n_panels)

        i_panels += n_panels

    return aic
