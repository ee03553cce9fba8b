import numpy as np

from openaerowake.common.options import DimensionMismatchError


HORSESHOE = 'horseshoe'
DISCRETISED = 'discretised'


class Wake(object):
    """
    Trailing wake of every lifting surface, stored as a lattice of vortex-ring
    corner points and ring circulations.

    The `phase` tells how the lattice has to be interpreted. In the horseshoe
    phase only the first row (the trailing edge) and the flow direction are
    meaningful: the trailing legs are semi-infinite. In the discretised phase
    every row is a finite vortex ring.

    Parameters
    ----------
    zeta_star : list of numpy arrays [mstar+1, ny, 3]
        Corner points of the wake rings for each surface.
    gamma_star : list of numpy arrays [mstar, ny-1]
        Circulation of the wake rings for each surface.
    phase : str
        Either HORSESHOE or DISCRETISED.
    """

    def __init__(self, zeta_star, gamma_star, phase=HORSESHOE):
        if len(zeta_star) != len(gamma_star):
            raise DimensionMismatchError(
                'Got {} wake grids but {} wake circulation grids'.format(
                    len(zeta_star), len(gamma_star)))

        for i_surf, (grid, gamma) in enumerate(zip(zeta_star, gamma_star)):
            if grid.shape[0] - 1 != gamma.shape[0] or grid.shape[1] - 1 != gamma.shape[1]:
                raise DimensionMismatchError(
                    'Wake of surface {}: grid of shape {} does not match circulation '
                    'of shape {}'.format(i_surf, grid.shape, gamma.shape))

        self.zeta_star = zeta_star
        self.gamma_star = gamma_star
        self.phase = phase

    @property
    def is_horseshoe(self):
        return self.phase == HORSESHOE

    @property
    def n_rows(self):
        """ Number of wake ring rows on each surface. """
        return [gamma.shape[0] for gamma in self.gamma_star]

    def copy(self):
        return Wake(copy_grids(self.zeta_star), copy_grids(self.gamma_star), self.phase)


def allocate_wake(zeta, mstar):
    """
    Create an empty wake to be filled by `init_horseshoe`.

    Parameters
    ----------
    zeta : list of numpy arrays [nx, ny, 3]
        Nodal mesh of each lifting surface.
    mstar : int or list of int
        Number of wake rows, shared or per surface.

    Returns
    -------
    wake : Wake
        Wake of zeros in the horseshoe phase.
    """
    if np.isscalar(mstar):
        mstar = [mstar] * len(zeta)

    if len(mstar) != len(zeta):
        raise DimensionMismatchError(
            'Got {} wake lengths for {} surfaces'.format(len(mstar), len(zeta)))

    zeta_star = []
    gamma_star = []
    for mesh, m in zip(zeta, mstar):
        if m < 1:
            raise ValueError('A wake needs at least one row of panels, got {}'.format(m))
        ny = mesh.shape[1]
        zeta_star.append(np.zeros((m + 1, ny, 3)))
        gamma_star.append(np.zeros((m, ny - 1)))

    return Wake(zeta_star, gamma_star, HORSESHOE)


def copy_grids(grids):
    return [np.array(grid, copy=True) for grid in grids]


def grids_norm(grids):
    """
    Aggregate size of a set of nodal grids: the sum, over surfaces and
    coordinates, of the Frobenius norm of each coordinate grid.
    """
    norm = 0.0
    for grid in grids:
        for i_dim in range(grid.shape[-1]):
            norm += np.linalg.norm(grid[..., i_dim])
    return norm
