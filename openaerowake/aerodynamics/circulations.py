import numpy as np

from openaerowake.common.options import DimensionMismatchError


def reconstruct_gamma(gamma_flat, zeta_col, gamma=None):
    """
    Split the solution of the AIC system into one circulation grid per surface.

    Parameters
    ----------
    gamma_flat[Ktotal] : numpy array
        Ring circulations ordered by surface, then chordwise row, then
        spanwise column.
    zeta_col : list of numpy arrays [nx-1, ny-1, 3]
        Collocation points of each surface; only their shapes are used.
    gamma : list of numpy arrays [nx-1, ny-1] (optional)
        Grids to fill in place. New grids are created if not given.

    Returns
    -------
    gamma : list of numpy arrays [nx-1, ny-1]
    """
    Ktotal = 0
    for col in zeta_col:
        Ktotal += col.shape[0] * col.shape[1]

    if gamma_flat.shape != (Ktotal,):
        raise DimensionMismatchError(
            'Expected a solution vector of {} circulations, got shape {}'.format(
                Ktotal, gamma_flat.shape))

    if gamma is None:
        gamma = [np.zeros(col.shape[:2]) for col in zeta_col]

    start = 0
    for i_surf, col in enumerate(zeta_col):
        size = col.shape[0] * col.shape[1]
        gamma[i_surf][:, :] = gamma_flat[start:start + size].reshape(col.shape[:2])
        start += size

    return gamma


def flatten_gamma(gamma):
    """ Inverse of `reconstruct_gamma`. """
    return np.concatenate([grid.flatten() for grid in gamma])


def circulation_transfer(gamma, gamma_star, n_rows=None):
    """
    Copy the trailing-edge circulation of each surface into its wake.

    This is the Kutta condition: the rows of wake rings next to the trailing
    edge take the circulation of the last row of bound rings, so that the
    trailing-edge filament carries no vorticity.

    Parameters
    ----------
    gamma : list of numpy arrays [nx-1, ny-1]
        Bound ring circulations.
    gamma_star : list of numpy arrays [mstar, ny-1]
        Wake ring circulations, modified in place.
    n_rows : int (optional)
        Number of wake rows to overwrite, starting from the trailing edge.
        Every row is overwritten if not given.
    """
    for grid, grid_star in zip(gamma, gamma_star):
        if grid.shape[1] != grid_star.shape[1]:
            raise DimensionMismatchError(
                'Surface has {} spanwise panels but its wake has {}'.format(
                    grid.shape[1], grid_star.shape[1]))

        rows = grid_star.shape[0] if n_rows is None else min(n_rows, grid_star.shape[0])
        grid_star[:rows, :] = grid[-1, :]
