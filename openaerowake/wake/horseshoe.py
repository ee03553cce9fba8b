"""
Horseshoe wake: one row of vortex rings per surface whose trailing legs go to
infinity along the freestream.
"""
import logging

import numpy as np

from openaerowake.common.options import DimensionMismatchError
from openaerowake.wake.lattice import HORSESHOE, DISCRETISED
from openaerowake.utils.vector_algebra import normalize


logger = logging.getLogger(__name__)

# Distance, in reference lengths, at which the far rows of a horseshoe wake are
# placed. Only their direction is used by the influence kernels.
HORSESHOE_FACTOR = 50.


def init_horseshoe(zeta, wake, flight_conditions):
    """
    Lay the wake out as a horseshoe wake.

    The first row of every wake grid is set to the trailing edge of its
    surface and all the other rows to a far point along the freestream
    direction. The wake circulation is reset to zero.

    Parameters
    ----------
    zeta : list of numpy arrays [nx, ny, 3]
        Nodal mesh of each lifting surface.
    wake : Wake
        Wake to initialise in place.
    flight_conditions : FlightConditions
        Supplies the flow direction and the reference length.
    """
    if len(zeta) != len(wake.zeta_star):
        raise DimensionMismatchError(
            'Got {} surfaces but {} wakes'.format(len(zeta), len(wake.zeta_star)))

    far = HORSESHOE_FACTOR * flight_conditions['c_ref'] * flight_conditions.direction

    for i_surf, mesh in enumerate(zeta):
        zeta_star = wake.zeta_star[i_surf]
        if zeta_star.shape[1] != mesh.shape[1]:
            raise DimensionMismatchError(
                'Wake of surface {} has {} spanwise points, the surface has {}'.format(
                    i_surf, zeta_star.shape[1], mesh.shape[1]))

        zeta_star[0, :, :] = mesh[-1, :, :]
        zeta_star[1:, :, :] = mesh[-1, :, :] + far
        wake.gamma_star[i_surf][:, :] = 0.

    wake.phase = HORSESHOE


def to_discretised(wake, delta_x):
    """
    Turn a horseshoe wake into a lattice of finite vortex rings.

    Row `i` of every wake grid is placed `i * delta_x` downstream of the
    trailing edge along the direction of the horseshoe legs, and every wake
    row takes the circulation of the first one.

    Parameters
    ----------
    wake : Wake
        Horseshoe wake, modified in place.
    delta_x : float
        Spacing between consecutive wake rows.
    """
    if not wake.is_horseshoe:
        raise ValueError('Only a horseshoe wake can be discretised, got a {} wake'.format(
            wake.phase))

    for zeta_star, gamma_star in zip(wake.zeta_star, wake.gamma_star):
        mstar = zeta_star.shape[0] - 1

        direction = normalize(zeta_star[-1, :, :] - zeta_star[0, :, :])
        offsets = np.arange(mstar + 1) * delta_x

        zeta_star[:, :, :] = zeta_star[0, :, :] + \
            np.einsum('i,jk->ijk', offsets, direction)
        gamma_star[:, :] = gamma_star[0, :]

    wake.phase = DISCRETISED
    logger.debug('Wake discretised with rows spaced by %g', delta_x)
