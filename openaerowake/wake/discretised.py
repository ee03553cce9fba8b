"""
Time stepping of a discretised wake: convection, row shift and re-attachment.
"""


def convect(wake, u_ind, dt):
    """
    Move every wake point with its velocity for one explicit Euler step.

    Parameters
    ----------
    wake : Wake
        Discretised wake, modified in place.
    u_ind : list of numpy arrays [mstar+1, ny, 3]
        Velocity at each wake point.
    dt : float
        Time step.
    """
    for zeta_star, u in zip(wake.zeta_star, u_ind):
        zeta_star += u * dt


def displace(wake):
    """
    Shift the wake one row downstream and drop the farthest row.

    Both the geometry and the circulation move; the first row keeps its value
    and the row count is unchanged.
    """
    for zeta_star, gamma_star in zip(wake.zeta_star, wake.gamma_star):
        zeta_star[1:, :, :] = zeta_star[:-1, :, :].copy()
        gamma_star[1:, :] = gamma_star[:-1, :].copy()


def attach_to_trailing_edge(zeta, wake):
    """ Set the first wake row of each surface to the surface trailing edge. """
    for mesh, zeta_star in zip(zeta, wake.zeta_star):
        zeta_star[0, :, :] = mesh[-1, :, :]
