"""
Biot-Savart kernels for vortex segments, vortex rings and horseshoe vortices.

All functions work on whole arrays of evaluation points and filaments at once;
the returned velocities are for unit circulation unless a circulation is
passed in.
"""
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from openaerowake.utils.vector_algebra import add_ones_axis, compute_cross, \
    compute_dot, compute_norm, normalize


def _compute_finite_vortex(r1, r2, cutoff):
    r1_norm = compute_norm(r1)
    r2_norm = compute_norm(r2)

    r1_x_r2 = compute_cross(r1, r2)
    r1_d_r2 = compute_dot(r1, r2)

    # Points on a filament or at its ends get no velocity from it.
    singular = (r1_norm < cutoff) | (r2_norm < cutoff) | \
        (compute_dot(r1_x_r2, r1_x_r2) < cutoff ** 2)

    with np.errstate(divide='ignore', invalid='ignore'):
        num = add_ones_axis(1. / r1_norm + 1. / r2_norm) * r1_x_r2
        den = r1_norm * r2_norm + r1_d_r2
        result = num / add_ones_axis(den) / 4 / np.pi

    result[singular] = 0.
    return result

def _compute_semi_infinite_vortex(u, r, cutoff):
    r_norm = compute_norm(r)
    u_x_r = compute_cross(u, r)
    u_d_r = compute_dot(u, r)

    singular = (r_norm < cutoff) | (compute_dot(u_x_r, u_x_r) < cutoff ** 2)

    with np.errstate(divide='ignore', invalid='ignore'):
        num = u_x_r
        den = r_norm * (r_norm - u_d_r)
        result = num / add_ones_axis(den) / 4 / np.pi

    result[singular] = 0.
    return result


def segment_velocity(points, start, end, cutoff=1e-6):
    """
    Velocity induced by straight vortex filaments of unit circulation.

    Parameters
    ----------
    points[..., 3] : numpy array
        Evaluation points.
    start[..., 3] : numpy array
        First end of each filament; the circulation runs from start to end.
    end[..., 3] : numpy array
        Second end of each filament.
    cutoff : float
        Distance under which a point is considered to lie on the filament.

    Returns
    -------
    vel[..., 3] : numpy array
        Induced velocity, broadcast over the leading axes of the inputs.
    """
    return _compute_finite_vortex(points - start, points - end, cutoff)


def ring_influence(points, rings_mesh, cutoff=1e-6):
    """
    Velocity induced at every point by every vortex ring of a lattice, for
    unit ring circulation.

    The ring of panel (i, j) runs through A=[i, j], B=[i, j+1], C=[i+1, j+1]
    and D=[i+1, j], in that order.

    Parameters
    ----------
    points[num_points, 3] : numpy array
        Evaluation points.
    rings_mesh[nx, ny, 3] : numpy array
        Corner points of the lattice.

    Returns
    -------
    vel[num_points, nx-1, ny-1, 3] : numpy array
        Influence of each ring on each point.
    """
    pts = points[:, np.newaxis, np.newaxis, :]

    A = rings_mesh[:-1, :-1, :]
    B = rings_mesh[:-1, 1:  , :]
    C = rings_mesh[1:  , 1:  , :]
    D = rings_mesh[1:  , :-1, :]

    return segment_velocity(pts, A, B, cutoff) + \
        segment_velocity(pts, B, C, cutoff) + \
        segment_velocity(pts, C, D, cutoff) + \
        segment_velocity(pts, D, A, cutoff)


def horseshoe_directions(zeta_star):
    """ Unit direction of the trailing legs leaving each trailing-edge node. """
    return normalize(zeta_star[-1, :, :] - zeta_star[0, :, :])


def horseshoe_influence(points, trailing_edge, directions, cutoff=1e-6):
    """
    Velocity induced by horseshoe vortices of unit circulation attached to a
    trailing edge.

    Each horseshoe closes the corresponding trailing-edge ring: it is made of
    the trailing-edge segment from node j to node j+1, a semi-infinite leg from
    node j+1 going downstream and a semi-infinite leg coming back from
    infinity to node j.

    Parameters
    ----------
    points[num_points, 3] : numpy array
        Evaluation points.
    trailing_edge[ny, 3] : numpy array
        Nodes of the trailing edge.
    directions[ny, 3] : numpy array
        Unit direction of the leg leaving each node.

    Returns
    -------
    vel[num_points, ny-1, 3] : numpy array
        Influence of each horseshoe on each point.
    """
    pts = points[:, np.newaxis, :]

    A = trailing_edge[:-1, :]
    B = trailing_edge[1:, :]

    return segment_velocity(pts, A, B, cutoff) + \
        _compute_semi_infinite_vortex(directions[1:, :], pts - B, cutoff) - \
        _compute_semi_infinite_vortex(directions[:-1, :], pts - A, cutoff)


def wake_influence(points, zeta_star, horseshoe, cutoff=1e-6):
    """
    Unit-circulation influence of the rows of one surface's wake.

    Parameters
    ----------
    points[num_points, 3] : numpy array
        Evaluation points.
    zeta_star[mstar+1, ny, 3] : numpy array
        Wake lattice.
    horseshoe : bool
        If True, the wake is a single row of horseshoe vortices.

    Returns
    -------
    vel[num_points, rows, ny-1, 3] : numpy array
        One row for a horseshoe wake, mstar rows otherwise.
    """
    if horseshoe:
        vel = horseshoe_influence(points, zeta_star[0, :, :],
                                  horseshoe_directions(zeta_star), cutoff)
        return vel[:, np.newaxis, :, :]

    return ring_influence(points, zeta_star, cutoff)


def induced_velocity_at_points(points, zeta, wake, gamma, cutoff=1e-6):
    """
    Total velocity induced by the bound rings and the wake of every surface.

    Parameters
    ----------
    points[num_points, 3] : numpy array
        Evaluation points.
    zeta : list of numpy arrays [nx, ny, 3]
        Vortex lattice of each surface.
    wake : Wake
        Wake of every surface, in either phase.
    gamma : list of numpy arrays [nx-1, ny-1]
        Bound ring circulations.

    Returns
    -------
    vel[num_points, 3] : numpy array
    """
    vel = np.zeros((points.shape[0], 3))

    for i_surf, mesh in enumerate(zeta):
        vel += np.einsum('pijk,ij->pk', ring_influence(points, mesh, cutoff), gamma[i_surf])

        gamma_star = wake.gamma_star[i_surf]
        if wake.is_horseshoe:
            gamma_star = gamma_star[:1, :]

        vel += np.einsum('pijk,ij->pk',
            wake_influence(points, wake.zeta_star[i_surf], wake.is_horseshoe, cutoff),
            gamma_star)

    return vel


def total_induced_velocity_on_wake(zeta, wake, gamma, cutoff=1e-6, num_cores=1):
    """
    Velocity induced at every wake corner point by all bound and wake rings.

    The points are split into contiguous chunks evaluated by `num_cores`
    threads; each chunk writes its own slice of the result.

    Returns
    -------
    u_ind : list of numpy arrays [mstar+1, ny, 3]
        Induced velocity on each wake grid.
    """
    shapes = [zeta_star.shape for zeta_star in wake.zeta_star]
    points = np.concatenate([zeta_star.reshape(-1, 3) for zeta_star in wake.zeta_star])

    vel = np.zeros(points.shape)
    chunks = [chunk for chunk in np.array_split(np.arange(points.shape[0]), num_cores)
              if chunk.size]

    def _evaluate(chunk):
        vel[chunk, :] = induced_velocity_at_points(points[chunk, :], zeta, wake, gamma, cutoff)

    if len(chunks) > 1:
        with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
            # list() re-raises any worker exception here
            list(executor.map(_evaluate, chunks))
    else:
        for chunk in chunks:
            _evaluate(chunk)

    u_ind = []
    start = 0
    for shape in shapes:
        size = shape[0] * shape[1]
        u_ind.append(vel[start:start + size, :].reshape(shape))
        start += size

    return u_ind
