import numpy as np

from openaerowake.utils.vector_algebra import compute_cross, compute_norm, add_ones_axis


def _panel_diagonal_cross(mesh):
    # (B - D) x (A - C) for the ring A=[i, j], B=[i, j+1], C=[i+1, j+1], D=[i+1, j]
    return compute_cross(
        mesh[:-1,  1:, :] - mesh[1:, :-1, :],
        mesh[:-1, :-1, :] - mesh[1:,  1:, :])


def generate_surface_normals(meshes):
    """
    Compute the unit normal of every panel as the cross product of the two
    diagonals of the panel.

    The orientation follows the circulation sense of the vortex rings, so a
    positive circulation induces velocity opposite to the normal inside the
    ring. For a surface with the chord along +x and the span along +y the
    normals point in +z.

    Parameters
    ----------
    meshes : list of numpy arrays [nx, ny, 3]
        Nodal mesh of each lifting surface.

    Returns
    -------
    normals : list of numpy arrays [nx-1, ny-1, 3]
        Unit normals of each panel.
    """
    normals = []
    for mesh in meshes:
        normal = _panel_diagonal_cross(np.asarray(mesh))
        normals.append(normal / add_ones_axis(compute_norm(normal)))
    return normals


def panel_areas(mesh):
    """
    Area of each quadrilateral panel, half the norm of the diagonal cross.

    Parameters
    ----------
    mesh[nx, ny, 3] : numpy array
        Nodal mesh of a lifting surface.

    Returns
    -------
    areas[nx-1, ny-1] : numpy array
    """
    return 0.5 * compute_norm(_panel_diagonal_cross(np.asarray(mesh)))


def projected_area(mesh, normal_direction=np.array([0., 0., 1.])):
    """ Sum of the panel areas projected on the plane normal to `normal_direction`. """
    return np.abs(np.einsum('ijk,k->', 0.5 * _panel_diagonal_cross(np.asarray(mesh)),
                            normal_direction))
