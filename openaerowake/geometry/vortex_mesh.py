import numpy as np


def generate_vortex_mesh(mesh):
    """
    Compute the vortex-ring lattice from a nodal aerodynamic mesh.

    Every row of the mesh is moved a quarter of the local panel length
    downstream, the trailing-edge row by a quarter of the last panel. The
    leading segment of each ring then lies on the quarter-chord line of its
    panel and the centre of the ring, where the collocation point is placed,
    lies on the three-quarter-chord line.

    Parameters
    ----------
    mesh[nx, ny, 3] : numpy array
        Nodal mesh of a lifting surface.

    Returns
    -------
    vortex_mesh[nx, ny, 3] : numpy array
        The lattice the steady solver works on.
    """
    mesh = np.asarray(mesh)
    vortex_mesh = np.zeros(mesh.shape, dtype=mesh.dtype)

    vortex_mesh[:-1, :, :] = 0.75 * mesh[:-1, :, :] + 0.25 * mesh[1:, :, :]
    vortex_mesh[-1, :, :] = 1.25 * mesh[-1, :, :] - 0.25 * mesh[-2, :, :]

    return vortex_mesh
