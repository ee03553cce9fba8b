import numpy as np


def bilinear_mapping(grid, xi=0.5, eta=0.5):
    """
    Evaluate the bilinear map of every quadrilateral cell of a nodal grid.

    Parameters
    ----------
    grid[nx, ny, 3] : numpy array
        Values at the corners of the cells; a mesh, a velocity field or any
        other nodal quantity with a trailing axis.
    xi : float
        Chordwise (row) parameter in [0, 1], 0 being the front of the cell.
    eta : float
        Spanwise (column) parameter in [0, 1].

    Returns
    -------
    mapped[nx-1, ny-1, 3] : numpy array
        The interpolated value inside each cell. With the default parameters
        this is the cell centre.
    """
    return (
        (1. - xi) * (1. - eta) * grid[0:-1, 0:-1, :] +
        xi        * (1. - eta) * grid[1:  , 0:-1, :] +
        (1. - xi) * eta        * grid[0:-1, 1:  , :] +
        xi        * eta        * grid[1:  , 1:  , :]
    )


def generate_colocation_mesh(grids):
    """
    Map every nodal grid of a multi-surface problem to its panel centres.

    We enforce the flow tangency condition at these collocation points when
    solving for the circulations of the lifting surfaces. The same mapping is
    applied to the external velocity so that it is sampled at the same points.

    Parameters
    ----------
    grids : list of numpy arrays [nx, ny, 3]
        One nodal grid per surface.

    Returns
    -------
    col : list of numpy arrays [nx-1, ny-1, 3]
        One collocation grid per surface.
    """
    return [bilinear_mapping(np.asarray(grid)) for grid in grids]
