""" Script to plot the lattice and wake of a steady solve.

Usage is `plot_wake result.npz`, where the file was written by
`SteadyResult.save`. The bound rings are coloured by their circulation.

"""
import sys

import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401, registers the 3d projection
from mpl_toolkits.mplot3d.art3d import Poly3DCollection


def _quads(grid):
    return np.stack([grid[:-1, :-1], grid[:-1, 1:], grid[1:, 1:], grid[1:, :-1]], axis=2) \
        .reshape(-1, 4, 3)


def plot_wake(zeta, zeta_star, gamma=None, ax=None):
    """
    Draw the vortex lattice of every surface and its wake in 3d.

    Parameters
    ----------
    zeta : list of numpy arrays [nx, ny, 3]
        Vortex lattice of each surface.
    zeta_star : list of numpy arrays [mstar+1, ny, 3]
        Wake lattice of each surface.
    gamma : list of numpy arrays [nx-1, ny-1] (optional)
        Bound circulations used to colour the panels.
    ax : Axes3D (optional)
        Axes to draw in; a new figure is created if not given.

    Returns
    -------
    fig : matplotlib Figure
    """
    if ax is None:
        fig = plt.figure(figsize=(10, 7))
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.get_figure()

    if gamma is not None:
        vmin = min(np.min(g) for g in gamma)
        vmax = max(np.max(g) for g in gamma)
        norm = matplotlib.colors.Normalize(vmin=vmin, vmax=vmax if vmax > vmin else vmin + 1.)
        cmap = plt.get_cmap('viridis')

    for i_surf, mesh in enumerate(zeta):
        if gamma is not None:
            facecolors = cmap(norm(gamma[i_surf].flatten()))
        else:
            facecolors = 'lightsteelblue'
        ax.add_collection3d(Poly3DCollection(_quads(mesh), facecolors=facecolors,
                                             edgecolors='k', linewidths=0.5))

        wake = zeta_star[i_surf]
        for j in range(wake.shape[1]):
            ax.plot(wake[:, j, 0], wake[:, j, 1], wake[:, j, 2], color='gray', lw=0.7)
        for i in range(wake.shape[0]):
            ax.plot(wake[i, :, 0], wake[i, :, 1], wake[i, :, 2], color='gray', lw=0.4)

    points = np.concatenate([grid.reshape(-1, 3) for grid in list(zeta) + list(zeta_star)])
    center = 0.5 * (points.max(axis=0) + points.min(axis=0))
    radius = 0.5 * np.max(points.max(axis=0) - points.min(axis=0))
    ax.set_xlim(center[0] - radius, center[0] + radius)
    ax.set_ylim(center[1] - radius, center[1] + radius)
    ax.set_zlim(center[2] - radius, center[2] + radius)
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')

    return fig


def load_result(filename):
    """ Read the lattice, wake and circulation grids written by `SteadyResult.save`. """
    with np.load(filename) as data:
        n_surfaces = int(data['n_surfaces'])
        zeta = [data['zeta_{}'.format(i)] for i in range(n_surfaces)]
        zeta_star = [data['zeta_star_{}'.format(i)] for i in range(n_surfaces)]
        gamma = [data['gamma_{}'.format(i)] for i in range(n_surfaces)]
    return zeta, zeta_star, gamma


def disp_plot(args=None):
    if args is None:
        args = sys.argv
    if len(args) < 2:
        print('Usage: plot_wake result.npz')
        return 1

    zeta, zeta_star, gamma = load_result(args[1])
    plot_wake(zeta, zeta_star, gamma)
    plt.show()
    return 0

if __name__ == '__main__':
    sys.exit(disp_plot())
