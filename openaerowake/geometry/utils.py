import numpy as np
from numpy import cos, sin, tan


def gen_rect_mesh(num_x, num_y, span, chord, span_cos_spacing=0., chord_cos_spacing=0.):
    """
    Generate simple rectangular wing mesh.

    Parameters
    ----------
    num_x : int
        Desired number of chordwise node points for the final mesh.
    num_y : int
        Desired number of spanwise node points for the final mesh.
    span : float
        Total wingspan.
    chord : float
        Root chord.
    span_cos_spacing : float (optional)
        Blending ratio of uniform and cosine spacing in the spanwise direction.
        A value of 0. corresponds to uniform spacing and a value of 1.
        corresponds to regular cosine spacing. This increases the number of
        spanwise node points near the wingtips.
    chord_cos_spacing : float (optional)
        Blending ratio of uniform and cosine spacing in the chordwise direction.
        A value of 0. corresponds to uniform spacing and a value of 1.
        corresponds to regular cosine spacing. This increases the number of
        chordwise node points near the leading and trailing edges.

    Returns
    -------
    mesh[nx, ny, 3] : numpy array
        Rectangular nodal mesh defining the final aerodynamic surface with the
        specified parameters. Row 0 is the leading edge, the last row is the
        trailing edge and the span runs from -span/2 to span/2.
    """

    mesh = np.zeros((num_x, num_y, 3))

    beta = np.linspace(0, np.pi, num_y)

    # mixed spacing with span_cos_spacing as a weighting factor
    # this is for the spanwise spacing
    cosine = -.5 * np.cos(beta)
    uniform = np.linspace(-.5, .5, num_y)
    full_wing = (cosine * span_cos_spacing + (1 - span_cos_spacing) * uniform) * span

    beta = np.linspace(0, np.pi, num_x)

    # this is for the chordwise spacing
    cosine = .5 * (1 - np.cos(beta))
    uniform = np.linspace(0., 1., num_x)
    full_wing_x = (cosine * chord_cos_spacing + (1 - chord_cos_spacing) * uniform) * chord

    mesh[:, :, 0] = full_wing_x[:, np.newaxis]
    mesh[:, :, 1] = full_wing[np.newaxis, :]

    return mesh


def get_default_geo_dict():
    """
    Obtain the default settings for the surface descriptions. Note that
    these defaults are overwritten based on user input for each surface.
    Each dictionary describes one surface.

    Returns
    -------
    defaults : dict
        A python dict containing the default surface-level settings.
    """

    defaults = {
                # Wing definition
                'num_x' : 3,            # number of chordwise points
                'num_y' : 5,            # number of spanwise points
                'span_cos_spacing' : 0, # 0 for uniform spanwise panels
                                        # 1 for cosine-spaced panels
                                        # any value between 0 and 1 for
                                        # a mixed spacing
                'chord_cos_spacing' : 0.,   # 0 for uniform chordwise panels
                                        # 1 for cosine-spaced panels
                                        # any value between 0 and 1 for
                                        # a mixed spacing
                'offset' : np.zeros((3)), # coordinates to offset
                                # the surface from its default location

                # Simple Geometric Variables
                'span' : 10.,           # full wingspan
                'root_chord' : 1.,      # root chord
                'dihedral' : 0.,        # wing dihedral angle in degrees
                                        # positive is upward
                'sweep' : 0.,           # wing sweep angle in degrees
                                        # positive sweeps back
                'taper' : 1.,           # taper ratio; 1. is uniform chord
                }

    return defaults


def generate_mesh(input_dict):
    """
    Build a rectangular planform and apply taper, sweep, dihedral and offset.

    Parameters
    ----------
    input_dict : dict
        Any subset of the keys from `get_default_geo_dict`.

    Returns
    -------
    mesh[num_x, num_y, 3] : numpy array
        Nodal mesh of the lifting surface.
    """

    # Get defaults and update surface with the user-provided input
    surf_dict = get_default_geo_dict()
    surf_dict.update(input_dict)

    num_x = surf_dict['num_x']
    num_y = surf_dict['num_y']

    if num_x < 2 or num_y < 2:
        raise ValueError('num_x and num_y must both be at least 2.')

    mesh = gen_rect_mesh(num_x, num_y, surf_dict['span'], surf_dict['root_chord'],
        surf_dict['span_cos_spacing'], surf_dict['chord_cos_spacing'])

    # Spanwise station normalised to [0, 1] from root to tip
    half_span = surf_dict['span'] / 2.
    eta = np.abs(mesh[0, :, 1]) / half_span

    # Taper about the quarter chord line
    taper = 1. - (1. - surf_dict['taper']) * eta
    quarter_chord = 0.25 * surf_dict['root_chord']
    mesh[:, :, 0] = quarter_chord + (mesh[:, :, 0] - quarter_chord) * taper

    # Sweep and dihedral shift every section by its spanwise distance
    dy = np.abs(mesh[0, :, 1])
    mesh[:, :, 0] += tan(surf_dict['sweep'] * np.pi / 180.) * dy
    mesh[:, :, 2] += tan(surf_dict['dihedral'] * np.pi / 180.) * dy

    # Apply the user-provided coordinate offset to position the mesh
    mesh = mesh + surf_dict['offset']

    return mesh


def generate_uext(mesh, v, alpha=0., beta=0.):
    """
    Sample a uniform freestream at every node of a mesh.

    Parameters
    ----------
    mesh[nx, ny, 3] : numpy array
        Nodal mesh of the lifting surface.
    v : float
        Freestream speed.
    alpha : float
        Angle of attack in degrees.
    beta : float
        Sideslip angle in degrees.

    Returns
    -------
    uext[nx, ny, 3] : numpy array
        External velocity at each mesh node.
    """
    alpha = alpha * np.pi / 180.
    beta = beta * np.pi / 180.

    direction = np.array([cos(alpha) * cos(beta), -sin(beta), sin(alpha) * cos(beta)])

    uext = np.zeros(mesh.shape)
    uext[:, :, :] = v * direction
    return uext
