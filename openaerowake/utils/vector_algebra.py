import numpy as np


def add_ones_axis(array):
    return np.einsum('...,l->...l', array, np.ones(3))

def compute_dot(array1, array2):
    """
    Parameters
    ----------
    array1 : numpy array[..., 3]
        First argument in the dot product.
        The dot product axis is the last one.
    array2 : numpy array[..., 3]
        Second argument in the dot product.
        The dot product axis is the last one.

    Returns
    -------
    dot : numpy array[...]
        The dot product with the last axis contracted.
    """
    return np.einsum('...i,...i->...', array1, array2)

def compute_cross(array1, array2):
    """
    Parameters
    ----------
    array1 : numpy array[..., 3]
        First argument in the cross product (order matters).
        The cross product axis is the last one.
    array2 : numpy array[..., 3]
        Second argument in the cross product (order matters).
        The cross product axis is the last one.
    """
    return np.cross(array1, array2, axis=-1)

def compute_norm(array):
    """
    Parameters
    ----------
    array : numpy array[..., 3]
        Array we are taking the norm of in the last axis.

    Returns
    -------
    norm : numpy array[...]
        Euclidean norm along the last axis.
    """
    return np.sum(array ** 2, axis=-1) ** 0.5

def normalize(array):
    """ Scale every vector in the last axis of `array` to unit length. """
    return array / add_ones_axis(compute_norm(array))
