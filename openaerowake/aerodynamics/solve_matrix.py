import logging

import numpy as np
from scipy.linalg import lu_factor, lu_solve
from scipy.sparse.linalg import LinearOperator, gmres

from openmdao.api import AnalysisError


logger = logging.getLogger(__name__)


def _jacobi_preconditioner(mtx):
    diag = np.diag(mtx).copy()
    diag[diag == 0.] = 1.
    inv_diag = 1. / diag
    return LinearOperator(mtx.shape, matvec=lambda x: inv_diag * x, dtype=mtx.dtype)


def solve_system(mtx, rhs, options, return_info=False):
    """
    Solve the AIC linear system to obtain the vortex ring circulations.

    A dense LU factorisation is used unless `options['iterative_solver']` is
    set, in which case GMRES runs to a relative residual of
    `options['iterative_tol']`, Jacobi-preconditioned if
    `options['iterative_precond']` is set.

    Parameters
    ----------
    mtx[system_size, system_size] : numpy array
        Final fully assembled AIC matrix.
    rhs[system_size] : numpy array
        Right-hand side of the AIC linear system.
    options : VMOptions
    return_info : bool
        Also return whether the solver reached its tolerance.

    Returns
    -------
    circulations[system_size] : numpy array
        The vortex ring circulations. An iterative solve that does not reach
        its tolerance still returns its last iterate, with a warning.
    converged : bool
        Only if `return_info` is True.
    """
    converged = True

    if options['iterative_solver']:
        if options['iterative_precond']:
            M = _jacobi_preconditioner(mtx)
        else:
            M = None

        circulations, info = gmres(mtx, rhs, rtol=options['iterative_tol'], atol=0., M=M)

        if info < 0:
            raise AnalysisError('GMRES received illegal input or broke down (info={})'.format(info))
        elif info > 0:
            converged = False
            residual = np.linalg.norm(mtx.dot(circulations) - rhs)
            logger.warning('GMRES did not reach a relative tolerance of %g after %d iterations '
                           '(residual norm %g)', options['iterative_tol'], info, residual)

    else:
        try:
            lu = lu_factor(mtx)
        except ValueError as err:
            raise AnalysisError('AIC matrix could not be factorised: {}'.format(err))

        if np.any(np.diag(lu[0]) == 0.):
            raise AnalysisError('AIC matrix is singular')

        circulations = lu_solve(lu, rhs)

    if return_info:
        return circulations, converged
    return circulations
