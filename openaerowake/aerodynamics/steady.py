"""
Steady vortex-lattice solve with optional free-wake roll-up.

The solve starts from a horseshoe wake. Unless only the horseshoe solution is
wanted, the wake is then cut into a lattice of finite rings and rolled up: each
iteration convects the wake with the local velocity, shifts it one row
downstream, re-attaches it to the trailing edge and, every
`rollup_aic_refresh` iterations, solves again for the circulation. Roll-up
stops when the relative change of the wake geometry drops below
`rollup_tolerance` or after `n_rollup` iterations; running out of iterations is
not an error.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

import numpy as np

from openaerowake.common.options import DimensionMismatchError
from openaerowake.geometry.collocation import generate_colocation_mesh
from openaerowake.geometry.normals import generate_surface_normals
from openaerowake.aerodynamics.assemble_aic import assemble_aic, assemble_rhs, count_unknowns
from openaerowake.aerodynamics.biot_savart import total_induced_velocity_on_wake
from openaerowake.aerodynamics.circulations import reconstruct_gamma, circulation_transfer
from openaerowake.aerodynamics.forces import calculate_static_forces
from openaerowake.aerodynamics.solve_matrix import solve_system
from openaerowake.wake import Wake, init_horseshoe, to_discretised, convect, displace, \
    attach_to_trailing_edge, copy_grids, grids_norm


logger = logging.getLogger(__name__)


class RollupStatus(Enum):
    HORSESHOE = 'horseshoe'      # horseshoe-only solve
    NOT_RUN = 'not_run'          # wake discretised, no roll-up iterations
    CONVERGING = 'converging'
    CONVERGED = 'converged'
    EXHAUSTED = 'exhausted'


class SteadyResult(object):
    """
    Outcome of a steady solve.

    Attributes
    ----------
    zeta : list of numpy arrays [nx, ny, 3]
        Vortex lattice the solve ran on.
    wake : Wake
        Final wake, geometry and circulation.
    gamma : list of numpy arrays [nx-1, ny-1]
        Bound ring circulations.
    forces : list of numpy arrays [nx, ny, 3]
        Nodal forces on each surface.
    status : RollupStatus
    n_iterations : int
        Roll-up iterations run.
    eps_history : list of float
        Relative wake change of every convergence check.
    n_solver_warnings : int
        Iterative linear solves that missed their tolerance.
    """

    def __init__(self, zeta, wake, gamma, forces, status=RollupStatus.HORSESHOE,
                 n_iterations=0, eps_history=None, n_solver_warnings=0):
        self.zeta = zeta
        self.wake = wake
        self.gamma = gamma
        self.forces = forces
        self.status = status
        self.n_iterations = n_iterations
        self.eps_history = eps_history if eps_history is not None else []
        self.n_solver_warnings = n_solver_warnings

    @property
    def zeta_star(self):
        return self.wake.zeta_star

    @property
    def gamma_star(self):
        return self.wake.gamma_star

    @property
    def converged(self):
        return self.status in (RollupStatus.HORSESHOE, RollupStatus.CONVERGED)

    def save(self, filename):
        """ Write the lattice, wake, circulations and forces to a `.npz` file. """
        arrays = {'n_surfaces': len(self.zeta)}
        for i_surf in range(len(self.zeta)):
            arrays['zeta_{}'.format(i_surf)] = self.zeta[i_surf]
            arrays['zeta_star_{}'.format(i_surf)] = self.zeta_star[i_surf]
            arrays['gamma_{}'.format(i_surf)] = self.gamma[i_surf]
            arrays['gamma_star_{}'.format(i_surf)] = self.gamma_star[i_surf]
            arrays['forces_{}'.format(i_surf)] = self.forces[i_surf]
        np.savez(filename, **arrays)


class SteadySolver(object):
    """
    Sequence the steady VLM solve for a rigid set of lifting surfaces.

    Parameters
    ----------
    options : VMOptions
        Solve and roll-up settings; only read.
    flight_conditions : FlightConditions
        Freestream used to lay out the horseshoe wake and scale the forces.
    """

    def __init__(self, options, flight_conditions):
        self.options = options
        self.flight_conditions = flight_conditions
        self.n_solver_warnings = 0

    def solve(self, zeta, uext, wake, gamma=None):
        """
        Solve for the circulation and forces of every surface.

        Parameters
        ----------
        zeta : list of numpy arrays [nx, ny, 3]
            Vortex lattice of each surface.
        uext : list of numpy arrays [nx, ny, 3]
            External velocity at the lattice nodes.
        wake : Wake
            Wake containers, filled in place; see `allocate_wake`.
        gamma : list of numpy arrays [nx-1, ny-1] (optional)
            Circulation grids to fill in place.

        Returns
        -------
        result : SteadyResult
        """
        options = self.options

        if len(zeta) != options['NumSurfaces'] or len(uext) != len(zeta):
            raise DimensionMismatchError(
                'NumSurfaces is {} but got {} meshes and {} velocity fields'.format(
                    options['NumSurfaces'], len(zeta), len(uext)))

        zeta_col = generate_colocation_mesh(zeta)
        uext_col = generate_colocation_mesh(uext)
        normals = generate_surface_normals(zeta)

        if gamma is None:
            gamma = [np.zeros(col.shape[:2]) for col in zeta_col]

        self.n_solver_warnings = 0

        self.solve_horseshoe(zeta, zeta_col, uext_col, wake, gamma, normals)

        if options['horseshoe']:
            forces = calculate_static_forces(zeta, wake, gamma, uext, options,
                                             self.flight_conditions)
            logger.info('Horseshoe solve done, %d unknowns', count_unknowns(uext_col))
            return SteadyResult(zeta, wake, gamma, forces, RollupStatus.HORSESHOE,
                                n_solver_warnings=self.n_solver_warnings)

        u_steady = np.array(uext[0][0, 0, :])
        delta_x = np.linalg.norm(u_steady) * options['dt']
        to_discretised(wake, delta_x)

        status = RollupStatus.NOT_RUN
        n_iterations = 0
        eps_history = []
        if options['n_rollup'] > 0:
            status, n_iterations, eps_history = self.rollup(
                zeta, zeta_col, uext_col, wake, gamma, normals, u_steady)

        forces = calculate_static_forces(zeta, wake, gamma, uext, options, self.flight_conditions)

        return SteadyResult(zeta, wake, gamma, forces, status, n_iterations, eps_history,
                            self.n_solver_warnings)

    def rollup(self, zeta, zeta_col, uext_col, wake, gamma, normals, u_steady):
        """
        Convect the discretised wake until its shape settles.

        Returns
        -------
        status : RollupStatus
            CONVERGED or EXHAUSTED.
        n_iterations : int
        eps_history : list of float
        """
        options = self.options
        dt = options['dt']

        zeta_star_norm_first = grids_norm(wake.zeta_star)
        zeta_star_previous = copy_grids(wake.zeta_star)

        status = RollupStatus.CONVERGING
        eps_history = []
        n_iterations = 0

        for i_rollup in range(options['n_rollup']):
            n_iterations = i_rollup + 1

            u_ind = total_induced_velocity_on_wake(zeta, wake, gamma,
                                                   options['vortex_radius'], options['NumCores'])
            for u in u_ind:
                u += u_steady

            convect(wake, u_ind, dt)
            displace(wake)
            attach_to_trailing_edge(zeta, wake)

            if i_rollup % options['rollup_aic_refresh'] == 0:
                self.solve_discretised(zeta, zeta_col, uext_col, wake, gamma, normals)

            # The first iteration only starts the comparison against the
            # freshly discretised wake.
            if i_rollup != 0:
                delta = [now - previous for now, previous in
                         zip(wake.zeta_star, zeta_star_previous)]
                eps = abs(grids_norm(delta)) / zeta_star_norm_first
                eps_history.append(eps)
                logger.debug('Roll-up iteration %d: eps = %g', i_rollup, eps)

                if eps < options['rollup_tolerance']:
                    status = RollupStatus.CONVERGED
                    break

                zeta_star_previous = copy_grids(wake.zeta_star)

        if status == RollupStatus.CONVERGING:
            status = RollupStatus.EXHAUSTED
            logger.info('Wake roll-up did not converge to %g in %d iterations',
                        options['rollup_tolerance'], n_iterations)
        else:
            logger.info('Wake roll-up converged in %d iterations', n_iterations)

        return status, n_iterations, eps_history

    def solve_horseshoe(self, zeta, zeta_col, uext_col, wake, gamma, normals):
        """
        Solve the tangency problem with a horseshoe wake.

        The wake is laid out from the trailing edge and flow direction, then
        every wake row takes the trailing-edge circulation.
        """
        init_horseshoe(zeta, wake, self.flight_conditions)

        Ktotal = count_unknowns(uext_col, zeta)

        rhs, _ = assemble_rhs(zeta_col, wake, uext_col, normals, self.options)
        aic = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, self.options, True)

        gamma_flat = self._solve_linear(aic, rhs)
        reconstruct_gamma(gamma_flat, zeta_col, gamma)

        circulation_transfer(gamma, wake.gamma_star)

    def solve_discretised(self, zeta, zeta_col, uext_col, wake, gamma, normals):
        """
        Solve the tangency problem with the current discretised wake.

        The AIC matrix and the right-hand side only read the geometry, so they
        are built as two concurrent tasks when more than one core is allowed.
        The trailing-edge circulation goes to every wake row for a steady
        wake, to the newest row only otherwise.
        """
        options = self.options
        Ktotal = count_unknowns(uext_col, zeta)

        if options['NumCores'] > 1:
            with ThreadPoolExecutor(max_workers=2) as executor:
                rhs_task = executor.submit(assemble_rhs, zeta_col, wake, uext_col, normals,
                                           options)
                aic_task = executor.submit(assemble_aic, Ktotal, zeta, zeta_col, wake,
                                           uext_col, normals, options, False)
                rhs, _ = rhs_task.result()
                aic = aic_task.result()
        else:
            rhs, _ = assemble_rhs(zeta_col, wake, uext_col, normals, options)
            aic = assemble_aic(Ktotal, zeta, zeta_col, wake, uext_col, normals, options, False)

        gamma_flat = self._solve_linear(aic, rhs)
        reconstruct_gamma(gamma_flat, zeta_col, gamma)

        n_rows = None if options['Steady'] else 1
        circulation_transfer(gamma, wake.gamma_star, n_rows)

    def _solve_linear(self, aic, rhs):
        gamma_flat, converged = solve_system(aic, rhs, self.options, return_info=True)
        if not converged:
            self.n_solver_warnings += 1
        return gamma_flat


def solve_steady(zeta, uext, zeta_star, gamma, gamma_star, options, flight_conditions):
    """
    Run the steady solve on caller-owned containers.

    `zeta_star`, `gamma` and `gamma_star` are filled in place with the final
    wake geometry, bound circulation and wake circulation.

    Parameters
    ----------
    zeta : list of numpy arrays [nx, ny, 3]
        Vortex lattice of each surface.
    uext : list of numpy arrays [nx, ny, 3]
        External velocity at the lattice nodes.
    zeta_star : list of numpy arrays [mstar+1, ny, 3]
        Wake geometry; its row count sets the wake length.
    gamma : list of numpy arrays [nx-1, ny-1]
        Bound ring circulations.
    gamma_star : list of numpy arrays [mstar, ny-1]
        Wake ring circulations.
    options : VMOptions
    flight_conditions : FlightConditions

    Returns
    -------
    result : SteadyResult
    """
    wake = Wake(zeta_star, gamma_star)
    return SteadySolver(options, flight_conditions).solve(zeta, uext, wake, gamma)
