"""
Option sets shared by every stage of the steady VLM analysis.

Both sets are OpenMDAO options dictionaries, so each entry is declared once with
its type, bounds and description and checked on assignment. The caller builds
them once and the solver only reads them.
"""
import numpy as np

from openmdao.utils.options_dictionary import OptionsDictionary


class DimensionMismatchError(ValueError):
    """
    Raised when grid sizes that must agree do not, e.g. the number of unknowns
    derived from the velocity grids against the panels of the mesh.
    """
    pass


def _check_positive(name, value):
    if value <= 0.:
        raise ValueError("Option '{}' must be positive, got {}".format(name, value))


class VMOptions(OptionsDictionary):
    """
    Settings for the steady vortex-lattice solve and the wake roll-up.

    Any keyword argument overrides the declared default.
    """

    def __init__(self, **kwargs):
        super(VMOptions, self).__init__()

        self.declare('horseshoe', default=False, types=bool,
            desc='Stop after the horseshoe solve (no wake discretisation or roll-up).')
        self.declare('Steady', default=True, types=bool,
            desc='Transfer trailing-edge circulation to every wake row. If False '
                 'only the newest row is updated and older rows are treated as known.')
        self.declare('n_rollup', default=0, types=int, lower=0,
            desc='Maximum number of wake roll-up iterations.')
        self.declare('rollup_tolerance', default=1e-4, types=(int, float), lower=0.,
            desc='Relative change of the wake geometry below which roll-up stops.')
        self.declare('rollup_aic_refresh', default=1, types=int, lower=1,
            desc='Re-solve the discretised system every this many roll-up iterations.')
        self.declare('dt', default=0.1, types=(int, float), check_valid=_check_positive,
            desc='Convection time step; also sets the wake row spacing.')
        self.declare('iterative_solver', default=False, types=bool,
            desc='Use GMRES instead of a dense LU factorisation.')
        self.declare('iterative_tol', default=1e-4, types=(int, float), lower=0.,
            desc='Relative residual tolerance of the iterative solver.')
        self.declare('iterative_precond', default=False, types=bool,
            desc='Jacobi-precondition the iterative solver.')
        self.declare('NumSurfaces', default=1, types=int, lower=1,
            desc='Number of lifting surfaces.')
        self.declare('NumCores', default=1, types=int, lower=1,
            desc='Worker threads for the assembly and the wake velocity evaluation.')
        self.declare('vortex_radius', default=1e-6, types=(int, float), lower=0.,
            desc='Cutoff distance under which a filament induces no velocity.')

        self.update(kwargs)


class FlightConditions(OptionsDictionary):
    """
    Freestream state used to lay out the wake and to scale the forces.
    """

    def __init__(self, **kwargs):
        super(FlightConditions, self).__init__()

        self.declare('uinf', default=1.0, types=(int, float), lower=0.,
            desc='Freestream speed [m/s].')
        self.declare('uinf_direction', default=np.array([1., 0., 0.]),
            types=(list, tuple, np.ndarray),
            desc='Freestream direction; normalised when read.')
        self.declare('rho', default=1.225, types=(int, float), lower=0.,
            desc='Air density [kg/m**3].')
        self.declare('c_ref', default=1.0, types=(int, float), lower=0.,
            desc='Reference length [m].')

        self.update(kwargs)

    @property
    def direction(self):
        """ Unit freestream direction as a (3,) array. """
        direction = np.asarray(self['uinf_direction'], dtype=float)
        if direction.shape != (3,):
            raise ValueError('uinf_direction must have 3 components, got shape {}'.format(
                direction.shape))
        return direction / np.linalg.norm(direction)
