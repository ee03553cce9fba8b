from openaerowake.wake.lattice import Wake, allocate_wake, copy_grids, grids_norm, \
    HORSESHOE, DISCRETISED
from openaerowake.wake.horseshoe import init_horseshoe, to_discretised, HORSESHOE_FACTOR
from openaerowake.wake.discretised import convect, displace, attach_to_trailing_edge
