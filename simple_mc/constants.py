"""
Constants and default run parameters for the criticality mini-app.
All lengths in cm, cross sections in 1/cm.
"""
import numpy as np

# ---------------------------------------------------------------------------
# Boundary conditions
# ---------------------------------------------------------------------------
VACUUM = 0
REFLECT = 1
PERIODIC = 2

BC_NAMES = {
    'vacuum': VACUUM,
    'reflect': REFLECT,
    'periodic': PERIODIC,
}

# ---------------------------------------------------------------------------
# Box surfaces
# ---------------------------------------------------------------------------
X0 = 0
X1 = 1
Y0 = 2
Y1 = 3
Z0 = 4
Z1 = 5

# ---------------------------------------------------------------------------
# RNG stream families
# ---------------------------------------------------------------------------
N_STREAMS = 2
STREAM_TRACK = 0   # per-particle random walks (one sub-stream per worker)
STREAM_OTHER = 1   # source sampling, resampling, material generation

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_N_PARTICLES = 10000
DEFAULT_N_BATCHES = 20
DEFAULT_N_GENERATIONS = 1
DEFAULT_N_ACTIVE = 10
DEFAULT_N_NUCLIDES = 60
DEFAULT_N_BINS = 10
DEFAULT_SEED = 1

# Macroscopic cross sections hardwired to give k_inf close to 1
DEFAULT_NU = 1.5
DEFAULT_XS_F = 2.29
DEFAULT_XS_A = 3.42
DEFAULT_XS_S = 2.29

# Box extents (cm)
DEFAULT_GX = 1000.0
DEFAULT_GY = 1000.0
DEFAULT_GZ = 1000.0

INFINITY = np.inf
