"""
simple_mc - Criticality Monte Carlo Mini-Application

Estimates k-effective of a homogeneous rectangular box by power iteration:
  - fixed-size source bank, variable-size fission bank
  - unbiased reservoir resampling between generations
  - Shannon entropy of the source as a convergence diagnostic
  - threaded per-particle transport with worker-private fission banks

Entry point: simple_mc.cli:main (console script `simple-mc`).
"""
__version__ = "0.1.0"
