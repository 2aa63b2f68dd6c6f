"""
Run parameters.

Defaults reproduce the reference mini-app. A plain-text parameter file
holds one ``key value`` pair per line; ``#`` starts a comment:

    # box and physics
    particles   10000
    batches     20
    active      10
    bc          reflect
    entropy_file entropy.dat

Giving an output file name switches that output on. ``source_file`` is
the exception: it is shared by load_source, save_source and write_source,
which must each be switched on by name.
"""
import logging
from dataclasses import dataclass, fields
from typing import Optional

from .constants import (
    BC_NAMES,
    DEFAULT_N_PARTICLES, DEFAULT_N_BATCHES, DEFAULT_N_GENERATIONS,
    DEFAULT_N_ACTIVE, DEFAULT_N_NUCLIDES, DEFAULT_N_BINS, DEFAULT_SEED,
    DEFAULT_NU, DEFAULT_XS_F, DEFAULT_XS_A, DEFAULT_XS_S,
    DEFAULT_GX, DEFAULT_GY, DEFAULT_GZ,
)
from .errors import ParameterError

logger = logging.getLogger(__name__)


@dataclass
class Parameters:
    n_particles: int = DEFAULT_N_PARTICLES
    n_batches: int = DEFAULT_N_BATCHES
    n_generations: int = DEFAULT_N_GENERATIONS
    n_active: int = DEFAULT_N_ACTIVE
    bc: str = 'reflect'
    n_nuclides: int = DEFAULT_N_NUCLIDES
    tally: bool = False
    n_bins: int = DEFAULT_N_BINS
    seed: int = DEFAULT_SEED
    nu: float = DEFAULT_NU
    xs_f: float = DEFAULT_XS_F
    xs_a: float = DEFAULT_XS_A
    xs_s: float = DEFAULT_XS_S
    gx: float = DEFAULT_GX
    gy: float = DEFAULT_GY
    gz: float = DEFAULT_GZ
    n_workers: int = 1

    load_source: bool = False
    save_source: bool = False
    write_tally: bool = False
    write_entropy: bool = False
    write_keff: bool = False
    write_bank: bool = False
    write_source: bool = False
    tally_file: Optional[str] = None
    entropy_file: Optional[str] = None
    keff_file: Optional[str] = None
    bank_file: Optional[str] = None
    source_file: Optional[str] = None

    @property
    def n_inactive(self):
        return self.n_batches - self.n_active

    def validate(self):
        """Raise ParameterError on an inconsistent parameter set."""
        for name in ('n_particles', 'n_batches', 'n_generations', 'n_nuclides',
                     'n_bins', 'n_workers'):
            if getattr(self, name) < 1:
                raise ParameterError(f"{name} must be at least 1")
        if not 0 <= self.n_active <= self.n_batches:
            raise ParameterError(
                f"n_active ({self.n_active}) must be between 0 and n_batches ({self.n_batches})"
            )
        if min(self.gx, self.gy, self.gz) <= 0:
            raise ParameterError("geometry extents must be positive")
        if self.bc not in BC_NAMES:
            raise ParameterError(
                f"unknown boundary condition '{self.bc}' (choose from {', '.join(BC_NAMES)})"
            )
        if self.xs_a <= 0 or self.xs_s < 0 or not 0 <= self.xs_f <= self.xs_a:
            raise ParameterError("cross sections must satisfy 0 <= xs_f <= xs_a, xs_a > 0, xs_s >= 0")
        for switch, fname in (('write_tally', 'tally_file'), ('write_entropy', 'entropy_file'),
                              ('write_keff', 'keff_file'), ('write_bank', 'bank_file'),
                              ('write_source', 'source_file'), ('load_source', 'source_file'),
                              ('save_source', 'source_file')):
            if getattr(self, switch) and not getattr(self, fname):
                raise ParameterError(f"{switch} requires {fname}")
        if self.write_source and (self.load_source or self.save_source):
            raise ParameterError(
                "write_source cannot share source_file with load_source or save_source"
            )
        return self

    def summary(self):
        """Print human-readable parameter table."""
        print("=" * 60)
        print("  INPUT SUMMARY")
        print("=" * 60)
        print(f"  Number of particles:          {self.n_particles:,}")
        print(f"  Number of batches:            {self.n_batches}")
        print(f"  Number of active batches:     {self.n_active}")
        print(f"  Number of generations:        {self.n_generations}")
        print(f"  Boundary conditions:          {self.bc}")
        print(f"  Number of nuclides:           {self.n_nuclides}")
        print(f"  Tallies active:               {'yes' if self.tally else 'no'}")
        print(f"  Mesh bins per axis:           {self.n_bins}")
        print(f"  Box (x, y, z):                {self.gx:g} x {self.gy:g} x {self.gz:g}")
        print(f"  nu / xs_f / xs_a / xs_s:      {self.nu:g} / {self.xs_f:g} / "
              f"{self.xs_a:g} / {self.xs_s:g}")
        print(f"  RNG seed:                     {self.seed}")
        print(f"  Worker threads:               {self.n_workers}")
        print("=" * 60)


# Parameter-file keys -> (dataclass field, converter)
def _to_bool(text):
    value = text.strip().lower()
    if value in ('true', '1', 'yes', 'on'):
        return True
    if value in ('false', '0', 'no', 'off'):
        return False
    raise ValueError(f"not a boolean: {text}")


_KEYS = {
    'particles': 'n_particles',
    'batches': 'n_batches',
    'generations': 'n_generations',
    'active': 'n_active',
    'boundary_conditions': 'bc',
    'nuclides': 'n_nuclides',
    'bins': 'n_bins',
    'workers': 'n_workers',
    'threads': 'n_workers',
}

_FILE_SWITCHES = {
    'tally_file': 'write_tally',
    'entropy_file': 'write_entropy',
    'keff_file': 'write_keff',
    'bank_file': 'write_bank',
}


def set_param(params, key, text):
    """Set one parameter from its textual value."""
    name = _KEYS.get(key, key)
    types = {f.name: f.type for f in fields(Parameters)}
    if name not in types:
        raise ParameterError(f"unknown parameter '{key}'")

    kind = types[name]
    try:
        if kind in (bool, 'bool'):
            value = _to_bool(text)
        elif kind in (int, 'int'):
            value = int(text)
        elif kind in (float, 'float'):
            value = float(text)
        elif name == 'bc':
            value = text.strip().lower()
        else:
            value = text.strip()
    except ValueError as exc:
        raise ParameterError(f"bad value for '{key}': {text!r}") from exc

    setattr(params, name, value)
    if name in _FILE_SWITCHES and value:
        setattr(params, _FILE_SWITCHES[name], True)
    return params


def parse_params(path, params=None):
    """Read a ``key value`` parameter file into *params* (or new defaults)."""
    if params is None:
        params = Parameters()
    try:
        with open(path) as f:
            lines = f.readlines()
    except OSError as exc:
        raise ParameterError(f"could not read parameter file {path}: {exc}") from exc

    for lineno, line in enumerate(lines, start=1):
        line = line.split('#', 1)[0].strip()
        if not line:
            continue
        parts = line.split(None, 1)
        if len(parts) != 2:
            raise ParameterError(f"{path}:{lineno}: expected 'key value', got {line!r}")
        key, text = parts
        set_param(params, key.lower(), text)
        logger.debug("parameter %s = %s", key, text)

    return params
