"""
Plain-text output artifacts.

Every file is truncated once by init_output() and then appended to, one
value (or vector) per call:

  entropy file : one Shannon entropy per generation
  keff file    : one k_eff per active batch
  tally file   : one line per active batch, the flattened batch flux
  bank file    : one 'x y z' line per source particle, per call
  source file  : full particle records (also read back by load_source)
"""
import numpy as np

from .errors import ParameterError
from .particle import PARTICLE_DTYPE, ParticleBank

_FILES = (
    ('write_tally', 'tally_file'),
    ('write_entropy', 'entropy_file'),
    ('write_keff', 'keff_file'),
    ('write_bank', 'bank_file'),
    ('write_source', 'source_file'),
)


def init_output(params):
    """Truncate every enabled output file."""
    for switch, fname in _FILES:
        if getattr(params, switch):
            open(getattr(params, fname), 'w').close()


def write_entropy(H, filename):
    with open(filename, 'a') as f:
        f.write(f"{H:.10e}\n")


def write_keff(keff, filename):
    """Append k_eff values, one per line."""
    with open(filename, 'a') as f:
        np.savetxt(f, np.atleast_1d(np.asarray(keff, dtype=np.float64)), fmt='%.10e')


def write_tally(tally, filename):
    """Append the last closed batch's flux as one line."""
    with open(filename, 'a') as f:
        np.savetxt(f, tally.last_batch.reshape(1, -1), fmt='%.10e')


def write_bank(bank, filename):
    """Append the positions of the bank's live particles."""
    x, y, z = bank.positions()
    with open(filename, 'a') as f:
        np.savetxt(f, np.column_stack((x, y, z)), fmt='%.10e')


def _record_columns(bank):
    live = bank.particles
    return np.column_stack([live[name].astype(np.float64) for name in PARTICLE_DTYPE.names])


def write_source(bank, filename):
    """Append full particle records of the bank."""
    with open(filename, 'a') as f:
        np.savetxt(f, _record_columns(bank), fmt='%.17e')


def save_source(bank, filename):
    """Overwrite *filename* with the bank's particle records."""
    with open(filename, 'w') as f:
        np.savetxt(f, _record_columns(bank), fmt='%.17e')


def load_source(filename, n_particles=None):
    """Read particle records written by save_source into a new bank.

    If n_particles is given only the first n_particles records are kept.

    Raises:
        ParameterError: if the file is missing, empty or not a source file
    """
    try:
        data = np.loadtxt(filename, ndmin=2)
    except (OSError, ValueError) as exc:
        raise ParameterError(f"could not read source file {filename}: {exc}") from exc
    n_cols = len(PARTICLE_DTYPE.names)
    if data.shape[0] == 0 or data.shape[1] != n_cols:
        raise ParameterError(
            f"source file {filename} must hold rows of {n_cols} columns, "
            f"got shape {data.shape}"
        )
    if n_particles is not None:
        data = data[:n_particles]
    records = np.zeros(len(data), dtype=PARTICLE_DTYPE)
    for col, name in enumerate(PARTICLE_DTYPE.names):
        records[name] = data[:, col]
    records['alive'] = data[:, -1] != 0.0
    bank = ParticleBank(len(records))
    bank.extend(records)
    return bank
