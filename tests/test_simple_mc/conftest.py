"""
Shared pytest fixtures for simple_mc test suite.
"""
import numpy as np
import pytest

from simple_mc.constants import REFLECT
from simple_mc.geometry import Geometry
from simple_mc.materials import build_material
from simple_mc.particle import ParticleBank, PARTICLE_DTYPE, create_source_bank
from simple_mc.backends.cpu import CPUBackend


@pytest.fixture
def rng():
    """Numpy Generator with fixed seed for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def geometry():
    """Small reflecting 10 x 10 x 10 cm box."""
    return Geometry(10.0, 10.0, 10.0, REFLECT)


@pytest.fixture
def material(rng):
    """Default cross sections spread over a handful of nuclides."""
    return build_material(5, rng)


@pytest.fixture
def source_bank(geometry, rng):
    """200-particle source bank uniform in the box."""
    return create_source_bank(200, geometry, rng)


@pytest.fixture
def cpu_backend():
    """CPUBackend with 2 worker threads."""
    return CPUBackend(n_workers=2)


def make_labelled_bank(n, capacity=None):
    """Bank whose particle k sits at x = k, so records can be identified."""
    bank = ParticleBank(capacity or max(n, 1))
    rec = np.zeros(n, dtype=PARTICLE_DTYPE)
    rec['x'] = np.arange(n, dtype=np.float64)
    rec['u'] = 1.0
    rec['mu'] = 1.0
    rec['energy'] = 1.0
    rec['alive'] = True
    bank.extend(rec)
    return bank


@pytest.fixture
def labelled_bank():
    return make_labelled_bank
