"""
Tests for simple_mc.backends (CPUBackend and registry).
"""
import numpy as np
import pytest

from simple_mc.backends import get_backend, list_backends
from simple_mc.backends.cpu import CPUBackend
from simple_mc.particle import ParticleBank, create_source_bank
from simple_mc.tallies import Tally


class TestCPUBackendAvailability:
    def test_is_available_returns_true(self, cpu_backend):
        assert cpu_backend.is_available() is True

    def test_get_name_contains_cpu(self, cpu_backend):
        name = cpu_backend.get_name()
        assert "CPU" in name, f"get_name() '{name}' does not contain 'CPU'"
        assert "2 threads" in name

    def test_registry(self):
        assert isinstance(get_backend('cpu', n_workers=3), CPUBackend)
        assert get_backend('auto', n_workers=3).n_workers == 3
        assert list_backends()[0][0] == 'CPU'

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_backend('gpu')


class TestTransportGeneration:
    def test_returns_merged_fission_bank(self, cpu_backend, geometry, material, source_bank):
        fb = cpu_backend.transport_generation(source_bank, geometry, material, None, 1, 0)
        assert isinstance(fb, ParticleBank)
        assert fb.n > 0

    def test_k_generation_reasonable(self, cpu_backend, geometry, material, source_bank):
        fb = cpu_backend.transport_generation(source_bank, geometry, material, None, 1, 0)
        k_gen = fb.n / source_bank.n
        assert 0.6 <= k_gen <= 1.4

    def test_source_bank_untouched(self, cpu_backend, geometry, material, source_bank):
        before = source_bank.particles.copy()
        cpu_backend.transport_generation(source_bank, geometry, material, None, 1, 0)
        assert source_bank.n == len(before)
        np.testing.assert_array_equal(source_bank.particles, before)

    def test_empty_source(self, cpu_backend, geometry, material):
        fb = cpu_backend.transport_generation(ParticleBank(4), geometry, material, None, 1, 0)
        assert fb.n == 0

    def test_more_workers_than_particles(self, geometry, material, rng):
        backend = CPUBackend(n_workers=8)
        source = create_source_bank(3, geometry, rng)
        fb = backend.transport_generation(source, geometry, material, None, 1, 0)
        assert fb.n >= 0

    def test_tally_merged_from_workers(self, cpu_backend, geometry, material, source_bank):
        tally = Tally(geometry, 2)
        tally.tallies_on = True
        cpu_backend.transport_generation(source_bank, geometry, material, tally, 1, 0)
        assert np.sum(tally.flux) > 0


class TestReproducibility:
    def test_same_seed_same_fission_bank(self, geometry, material, source_bank):
        backend = CPUBackend(n_workers=3)
        a = backend.transport_generation(source_bank, geometry, material, None, 7, 4)
        b = backend.transport_generation(source_bank, geometry, material, None, 7, 4)
        assert a.n == b.n
        np.testing.assert_array_equal(a.particles, b.particles)

    def test_generation_changes_streams(self, geometry, material, source_bank):
        backend = CPUBackend(n_workers=2)
        a = backend.transport_generation(source_bank, geometry, material, None, 7, 0)
        b = backend.transport_generation(source_bank, geometry, material, None, 7, 1)
        assert not (a.n == b.n and np.array_equal(a.particles, b.particles))

    def test_single_worker_matches_inline(self, geometry, material, source_bank):
        a = CPUBackend(n_workers=1).transport_generation(source_bank, geometry, material, None, 3, 0)
        b = CPUBackend(n_workers=1).transport_generation(source_bank, geometry, material, None, 3, 0)
        np.testing.assert_array_equal(a.particles, b.particles)
