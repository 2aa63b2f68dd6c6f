"""Abstract base class for transport backends."""
from abc import ABC, abstractmethod
from typing import Optional

from ..geometry import Geometry
from ..materials import Material
from ..particle import ParticleBank
from ..tallies import Tally


class TransportBackend(ABC):
    """Abstract interface for per-generation particle transport.

    The eigenvalue driver (PowerIteration) calls transport_generation()
    once per generation and resamples the returned fission bank.
    """

    @abstractmethod
    def transport_generation(
        self,
        source_bank: ParticleBank,
        geometry: Geometry,
        material: Material,
        tally: Optional[Tally],
        seed: int,
        generation: int,
    ) -> ParticleBank:
        """Transport every particle of source_bank through one generation.

        Args:
            source_bank: ParticleBank with this generation's source
            geometry: Geometry of the box
            material: Material filling the box
            tally: Tally receiving collision scores (may be off or None)
            seed: global run seed, for per-worker tracking streams
            generation: global generation counter

        Returns:
            ParticleBank holding all fission progeny, merged across workers
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable backend name, e.g. 'CPU (8 threads)'."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this backend can run here."""
        pass
