"""
Homogeneous material built from a set of synthetic nuclides.

The macroscopic cross sections are hardwired (xs_f, xs_a, xs_s) to give a
k_inf close to 1. The nuclide set is generated so that the
density-weighted microscopic cross sections reproduce exactly those
macroscopic values; transport recomputes the sum at every collision,
which is the dominant per-collision lookup cost.
"""
from dataclasses import dataclass, field

import numpy as np

from .constants import DEFAULT_NU, DEFAULT_XS_F, DEFAULT_XS_A, DEFAULT_XS_S


@dataclass
class Nuclide:
    xs_f: float
    xs_a: float
    xs_s: float
    xs_t: float
    atom_density: float


@dataclass
class MacroXS:
    """Macroscopic cross sections (1/cm)."""
    xs_f: float
    xs_a: float
    xs_s: float
    xs_t: float


@dataclass
class Material:
    xs_f: float = DEFAULT_XS_F
    xs_a: float = DEFAULT_XS_A
    xs_s: float = DEFAULT_XS_S
    nu: float = DEFAULT_NU
    nuclides: list = field(default_factory=list)

    # SoA copies of the nuclide data for vectorized summation
    _density: np.ndarray = field(default=None, init=False, repr=False)
    _micro: np.ndarray = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self._pack()

    @property
    def xs_t(self):
        return self.xs_a + self.xs_s

    @property
    def n_nuclides(self):
        return len(self.nuclides)

    @property
    def k_inf(self):
        """Infinite-medium multiplication factor nu * xs_f / xs_a."""
        return self.nu * self.xs_f / self.xs_a

    def _pack(self):
        if not self.nuclides:
            self._density = None
            self._micro = None
            return
        self._density = np.array([n.atom_density for n in self.nuclides])
        self._micro = np.array([[n.xs_f, n.xs_a, n.xs_s] for n in self.nuclides])

    def macro_xs(self):
        """Macroscopic cross sections summed over nuclides.

        Falls back to the hardwired values for a nuclide-free material.
        """
        if self._micro is None:
            return MacroXS(self.xs_f, self.xs_a, self.xs_s, self.xs_t)
        xs_f, xs_a, xs_s = self._density @ self._micro
        return MacroXS(float(xs_f), float(xs_a), float(xs_s), float(xs_a + xs_s))


def build_material(n_nuclides, rng, xs_f=DEFAULT_XS_F, xs_a=DEFAULT_XS_A,
                   xs_s=DEFAULT_XS_S, nu=DEFAULT_NU):
    """Generate n_nuclides arbitrary nuclides summing to the given macro XS.

    Atom densities are drawn by stick-breaking so they sum to 1; random
    microscopic cross sections are then rescaled per reaction so that
    sum_i N_i * sigma_i equals the requested macroscopic value.

    Args:
        n_nuclides: number of nuclides (>= 1)
        rng: numpy random Generator
        xs_f, xs_a, xs_s: target macroscopic cross sections (1/cm)
        nu: mean number of neutrons per fission

    Returns:
        Material
    """
    remaining = 1.0
    density = np.zeros(n_nuclides)
    micro = np.zeros((n_nuclides, 3))   # columns: a, f, s
    for i in range(n_nuclides):
        if i < n_nuclides - 1:
            density[i] = rng.random() * remaining
            remaining -= density[i]
        else:
            density[i] = remaining
        micro[i] = rng.random(3)

    sums = density @ micro
    micro[:, 0] /= sums[0] / xs_a
    micro[:, 1] /= sums[1] / xs_f
    micro[:, 2] /= sums[2] / xs_s

    nuclides = [
        Nuclide(
            xs_f=float(micro[i, 1]),
            xs_a=float(micro[i, 0]),
            xs_s=float(micro[i, 2]),
            xs_t=float(micro[i, 0] + micro[i, 2]),
            atom_density=float(density[i]),
        )
        for i in range(n_nuclides)
    ]
    return Material(xs_f=xs_f, xs_a=xs_a, xs_s=xs_s, nu=nu, nuclides=nuclides)
