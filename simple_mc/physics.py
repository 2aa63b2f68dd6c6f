"""
Analog transport of a single particle in the homogeneous box.

Implements:
- Free flight distance sampling: s = -ln(xi) / xs_t
- Boundary crossing with the box boundary condition
- Collision estimator flux tally (when tallies are on)
- Absorption vs scattering, fission vs capture
- Fission: floor(nu + xi) isotropic progeny banked at the collision site

The fission bank is passed explicitly; transport touches no shared state.
"""
import numpy as np

from .particle import sample_fission_particle


def transport(p, geometry, material, tally, fission_bank, rng):
    """Follow particle *p* until it is absorbed or leaks.

    Args:
        p: Particle (mutated in place, dead on return)
        geometry: Geometry
        material: Material
        tally: Tally or None; scored only when tally.tallies_on
        fission_bank: ParticleBank receiving fission progeny
        rng: numpy random Generator (this worker's tracking stream)
    """
    while p.alive:
        xs = material.macro_xs()

        d_collision = -np.log(1.0 - rng.random()) / xs.xs_t
        d_boundary, surface = geometry.distance_to_boundary(p)

        if d_boundary < d_collision:
            # --- BOUNDARY CROSSING ---
            p.move(d_boundary)
            geometry.cross_surface(p, surface)
        else:
            # --- COLLISION ---
            p.move(d_collision)
            if tally is not None and tally.tallies_on:
                tally.score(p, xs.xs_t)
            collision(p, material, xs, fission_bank, rng)


def collision(p, material, xs, fission_bank, rng):
    """Sample the reaction at a collision site."""
    if rng.random() < xs.xs_a / xs.xs_t:
        # --- ABSORPTION ---
        if rng.random() < xs.xs_f / xs.xs_a:
            # --- FISSION ---
            n_new = int(material.nu + rng.random())
            for _ in range(n_new):
                fission_bank.append(sample_fission_particle(p, rng))
        p.alive = False
    else:
        # --- SCATTERING (isotropic) ---
        p.last_energy = p.energy
        p.set_direction(rng.random() * 2.0 - 1.0, rng.random() * 2.0 * np.pi)
