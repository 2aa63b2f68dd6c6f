"""
Homogeneous rectangular box geometry.

The box spans [0, x] x [0, y] x [0, z] and is filled with a single
material. Six surfaces (X0, X1, Y0, Y1, Z0, Z1) share one boundary
condition:

  VACUUM   - particle leaks and is killed
  REFLECT  - specular reflection, normal direction component flipped
  PERIODIC - particle re-enters through the opposite face
"""
from dataclasses import dataclass

import numpy as np

from .constants import (
    VACUUM, REFLECT, PERIODIC, BC_NAMES,
    X0, X1, Y0, Y1, Z0, Z1,
    DEFAULT_GX, DEFAULT_GY, DEFAULT_GZ, INFINITY,
)


@dataclass
class Geometry:
    x: float = DEFAULT_GX
    y: float = DEFAULT_GY
    z: float = DEFAULT_GZ
    bc: int = REFLECT

    def __post_init__(self):
        if isinstance(self.bc, str):
            self.bc = BC_NAMES[self.bc.lower()]

    @property
    def volume(self):
        return self.x * self.y * self.z

    @property
    def extents(self):
        return self.x, self.y, self.z

    def contains(self, x, y, z):
        """True where the point lies inside the closed box. Scalars or arrays."""
        return ((x >= 0) & (x <= self.x) & (y >= 0) & (y <= self.y)
                & (z >= 0) & (z <= self.z))

    def distance_to_boundary(self, p):
        """Distance along the particle's direction to the nearest face.

        Returns: (distance, surface)
        """
        d_min = INFINITY
        surface = -1
        for pos, cos, upper, lo_surf, hi_surf in (
            (p.x, p.u, self.x, X0, X1),
            (p.y, p.v, self.y, Y0, Y1),
            (p.z, p.w, self.z, Z0, Z1),
        ):
            if cos > 0.0:
                d = (upper - pos) / cos
                if d < d_min:
                    d_min, surface = d, hi_surf
            elif cos < 0.0:
                d = -pos / cos
                if d < d_min:
                    d_min, surface = d, lo_surf
        return d_min, surface

    def cross_surface(self, p, surface):
        """Apply the boundary condition to a particle sitting on *surface*."""
        if self.bc == VACUUM:
            p.alive = False
            return

        upper = {X1: self.x, Y1: self.y, Z1: self.z}
        axis = 'xyz'[surface // 2]
        on_low_face = surface in (X0, Y0, Z0)

        if self.bc == REFLECT:
            setattr(p, axis, 0.0 if on_low_face else upper[surface])
            if axis == 'x':
                p.u = -p.u
                p.mu = -p.mu
            elif axis == 'y':
                p.v = -p.v
                p.phi = np.pi - p.phi
            else:
                p.w = -p.w
                p.phi = -p.phi
        elif self.bc == PERIODIC:
            extent = getattr(self, axis)
            setattr(p, axis, extent if on_low_face else 0.0)
        else:
            raise ValueError(f"Unknown boundary condition: {self.bc}")
