"""
Tests for simple_mc.geometry module.
"""
import numpy as np
import pytest

from simple_mc.constants import VACUUM, REFLECT, PERIODIC, X0, X1, Y1, Z0
from simple_mc.geometry import Geometry
from simple_mc.particle import Particle


def _particle(x, y, z, mu, phi):
    p = Particle(x=x, y=y, z=z)
    p.set_direction(mu, phi)
    return p


class TestGeometryBasics:
    def test_volume(self):
        assert Geometry(2.0, 3.0, 4.0).volume == pytest.approx(24.0)

    def test_bc_from_name(self):
        assert Geometry(1, 1, 1, 'periodic').bc == PERIODIC
        assert Geometry(1, 1, 1, 'VACUUM').bc == VACUUM

    def test_contains_vectorized(self, geometry):
        x = np.array([0.0, 5.0, 10.0, 10.1])
        inside = geometry.contains(x, x * 0 + 1, x * 0 + 1)
        np.testing.assert_array_equal(inside, [True, True, True, False])


class TestDistanceToBoundary:
    def test_along_plus_x(self, geometry):
        p = _particle(2.0, 5.0, 5.0, 1.0, 0.0)
        d, surface = geometry.distance_to_boundary(p)
        assert d == pytest.approx(8.0)
        assert surface == X1

    def test_along_minus_x(self, geometry):
        p = _particle(2.0, 5.0, 5.0, -1.0, 0.0)
        d, surface = geometry.distance_to_boundary(p)
        assert d == pytest.approx(2.0)
        assert surface == X0

    def test_along_plus_y(self, geometry):
        p = _particle(5.0, 7.0, 5.0, 0.0, 0.0)
        d, surface = geometry.distance_to_boundary(p)
        assert d == pytest.approx(3.0)
        assert surface == Y1

    def test_along_minus_z(self, geometry):
        p = _particle(5.0, 5.0, 4.0, 0.0, -np.pi / 2)
        d, surface = geometry.distance_to_boundary(p)
        assert d == pytest.approx(4.0)
        assert surface == Z0

    def test_oblique_picks_nearest(self, geometry):
        p = _particle(9.0, 5.0, 5.0, np.sqrt(0.5), 0.0)  # 45 degrees in x-y
        d, surface = geometry.distance_to_boundary(p)
        assert surface == X1
        assert d == pytest.approx(np.sqrt(2.0))


class TestCrossSurface:
    def test_vacuum_kills(self):
        g = Geometry(10, 10, 10, VACUUM)
        p = _particle(10.0, 5.0, 5.0, 1.0, 0.0)
        g.cross_surface(p, X1)
        assert not p.alive

    def test_reflect_flips_normal_component(self):
        g = Geometry(10, 10, 10, REFLECT)
        p = _particle(10.0, 5.0, 5.0, 0.6, 0.3)
        v, w = p.v, p.w
        g.cross_surface(p, X1)
        assert p.alive
        assert p.x == 10.0
        assert p.u == pytest.approx(-0.6)
        assert p.v == pytest.approx(v)
        assert p.w == pytest.approx(w)

    def test_reflect_y_keeps_angles_consistent(self):
        g = Geometry(10, 10, 10, REFLECT)
        p = _particle(5.0, 10.0, 5.0, 0.2, 0.4)
        v = p.v
        g.cross_surface(p, Y1)
        assert p.v == pytest.approx(-v)
        u, v2, w = p.mu, np.sqrt(1 - p.mu**2) * np.cos(p.phi), np.sqrt(1 - p.mu**2) * np.sin(p.phi)
        assert (p.u, p.v, p.w) == pytest.approx((u, v2, w))

    def test_periodic_moves_to_opposite_face(self):
        g = Geometry(10, 10, 10, PERIODIC)
        p = _particle(10.0, 5.0, 5.0, 1.0, 0.0)
        g.cross_surface(p, X1)
        assert p.alive
        assert p.x == 0.0
        assert p.u == pytest.approx(1.0)
