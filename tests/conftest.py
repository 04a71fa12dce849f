"""Shared fixtures for horn tests."""

import pytest

from horn.profile import HornParameters, ProfilePoint


@pytest.fixture
def reference_params():
    """Default tool parameters: 340 Hz, T=1, 36 mm throat, 180° rollback."""
    return HornParameters(fc=340.0, T=1.0, d0=36.0, rollback=180.0)


@pytest.fixture
def spiral_params():
    """Full-turn rollback, reachable only through the spiral regime."""
    return HornParameters(fc=340.0, T=1.0, d0=36.0, rollback=360.0)


def make_point(index=0, x=0.0, y=18.0, length=0.0, radius=None,
               angle=0.0, delta_angle=0.0):
    return ProfilePoint(index=index, x=x, y=y, length=length,
                        radius=y if radius is None else radius,
                        angle=angle, delta_angle=delta_angle)


def make_line(n, dx=1.0, y0=10.0, dy=0.1):
    """n points along a straight wall, one angle degree per point."""
    return [make_point(index=i, x=i * dx, y=y0 + i * dy, length=i * dx,
                       angle=float(i), delta_angle=1.0 if i else 0.0)
            for i in range(n)]
