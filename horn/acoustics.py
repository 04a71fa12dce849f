"""Area law and wall geometry for LeCleac'h (JMLC) horns.

All lengths are in millimeters, areas in mm², angles in radians unless a
name says otherwise.

References:
- J.-M. Le Cléac'h, "Le pavillon à expansion sphérique", 2000.
- Kolbrek & Dunker, *High-Quality Horn Loudspeaker Systems*, 2019, Ch. 5.
"""

import numpy as np
from scipy.optimize import brentq


C_SOUND = 343200.0  # mm/s, dry air at about 20 °C


# ---------------------------------------------------------------------------
# Hyperbolic-exponential area law
# ---------------------------------------------------------------------------

def expansion_constant(fc):
    """Flare constant m = 4π·fc / c [1/mm]."""
    return 4 * np.pi * fc / C_SOUND


def throat_area(d0):
    """Planar throat area S0 = π·(d0/2)²."""
    r0 = d0 / 2
    return np.pi * r0 * r0


def target_area(l, params):
    """Required planar-equivalent area at arc length l.

    S(l) = S0 · (cosh(m·l/2) + T·sinh(m·l/2))²

    T = 1 is the exponential horn, T < 1 flares more slowly near the throat
    (hypex), T > 1 faster.
    """
    term = expansion_constant(params.fc) * l / 2
    factor = np.cosh(term) + params.T * np.sinh(term)
    return throat_area(params.d0) * factor * factor


def equivalent_radius(area):
    """Radius of a flat disc with the given area."""
    return np.sqrt(area / np.pi)


def is_degenerate(params):
    """True when the area law cannot produce a profile (m == 0 or d0 <= 0)."""
    return expansion_constant(params.fc) == 0 or params.d0 <= 0


# ---------------------------------------------------------------------------
# Wavefront geometry
# ---------------------------------------------------------------------------

def geometry_area(theta, y, step):
    """Area of the spherical cap wavefront after one step at wall angle theta.

    The wavefront meets the wall at right angles; for a cap of base radius
    y' = y + step·sin(theta) and half-angle theta the area is

        S = 2π·y'² / (1 + cos(theta))

    Returns inf at theta = π, where the cap closes on itself.
    """
    y_candidate = y + step * np.sin(theta)
    denominator = 1 + np.cos(theta)
    if denominator <= 0:
        return np.inf
    return 2 * np.pi * y_candidate * y_candidate / denominator


# ---------------------------------------------------------------------------
# Inverse area law
# ---------------------------------------------------------------------------

def length_for_area(params, area, l_max=1e7):
    """Arc length at which the area law reaches `area`.

    Uses Brent's method on a bracket grown by doubling from 1 mm.

    Parameters
    ----------
    params : HornParameters
    area : float
        Target planar area [mm²].
    l_max : float
        Largest arc length searched [mm].

    Returns
    -------
    float
        Arc length [mm]; 0 when the area is not larger than the throat.

    Raises
    ------
    ValueError
        If the law never reaches the area below l_max.
    """
    if is_degenerate(params):
        raise ValueError("Degenerate horn parameters: area law is constant")
    if area <= throat_area(params.d0):
        return 0.0

    def f(l):
        return target_area(l, params) - area

    hi = 1.0
    # NaN from cosh/sinh overflow counts as not reached
    with np.errstate(over='ignore', invalid='ignore'):
        while not f(hi) >= 0:
            hi *= 2
            if hi > l_max:
                raise ValueError(
                    f"Area {area:.1f} mm² not reached within "
                    f"{l_max:g} mm of arc"
                )
    return brentq(f, 0.0, hi)


def length_for_mouth_diameter(params, diameter):
    """Arc length at which the equivalent planar diameter reaches `diameter`."""
    return length_for_area(params, throat_area(diameter))
