"""Dimensions and diagnostics of a computed horn profile."""

import numpy as np


def profile_arrays(points):
    """Profile fields as numpy arrays.

    Parameters
    ----------
    points : sequence of ProfilePoint

    Returns
    -------
    dict with keys index, x, y, length, radius, angle, delta_angle.
    """
    fields = ('index', 'x', 'y', 'length', 'radius', 'angle', 'delta_angle')
    arrays = {f: np.array([getattr(p, f) for p in points], dtype=float)
              for f in fields}
    arrays['index'] = arrays['index'].astype(int)
    return arrays


def profile_dimensions(points):
    """Overall dimensions of a horn profile.

    Parameters
    ----------
    points : sequence of ProfilePoint

    Returns
    -------
    dict with keys:
        mouth_diameter : float -- twice the wall radius of the last point [mm]
        depth : float -- largest axial position [mm]
        min_x : float -- smallest axial position [mm]
        max_radius : float -- largest wall radius [mm]
        arc_length : float -- wall length from throat to last point [mm]
        final_angle : float -- wall angle of the last point [degrees]
        n_points : int
    """
    if len(points) == 0:
        return {'mouth_diameter': 0.0, 'depth': 0.0, 'min_x': 0.0,
                'max_radius': 0.0, 'arc_length': 0.0, 'final_angle': 0.0,
                'n_points': 0}

    arr = profile_arrays(points)
    last = points[-1]
    return {
        'mouth_diameter': 2 * last.y,
        'depth': float(arr['x'].max()),
        'min_x': float(arr['x'].min()),
        'max_radius': float(arr['y'].max()),
        'arc_length': last.length,
        'final_angle': last.angle,
        'n_points': len(points),
    }


def mouth_diameter_exceeded(points, max_diameter):
    """True if a mouth diameter limit is set and the profile exceeds it."""
    if max_diameter is None:
        return False
    return profile_dimensions(points)['mouth_diameter'] > max_diameter


def growth_percent(point):
    """Angle increment relative to the angle before it, in percent.

    Display heuristic only; the divisor falls back to 1 when the previous
    angle is zero.
    """
    previous = point.angle - point.delta_angle
    return point.delta_angle / (previous or 1) * 100
