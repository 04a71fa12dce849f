"""Visualization for horn profiles.

All plot functions return (fig, ax) or (fig, axes) tuples for composability.
"""

import math

import numpy as np
import matplotlib.pyplot as plt

from horn.analysis import profile_arrays


def downsample_for_display(points, preserved_tail=200, target_body=300):
    """Thin out the long horn body while keeping the rollback at full detail.

    Parameters
    ----------
    points : sequence of ProfilePoint
    preserved_tail : int
        Number of trailing points always kept.
    target_body : int
        Approximate number of points kept from the rest.

    Returns
    -------
    list of ProfilePoint
    """
    points = list(points)
    if len(points) <= preserved_tail + target_body:
        return points

    body = points[:len(points) - preserved_tail]
    tail = points[len(points) - preserved_tail:]
    body_step = math.ceil(len(body) / target_body) or 1
    return body[::body_step] + tail


def decimate(points, max_points=1000):
    """Every n-th point so at most ~max_points remain, plus the last point."""
    points = list(points)
    if not points:
        return points
    step = math.ceil(len(points) / max_points) or 1
    kept = points[::step]
    if kept[-1] is not points[-1]:
        kept.append(points[-1])
    return kept


def view_domain(points, aspect=2.0, padding=1.1):
    """Axis limits showing the mirrored profile at a fixed aspect ratio.

    The data box spans min(x)..max(x) horizontally and ±max(y) vertically.
    The shorter side is stretched to width/height = aspect, then both are
    padded.

    Returns
    -------
    (x_lo, x_hi), (y_lo, y_hi)
    """
    arr = profile_arrays(points)
    min_x = min(0.0, arr['x'].min()) if len(points) else 0.0
    max_x = max(0.0, arr['x'].max()) if len(points) else 0.0
    max_y = max(0.0, arr['y'].max()) if len(points) else 0.0

    width = max_x - min_x
    height = 2 * max_y
    center_x = (min_x + max_x) / 2

    if height == 0 or width / height > aspect:
        height = width / aspect
    else:
        width = height * aspect

    width *= padding
    height *= padding
    return ((center_x - width / 2, center_x + width / 2),
            (-height / 2, height / 2))


def plot_profile(points, label=None, ax=None, title="Horn Profile",
                 mirror=True, show_axis=True):
    """Plot a horn wall profile (upper wall and mirrored lower wall).

    Parameters
    ----------
    points : sequence of ProfilePoint
    label : str or None
        Legend label.
    ax : matplotlib Axes or None
        Existing axes to plot on.
    title : str
    mirror : bool
        Mirror the wall below the axis.
    show_axis : bool
        Draw the centerline at y=0.

    Returns
    -------
    fig, ax
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 5))
    else:
        fig = ax.figure

    arr = profile_arrays(downsample_for_display(points))
    ax.plot(arr['x'], arr['y'], 'b-', linewidth=2, label=label)
    if mirror:
        ax.plot(arr['x'], -arr['y'], 'b-', linewidth=2)
    if show_axis:
        ax.axhline(0, color='k', linewidth=0.5, linestyle='--')

    if len(points):
        xlim, ylim = view_domain(points)
        ax.set_xlim(*xlim)
        ax.set_ylim(*ylim)
    ax.set_xlabel("Length [mm]")
    ax.set_ylabel("Radius [mm]")
    ax.set_title(title)
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    if label:
        ax.legend()
    fig.tight_layout()
    return fig, ax


def plot_angle_growth(points, transition_index=None,
                      title="Wall Angle Growth"):
    """Wall angle and per-step angle increment along the arc length.

    Parameters
    ----------
    points : sequence of ProfilePoint
    transition_index : int or None
        Index of the first spiral point; marked with a vertical line.
    title : str

    Returns
    -------
    fig, axes
    """
    arr = profile_arrays(decimate(points))
    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    axes[0].plot(arr['length'], arr['angle'], 'b-')
    axes[0].set_xlabel("Arc length [mm]")
    axes[0].set_ylabel("Wall angle [°]")
    axes[0].set_title("Angle")
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(arr['length'], arr['delta_angle'], 'r-')
    axes[1].set_xlabel("Arc length [mm]")
    axes[1].set_ylabel("Δ angle [°]")
    axes[1].set_title("Increment per step")
    axes[1].grid(True, alpha=0.3)

    if transition_index is not None and transition_index < len(points):
        l_spiral = points[transition_index].length
        for ax in axes:
            ax.axvline(l_spiral, color='k', linewidth=0.8, linestyle=':',
                       label='Spiral start')
        axes[0].legend(fontsize=8)

    fig.suptitle(title)
    fig.tight_layout()
    return fig, axes


def plot_profile_comparison(profiles, title="Horn Profile Comparison"):
    """Plot several profiles overlaid.

    Parameters
    ----------
    profiles : list of (points, label) tuples
    title : str

    Returns
    -------
    fig, ax
    """
    fig, ax = plt.subplots(1, 1, figsize=(10, 5))
    colors = plt.cm.tab10.colors

    for i, (points, label) in enumerate(profiles):
        color = colors[i % len(colors)]
        arr = profile_arrays(downsample_for_display(points))
        ax.plot(arr['x'], arr['y'], '-', color=color, linewidth=2,
                label=label)
        ax.plot(arr['x'], -arr['y'], '-', color=color, linewidth=2)

    ax.axhline(0, color='k', linewidth=0.5, linestyle='--')
    ax.set_xlabel("Length [mm]")
    ax.set_ylabel("Radius [mm]")
    ax.set_title(title)
    ax.set_aspect('equal')
    ax.legend()
    fig.tight_layout()
    return fig, ax
