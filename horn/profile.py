"""Horn wall profile solver.

Marches along the horn wall in fixed arc-length steps. At every step the
wall angle is chosen so that the spherical-cap wavefront leaving the new
wall point has the area required by the hyperbolic-exponential law
(see horn.acoustics). Coordinates are in mm with the throat at x=0,
y=d0/2; angles are measured from the horn axis.

Past ~90° the physical solution approaches 180° asymptotically and its
angle increments shrink toward zero. When a deep rollback is requested the
solver hands over to a synthetic spiral whose increments grow geometrically
from the last peak increment, so any rollback up to a full turn is reached
in a bounded number of steps.
"""

import enum
import functools
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from horn.acoustics import (
    target_area, geometry_area, equivalent_radius, is_degenerate,
)

logger = logging.getLogger(__name__)


MAX_STEPS = 20000
BISECTION_ITERATIONS = 50
ROLLBACK_EPSILON_DEG = 0.005
SPIRAL_DETECTION_ANGLE_DEG = 90.0
SPIRAL_ROLLBACK_GATE_DEG = 100.0
SPIRAL_GROWTH_RATE = 1.005


@dataclass(frozen=True)
class HornParameters:
    """Input parameters of a JMLC horn.

    Attributes
    ----------
    fc : float
        Cutoff frequency [Hz].
    T : float
        Expansion factor (1 = exponential, typically 0.5-2.0).
    d0 : float
        Throat diameter [mm].
    rollback : float
        Largest cumulative wall angle the profile may reach [degrees].
    """
    fc: float
    T: float
    d0: float
    rollback: float


@dataclass(frozen=True)
class ProfilePoint:
    """A point on the horn wall.

    Attributes
    ----------
    index : int
        Position in the profile, 0 at the throat.
    x, y : float
        Axial position and wall radius [mm].
    length : float
        Arc length along the wall from the throat [mm].
    radius : float
        Equivalent planar radius of the target area at this length [mm].
    angle : float
        Wall angle from the axis [degrees].
    delta_angle : float
        Angle change from the previous point [degrees].
    """
    index: int
    x: float
    y: float
    length: float
    radius: float
    angle: float
    delta_angle: float


class Regime(enum.Enum):
    PHYSICAL = 'physical'
    SPIRAL = 'spiral'


class StopReason(enum.Enum):
    ROLLBACK = 'rollback'
    RADIUS = 'radius'
    STEP_LIMIT = 'step_limit'
    DEGENERATE = 'degenerate'


@dataclass(frozen=True)
class SolverState:
    """Solver progress after a step.

    Angles are in radians. `previous_delta` is the last physical increment;
    it is frozen once the spiral regime starts. `base_increment` and
    `spiral_steps` are only meaningful in the spiral regime.
    """
    length: float
    x: float
    y: float
    previous_angle: float = 0.0
    previous_delta: float = 0.0
    regime: Regime = Regime.PHYSICAL
    base_increment: float = 0.0
    spiral_steps: int = 0


@dataclass(frozen=True)
class ProfileRun:
    """Profile points plus how the march ended.

    `transition_index` is the index of the first point placed by the
    spiral regime, or None if the physical solver ran to the end.
    """
    points: tuple
    stop_reason: StopReason
    transition_index: Optional[int] = None


def bisect(f, lo, hi, iterations=BISECTION_ITERATIONS):
    """Fixed-count bisection for an increasing function.

    Halves [lo, hi] `iterations` times, keeping the half where f changes
    from negative to non-negative, and returns the last midpoint. No
    bracketing check is made: if f never changes sign the result converges
    to the matching end of the interval.
    """
    x = lo
    for _ in range(iterations):
        x = (lo + hi) / 2
        if f(x) < 0:
            lo = x
        else:
            hi = x
    return x


def physical_angle(y, area, step):
    """Wall angle that makes the wavefront one step ahead have `area`.

    Bisects geometry_area(theta) - area over [0, 2π].
    """
    def residual(theta):
        return geometry_area(theta, y, step) - area

    return bisect(residual, 0.0, 2 * np.pi)


def enters_spiral(theta, previous_angle, previous_delta, rollback):
    """Spiral hand-over guard.

    Fires when the physical angle is past 90°, its increment has dropped
    below the previous one, and the requested rollback is over 100°.
    """
    decelerating = (theta - previous_angle < previous_delta
                    and np.degrees(theta) > SPIRAL_DETECTION_ANGLE_DEG)
    return decelerating and rollback > SPIRAL_ROLLBACK_GATE_DEG


def initial_state(params):
    """Solver state at the throat."""
    return SolverState(length=0.0, x=0.0, y=params.d0 / 2)


def advance(state, params, step_size):
    """Advance the wall by one arc-length step.

    Parameters
    ----------
    state : SolverState
        Current state.
    params : HornParameters
    step_size : float
        Arc-length increment [mm].

    Returns
    -------
    next_state : SolverState or None
        State after the step, None when a stop condition fired.
    stop_reason : StopReason or None
        Why the step was rejected.
    """
    l_next = state.length + step_size
    regime = state.regime
    base_increment = state.base_increment
    spiral_steps = state.spiral_steps
    previous_delta = state.previous_delta

    if regime is Regime.SPIRAL:
        spiral_steps += 1
        increment = base_increment * SPIRAL_GROWTH_RATE ** spiral_steps
        theta = state.previous_angle + increment
    else:
        theta = physical_angle(state.y, target_area(l_next, params), step_size)
        if enters_spiral(theta, state.previous_angle, state.previous_delta,
                         params.rollback):
            regime = Regime.SPIRAL
            # Carry the peak increment over so the curl keeps its momentum
            base_increment = state.previous_delta
            theta = state.previous_angle + base_increment
            logger.debug("Spiral hand-over at l=%.2f mm, angle=%.3f deg, "
                         "base increment=%.5f deg", l_next,
                         np.degrees(theta), np.degrees(base_increment))
        else:
            previous_delta = theta - state.previous_angle

    if np.degrees(theta) >= params.rollback - ROLLBACK_EPSILON_DEG:
        return None, StopReason.ROLLBACK

    dy = step_size * np.sin(theta)
    if regime is Regime.SPIRAL and state.y + dy <= 0:
        return None, StopReason.RADIUS

    next_state = SolverState(
        length=l_next,
        x=float(state.x + step_size * np.cos(theta)),
        y=float(state.y + dy),
        previous_angle=float(theta),
        previous_delta=float(previous_delta),
        regime=regime,
        base_increment=float(base_increment),
        spiral_steps=spiral_steps,
    )
    return next_state, None


def _point(index, state, previous_angle, params):
    return ProfilePoint(
        index=index,
        x=state.x,
        y=state.y,
        length=state.length,
        radius=float(equivalent_radius(target_area(state.length, params))),
        angle=float(np.degrees(state.previous_angle)),
        delta_angle=float(np.degrees(state.previous_angle - previous_angle)),
    )


def solve_profile(params, step_size=1.0, max_steps=MAX_STEPS):
    """March the horn wall from the throat to the rollback limit.

    Parameters
    ----------
    params : HornParameters
    step_size : float
        Arc-length increment [mm]. Smaller steps keep the solver stable
        near large rollback angles at the cost of more points.
    max_steps : int
        Step cap.

    Returns
    -------
    ProfileRun
        Empty points and StopReason.DEGENERATE when m == 0 or d0 <= 0.
    """
    if is_degenerate(params):
        return ProfileRun(points=(), stop_reason=StopReason.DEGENERATE)

    state = initial_state(params)
    r0 = state.y
    points = [ProfilePoint(index=0, x=0.0, y=r0, length=0.0, radius=r0,
                           angle=0.0, delta_angle=0.0)]
    transition_index = None
    stop_reason = StopReason.STEP_LIMIT

    for i in range(max_steps):
        next_state, reason = advance(state, params, step_size)
        if next_state is None:
            stop_reason = reason
            break
        if (transition_index is None
                and next_state.regime is Regime.SPIRAL):
            transition_index = i + 1
        points.append(_point(i + 1, next_state, state.previous_angle, params))
        state = next_state

    logger.debug("Profile fc=%g T=%g d0=%g rollback=%g: %d points, "
                 "stopped on %s", params.fc, params.T, params.d0,
                 params.rollback, len(points), stop_reason.value)
    return ProfileRun(points=tuple(points), stop_reason=stop_reason,
                      transition_index=transition_index)


def generate_profile(params, step_size=1.0):
    """Profile points from throat to rollback limit (or step cap).

    Returns an empty tuple for degenerate parameters.
    """
    return solve_profile(params, step_size).points


@functools.lru_cache(maxsize=32)
def cached_solve(params, step_size=1.0):
    """solve_profile memoized on (fc, T, d0, rollback, step_size)."""
    return solve_profile(params, step_size)
