"""Text exports of a horn profile.

Both formats are CSV with a header line and one newline-terminated row per
point. Writing them to disk is left to the caller.
"""

import math
from decimal import Decimal, ROUND_HALF_UP

from horn.analysis import growth_percent


COORDINATE_HEADER = "X (cm),Y (cm),Z (cm)"
LOG_HEADER = ("Index,Length (mm),Radius (mm),Angle (deg),"
              "Delta Angle (deg),Growth (%)")


def fixed(value, digits):
    """Format `value` with `digits` decimals, rounding exact ties up.

    Ties are judged on the exact binary value of the float, so 0.125 becomes
    '0.13' where format() would give '0.12'. Negative zero prints as zero.
    """
    if not math.isfinite(value):
        return f"{value:.{digits}f}"
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:f}"


def to_coordinate_text(points):
    """Wall coordinates in cm, z=0, ready for CAD spline import.

    Row format: x/10, y/10, 0 with 4 decimals.
    """
    lines = [COORDINATE_HEADER]
    for p in points:
        lines.append(f"{fixed(p.x / 10, 4)},{fixed(p.y / 10, 4)},0.0000")
    return "\n".join(lines) + "\n"


def to_log_text(points):
    """Per-point diagnostic log.

    The radius column is the geometric wall radius y, not the equivalent
    planar radius.
    """
    lines = [LOG_HEADER]
    for p in points:
        lines.append(
            f"{p.index},{fixed(p.length, 2)},{fixed(p.y, 2)},"
            f"{fixed(p.angle, 3)},{fixed(p.delta_angle, 4)},"
            f"{fixed(growth_percent(p), 4)}"
        )
    return "\n".join(lines) + "\n"


def export_filename(params, kind='coordinates'):
    """Default download name for an export, e.g. 'jmlc-fc340-T1-d36.csv'."""
    stem = f"fc{params.fc:g}-T{params.T:g}-d{params.d0:g}"
    if kind == 'coordinates':
        return f"jmlc-{stem}.csv"
    elif kind == 'log':
        return f"jmlc-log-{stem}.csv"
    raise ValueError(f"Unknown export kind: {kind}")
