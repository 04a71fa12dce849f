"""LeCleac'h (JMLC) horn profile generator."""

from horn.profile import (
    HornParameters, ProfilePoint, generate_profile, solve_profile,
)
from horn.export import to_coordinate_text, to_log_text

__all__ = [
    "HornParameters", "ProfilePoint", "generate_profile", "solve_profile",
    "to_coordinate_text", "to_log_text",
]
