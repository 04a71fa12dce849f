"""Tests for the coordinate and log CSV exports."""

import pytest

from horn.export import (
    COORDINATE_HEADER, LOG_HEADER, to_coordinate_text, to_log_text,
    export_filename,
)
from horn.profile import HornParameters, generate_profile

from conftest import make_point


class TestCoordinateText:

    def test_mm_to_cm(self):
        """x=36, y=18 mm → 3.6, 1.8 cm."""
        text = to_coordinate_text([make_point(x=36.0, y=18.0)])
        assert text.splitlines()[1] == "3.6000,1.8000,0.0000"

    def test_header_and_rows(self):
        pts = [make_point(index=i, x=float(i), y=18.0 + i) for i in range(5)]
        lines = to_coordinate_text(pts).splitlines()
        assert lines[0] == "X (cm),Y (cm),Z (cm)"
        assert lines[0] == COORDINATE_HEADER
        assert len(lines) == 6
        assert lines[3] == "0.2000,2.0000,0.0000"

    def test_newline_terminated(self):
        assert to_coordinate_text([make_point()]).endswith("0.0000\n")

    def test_empty_profile(self):
        assert to_coordinate_text([]) == "X (cm),Y (cm),Z (cm)\n"

    def test_rounding(self):
        text = to_coordinate_text([make_point(x=123.45678, y=0.00004)])
        assert text.splitlines()[1] == "12.3457,0.0000,0.0000"

    def test_exact_tie_rounds_up(self):
        """x/10 = 1/32 exactly; the tie goes up, not to even."""
        text = to_coordinate_text([make_point(x=0.3125, y=18.0)])
        assert text.splitlines()[1] == "0.0313,1.8000,0.0000"

    def test_no_negative_zero(self):
        text = to_coordinate_text([make_point(x=-0.0001, y=18.0)])
        assert text.splitlines()[1] == "0.0000,1.8000,0.0000"

    def test_generated_profile_starts_at_throat(self, reference_params):
        pts = generate_profile(reference_params, 2.0)
        lines = to_coordinate_text(pts).splitlines()
        assert lines[1] == "0.0000,1.8000,0.0000"
        assert len(lines) == len(pts) + 1


class TestLogText:

    def test_header(self):
        lines = to_log_text([]).splitlines()
        assert lines == [LOG_HEADER]
        assert LOG_HEADER == ("Index,Length (mm),Radius (mm),Angle (deg),"
                              "Delta Angle (deg),Growth (%)")

    def test_exact_ties_round_up(self):
        p = make_point(index=1, length=0.125, y=18.0, angle=0.0625,
                       delta_angle=0.03125)
        assert to_log_text([p]).splitlines()[1] == \
            "1,0.13,18.00,0.063,0.0313,100.0000"

    def test_negative_tie_rounds_away_from_zero(self):
        p = make_point(index=2, length=1.0, y=18.0, angle=0.5,
                       delta_angle=-0.03125)
        row = to_log_text([p]).splitlines()[1]
        assert row.split(",")[4] == "-0.0313"

    def test_seed_row(self):
        """Growth divisor falls back to 1 at the throat."""
        text = to_log_text([make_point()])
        assert text.splitlines()[1] == "0,0.00,18.00,0.000,0.0000,0.0000"

    def test_growth_percent(self):
        p = make_point(index=5, length=2.5, y=20.0, angle=10.0,
                       delta_angle=2.0)
        assert to_log_text([p]).splitlines()[1] == \
            "5,2.50,20.00,10.000,2.0000,25.0000"

    def test_first_step_growth(self):
        """angle == delta: previous angle 0, growth = delta·100."""
        p = make_point(index=1, length=0.5, y=18.04, angle=0.5,
                       delta_angle=0.5)
        assert to_log_text([p]).splitlines()[1].endswith(",0.5000,50.0000")

    def test_radius_column_is_wall_radius(self):
        p = make_point(index=3, y=20.0, radius=99.0)
        row = to_log_text([p]).splitlines()[1]
        assert row.split(',')[2] == "20.00"

    def test_row_count(self, reference_params):
        pts = generate_profile(reference_params, 2.0)
        text = to_log_text(pts)
        assert text.endswith("\n")
        assert len(text.splitlines()) == len(pts) + 1


class TestExportFilename:

    def test_coordinates(self):
        params = HornParameters(fc=340.0, T=1.0, d0=36.0, rollback=180)
        assert export_filename(params) == "jmlc-fc340-T1-d36.csv"

    def test_log(self):
        params = HornParameters(fc=340.0, T=1.0, d0=36.0, rollback=180)
        assert export_filename(params, 'log') == "jmlc-log-fc340-T1-d36.csv"

    def test_fractional_values(self):
        params = HornParameters(fc=412.5, T=0.75, d0=25.4, rollback=180)
        assert export_filename(params) == "jmlc-fc412.5-T0.75-d25.4.csv"

    def test_unknown_kind(self, reference_params):
        with pytest.raises(ValueError, match="Unknown export kind"):
            export_filename(reference_params, 'stl')
