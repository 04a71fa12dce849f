"""Tests for YAML config loading and horn spec building."""

import pytest

from horn.config import load_config, build_horn_spec, DEFAULT_OUTPUTS
from horn.profile import HornParameters


def _write(tmp_path, text, name="horn.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestLoadConfig:

    def test_single_horn(self, tmp_path):
        path = _write(tmp_path, """
horn:
  fc: 400
  T: 0.8
  d0: 25.4
  rollback: 200
""")
        spec = load_config(path)
        assert list(spec['configs']) == ['default']
        assert spec['configs']['default']['fc'] == 400
        assert spec['outputs'] == DEFAULT_OUTPUTS

    def test_inheritance(self, tmp_path):
        path = _write(tmp_path, """
configs:
  base_horn:
    fc: 340
    d0: 36
    rollback: 180
  slow_flare:
    base: base_horn
    T: 0.7
  full_spiral:
    base: slow_flare
    rollback: 360
outputs: [coordinates, log]
""")
        spec = load_config(path)
        cfgs = spec['configs']
        assert cfgs['slow_flare'] == {'fc': 340, 'd0': 36, 'rollback': 180,
                                      'T': 0.7}
        assert cfgs['full_spiral']['T'] == 0.7
        assert cfgs['full_spiral']['rollback'] == 360
        assert 'base' not in cfgs['full_spiral']
        assert spec['outputs'] == ['coordinates', 'log']

    def test_none_removes_key(self, tmp_path):
        path = _write(tmp_path, """
configs:
  a:
    fc: 340
    max_mouth_diameter: 600
  b:
    base: a
    max_mouth_diameter: null
""")
        cfgs = load_config(path)['configs']
        assert 'max_mouth_diameter' not in cfgs['b']
        assert cfgs['a']['max_mouth_diameter'] == 600

    def test_unknown_base(self, tmp_path):
        path = _write(tmp_path, """
configs:
  a:
    base: missing
""")
        with pytest.raises(ValueError, match="unknown base"):
            load_config(path)

    def test_inheritance_cycle(self, tmp_path):
        path = _write(tmp_path, """
configs:
  a:
    base: b
  b:
    base: a
""")
        with pytest.raises(ValueError, match="inherits from itself"):
            load_config(path)

    def test_empty_file(self, tmp_path):
        path = _write(tmp_path, "")
        with pytest.raises(ValueError, match="Empty config"):
            load_config(path)

    @pytest.mark.parametrize("text", ["- a\n- b\n", "42\n", "just a string\n"])
    def test_top_level_not_a_mapping(self, tmp_path, text):
        path = _write(tmp_path, text)
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(path)

    def test_whole_file_as_config(self, tmp_path):
        path = _write(tmp_path, """
fc: 500
T: 1.2
outputs: [summary]
""")
        spec = load_config(path)
        assert spec['configs'] == {'default': {'fc': 500, 'T': 1.2}}
        assert spec['outputs'] == ['summary']


class TestBuildHornSpec:

    def test_defaults(self):
        spec = build_horn_spec({})
        assert spec['params'] == HornParameters(fc=340.0, T=1.0, d0=36.0,
                                                rollback=180.0)
        assert spec['step_size'] == 0.5
        assert spec['max_mouth_diameter'] is None

    def test_values(self):
        spec = build_horn_spec({'fc': 400, 'T': '0.8', 'd0': 25.4,
                                'rollback': 270, 'step_size': 1,
                                'max_mouth_diameter': 620})
        params = spec['params']
        assert params == HornParameters(fc=400.0, T=0.8, d0=25.4,
                                        rollback=270.0)
        assert isinstance(params.fc, float)
        assert spec['step_size'] == 1.0
        assert spec['max_mouth_diameter'] == 620.0

    def test_round_over_alias(self):
        spec = build_horn_spec({'round_over': 240})
        assert spec['params'].rollback == 240.0

    def test_rollback_wins_over_alias(self):
        spec = build_horn_spec({'round_over': 240, 'rollback': 200})
        assert spec['params'].rollback == 200.0

    def test_non_numeric(self):
        with pytest.raises(ValueError, match="'fc' must be a number"):
            build_horn_spec({'fc': 'loud'})

    @pytest.mark.parametrize("step", [0, -0.5])
    def test_non_positive_step(self, step):
        with pytest.raises(ValueError, match="step_size must be positive"):
            build_horn_spec({'step_size': step})

    def test_degenerate_values_accepted(self):
        """Degenerate horns are the solver's business, not the config's."""
        spec = build_horn_spec({'fc': 0, 'd0': -1})
        assert spec['params'].fc == 0.0
        assert spec['params'].d0 == -1.0
