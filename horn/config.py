"""YAML configuration loading with inheritance.

Supports a `base:` key for config inheritance with deep merge, so a family
of horns can share one set of parameters and override a few.
"""

import yaml
import copy
from pathlib import Path

from horn.profile import HornParameters


DEFAULTS = {
    'fc': 340.0,
    'T': 1.0,
    'd0': 36.0,
    'rollback': 180.0,
    'step_size': 0.5,
}

DEFAULT_OUTPUTS = ['coordinates', 'log', 'plot', 'summary']


def _deep_merge(base, overrides):
    """Recursively merge overrides into base dict.

    - Scalars in overrides replace base values
    - Dicts are merged recursively
    - None values in overrides remove the key
    """
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _resolve_config(name, raw, all_raw, resolved_cache=None, chain=()):
    """Resolve a single config, following base references.

    Parameters
    ----------
    name : str
        Config name.
    raw : dict
        Raw config dict.
    all_raw : dict
        All raw configs (for base resolution).
    resolved_cache : dict
        Cache of already-resolved configs.
    chain : tuple
        Names being resolved above this one, to catch cycles.

    Returns
    -------
    dict : Resolved config (base fields merged in).
    """
    if resolved_cache is None:
        resolved_cache = {}

    if name in resolved_cache:
        return resolved_cache[name]
    if name in chain:
        raise ValueError(f"Config '{name}' inherits from itself")

    if 'base' in raw:
        base_name = raw['base']
        if base_name not in all_raw:
            raise ValueError(f"Config '{name}' references unknown base '{base_name}'")
        base_resolved = _resolve_config(
            base_name, all_raw[base_name], all_raw, resolved_cache,
            chain + (name,)
        )
        overrides = {k: v for k, v in raw.items() if k != 'base'}
        resolved = _deep_merge(base_resolved, overrides)
    else:
        resolved = copy.deepcopy(raw)

    resolved_cache[name] = resolved
    return resolved


def load_config(path):
    """Load a horn design configuration from YAML.

    Supports:
    - Single config: `horn:` top-level key
    - Multiple configs: `configs:` top-level key with inheritance
    - Output control: `outputs:` list

    Parameters
    ----------
    path : str or Path
        Path to YAML config file.

    Returns
    -------
    dict with keys:
        configs : dict of {name: resolved_config}
        outputs : list of output types
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError(f"Empty config file: {path}")
    if not isinstance(raw, dict):
        raise ValueError(
            f"Config file must contain a mapping, got {type(raw).__name__}: {path}"
        )

    if 'horn' in raw and 'configs' not in raw:
        configs_raw = {'default': raw['horn']}
    elif 'configs' in raw:
        configs_raw = raw['configs']
    else:
        # Treat entire file as a single config
        configs_raw = {'default': {k: v for k, v in raw.items()
                                   if k != 'outputs'}}

    resolved_cache = {}
    configs = {}
    for name, cfg in configs_raw.items():
        configs[name] = _resolve_config(name, cfg, configs_raw, resolved_cache)

    outputs = raw.get('outputs', list(DEFAULT_OUTPUTS))

    return {
        'configs': configs,
        'outputs': outputs,
    }


def _number(cfg, key, default):
    value = cfg.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number, got {value!r}") from None


def build_horn_spec(cfg):
    """Convert a resolved config dict into a horn specification.

    Parameters
    ----------
    cfg : dict
        Resolved config from load_config.

    Returns
    -------
    dict with keys:
        params : HornParameters
        step_size : float -- arc-length step [mm]
        max_mouth_diameter : float or None -- mouth diameter limit [mm]
    """
    if 'round_over' in cfg and 'rollback' not in cfg:
        cfg = dict(cfg, rollback=cfg['round_over'])

    params = HornParameters(
        fc=_number(cfg, 'fc', DEFAULTS['fc']),
        T=_number(cfg, 'T', DEFAULTS['T']),
        d0=_number(cfg, 'd0', DEFAULTS['d0']),
        rollback=_number(cfg, 'rollback', DEFAULTS['rollback']),
    )

    step_size = _number(cfg, 'step_size', DEFAULTS['step_size'])
    if step_size <= 0:
        raise ValueError(f"step_size must be positive, got {step_size}")

    max_mouth_diameter = None
    if cfg.get('max_mouth_diameter') is not None:
        max_mouth_diameter = _number(cfg, 'max_mouth_diameter', None)

    return {
        'params': params,
        'step_size': step_size,
        'max_mouth_diameter': max_mouth_diameter,
    }
