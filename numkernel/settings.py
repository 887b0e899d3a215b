"""
Runtime settings.

Responsibility: load the YAML switches that pick between equivalent code
paths (floating-point vs software square root, log10 vs division digit
counting, table vs butterfly bit pairing). Loaded once at import.

Usage:
    from numkernel.settings import SETTINGS, load_settings

    custom = load_settings('config/custom.yaml')
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_CONFIG = Path(__file__).parent / 'default.yaml'

PAIRING_STRATEGIES = ('auto', 'table', 'butterfly')

DEFAULTS: Dict[str, Dict[str, Any]] = {
    'square_root': {'force_software': False},
    'digits': {'force_software_log10': False},
    'pairing': {'strategy': 'auto'},
}


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load settings from a YAML file, filling gaps from the built-in defaults.

    Parameters
    ----------
    path : str or Path, optional
        Config file. Defaults to the default.yaml shipped with the package;
        if that file is missing the built-in defaults are used as-is.

    Returns
    -------
    dict
        Section name -> {key: value}.

    Raises
    ------
    ValueError
        If the pairing strategy is not one of auto, table, butterfly.
    """
    settings = copy.deepcopy(DEFAULTS)

    if path is None:
        path = DEFAULT_CONFIG
        if not path.exists():
            return settings

    with open(path) as f:
        loaded = yaml.safe_load(f) or {}

    for section, values in loaded.items():
        settings.setdefault(section, {}).update(values or {})

    strategy = settings['pairing']['strategy']
    if strategy not in PAIRING_STRATEGIES:
        raise ValueError(
            f"pairing.strategy must be one of {PAIRING_STRATEGIES}, got {strategy!r}"
        )

    return settings


SETTINGS = load_settings()
