"""
Configuration and puzzle file loading for the engine service.

Configuration is YAML with ``engine``, ``logging`` and ``recording``
sections. Missing sections or keys fall back to ``DEFAULT_CONFIG``.
"""
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from pkgs.engine_runtime.schemas import PuzzleSpec

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'engine': {
        'default_domain': 'binary',
        'link_seq': True,
        'initial_value': 0,
        'enable_recorder': True,
    },
    'logging': {
        'level': 'INFO',
        'format': 'structured',
    },
    'recording': {
        'format': 'jsonl',
        'path': 'logs/engine_trace',
    },
}


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``overrides`` on the defaults, one level deep per section."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from YAML, falling back to defaults on any read error."""
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"top level must be a mapping, got {type(data).__name__}")
        logger.info(f"Loaded configuration from {path}")
        return merge_config(data)
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.warning(f"Failed to load config from {path}: {e}; using defaults")
        return merge_config({})


def load_puzzle_file(path: Union[str, Path]) -> PuzzleSpec:
    """Read a YAML or JSON puzzle description."""
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    puzzle = PuzzleSpec.model_validate(data)
    logger.info(f"Loaded puzzle '{puzzle.name}' from {path}")
    return puzzle
