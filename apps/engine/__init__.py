"""
Engine application package.

In-process service wrapper around the reversible VM and the gate
evaluator, plus configuration and puzzle loading.
"""

from .engine_service import EngineService
from .config import DEFAULT_CONFIG, load_config, merge_config, load_puzzle_file

__all__ = ['EngineService', 'DEFAULT_CONFIG', 'load_config', 'merge_config', 'load_puzzle_file']
