"""Logging configuration for the reversible engine."""

import logging
import sys


def setup_logging(level: str = "INFO", format_type: str = "structured") -> logging.Logger:
    """Route engine logs to stdout and return the ``pkgs`` logger."""

    log_level = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if format_type == "structured":
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        formatter = logging.Formatter('%(levelname)s - %(message)s')

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    # Engine modules log under pkgs.* and apps.*; configure both without
    # touching the root logger so host applications keep their own setup.
    for name in ('pkgs', 'apps'):
        lg = logging.getLogger(name)
        lg.setLevel(log_level)
        lg.handlers.clear()
        lg.addHandler(handler)
        lg.propagate = False

    return logging.getLogger('pkgs')
