"""
Domain-dispatched logic gate interpreter.

Routes declarative gate steps to domain-specific registries: binary
(active), ternary (no gates yet) and natlog (identity only).
"""

from .types import (
    LogicDomain, Bit, BIT_VALUES, TRIT_VALUES,
    GateOp, GateContext, GateFn, DomainRegistry, build_registry, read_value,
)
from .binary import BinaryOp, BINARY_GATES
from .ternary import TernaryOp, TERNARY_GATES
from .natlog import NatlogOp, NATLOG_GATES
from .evaluator import REGISTRIES, Evaluator, evaluate, resolve_registry, coerce_step

__all__ = [
    # Types
    'LogicDomain', 'Bit', 'BIT_VALUES', 'TRIT_VALUES',
    'GateOp', 'GateContext', 'GateFn', 'DomainRegistry', 'build_registry', 'read_value',
    # Registries
    'BinaryOp', 'BINARY_GATES', 'TernaryOp', 'TERNARY_GATES', 'NatlogOp', 'NATLOG_GATES',
    # Dispatch
    'REGISTRIES', 'Evaluator', 'evaluate', 'resolve_registry', 'coerce_step',
]
