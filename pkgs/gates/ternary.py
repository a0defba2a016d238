"""Ternary logic over trits in {0, 1, 2}. No gates are defined yet."""
from enum import Enum

from .types import TRIT_VALUES, LogicDomain, build_registry


class TernaryOp(str, Enum):
    pass


TERNARY_GATES = build_registry(LogicDomain.TERNARY, TernaryOp, {}, values=TRIT_VALUES)
