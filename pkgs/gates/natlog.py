"""
Natural-log ("natlog") symbolic domain.

Reserved for entropy-weighted reversible gates over unconstrained integer
symbols. Only the identity ``noop`` exists so the registry is valid.
"""
from enum import Enum

from pkgs.reversible.state import State

from .types import GateContext, GateOp, LogicDomain, build_registry


class NatlogOp(str, Enum):
    NOOP = "noop"


def noop(step: GateOp, state: State, ctx: GateContext):
    pass


NATLOG_GATES = build_registry(LogicDomain.NATLOG, NatlogOp, {NatlogOp.NOOP: noop})
