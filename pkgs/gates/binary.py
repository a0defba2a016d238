"""
Binary logic gates over bits in {0, 1}.

``seq`` dispatches its child steps back through the evaluator that invoked
it and rolls the whole state back if any child fails.
"""
import logging
from enum import Enum
from typing import List

from pkgs.reversible.errors import EngineError, MissingOperand, NotLinked
from pkgs.reversible.state import State, clone_state, require_variables

from .types import BIT_VALUES, Bit, GateContext, GateOp, LogicDomain, build_registry

logger = logging.getLogger(__name__)


class BinaryOp(str, Enum):
    FLIP = "flip"
    SWAP = "swap"
    XOR = "xor"
    SEQ = "seq"


def _bit(state: State, name: str) -> Bit:
    return BINARY_GATES.read(state, name)


def _pair(step: GateOp) -> List[str]:
    targets = step.targets or []
    if len(targets) < 2:
        raise MissingOperand(f"'{step.op}' needs two targets, got {len(targets)}")
    return targets[:2]


def flip(step: GateOp, state: State, ctx: GateContext):
    if not step.target:
        raise MissingOperand("Missing target for flip")
    state[step.target] = _bit(state, step.target) ^ 1


def swap(step: GateOp, state: State, ctx: GateContext):
    a, b = _pair(step)
    state[a], state[b] = _bit(state, b), _bit(state, a)


def xor(step: GateOp, state: State, ctx: GateContext):
    if not step.result:
        raise MissingOperand("Missing result for xor")
    a, b = _pair(step)
    require_variables(state, step.result)
    state[step.result] = _bit(state, a) ^ _bit(state, b)


def seq(step: GateOp, state: State, ctx: GateContext):
    snapshot = clone_state(state)
    try:
        for sub in step.steps or []:
            # an empty seq has nothing to dispatch, so it succeeds unlinked
            if not ctx.evaluator.link_seq:
                raise NotLinked("seq not yet linked to evaluator")
            ctx.evaluator.evaluate(sub, state, ctx.default_domain)
    except EngineError:
        state.clear()
        state.update(snapshot)
        logger.debug(f"seq rolled back after child failure ({len(step.steps or [])} steps)")
        raise


BINARY_GATES = build_registry(
    LogicDomain.BINARY,
    BinaryOp,
    {
        BinaryOp.FLIP: flip,
        BinaryOp.SWAP: swap,
        BinaryOp.XOR: xor,
        BinaryOp.SEQ: seq,
    },
    values=BIT_VALUES,
)
