"""
Reversible virtual machine.

Owns a register state and a LIFO history of applied instructions. Undo pops
the most recent instruction and applies its inverse, so repeated undos walk
back through every earlier state down to the initial one.
"""
import logging
from types import MappingProxyType
from typing import List, Mapping, Optional

from .instructions import Instruction
from .state import State, clone_state

logger = logging.getLogger(__name__)


class ReversibleVM:
    """Single-owner VM with run/undo over an integer register state."""

    def __init__(self, initial: Mapping[str, int]):
        self.initial: State = clone_state(initial)
        self.state: State = clone_state(initial)
        self.history: List[Instruction] = []

    @property
    def depth(self) -> int:
        return len(self.history)

    def run(self, instr: Instruction):
        """Execute ``instr`` and push it onto the history.

        If execution raises, the state is restored and nothing is pushed.
        """
        snapshot = clone_state(self.state)
        try:
            instr.execute(self.state)
        except Exception:
            self.state.clear()
            self.state.update(snapshot)
            raise
        self.history.append(instr)
        logger.debug(f"run {instr} -> depth {len(self.history)}")

    def undo(self) -> Optional[Instruction]:
        """Invert the most recent instruction. No-op on empty history.

        If inversion raises, the state is restored and the instruction stays
        on the history.
        """
        if not self.history:
            return None
        instr = self.history[-1]
        snapshot = clone_state(self.state)
        try:
            instr.invert(self.state)
        except Exception:
            self.state.clear()
            self.state.update(snapshot)
            raise
        self.history.pop()
        logger.debug(f"undo {instr} -> depth {len(self.history)}")
        return instr

    def rewind(self) -> int:
        """Undo every instruction; returns how many were undone."""
        count = 0
        while self.undo() is not None:
            count += 1
        return count

    def replay(self) -> State:
        """Recompute the state by running the history forward from the initial state."""
        state = clone_state(self.initial)
        for instr in self.history:
            instr.execute(state)
        return state

    def inspect(self) -> Mapping[str, int]:
        """Read-only snapshot of the current state."""
        return MappingProxyType(clone_state(self.state))

    def print_state(self):
        logger.info(f"Current State: {self.state}")
