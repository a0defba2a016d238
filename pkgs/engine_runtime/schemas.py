"""Pydantic schemas for the engine service and puzzle descriptions."""

from typing import Dict, List, Optional

from pydantic import BaseModel, model_validator

from pkgs.gates.types import GateOp
from pkgs.reversible.state import State, create_state


class InitRequest(BaseModel):
    """Request schema for engine initialization."""
    variables: List[str]
    initial_value: Optional[int] = None      # None -> engine.initial_value from config
    values: Dict[str, int] = {}              # per-variable overrides
    board: Dict[str, int] = {}               # gate-path state; defaults to all zeros


class RunRequest(BaseModel):
    """Instruction in its wire form, e.g. {"type": "ADD", "args": ["a", "b"]}."""
    type: str
    args: List[str] = []


class EvaluateRequest(BaseModel):
    """A gate step plus an optional default domain for this call."""
    step: GateOp
    domain: Optional[str] = None


class StepResult(BaseModel):
    """Result schema from run/undo/evaluate."""
    ok: bool
    state: Dict[str, int]
    depth: int = 0
    message: Optional[str] = None


class PuzzleSpec(BaseModel):
    """A gate-path level: starting board, goal board and a reference solution."""
    name: str
    domain: str = "binary"
    variables: List[str]
    initial: Dict[str, int] = {}
    goal: Dict[str, int] = {}
    steps: List[GateOp] = []

    @model_validator(mode="after")
    def _known_variables(self):
        known = set(self.variables)
        for section in ("initial", "goal"):
            unknown = sorted(set(getattr(self, section)) - known)
            if unknown:
                raise ValueError(f"{section} references undeclared variables: {unknown}")
        return self

    def initial_state(self) -> State:
        state = create_state(self.variables, 0)
        state.update(self.initial)
        return state
