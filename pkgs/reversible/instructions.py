"""
Invertible instruction set for the reversible VM.

Each instruction is an immutable record with a forward ``execute`` and an
exact inverse ``invert``, both mutating the state in place. Operands are
checked before any write so a failing call never leaves a partial update.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Tuple, Type

from .errors import AliasedOperands, MissingOperand, UnknownOperation
from .state import State, require_variables


class Opcode(str, Enum):
    """Wire names of the instruction variants."""
    ADD = "ADD"
    SUB = "SUB"
    NEGATE = "NEGATE"
    SWAP = "SWAP"
    NOOP = "NOOP"


class Instruction(ABC):
    """Base class for a reversible unit of state mutation."""

    type: ClassVar[Opcode]

    @property
    def args(self) -> Tuple[str, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    @abstractmethod
    def execute(self, state: State) -> None:
        ...

    @abstractmethod
    def invert(self, state: State) -> None:
        ...

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "args": list(self.args)}

    def __str__(self) -> str:
        return " ".join((self.type.value,) + self.args)


@dataclass(frozen=True)
class Add(Instruction):
    type: ClassVar[Opcode] = Opcode.ADD
    a: str
    b: str

    def __post_init__(self):
        if self.a == self.b:
            raise AliasedOperands(f"ADD cannot use '{self.a}' as both operands")

    def execute(self, state: State) -> None:
        require_variables(state, self.a, self.b)
        state[self.a] += state[self.b]

    def invert(self, state: State) -> None:
        require_variables(state, self.a, self.b)
        state[self.a] -= state[self.b]


@dataclass(frozen=True)
class Sub(Instruction):
    type: ClassVar[Opcode] = Opcode.SUB
    a: str
    b: str

    def __post_init__(self):
        if self.a == self.b:
            raise AliasedOperands(f"SUB cannot use '{self.a}' as both operands")

    def execute(self, state: State) -> None:
        require_variables(state, self.a, self.b)
        state[self.a] -= state[self.b]

    def invert(self, state: State) -> None:
        require_variables(state, self.a, self.b)
        state[self.a] += state[self.b]


@dataclass(frozen=True)
class Negate(Instruction):
    type: ClassVar[Opcode] = Opcode.NEGATE
    a: str

    def execute(self, state: State) -> None:
        require_variables(state, self.a)
        state[self.a] = -state[self.a]

    def invert(self, state: State) -> None:
        # negating again undoes it
        self.execute(state)


@dataclass(frozen=True)
class Swap(Instruction):
    type: ClassVar[Opcode] = Opcode.SWAP
    a: str
    b: str

    def execute(self, state: State) -> None:
        require_variables(state, self.a, self.b)
        state[self.a], state[self.b] = state[self.b], state[self.a]

    def invert(self, state: State) -> None:
        # swap is its own inverse
        self.execute(state)


@dataclass(frozen=True)
class Noop(Instruction):
    type: ClassVar[Opcode] = Opcode.NOOP

    def execute(self, state: State) -> None:
        pass

    def invert(self, state: State) -> None:
        pass


INSTRUCTION_TYPES: Mapping[Opcode, Type[Instruction]] = {
    Opcode.ADD: Add,
    Opcode.SUB: Sub,
    Opcode.NEGATE: Negate,
    Opcode.SWAP: Swap,
    Opcode.NOOP: Noop,
}


def instruction_from_dict(data: Mapping[str, Any]) -> Instruction:
    """
    Build an instruction from its wire form ``{"type": "ADD", "args": ["a", "b"]}``.

    The type is matched case-insensitively. Unknown types raise
    UnknownOperation, a wrong operand count raises MissingOperand.
    """
    raw_type = str(data.get("type", ""))
    try:
        opcode = Opcode(raw_type.upper())
    except ValueError:
        raise UnknownOperation(raw_type) from None

    cls = INSTRUCTION_TYPES[opcode]
    args = list(data.get("args") or [])
    arity = len(fields(cls))
    if len(args) != arity:
        raise MissingOperand(
            f"{opcode.value} takes {arity} operand(s), got {len(args)}"
        )
    return cls(*[str(a) for a in args])
