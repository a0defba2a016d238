"""
Shared types for the domain gate interpreter.

A ``GateOp`` is one node of a declarative step tree: atomic (``flip``) or
compound (``seq`` with child ``steps``). Each logic domain owns a registry
mapping its operation enum to gate functions; the string-to-enum conversion
happens only in ``DomainRegistry.lookup``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict

from pkgs.reversible.errors import InvalidValue, UnknownOperation
from pkgs.reversible.state import State, require_variables

if TYPE_CHECKING:
    from .evaluator import Evaluator


class LogicDomain(str, Enum):
    """Domains a step or puzzle can specify."""
    BINARY = "binary"
    TERNARY = "ternary"
    NATLOG = "natlog"


# A binary register value, always one of BIT_VALUES
Bit = int

BIT_VALUES: FrozenSet[int] = frozenset({0, 1})
TRIT_VALUES: FrozenSet[int] = frozenset({0, 1, 2})


class GateOp(BaseModel):
    """A single logic step: atomic (e.g. flip) or compound (e.g. seq)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    domain: Optional[str] = None          # falls back to the caller's default
    op: str
    target: Optional[str] = None
    targets: Optional[List[str]] = None
    result: Optional[str] = None
    steps: Optional[List[GateOp]] = None


GateOp.model_rebuild()


@dataclass(frozen=True)
class GateContext:
    """What a gate needs to dispatch child steps back through the evaluator."""
    default_domain: str
    evaluator: "Evaluator"


GateFn = Callable[[GateOp, State, GateContext], None]


def read_value(state: State, name: str, allowed: Optional[FrozenSet[int]],
               domain: str) -> int:
    """Read ``state[name]``, enforcing presence and the domain's value set."""
    require_variables(state, name)
    value = state[name]
    if allowed is not None and value not in allowed:
        raise InvalidValue(
            f"Value {value!r} of '{name}' is outside the {domain} domain {sorted(allowed)}"
        )
    return value


@dataclass(frozen=True)
class DomainRegistry:
    """Fixed table from a domain's operation enum to its gate functions."""
    domain: LogicDomain
    ops: Type[Enum]
    gates: Mapping[Enum, GateFn]
    values: Optional[FrozenSet[int]] = None

    def lookup(self, op: str) -> GateFn:
        try:
            member = self.ops(op)
        except ValueError:
            raise UnknownOperation(op, self.domain.value) from None
        fn = self.gates.get(member)
        if fn is None:
            raise UnknownOperation(op, self.domain.value)
        return fn

    def read(self, state: State, name: str) -> int:
        return read_value(state, name, self.values, self.domain.value)

    @property
    def operations(self) -> List[str]:
        return [m.value for m in self.ops]


def build_registry(domain: LogicDomain, ops: Type[Enum], gates: Mapping[Enum, GateFn],
                   values: Optional[FrozenSet[int]] = None) -> DomainRegistry:
    """Freeze a registry, requiring a gate for every member of ``ops``."""
    missing = [m.value for m in ops if m not in gates]
    if missing:
        raise RuntimeError(f"Domain '{domain.value}' has no gate for: {missing}")
    return DomainRegistry(domain=domain, ops=ops, gates=MappingProxyType(dict(gates)),
                          values=values)
