"""
Universal gate dispatcher.

Executes a single logic step by:
1. Determining the domain (per-step override or the caller's default)
2. Selecting that domain's gate registry
3. Looking up the operation by name
4. Applying the gate function to mutate the state in place

Compound steps (``seq``) call back into the same evaluator for each child,
propagating the caller's default domain. Step trees must be acyclic.
"""
import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from pkgs.reversible.errors import UnknownDomain
from pkgs.reversible.state import State

from .binary import BINARY_GATES
from .natlog import NATLOG_GATES
from .ternary import TERNARY_GATES
from .types import DomainRegistry, GateContext, GateOp, LogicDomain

logger = logging.getLogger(__name__)

REGISTRIES: Mapping[LogicDomain, DomainRegistry] = MappingProxyType({
    LogicDomain.BINARY: BINARY_GATES,
    LogicDomain.TERNARY: TERNARY_GATES,
    LogicDomain.NATLOG: NATLOG_GATES,
})

StepLike = Union[GateOp, Mapping[str, Any]]


def resolve_registry(domain: Union[str, LogicDomain]) -> DomainRegistry:
    """Registry for ``domain``; raises UnknownDomain if there is none."""
    try:
        key = LogicDomain(domain)
    except ValueError:
        raise UnknownDomain(domain) from None
    return REGISTRIES[key]


def coerce_step(step: StepLike) -> GateOp:
    """Validate a plain mapping (e.g. from a level file) into a GateOp."""
    if isinstance(step, GateOp):
        return step
    return GateOp.model_validate(step)


class Evaluator:
    """Dispatches gate steps to their domain registries."""

    def __init__(self, default_domain: Union[str, LogicDomain] = LogicDomain.BINARY,
                 link_seq: bool = True):
        self.default_domain = default_domain
        self.link_seq = link_seq
        self.steps_evaluated = 0

    def evaluate(self, step: StepLike, state: State,
                 default_domain: Optional[Union[str, LogicDomain]] = None):
        step = coerce_step(step)
        default = self.default_domain if default_domain is None else default_domain
        registry = resolve_registry(step.domain or default)
        fn = registry.lookup(step.op)

        logger.debug(f"evaluate {registry.domain.value}.{step.op}")
        fn(step, state, GateContext(default_domain=default, evaluator=self))
        self.steps_evaluated += 1


def evaluate(step: StepLike, state: State,
             default_domain: Union[str, LogicDomain] = LogicDomain.BINARY):
    """Evaluate one step tree with a throwaway evaluator (``seq`` linked)."""
    Evaluator(default_domain).evaluate(step, state)
