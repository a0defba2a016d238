"""
Reversible instruction core.

State helpers, the invertible instruction set and the VM that runs and
undoes instructions against an integer register state.
"""

from .errors import (
    EngineError, UnknownVariable, MissingOperand, UnknownDomain,
    UnknownOperation, NotLinked, InvalidValue, AliasedOperands,
)
from .state import (
    State, create_state, clone_state, states_match, require_variables,
    serialize_state, deserialize_state,
)
from .instructions import (
    Opcode, Instruction, Add, Sub, Negate, Swap, Noop,
    INSTRUCTION_TYPES, instruction_from_dict,
)
from .vm import ReversibleVM

__all__ = [
    # Errors
    'EngineError', 'UnknownVariable', 'MissingOperand', 'UnknownDomain',
    'UnknownOperation', 'NotLinked', 'InvalidValue', 'AliasedOperands',
    # State
    'State', 'create_state', 'clone_state', 'states_match', 'require_variables',
    'serialize_state', 'deserialize_state',
    # Instructions
    'Opcode', 'Instruction', 'Add', 'Sub', 'Negate', 'Swap', 'Noop',
    'INSTRUCTION_TYPES', 'instruction_from_dict',
    # VM
    'ReversibleVM',
]
