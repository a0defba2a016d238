"""
Register state helpers.

A state is a plain ``Dict[str, int]``. These helpers create, copy, compare
and (de)serialize states; ``require_variables`` is the single place where
missing operands turn into ``UnknownVariable``.
"""
import json
from typing import Dict, Iterable, Mapping

from .errors import UnknownVariable

State = Dict[str, int]


def create_state(variables: Iterable[str], initial_value: int = 0) -> State:
    """Create a register state from a list of variable names."""
    return {name: initial_value for name in variables}


def clone_state(state: Mapping[str, int]) -> State:
    """Independent copy of a state (values are ints, so a shallow copy is deep)."""
    return dict(state)


def states_match(a: Mapping[str, int], b: Mapping[str, int]) -> bool:
    """
    Compare two states over the union of their keys.

    A key present on only one side compares against 0, so ``{"x": 0}``
    matches ``{}``. Puzzle goals rely on this to list only the variables
    they care about being non-zero.
    """
    keys = set(a) | set(b)
    return all(a.get(k, 0) == b.get(k, 0) for k in keys)


def require_variables(state: Mapping[str, int], *names: str):
    """Raise UnknownVariable for the first name missing from ``state``."""
    for name in names:
        if name not in state:
            raise UnknownVariable(name)


def serialize_state(state: Mapping[str, int]) -> str:
    """Serialize a state to compact JSON object text."""
    return json.dumps(dict(state), sort_keys=True, separators=(",", ":"))


def deserialize_state(text: str) -> State:
    """Parse JSON object text back into a state."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"State must be a JSON object, got {type(data).__name__}")

    state: State = {}
    for k, v in data.items():
        # bool is an int subclass but never a valid register value
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"Value for '{k}' is not an integer: {v!r}")
        state[k] = v
    return state
