"""
Error taxonomy for the reversible engine.

Every failure is raised at the point of the offending call and leaves the
state untouched. The builtin bases let callers catch them generically
(``LookupError``, ``ValueError``) without importing this module.
"""


class EngineError(Exception):
    """Base class for all engine failures."""


class UnknownVariable(EngineError, LookupError):
    """An operand names a variable that is not present in the state."""

    def __init__(self, name: str):
        super().__init__(f"Unknown variable: '{name}'")
        self.name = name


class MissingOperand(EngineError, ValueError):
    """A required target, targets entry or result is absent."""


class UnknownDomain(EngineError, LookupError):
    """The resolved logic domain has no registry."""

    def __init__(self, domain):
        super().__init__(f"Unknown logic domain: '{domain}'")
        self.domain = domain


class UnknownOperation(EngineError, LookupError):
    """The operation name is not present in the resolved registry."""

    def __init__(self, op, domain=None):
        where = f" in domain '{domain}'" if domain is not None else ""
        super().__init__(f"Unsupported operation '{op}'{where}")
        self.op = op
        self.domain = domain


class NotLinked(EngineError, NotImplementedError):
    """A declared capability that is switched off.

    The not-implemented member of the taxonomy; callers may catch it as
    ``NotImplementedError``.
    """


class InvalidValue(EngineError, ValueError):
    """A domain-typed read found a value outside the domain."""


class AliasedOperands(EngineError, ValueError):
    """An instruction was built with operands that break its inverse."""
