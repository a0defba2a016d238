"""
Engine runtime components: request schemas, puzzle descriptions and
session trace recording.
"""

from .recorder import TraceRecorder
from .schemas import InitRequest, RunRequest, EvaluateRequest, StepResult, PuzzleSpec

__all__ = [
    'TraceRecorder',
    'InitRequest', 'RunRequest', 'EvaluateRequest', 'StepResult', 'PuzzleSpec',
]
