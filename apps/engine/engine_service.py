"""
Engine service wrapper for the reversible execution engine.

Wraps the ReversibleVM (undoable instruction path) and the gate Evaluator
(declarative board path) behind one in-process API, publishing every state
change on an EventBus that feeds the trace recorder.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pkgs.engine_runtime import (
    TraceRecorder, InitRequest, RunRequest, EvaluateRequest, StepResult, PuzzleSpec,
)
from pkgs.gates import Evaluator, GateOp, coerce_step
from pkgs.observability import (
    setup_logging, MetricsCollector, EventBus,
    INSTRUCTION_RUN, INSTRUCTION_UNDONE, GATE_EVALUATED,
)
from pkgs.reversible import (
    EngineError, Instruction, ReversibleVM, State,
    create_state, clone_state, states_match, serialize_state, deserialize_state,
    instruction_from_dict,
)

from .config import merge_config

logger = logging.getLogger(__name__)


class EngineService:
    """High-level service interface for the reversible engine."""

    def __init__(self, cfg: Optional[Dict[str, Any]] = None):
        self.cfg = merge_config(cfg or {})
        engine_cfg = self.cfg['engine']

        self.vm: Optional[ReversibleVM] = None
        self.board: State = {}
        self._initial_board: State = {}
        self.puzzle: Optional[PuzzleSpec] = None
        self.evaluator = Evaluator(engine_cfg['default_domain'], link_seq=engine_cfg['link_seq'])
        self.metrics = MetricsCollector()
        self.events = EventBus()
        self.recorder = TraceRecorder(enabled=engine_cfg['enable_recorder'])

        for event_type in (INSTRUCTION_RUN, INSTRUCTION_UNDONE, GATE_EVALUATED):
            self.events.subscribe(event_type, self.recorder.log)

        setup_logging(self.cfg['logging']['level'], self.cfg['logging']['format'])
        logger.info("EngineService initialized")

    # ------------------------------------------------------------------
    # Instruction path
    # ------------------------------------------------------------------

    def init(self, req: InitRequest) -> Dict[str, Any]:
        """Create the VM register state and the gate board."""
        initial_value = req.initial_value
        if initial_value is None:
            initial_value = self.cfg['engine']['initial_value']

        state = create_state(req.variables, initial_value)
        state.update(req.values)
        self.vm = ReversibleVM(state)

        self.board = create_state(req.variables, 0)
        self.board.update(req.board)
        self._initial_board = clone_state(self.board)
        self.puzzle = None
        self.metrics.set_metric("history_depth", 0)
        self.metrics.set_metric("board_size", len(self.board))

        logger.info(f"Engine initialized with {len(state)} variables")
        return {
            "status": "initialized",
            "state": dict(self.vm.state),
            "board": dict(self.board),
        }

    def _require_vm(self) -> ReversibleVM:
        if self.vm is None:
            raise RuntimeError("Engine not initialized. Call init() first.")
        return self.vm

    def _fail(self, timer: str, what: str, e: Exception):
        self.metrics.stop_timer(timer)
        self.metrics.increment_counter("failures")
        logger.error(f"{what} failed: {e}")

    def run(self, req: Union[RunRequest, Instruction]) -> StepResult:
        """Run one instruction on the VM."""
        vm = self._require_vm()
        self.metrics.start_timer("run_duration")
        try:
            instr = req if isinstance(req, Instruction) else instruction_from_dict(req.model_dump())
            vm.run(instr)
        except EngineError as e:
            self._fail("run_duration", "run", e)
            raise

        duration = self.metrics.stop_timer("run_duration")
        self.metrics.increment_counter("instructions_run")
        self.metrics.set_metric("history_depth", vm.depth)
        self.events.publish(INSTRUCTION_RUN, {
            "event": INSTRUCTION_RUN,
            "instruction": str(instr),
            "depth": vm.depth,
            "state": dict(vm.state),
            "duration": duration,
        })
        return StepResult(ok=True, state=dict(vm.state), depth=vm.depth)

    def undo(self) -> StepResult:
        """Undo the most recent instruction; empty history is not an error."""
        vm = self._require_vm()
        instr = vm.undo()
        if instr is None:
            return StepResult(ok=True, state=dict(vm.state), depth=0,
                              message="history is empty")

        self.metrics.increment_counter("undos")
        self.metrics.set_metric("history_depth", vm.depth)
        self.events.publish(INSTRUCTION_UNDONE, {
            "event": INSTRUCTION_UNDONE,
            "instruction": str(instr),
            "depth": vm.depth,
            "state": dict(vm.state),
        })
        return StepResult(ok=True, state=dict(vm.state), depth=vm.depth)

    # ------------------------------------------------------------------
    # Gate path
    # ------------------------------------------------------------------

    def _default_domain(self, override: Optional[str] = None) -> str:
        if override:
            return override
        if self.puzzle is not None:
            return self.puzzle.domain
        return self.cfg['engine']['default_domain']

    def evaluate(self, req: Union[EvaluateRequest, GateOp, Mapping[str, Any]]) -> StepResult:
        """Evaluate a gate step tree against the board."""
        if isinstance(req, EvaluateRequest):
            step, domain = req.step, req.domain
        else:
            step, domain = coerce_step(req), None
        default_domain = self._default_domain(domain)

        self.metrics.start_timer("evaluate_duration")
        try:
            self.evaluator.evaluate(step, self.board, default_domain)
        except EngineError as e:
            self._fail("evaluate_duration", f"evaluate '{step.op}'", e)
            raise

        duration = self.metrics.stop_timer("evaluate_duration")
        self.metrics.increment_counter("steps_evaluated")
        self.metrics.set_metric("board_size", len(self.board))
        self.events.publish(GATE_EVALUATED, {
            "event": GATE_EVALUATED,
            "op": step.op,
            "domain": step.domain or default_domain,
            "state": dict(self.board),
            "duration": duration,
        })
        return StepResult(ok=True, state=dict(self.board),
                          depth=self.vm.depth if self.vm else 0)

    def load_puzzle(self, puzzle: Union[PuzzleSpec, Mapping[str, Any]]) -> Dict[str, Any]:
        """Replace the board with a puzzle's initial state."""
        if not isinstance(puzzle, PuzzleSpec):
            puzzle = PuzzleSpec.model_validate(puzzle)
        self.puzzle = puzzle
        self.board = puzzle.initial_state()
        self.recorder.set_metadata(puzzle=puzzle.name)

        logger.info(f"Loaded puzzle '{puzzle.name}' ({puzzle.domain}, {len(puzzle.variables)} variables)")
        return {
            "name": puzzle.name,
            "domain": puzzle.domain,
            "board": dict(self.board),
            "solved": self.puzzle_solved(),
        }

    def puzzle_solved(self) -> bool:
        if self.puzzle is None:
            return False
        return states_match(self.board, self.puzzle.goal)

    def solve_puzzle(self) -> StepResult:
        """Apply the loaded puzzle's reference steps to the board."""
        if self.puzzle is None:
            raise RuntimeError("No puzzle loaded. Call load_puzzle() first.")

        for step in self.puzzle.steps:
            self.evaluate(step)

        solved = self.puzzle_solved()
        if not solved:
            logger.warning(f"Reference steps did not solve puzzle '{self.puzzle.name}'")
        return StepResult(ok=solved, state=dict(self.board),
                          depth=self.vm.depth if self.vm else 0,
                          message="solved" if solved else "goal not reached")

    # ------------------------------------------------------------------
    # Snapshots, persistence, logs
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Return summary snapshot of current state."""
        if self.vm is None:
            return {"status": "not_initialized"}

        return {
            "status": "active",
            "state": dict(self.vm.inspect()),
            "history": [str(instr) for instr in self.vm.history],
            "depth": self.vm.depth,
            "board": clone_state(self.board),
            "puzzle": self.puzzle.name if self.puzzle else None,
            "solved": self.puzzle_solved(),
            "counters": dict(self.metrics.counters),
            "metrics_summary": self.metrics.summary_stats(),
            "recent_logs": self.recorder.get_recent(5),
        }

    def export_state(self) -> str:
        """Serialize the VM register state."""
        return serialize_state(self._require_vm().state)

    def import_state(self, text: str) -> Dict[str, Any]:
        """Start a fresh VM (empty history) from serialized state text."""
        state = deserialize_state(text)
        self.vm = ReversibleVM(state)
        logger.info(f"Imported state with {len(state)} variables")
        return {"status": "imported", "state": dict(self.vm.state)}

    def export_logs(self, format: Optional[str] = None, path: Optional[str] = None) -> str:
        """Export recorded trace rows in the given format."""
        format = format or self.cfg['recording']['format']
        path = path or self.cfg['recording']['path']

        if format == "csv":
            full_path = f"{path}.csv"
            self.recorder.dump_csv(full_path)
        elif format == "jsonl":
            full_path = f"{path}.jsonl"
            self.recorder.dump_jsonl(full_path)
        else:
            raise ValueError(f"Unsupported format: {format}")

        logger.info(f"Logs exported to: {full_path}")
        return full_path

    def reset(self):
        """Rewind the VM, restore the board and clear recordings."""
        if self.vm is not None:
            self.vm.rewind()
        if self.puzzle is not None:
            self.board = self.puzzle.initial_state()
        else:
            self.board = clone_state(self._initial_board)
        self.recorder.clear()
        self.metrics.reset()
        logger.info("Engine reset to initial state")
