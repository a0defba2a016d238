"""
Integration tests for the engine service: VM path, board path, puzzles,
configuration and log export.
"""
import csv
import json
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from apps.engine import EngineService, DEFAULT_CONFIG, load_config, merge_config, load_puzzle_file
from pkgs.engine_runtime import InitRequest, RunRequest, EvaluateRequest, PuzzleSpec
from pkgs.gates import GateOp
from pkgs.reversible import (
    Add, Negate, UnknownVariable, UnknownOperation, UnknownDomain, NotLinked,
)

REPO_ROOT = os.path.join(os.path.dirname(__file__), '..')

PARITY = {
    "name": "parity",
    "domain": "binary",
    "variables": ["a", "b", "parity"],
    "initial": {"a": 1},
    "goal": {"a": 0, "b": 1, "parity": 1},
    "steps": [
        {"op": "xor", "targets": ["a", "b"], "result": "parity"},
        {"op": "seq", "steps": [{"op": "swap", "targets": ["a", "b"]}]},
    ],
}


@pytest.fixture
def engine():
    svc = EngineService({"logging": {"level": "WARNING"}})
    svc.init(InitRequest(variables=["a", "b"], values={"a": 3, "b": 4}))
    return svc


class TestInstructionPath:
    """run/undo through the service."""

    def test_requires_init(self):
        svc = EngineService({"logging": {"level": "WARNING"}})
        with pytest.raises(RuntimeError):
            svc.run(RunRequest(type="NOOP"))
        assert svc.snapshot() == {"status": "not_initialized"}

    def test_init_uses_configured_initial_value(self):
        svc = EngineService({"engine": {"initial_value": 5}, "logging": {"level": "WARNING"}})
        result = svc.init(InitRequest(variables=["x", "y"]))
        assert result["state"] == {"x": 5, "y": 5}
        assert result["board"] == {"x": 0, "y": 0}

    def test_run_and_undo(self, engine):
        result = engine.run(RunRequest(type="ADD", args=["a", "b"]))
        assert result.ok
        assert result.state == {"a": 7, "b": 4}
        assert result.depth == 1

        engine.run(Negate("b"))
        assert engine.snapshot()["history"] == ["ADD a b", "NEGATE b"]

        engine.undo()
        result = engine.undo()
        assert result.state == {"a": 3, "b": 4}
        assert result.depth == 0

    def test_empty_undo(self, engine):
        result = engine.undo()
        assert result.ok
        assert result.message == "history is empty"
        assert result.state == {"a": 3, "b": 4}
        assert engine.metrics.get_counter("undos") == 0

    def test_failures_are_counted_and_raised(self, engine):
        with pytest.raises(UnknownVariable):
            engine.run(RunRequest(type="ADD", args=["a", "ghost"]))
        with pytest.raises(UnknownOperation):
            engine.run(RunRequest(type="JUMP", args=[]))
        assert engine.metrics.get_counter("failures") == 2
        assert engine.vm.history == []
        assert engine.vm.state == {"a": 3, "b": 4}

    def test_gauges_track_depth_and_board(self, engine):
        gauges = engine.metrics.get_all_metrics()["metrics"]
        assert gauges == {"history_depth": 0, "board_size": 2}

        engine.run(Add("a", "b"))
        engine.run(Negate("b"))
        assert engine.metrics.get_all_metrics()["metrics"]["history_depth"] == 2
        engine.undo()
        assert engine.metrics.get_all_metrics()["metrics"]["history_depth"] == 1

        engine.load_puzzle(PARITY)
        engine.evaluate({"op": "flip", "target": "parity"})
        assert engine.metrics.get_all_metrics()["metrics"]["board_size"] == 3

    def test_export_import_state(self, engine):
        engine.run(Add("a", "b"))
        text = engine.export_state()
        assert json.loads(text) == {"a": 7, "b": 4}

        other = EngineService({"logging": {"level": "WARNING"}})
        other.import_state(text)
        assert other.vm.state == {"a": 7, "b": 4}
        assert other.vm.history == []


class TestBoardPath:
    """Gate evaluation against the board."""

    def test_evaluate_request(self, engine):
        result = engine.evaluate(EvaluateRequest(step=GateOp(op="flip", target="a")))
        assert result.state == {"a": 1, "b": 0}
        # VM state is independent of the board
        assert engine.vm.state == {"a": 3, "b": 4}

    def test_evaluate_mapping(self, engine):
        engine.evaluate({"op": "swap", "targets": ["a", "b"]})
        engine.evaluate({"op": "flip", "target": "b"})
        assert engine.board == {"a": 0, "b": 1}

    def test_request_domain(self, engine):
        with pytest.raises(UnknownOperation):
            engine.evaluate(EvaluateRequest(step=GateOp(op="flip", target="a"), domain="natlog"))
        with pytest.raises(UnknownDomain):
            engine.evaluate(EvaluateRequest(step=GateOp(op="flip", target="a"), domain="quantum"))
        assert engine.metrics.get_counter("failures") == 2

    def test_seq_disabled_by_config(self):
        svc = EngineService({"engine": {"link_seq": False}, "logging": {"level": "WARNING"}})
        svc.init(InitRequest(variables=["a"]))
        with pytest.raises(NotLinked):
            svc.evaluate({"op": "seq", "steps": [{"op": "flip", "target": "a"}]})
        assert svc.board == {"a": 0}


class TestPuzzles:
    """Loading, solving and goal checking."""

    def test_load_and_solve(self, engine):
        info = engine.load_puzzle(PARITY)
        assert info["board"] == {"a": 1, "b": 0, "parity": 0}
        assert not info["solved"]

        result = engine.solve_puzzle()
        assert result.ok
        assert result.message == "solved"
        assert engine.puzzle_solved()

    def test_manual_moves(self, engine):
        engine.load_puzzle(PARITY)
        engine.evaluate({"op": "swap", "targets": ["a", "b"]})
        engine.evaluate({"op": "flip", "target": "parity"})
        assert engine.puzzle_solved()

    def test_unsolved_reference(self, engine):
        puzzle = dict(PARITY, steps=[{"op": "flip", "target": "b"}])
        engine.load_puzzle(puzzle)
        result = engine.solve_puzzle()
        assert not result.ok
        assert result.message == "goal not reached"

    def test_solve_requires_puzzle(self, engine):
        with pytest.raises(RuntimeError):
            engine.solve_puzzle()
        assert not engine.puzzle_solved()

    def test_undeclared_variables_rejected(self):
        with pytest.raises(ValueError):
            PuzzleSpec.model_validate(dict(PARITY, goal={"zzz": 1}))

    def test_reset_restores_puzzle_board(self, engine):
        engine.load_puzzle(PARITY)
        engine.run(Add("a", "b"))
        engine.solve_puzzle()
        engine.reset()
        assert engine.board == {"a": 1, "b": 0, "parity": 0}
        assert engine.vm.state == {"a": 3, "b": 4}
        assert engine.recorder.rows == []

    def test_reset_restores_init_board(self):
        svc = EngineService({"logging": {"level": "WARNING"}})
        svc.init(InitRequest(variables=["a", "b"], board={"a": 1}))
        svc.evaluate({"op": "flip", "target": "b"})
        assert svc.board == {"a": 1, "b": 1}
        svc.reset()
        assert svc.board == {"a": 1, "b": 0}
        # the restored board is a copy, later moves do not leak into the next reset
        svc.evaluate({"op": "flip", "target": "a"})
        svc.reset()
        assert svc.board == {"a": 1, "b": 0}

    def test_puzzle_file(self):
        puzzle = load_puzzle_file(os.path.join(REPO_ROOT, "configs", "puzzles", "parity.yaml"))
        assert puzzle == PuzzleSpec.model_validate(PARITY)


class TestConfig:
    """YAML configuration loading."""

    def test_default_file(self):
        cfg = load_config(os.path.join(REPO_ROOT, "configs", "default.yaml"))
        assert cfg == DEFAULT_CONFIG

    def test_missing_file_falls_back(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == DEFAULT_CONFIG

    def test_partial_override(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("engine:\n  default_domain: natlog\n")
        cfg = load_config(path)
        assert cfg["engine"]["default_domain"] == "natlog"
        assert cfg["engine"]["link_seq"] is True
        assert cfg["logging"] == DEFAULT_CONFIG["logging"]

    def test_invalid_top_level(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("- just\n- a list\n")
        assert load_config(path) == DEFAULT_CONFIG

    def test_merge_does_not_mutate_defaults(self):
        merge_config({"engine": {"initial_value": 9}})
        assert DEFAULT_CONFIG["engine"]["initial_value"] == 0


class TestRecording:
    """Events reach the recorder and can be exported."""

    def test_events_recorded(self, engine):
        engine.run(Add("a", "b"))
        engine.undo()
        engine.evaluate({"op": "flip", "target": "a"})

        events = [row["event"] for row in engine.recorder.rows]
        assert events == ["instruction_run", "instruction_undone", "gate_evaluated"]
        assert json.loads(engine.recorder.rows[0]["state"]) == {"a": 7, "b": 4}

    def test_export_jsonl(self, engine, tmp_path):
        engine.run(Add("a", "b"))
        path = engine.export_logs("jsonl", str(tmp_path / "trace"))
        assert path.endswith(".jsonl")
        with open(path) as f:
            lines = [json.loads(line) for line in f]
        assert "_metadata" in lines[0]
        assert lines[1]["instruction"] == "ADD a b"

    def test_export_csv(self, engine, tmp_path):
        engine.run(Add("a", "b"))
        engine.evaluate({"op": "flip", "target": "b"})
        path = engine.export_logs("csv", str(tmp_path / "trace"))
        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["event"] for r in rows] == ["instruction_run", "gate_evaluated"]

    def test_unsupported_format(self, engine):
        with pytest.raises(ValueError):
            engine.export_logs("parquet", "x")

    def test_disabled_recorder(self):
        svc = EngineService({"engine": {"enable_recorder": False}, "logging": {"level": "WARNING"}})
        svc.init(InitRequest(variables=["a", "b"]))
        svc.run(Add("a", "b"))
        assert svc.recorder.rows == []


if __name__ == "__main__":
    pytest.main([__file__])
