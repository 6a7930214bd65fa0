"""
Tests for the psci-toolkit command line.
"""

import json

import pytest

from psci_toolkit import cli as cli_module
from psci_toolkit.cli import build_parser, main
from psci_toolkit.core.utils.serialization import load_history_json, save_history_json


class TestParser:
    def test_parser_when_no_command_then_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_parser_when_simulate_then_defaults(self):
        args = build_parser().parse_args(["simulate", "MATH", "2"])

        assert args.kind == "MATH"
        assert args.level == 2
        assert args.accuracy == 1.0


class TestLevelsCommand:
    def test_levels_when_no_history_then_everything_at_level_1(self, capsys):
        assert main(["levels"]) == 0

        out = capsys.readouterr().out
        assert "MATH" in out
        assert out.count("unlocked: 1") == 8

    def test_levels_when_history_then_unlock_shown(self, tmp_path, capsys, make_result):
        path = tmp_path / "history.json"
        save_history_json([make_result("SEARCH", level=1, score=85, stars=3)], path)

        assert main(["levels", "--history", str(path)]) == 0

        out = capsys.readouterr().out
        assert "unlocked: 2" in out
        assert "best 85 (3 stars)" in out


class TestSimulateCommand:
    def test_simulate_when_perfect_math_then_prints_result(self, capsys):
        assert main(["simulate", "MATH", "1", "--seed", "7"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("MATH-1: 100 points, 3 stars (10 moves)")

    def test_simulate_when_history_given_then_appended(self, tmp_path, capsys):
        path = tmp_path / "nested" / "history.json"

        assert main(["simulate", "MARKET", "1", "--seed", "1", "--history", str(path)]) == 0
        assert main(["simulate", "MARKET", "2", "--seed", "2", "--history", str(path)]) == 0

        history = load_history_json(path)
        assert [r.game_id for r in history] == ["MARKET-1", "MARKET-2"]

    def test_simulate_when_unknown_exercise_then_exit_code_2(self, capsys):
        assert main(["simulate", "CHESS", "1"]) == 2

        assert "Unsupported exercise" in capsys.readouterr().err

    def test_simulate_when_config_invalid_then_exit_code_2(self, tmp_path, capsys):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"generator_retries": 0}), encoding="utf-8")

        assert main(["simulate", "MATH", "1", "--config", str(path)]) == 2

    def test_simulate_when_history_then_recorded_through_configured_dispatcher(self, tmp_path, capsys, monkeypatch):
        config_path = tmp_path / "engine.json"
        config_path.write_text(json.dumps({"dispatcher_workers": 3}), encoding="utf-8")
        history_path = tmp_path / "history.json"
        created = []
        build = cli_module.BackgroundDispatcher.from_config

        def spy(config):
            dispatcher = build(config)
            created.append(dispatcher)
            return dispatcher

        monkeypatch.setattr(cli_module.BackgroundDispatcher, "from_config", spy)

        args = ["simulate", "MATH", "1", "--seed", "3", "--config", str(config_path), "--history", str(history_path)]
        assert main(args) == 0

        assert [d.max_workers for d in created] == [3]
        assert [r.game_id for r in load_history_json(history_path)] == ["MATH-1"]
        assert "(1 results)" in capsys.readouterr().out

    def test_simulate_when_history_unwritable_then_exit_code_2(self, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        assert main(["simulate", "MATH", "1", "--seed", "3", "--history", str(blocker / "history.json")]) == 2

        assert "Could not record MATH-1" in capsys.readouterr().err


class TestReportCommand:
    def test_report_when_history_then_digest(self, tmp_path, capsys, make_result):
        path = tmp_path / "history.json"
        save_history_json([make_result("MATH", score=60, stars=2), make_result("MATH", score=80, stars=3)], path)

        assert main(["report", "--history", str(path)]) == 0

        out = capsys.readouterr().out
        assert "Sessions: 2" in out
        assert "Calculation: 70.0" in out
        assert "- Market Sums (Calculation) level 1: 80 points" in out

    def test_report_when_prompt_flag_then_prompt_text(self, tmp_path, capsys, make_result):
        path = tmp_path / "history.json"
        save_history_json([make_result()], path)

        assert main(["report", "--history", str(path), "--prompt"]) == 0

        assert "[Progress]" in capsys.readouterr().out

    def test_report_when_history_corrupt_then_exit_code_2(self, tmp_path, capsys):
        path = tmp_path / "history.json"
        path.write_text("{not json", encoding="utf-8")

        assert main(["report", "--history", str(path)]) == 2
