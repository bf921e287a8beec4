"""
tests/unit/test_cli.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for interfaces/cli.py.

get_pipeline() is patched to return the fake-backed pipeline fixture, so no
taxonomy file or API key is needed.
"""
from __future__ import annotations

import json

import pytest

from socmatch.interfaces import cli


def _args(**overrides):
    parsed = cli._build_parser().parse_args([])
    for key, value in overrides.items():
        setattr(parsed, key, value)
    return parsed


@pytest.fixture
def patched_pipeline(monkeypatch, pipeline):
    monkeypatch.setattr(cli, "get_pipeline", lambda: pipeline)
    return pipeline


class TestParser:
    def test_defaults(self):
        args = cli._build_parser().parse_args([])
        assert args.top_n == 10
        assert args.use_ai is False
        assert args.json_output is False

    def test_program_flags(self):
        args = cli._build_parser().parse_args(
            ["--long-name", "Nursing", "--type", "Bachelor", "--ai", "-n", "3"]
        )
        assert args.long_name == "Nursing"
        assert args.program_type == "Bachelor"
        assert args.use_ai is True
        assert args.top_n == 3

    def test_program_from_args(self):
        args = _args(name="CS", degree="BS", cip="11.0701")
        program = cli._program_from_args(args)
        assert program.name == "CS"
        assert program.degree_designation == "BS"
        assert program.cip_code == "11.0701"

    def test_no_program_fields(self):
        assert cli._program_from_args(_args()) is None


class TestRun:
    def test_no_input_is_argument_error(self, patched_pipeline, capsys):
        assert cli.run(_args()) == 2
        assert "provide program fields" in capsys.readouterr().err

    def test_pipeline_failure(self, monkeypatch, capsys):
        def _boom():
            raise RuntimeError("taxonomy missing")

        monkeypatch.setattr(cli, "get_pipeline", _boom)
        assert cli.run(_args(name="Chemistry")) == 1
        assert "initialisation failed" in capsys.readouterr().err

    def test_match_text_output(self, patched_pipeline, capsys):
        assert cli.run(_args(long_name="Registered Nurses (BSN)")) == 0
        out = capsys.readouterr().out
        assert "Registered Nurses (BSN)" in out
        assert "[29-1141]" in out

    def test_match_json_output(self, patched_pipeline, capsys):
        assert cli.run(_args(name="Chemists", json_output=True, use_ai=True)) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["localMatches"][0]["code"] == "19-2031"
        assert payload["aiModel"] == "fake-ranker"
        assert payload["aiMatches"][0]["source"] == "ai"

    def test_search(self, patched_pipeline, capsys):
        assert cli.run(_args(search="graphic")) == 0
        out = capsys.readouterr().out
        assert "1 result(s)" in out
        assert "[27-1024]" in out

    def test_batch_file(self, patched_pipeline, tmp_path, capsys):
        path = tmp_path / "programs.json"
        path.write_text(
            json.dumps({"programs": [{"name": "Chemists"}, {"longName": "Applied Statisticians Track"}]}),
            encoding="utf-8",
        )
        assert cli.run(_args(file=path, json_output=True)) == 0
        out = capsys.readouterr().out
        assert "19-2031" in out
        assert "15-2041" in out

    def test_unreadable_batch_file(self, patched_pipeline, tmp_path):
        path = tmp_path / "programs.json"
        path.write_text("[not json", encoding="utf-8")
        assert cli.run(_args(file=path)) == 2

    @pytest.mark.parametrize("payload", [42, "text", {"programs": None}, {"programs": {"name": "x"}}])
    def test_wrong_shape_batch_file(self, patched_pipeline, tmp_path, capsys, payload):
        path = tmp_path / "programs.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        assert cli.run(_args(file=path)) == 2
        assert "programs" in capsys.readouterr().err

    def test_missing_batch_file(self, patched_pipeline, tmp_path):
        with pytest.raises(SystemExit) as exc:
            cli.run(_args(file=tmp_path / "missing.json"))
        assert exc.value.code == 2
