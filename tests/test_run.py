"""Command-line entry point."""

import json

import pytest

from saju.run import build_parser, main

REFERENCE_ARGS = ["--date", "1990-02-01", "--time", "12:10", "--longitude", "126.9778"]


def test_prints_json(capsys):
    assert main(REFERENCE_ARGS + ["--gender", "male", "--current-year", "2025"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [data["pillars"][k] for k in ("year", "month", "day", "hour")] == \
        ["己巳", "丁丑", "丁酉", "丙午"]
    assert data["meta"]["timezone"] == "Asia/Seoul"
    assert len(data["yearly_luck"]) == 16


def test_yearly_range_and_output(tmp_path, capsys):
    out = tmp_path / "chart.json"
    code = main(REFERENCE_ARGS + ["--yearly-from", "2024", "--yearly-to", "2026",
                                  "--output", str(out)])
    assert code == 0
    printed = json.loads(capsys.readouterr().out)
    saved = json.loads(out.read_text(encoding="utf-8"))
    assert printed == saved
    assert [y["year"] for y in saved["yearly_luck"]] == [2024, 2025, 2026]


def test_manual_offset(capsys):
    assert main(REFERENCE_ARGS + ["--tz-offset", "9", "--preset", "traditional"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["meta"]["timezone_source"] == "manual"
    assert data["meta"]["preset"] == "traditional"


def test_engine_error_exit_code(capsys):
    assert main(REFERENCE_ARGS + ["--timezone", "Mars/Olympus"]) == 1
    assert "error:" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [
    REFERENCE_ARGS + ["--yearly-from", "2024"],
    REFERENCE_ARGS + ["--preset", "sidereal"],
    ["--date", "1990-13-01", "--time", "12:10"],
])
def test_usage_errors(argv):
    with pytest.raises(SystemExit):
        main(argv)


def test_parser_defaults():
    args = build_parser().parse_args(["--date", "2000-01-01", "--time", "00:00"])
    assert args.preset == "standard"
    assert args.gender is None
    assert not args.verbose
