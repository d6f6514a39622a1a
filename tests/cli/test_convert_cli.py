from pathlib import Path

import orjson
from typer.testing import CliRunner

from sse_converter.cli.convert import decode_escapes
from sse_converter.cli.main import app


runner = CliRunner()


def test_no_input_prints_usage_and_succeeds() -> None:
    result = runner.invoke(app, ["convert"])

    assert result.exit_code == 0
    assert "No input data provided" in result.output
    assert "--raw" in result.output


def test_raw_to_output_file(tmp_path: Path) -> None:
    out = tmp_path / "converted.json"

    result = runner.invoke(
        app,
        ["convert", "--raw", "event:a\ndata:1\n\nevent:b\n\n", "--timestamp", "100", "--output", str(out)],
    )

    assert result.exit_code == 0
    records = orjson.loads(out.read_bytes())
    assert records == [
        {"timestamp": "100", "value": "event:a\ndata:1\n\n"},
        {"timestamp": "100", "value": "event:b\n\n"},
    ]


def test_raw_with_literal_escapes_is_decoded(tmp_path: Path) -> None:
    out = tmp_path / "converted.json"

    result = runner.invoke(
        app,
        ["convert", "--raw", 'event:message\\ndata:{"timestamp":"5"}\\n\\n', "--output", str(out)],
    )

    assert result.exit_code == 0
    assert orjson.loads(out.read_bytes()) == [
        {"timestamp": "5", "value": 'event:message\ndata:{"timestamp":"5"}\n\n'}
    ]


def test_raw_prints_json_to_stdout() -> None:
    result = runner.invoke(app, ["convert", "--raw", "event:a\n\n", "--timestamp", "7"])

    assert result.exit_code == 0
    assert '"timestamp": "7"' in result.output


def test_file_input(tmp_path: Path) -> None:
    source = tmp_path / "input.txt"
    source.write_text('event:message\ndata:{"timestamp":"1753968218605"}\n\n', encoding="utf-8")
    out = tmp_path / "out.json"

    result = runner.invoke(app, ["convert", "--file", str(source), "--output", str(out)])

    assert result.exit_code == 0
    assert orjson.loads(out.read_bytes())[0]["timestamp"] == "1753968218605"


def test_missing_file_fails(tmp_path: Path) -> None:
    out = tmp_path / "out.json"

    result = runner.invoke(app, ["convert", "--file", str(tmp_path / "nope.txt"), "--output", str(out)])

    assert result.exit_code == 1
    assert not out.exists()


def test_object_input(tmp_path: Path) -> None:
    out = tmp_path / "out.json"

    result = runner.invoke(
        app,
        ["convert", "--object", '{"event":"message","content":"hi"}', "--timestamp", "100", "--output", str(out)],
    )

    assert result.exit_code == 0
    assert orjson.loads(out.read_bytes()) == [
        {"timestamp": "100", "value": 'event:message\ndata:{"content":"hi"}\n\n'}
    ]


def test_invalid_object_fails() -> None:
    result = runner.invoke(app, ["convert", "--object", "{not json"])

    assert result.exit_code == 1


def test_multiple_sources_rejected() -> None:
    result = runner.invoke(app, ["convert", "--raw", "event:a", "--object", "{}"])

    assert result.exit_code == 1


def test_synthetic_strategy_option(tmp_path: Path) -> None:
    out = tmp_path / "out.json"

    result = runner.invoke(
        app,
        ["convert", "--raw", "event:a\n\nevent:b\n\n", "--timestamp", "1000", "--strategy", "synthetic", "--output", str(out)],
    )

    assert result.exit_code == 0
    stamps = [int(r["timestamp"]) for r in orjson.loads(out.read_bytes())]
    assert stamps[0] == 1000
    assert 1100 <= stamps[1] < 2100


def test_decode_escapes_leaves_real_newlines() -> None:
    assert decode_escapes("event:a\\ndata:x") == "event:a\ndata:x"
    assert decode_escapes('event:a\ndata:{"s":"\\n"}') == 'event:a\ndata:{"s":"\\n"}'
