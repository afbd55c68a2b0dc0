import json
import logging
import sys
from pathlib import Path
from typing import Any

import pytest

from jsscan import jsscan_cli
from jsscan.jsscan_cli import STRING_MODULE, configure_logging, render_unit, run_jsscan


def json_lines(text: str) -> list[Any]:
    return [json.loads(line) for line in text.splitlines()]


def test_run_jsscan_string_input_prints_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_jsscan(["var x = 1;"], is_string=True) == 0
    (unit,) = json_lines(capsys.readouterr().out)
    assert unit["module"] == STRING_MODULE
    assert unit["path"] is None
    assert [n["kind"] for n in unit["body"]] == ["var", "assign"]


def test_run_jsscan_one_line_per_unit(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_jsscan(["foo();", "bar();"], is_string=True) == 0
    units = json_lines(capsys.readouterr().out)
    assert [u["body"][0]["path"][0]["value"] for u in units] == ["foo", "bar"]


def test_run_jsscan_parse_error_sets_status(
    capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        assert run_jsscan(["var ;", "ok();"], is_string=True) == 1
    assert "Expected name, got punc ;" in caplog.text
    assert len(json_lines(capsys.readouterr().out)) == 1


def test_run_jsscan_files(
    source_tree: Path,
    capsys: pytest.CaptureFixture[str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR):
        status = run_jsscan(
            [str(source_tree / "srv")], config_path=str(source_tree / "scan.yaml")
        )
    assert status == 1
    assert "bad.js" in caplog.text
    units = json_lines(capsys.readouterr().out)
    assert [u["module"] for u in units] == ["dojo/io", "dojo"]
    assert units[1]["path"].endswith("srv/dojo/main.js")


def test_run_jsscan_output_file(tmp_path: Path) -> None:
    out = tmp_path / "out.js"
    assert run_jsscan(["var x = 1;"], is_string=True, fmt="js", out=str(out)) == 0
    assert out.read_text() == f"// module: {STRING_MODULE}\nvar x = 1;\n"


def test_run_jsscan_tree_format(capsys: pytest.CaptureFixture[str]) -> None:
    run_jsscan(["var x;"], is_string=True, fmt="tree")
    assert capsys.readouterr().out == f"# {STRING_MODULE}\nvar x (var)  @1:5\n"


def test_run_jsscan_hoist(capsys: pytest.CaptureFixture[str]) -> None:
    run_jsscan(["foo(); var a;"], is_string=True, fmt="js", hoist=True)
    assert capsys.readouterr().out.splitlines()[1:] == ["var a;", "foo();"]


def test_run_jsscan_unknown_format() -> None:
    with pytest.raises(ValueError):
        run_jsscan(["x;"], is_string=True, fmt="xml")


def test_run_jsscan_missing_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        run_jsscan(["x;"], is_string=True, config_path=str(tmp_path / "none.yaml"))


def test_render_unit_empty_source() -> None:
    assert render_unit("", "m", fmt="js") == "// module: m"
    assert json.loads(render_unit("", "m")) == {"module": "m", "path": None, "body": []}


def test_process_file_uses_module_id(source_tree: Path) -> None:
    config = jsscan_cli.load_config(str(source_tree / "scan.yaml"))
    out = jsscan_cli.process_file(str(source_tree / "srv" / "dojo" / "io.js"), config, fmt="tree")
    assert out.splitlines()[0] == "# dojo/io"


def run_main(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["jsscan", *args])
    with pytest.raises(SystemExit) as exc:
        jsscan_cli.main()
    return int(exc.value.code or 0)


def test_main_success(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_main(monkeypatch, "-s", "var x;", "-f", "js") == 0
    assert capsys.readouterr().out == f"// module: {STRING_MODULE}\nvar x;\n"


def test_main_parse_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    assert run_main(monkeypatch, "-s", "var ;") == 1


def test_main_missing_config(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_main(monkeypatch, "-s", "x;", "-c", "/nonexistent/scan.yaml") == 2
    assert "Config file not found" in capsys.readouterr().err


def test_main_rejects_unknown_format(monkeypatch: pytest.MonkeyPatch) -> None:
    assert run_main(monkeypatch, "-s", "x;", "-f", "xml") == 2


def test_main_files(
    monkeypatch: pytest.MonkeyPatch,
    source_tree: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    main_js = str(source_tree / "srv" / "dojo" / "main.js")
    assert run_main(monkeypatch, main_js, "-f", "tree") == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == f"# {main_js[1:-3]}"
    assert "assign dojo.version" in out


@pytest.mark.parametrize(
    "verbose,level", [(True, logging.DEBUG), (False, logging.WARNING)]
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch, verbose: bool, level: int
) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    configure_logging(verbose)
    assert calls[0]["level"] == level
