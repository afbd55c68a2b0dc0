import logging
from pathlib import Path

import pytest

from jsscan.jsscan_config import ScanConfig
from jsscan.jsscan_modules import iter_source_files, module_id_from_path, resolve_relative_id

DOJO = ScanConfig(base_url="/srv/", module_map={"dojo": "dojo", "dijit": "dijit"})


@pytest.mark.parametrize(
    "path,expected",
    [
        ("a/./b/../c", "a/c"),
        ("../../a", "../../a"),
        ("a/../../b", "../b"),
        ("a/b/c", "a/b/c"),
        ("./a", "a"),
    ],
)
def test_resolve_relative_id(path: str, expected: str) -> None:
    assert resolve_relative_id(path) == expected


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/srv/dojo/main.js", "dojo"),
        ("/srv/dojo/io/script.js", "dojo/io/script"),
        ("/srv/dijit/form/Button.js", "dijit/form/Button"),
        ("/srv/dijit/../dojo/io.js", "dojo/io"),
        ("//srv//dojo/a.js", "dojo/a"),
        ("/srv/dojox/a.js", "srv/dojox/a"),
        ("/other/x.js", "other/x"),
    ],
)
def test_module_id_from_path(path: str, expected: str) -> None:
    assert module_id_from_path(path, DOJO) == expected


def test_first_matching_mapping_wins() -> None:
    config = ScanConfig(base_url="/srv/", module_map={"a": "lib", "b": "lib/sub"})
    assert module_id_from_path("/srv/lib/sub/x.js", config) == "a/sub/x"


def test_location_with_trailing_slash() -> None:
    config = ScanConfig(base_url="/srv/", module_map={"app": "app/"})
    assert module_id_from_path("/srv/app/x.js", config) == "app/x"


def test_default_config_keeps_relative_path() -> None:
    assert module_id_from_path("lib/x.js", ScanConfig()) == "lib/x"


def test_iter_source_files(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "c.js").write_text("")
    (tmp_path / "a" / "d.txt").write_text("")
    (tmp_path / "b.js").write_text("")
    (tmp_path / "e.js").write_text("")
    root = str(tmp_path)
    assert list(iter_source_files([root])) == [
        f"{root}/a/c.js",
        f"{root}/b.js",
        f"{root}/e.js",
    ]


def test_iter_source_files_keeps_argument_order(tmp_path: Path) -> None:
    for name in ("x.js", "y.js"):
        (tmp_path / name).write_text("")
    paths = [str(tmp_path / "y.js"), str(tmp_path / "x.js")]
    assert list(iter_source_files(paths)) == paths


def test_missing_path_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    missing = str(tmp_path / "nope.js")
    with caplog.at_level(logging.WARNING, logger="jsscan.jsscan_modules"):
        assert list(iter_source_files([missing])) == []
    assert "No such file or directory" in caplog.text
