from pathlib import Path

import pytest


@pytest.fixture  # type: ignore[misc]
def source_tree(tmp_path: Path) -> Path:
    """A small mapped source tree with one broken file, plus its config."""
    srv = tmp_path / "srv"
    (srv / "dojo").mkdir(parents=True)
    (srv / "dijit").mkdir()
    (srv / "dojo" / "main.js").write_text("var dojo = {};\ndojo.version = '1.0';\n")
    (srv / "dojo" / "io.js").write_text("dojo.io = function (url) { return url; };\n")
    (srv / "dijit" / "bad.js").write_text("var = 1;\n")
    (tmp_path / "scan.yaml").write_text(
        f"base_url: {srv}/\nmodule_map:\n  dojo: dojo\n  dijit: dijit\n"
    )
    return tmp_path
