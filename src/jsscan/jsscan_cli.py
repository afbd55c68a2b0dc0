"""
jsscan CLI Entrypoint.

This module provides the command-line interface for scanning JavaScript sources.

Features:
    - Scan `.js` files, or directories walked recursively for `.js` files.
    - Scan inline source strings with `-s`.
    - Label each parsed unit with its module id, derived from a YAML config.
    - Optionally hoist declarations before output.
    - Output as JSON lines, re-rendered JavaScript or an indented tree, to the
      console or a file.

Example usage:
    jsscan src/
    jsscan -s "var x = foo.bar();" -f tree
    jsscan dojo/ -c scan.yaml -f json -o tree.jsonl
    jsscan app.js --hoist -f js -v

Exit status:
    0 when every unit parsed, 1 when any unit failed to lex or parse (the
    remaining units are still processed), 2 for usage and configuration errors.

Functions:
    run_jsscan(...) -> int: Scans the given paths or sources and writes the output.
    process_file(path, config, fmt, hoist) -> str: Scans and renders one file.
    render_unit(source, module_id, path, fmt, hoist) -> str: Parses and renders one unit.
    configure_logging(verbose) -> None: Sets up console logging.
    main() -> None: Parses CLI arguments and exits with the scan status.
"""

from __future__ import annotations

import argparse
import logging
import sys

from jsscan.jsscan_config import ScanConfig, load_config
from jsscan.jsscan_errors import JSScanError
from jsscan.jsscan_hoist import hoist_declarations
from jsscan.jsscan_modules import iter_source_files, module_id_from_path
from jsscan.jsscan_parser import parse_source
from jsscan.jsscan_render import Renderer

logger = logging.getLogger(__name__)

FORMATS = ("json", "js", "tree")
STRING_MODULE = "<string>"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def render_unit(
    source: str,
    module_id: str,
    path: str | None = None,
    fmt: str = "json",
    hoist: bool = False,
) -> str:
    """
    Parse one source unit and render it in the requested format.

    Args:
        source (str): JavaScript source text.
        module_id (str): Label of the unit.
        path (str | None): File the source came from, if any.
        fmt (str): One of ``json``, ``js`` or ``tree``.
        hoist (bool): Hoist declarations before rendering.

    Returns:
        str: A single JSON line for ``json``; a header line followed by the
        rendered unit otherwise.

    Raises:
        JSScanError: If the source cannot be lexed or parsed.
    """
    nodes = parse_source(source)
    if hoist:
        nodes = hoist_declarations(nodes)
    if fmt == "json":
        return Renderer("json", indent=None, module=module_id, path=path).render(nodes)
    header = f"// module: {module_id}" if fmt == "js" else f"# {module_id}"
    body = Renderer(fmt).render(nodes)
    return f"{header}\n{body}" if body else header


def process_file(
    path: str, config: ScanConfig, fmt: str = "json", hoist: bool = False
) -> str:
    module_id = module_id_from_path(path, config)
    logger.info("Processing %s", module_id)
    with open(path, encoding="utf-8") as f:
        source = f.read()
    return render_unit(source, module_id, path, fmt, hoist)


def run_jsscan(
    paths: list[str],
    is_string: bool = False,
    config_path: str | None = None,
    fmt: str = "json",
    out: str | None = None,
    hoist: bool = False,
) -> int:
    """
    Run the jsscan pipeline over files or inline sources and write the output.

    Args:
        paths (list[str]): Files and directories, or source strings with `is_string`.
        is_string (bool): Treat `paths` as JavaScript source text.
        config_path (str | None): YAML config file for module ids.
        fmt (str): Output format: ``json``, ``js`` or ``tree``.
        out (str | None): Write the output to this file instead of stdout.
        hoist (bool): Hoist declarations before rendering.

    Returns:
        int: 0 if every unit parsed, 1 if any unit failed.

    Raises:
        FileNotFoundError: If `config_path` does not exist.
        ValueError: If the config is invalid or `fmt` is unknown.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format: {fmt!r}")
    config = load_config(config_path)

    outputs: list[str] = []
    status = 0

    if is_string:
        for source in paths:
            try:
                outputs.append(render_unit(source, STRING_MODULE, None, fmt, hoist))
            except JSScanError as e:
                logger.error("%s: %s", STRING_MODULE, e)
                status = 1
    else:
        for path in iter_source_files(paths):
            try:
                outputs.append(process_file(path, config, fmt, hoist))
            except (JSScanError, OSError, UnicodeDecodeError) as e:
                logger.error("%s: %s", path, e)
                status = 1

    text = "\n".join(outputs)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n" if text else "")
    elif text:
        print(text)
    return status


def main() -> None:
    """
    Entry point for the jsscan CLI.

    Supported flags:
        - `-s`, `--string`: Interpret the positional arguments as source text.
        - `-c`, `--config`: YAML file with `base_url` and `module_map`.
        - `-f`, `--format`: Output format (`json`, `js` or `tree`), default `json`.
        - `-o`, `--out`: Write output to a file.
        - `--hoist`: Hoist declarations before output.
        - `-v`, `--verbose`: Log progress and debug details to stderr.
    """
    parser = argparse.ArgumentParser(prog="jsscan")
    parser.add_argument(
        "paths", nargs="+", help="Files or directories (or source text with -s)"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret paths as source text"
    )
    parser.add_argument("-c", "--config", metavar="CONFIG", help="YAML config file")
    parser.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--hoist", action="store_true", help="Hoist declarations before output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        status = run_jsscan(
            paths=args.paths,
            is_string=args.string,
            config_path=args.config,
            fmt=args.format,
            out=args.out,
            hoist=args.hoist,
        )
    except (FileNotFoundError, ValueError) as e:
        parser.error(str(e))
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
