"""
Path utilities: module ids for source files and discovery of source files.

Functions:
    resolve_relative_id(path): Normalizes ``.`` and ``..`` segments.
    module_id_from_path(path, config): Maps a file path to a logical module id.
    iter_source_files(paths): Yields the ``.js`` files under the given paths.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator

from jsscan.jsscan_config import ScanConfig

SOURCE_SUFFIX = ".js"
MAIN_MODULE = "main"

logger = logging.getLogger(__name__)

_REPEATED_SLASHES = re.compile(r"/{2,}")


def resolve_relative_id(path: str) -> str:
    """Collapses ``.`` and ``..`` segments of a slash-separated id.

    A ``..`` removes the previous segment unless that segment is itself ``..``;
    leading ``..`` segments are kept.

    >>> resolve_relative_id("a/./b/../c")
    'a/c'
    >>> resolve_relative_id("../../a")
    '../../a'
    """
    result: list[str] = []
    for segment in path.split("/"):
        if segment == ".." and result and result[-1] != "..":
            result.pop()
        elif segment != ".":
            result.append(segment)
    return "/".join(result)


def module_id_from_path(path: str, config: ScanConfig) -> str:
    """Maps a source file path to its logical module id.

    The first ``base_url + module_map[prefix]`` that starts the normalized path
    is stripped and replaced by ``prefix``; a remaining ``main`` stands for the
    package itself. Paths outside every mapping keep their normalized form.

    Args:
        path: The file path, slash-separated.
        config: Supplies `base_url` and `module_map`.

    Returns:
        str: The module id, without the ``.js`` suffix.
    """
    result = resolve_relative_id(_REPEATED_SLASHES.sub("/", path))

    for module, location in config.module_map.items():
        prefix = config.base_url + location
        if not prefix.endswith("/"):
            prefix += "/"
        if result.startswith(prefix):
            rest = _strip_id(result[len(prefix):])
            return module if rest == MAIN_MODULE else f"{module}/{rest}"

    return _strip_id(result)


def _strip_id(path: str) -> str:
    if path.startswith("/"):
        path = path[1:]
    if path.endswith(SOURCE_SUFFIX):
        path = path[: -len(SOURCE_SUFFIX)]
    return path


def iter_source_files(paths: Iterable[str]) -> Iterator[str]:
    """Yields the ``.js`` files named by `paths`, walking directories recursively.

    Paths are yielded in the order given; directory entries in sorted order.
    Paths that are neither directories nor ``.js`` files are ignored; missing
    paths are logged.
    """
    for path in paths:
        path = _REPEATED_SLASHES.sub("/", path)
        if os.path.isdir(path):
            yield from iter_source_files(
                f"{path.rstrip('/')}/{entry}" for entry in sorted(os.listdir(path))
            )
        elif os.path.isfile(path) and path.endswith(SOURCE_SUFFIX):
            yield path
        elif not os.path.exists(path):
            logger.warning("No such file or directory: %s", path)
