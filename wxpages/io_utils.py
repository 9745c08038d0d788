"""Utility helpers for data file IO and warnings."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Union

import yaml

PathLike = Union[str, Path]


def read_data(path: Path) -> Any:
    """Load a YAML or JSON data file.

    JSON is a subset of YAML, but ``.json`` files go through the json module so
    that syntax errors are reported the way JSON users expect.
    """

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def write_text(path: PathLike, content: str, *, encoding: str = "utf-8") -> Path:
    """Write text content to a file, creating parent directories as needed."""

    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding=encoding)
    return file_path


def warn(msg: str) -> None:
    print(msg, file=sys.stderr)


__all__ = ["read_data", "warn", "write_text"]
