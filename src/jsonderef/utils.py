# src/jsonderef/utils.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .enums import OutputFormat


def pick_format(choice: OutputFormat, output: Path | None) -> OutputFormat:
    if choice != OutputFormat.auto:
        return choice
    if output is not None and output.suffix.lower() in (".yaml", ".yml"):
        return OutputFormat.yaml
    return OutputFormat.json


def dumps(data: Any, fmt: OutputFormat, *, indent: int = 2, sort_keys: bool = False) -> str:
    """Serialize a resolved document. Key order is kept unless sort_keys is set."""
    if fmt == OutputFormat.yaml:
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=sort_keys, indent=indent)
    return json.dumps(data, indent=indent or None, ensure_ascii=False, sort_keys=sort_keys) + "\n"


def write_if_changed(path: Path, content: str) -> bool:
    if path.exists():
        existing = path.read_text(encoding="utf-8")
        if existing == content:
            return False

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(content, encoding="utf-8")
    tmp.replace(path)
    return True


def would_change(path: Path, content: str) -> bool:
    return not path.exists() or path.read_text(encoding="utf-8") != content
