# src/jsonderef/runner.py
"""Resolution runner - wires CLI options to the engine and writes the output."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .core import JsonRef
from .enums import OutputFormat
from .errors import DerefError
from .loader import DEFAULT_TIMEOUT, parse_text
from .utils import dumps, pick_format, would_change, write_if_changed

STDIN = "-"


@dataclass(slots=True)
class ResolveConfig:
    source: str
    output: Path | None = None
    reference_key: str | None = None
    fmt: OutputFormat = OutputFormat.auto
    indent: int = 2
    sort_keys: bool = False
    timeout: float = DEFAULT_TIMEOUT
    check: bool = False
    stdin_yaml: bool = False
    verbose: int = 0


@dataclass(slots=True)
class ResolveResult:
    document: Any
    text: str
    output: Path | None = None
    changed: bool = True
    documents_loaded: int = 0

    def human_summary(self) -> str:
        target = self.output if self.output is not None else "stdout"
        state = "updated" if self.changed else "unchanged"
        return f"[OK] Resolved document ({self.documents_loaded} documents cached) -> {target} ({state})"


def _read_stdin(as_yaml: bool) -> Any:
    try:
        return parse_text(sys.stdin.read(), as_yaml=as_yaml)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RuntimeError(f"Cannot parse document from stdin: {e}") from e


def run_resolve(cfg: ResolveConfig, engine: JsonRef | None = None) -> ResolveResult:
    engine = engine or JsonRef(reference_key=cfg.reference_key, timeout=cfg.timeout, verbose=cfg.verbose)

    try:
        if cfg.source == STDIN:
            document = engine.deref_value(_read_stdin(cfg.stdin_yaml))
        else:
            document = engine.deref(cfg.source)
    except DerefError as e:
        raise RuntimeError(f"Failed to resolve {cfg.source}: {e}") from e

    fmt = pick_format(cfg.fmt, cfg.output)
    text = dumps(document, fmt, indent=cfg.indent, sort_keys=cfg.sort_keys)
    result = ResolveResult(document=document, text=text, output=cfg.output, documents_loaded=len(engine.cache))

    if cfg.output is None:
        return result

    if cfg.check:
        result.changed = would_change(cfg.output, text)
    else:
        result.changed = write_if_changed(cfg.output, text)
    return result
