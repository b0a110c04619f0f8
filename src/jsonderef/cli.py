#!/usr/bin/env python3
# src/jsonderef/cli.py


from __future__ import annotations

import sys
from pathlib import Path

import typer

from .enums import OutputFormat
from .loader import DEFAULT_TIMEOUT
from .runner import ResolveConfig, run_resolve

app = typer.Typer(
    name="jsonderef",
    help="Dereference JSON Schema $refs into a single self-contained document.",
    add_completion=False,
)


def _verbosity_callback(value: int):
    return max(0, min(value, 3))


@app.command()
def diagnose() -> None:
    print("jsonderef Environment Check\n")

    deps = {
        "requests": "requests",
        "yaml": "PyYAML",
        "typer": "typer",
    }

    print("Dependencies")
    print("-" * 50)
    print(f"{'Package':<30} {'Status':<10} {'Version'}")
    print("-" * 50)

    for module, name in deps.items():
        try:
            m = __import__(module)
            version = getattr(m, "__version__", "unknown")
            print(f"{name:<30} {'[OK]':<10} {version}")
        except ImportError:
            print(f"{name:<30} {'[MISSING]':<10} {'not installed'}")
    print(f"\nPython: {sys.version}")


@app.command()
def resolve(
    source: str = typer.Argument(..., help="Schema file path, http(s) URL, or '-' to read from stdin"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result here instead of stdout"),
    reference_key: str | None = typer.Option(
        None, "--reference-key", help="Keep the data each $ref replaced under this key (e.g. __reference__)"
    ),
    fmt: OutputFormat = typer.Option(
        OutputFormat.auto,
        "--format",
        help="Output format: auto (from --output suffix, default json)|json|yaml",
        case_sensitive=False,
    ),
    indent: int = typer.Option(2, "--indent", min=0, help="Indentation width (0 for compact JSON)"),
    sort_keys: bool = typer.Option(False, "--sort-keys", help="Sort object keys in the output"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", min=0.1, help="HTTP timeout in seconds"),
    stdin_yaml: bool = typer.Option(False, "--stdin-yaml", help="Parse stdin as YAML instead of JSON"),
    check: bool = typer.Option(False, "--check", help="Exit 1 if --output would change, without writing"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, callback=_verbosity_callback),
) -> None:
    if check and output is None:
        typer.secho("--check requires --output", fg=typer.colors.RED)
        raise typer.Exit(2)

    cfg = ResolveConfig(
        source=source,
        output=output,
        reference_key=reference_key,
        fmt=fmt,
        indent=indent,
        sort_keys=sort_keys,
        timeout=timeout,
        check=check,
        stdin_yaml=stdin_yaml,
        verbose=verbose,
    )

    try:
        result = run_resolve(cfg)
    except RuntimeError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e

    if output is None:
        typer.echo(result.text, nl=False)
        return

    if check:
        if result.changed:
            typer.secho(f"{output} is out of date", fg=typer.colors.YELLOW)
            raise typer.Exit(1)
        print(f"{output} is up to date")
        return

    print(result.human_summary())


if __name__ == "__main__":
    app()
