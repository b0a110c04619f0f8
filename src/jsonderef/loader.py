# src/jsonderef/loader.py
"""Fetch and parse documents named by file:// and http(s):// identifiers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import requests
import yaml

from .errors import FetchError, FileError, UnsupportedScheme
from .uri import scheme_of, uri_to_path

DEFAULT_TIMEOUT = 30.0

_YAML_SUFFIXES = (".yaml", ".yml")


def _is_yaml_name(name: str) -> bool:
    return name.lower().endswith(_YAML_SUFFIXES)


def parse_text(text: str, *, as_yaml: bool = False) -> Any:
    if as_yaml:
        return yaml.safe_load(text)
    return json.loads(text)


def read_file(path: str | Path) -> Any:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileError(f"Cannot open {path}: {e.strerror or e}", uri=str(path)) from e

    try:
        return parse_text(text, as_yaml=_is_yaml_name(path.name))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FileError(f"Cannot parse {path}: {e}", uri=str(path)) from e


def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Cannot fetch {url}: {e}", uri=url) from e

    content_type = response.headers.get("Content-Type", "")
    as_yaml = "yaml" in content_type or _is_yaml_name(urlsplit(url).path)
    try:
        return parse_text(response.text, as_yaml=as_yaml)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FetchError(f"Response from {url} is not a valid document: {e}", uri=url) from e


def load_uri(uri: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """Load the document at an absolute, fragment-free identifier."""
    scheme = scheme_of(uri)
    if scheme in ("http", "https"):
        return fetch_url(uri, timeout=timeout)
    if scheme == "file":
        return read_file(uri_to_path(uri))
    raise UnsupportedScheme(f"Unsupported URI scheme {scheme!r}: need a file or http(s) based URI", uri=uri)
