# src/jsonderef/__init__.py
"""Dereference JSON Schema $ref attributes into a self-contained schema."""

from .core import JsonRef
from .errors import (
    DerefError,
    FetchError,
    FileError,
    InvalidBaseUri,
    InvalidReference,
    PointerNotFound,
    UnsupportedScheme,
)

__all__ = [
    "DerefError",
    "FetchError",
    "FileError",
    "InvalidBaseUri",
    "InvalidReference",
    "JsonRef",
    "PointerNotFound",
    "UnsupportedScheme",
]
