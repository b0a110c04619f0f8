# src/jsonderef/errors.py
"""Typed failures raised while dereferencing a schema.

Every failure aborts the whole top-level call. The walker attaches the
offending $ref string and the base URI in effect so callers can locate the
problem in the source document.
"""

from __future__ import annotations


class DerefError(Exception):
    """Base class for all dereferencing failures."""

    def __init__(self, reason: str, *, ref: str | None = None, base_uri: str | None = None, uri: str | None = None):
        super().__init__(reason)
        self.reason = reason
        self.ref = ref
        self.base_uri = base_uri
        self.uri = uri

    def with_context(self, ref: str, base_uri: str) -> DerefError:
        # Innermost context wins: the deepest failing $ref is the useful one
        if self.ref is None:
            self.ref = ref
            self.base_uri = base_uri
        return self

    def __str__(self) -> str:
        parts = [self.reason]
        if self.ref is not None:
            parts.append(f"$ref '{self.ref}'")
        if self.base_uri is not None:
            parts.append(f"base '{self.base_uri}'")
        if self.uri is not None and self.uri not in self.reason:
            parts.append(f"target '{self.uri}'")
        return " | ".join(parts)


class InvalidBaseUri(DerefError):
    """Base identifier is not an absolute URI."""


class InvalidReference(DerefError):
    """$ref value cannot be joined onto the base."""


class FetchError(DerefError):
    """Network or HTTP failure fetching a remote document."""


class FileError(DerefError):
    """Open or parse failure reading a local document."""


class PointerNotFound(DerefError):
    """Fragment does not resolve inside the target document."""


class UnsupportedScheme(DerefError):
    """Identifier is neither http(s) nor file."""
