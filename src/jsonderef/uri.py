# src/jsonderef/uri.py
"""URI joining and JSON Pointer lookup for $ref resolution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote, urldefrag, urljoin, urlsplit

from .errors import InvalidBaseUri, InvalidReference, PointerNotFound

ANON_DOCUMENT = "anon.json"

# RFC 3986 reserved and unreserved characters plus "%" so existing escapes survive
_URI_SAFE = ":/?#[]@!$&'()*+,;=-._~%"


@dataclass(frozen=True)
class ResolvedRef:
    """A $ref joined onto its base.

    uri: full identifier including fragment, used for cycle tracking
    doc_uri: identifier with fragment stripped, used as cache key and fetch target
    fragment: JSON Pointer part, None when the ref carries no '#'
    """

    uri: str
    doc_uri: str
    fragment: str | None = None


def _check_base(base_uri: str) -> None:
    try:
        parts = urlsplit(base_uri)
    except ValueError as e:
        raise InvalidBaseUri(f"Cannot parse base URI: {e}", base_uri=base_uri) from e
    if not parts.scheme:
        raise InvalidBaseUri("Base URI has no scheme", base_uri=base_uri)


def resolve_ref(base_uri: str, ref: str) -> ResolvedRef:
    """Join ref onto base_uri using RFC 3986 reference resolution."""
    _check_base(base_uri)

    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in ref):
        raise InvalidReference("Reference contains control characters", ref=ref, base_uri=base_uri)
    # "my defs.json" -> "my%20defs.json"
    ref = quote(ref, safe=_URI_SAFE)

    if ref.startswith("#"):
        # urljoin drops fragments for non-hierarchical schemes (urn:) - join by hand
        joined = urldefrag(base_uri)[0] + ref
    else:
        try:
            joined = urljoin(base_uri, ref)
            urlsplit(joined)
        except ValueError as e:
            raise InvalidReference(f"Cannot join reference: {e}", ref=ref, base_uri=base_uri) from e

    doc_uri, _, fragment = joined.partition("#")
    return ResolvedRef(uri=joined, doc_uri=doc_uri, fragment=fragment if "#" in joined else None)


def rebase(base_uri: str, id_value: str) -> str:
    """Return the base URI established by an $id declared under base_uri."""
    try:
        if urlsplit(id_value).scheme:
            return urldefrag(id_value)[0]
        _check_base(base_uri)
        return urldefrag(urljoin(base_uri, id_value))[0]
    except ValueError as e:
        raise InvalidBaseUri(f"Cannot parse $id {id_value!r}: {e}", base_uri=base_uri) from e


def resolve_pointer(doc: Any, fragment: str) -> Any:
    """RFC 6901 JSON Pointer resolution. Handles ~0/~1 escaping and array/object traversal."""
    if fragment == "":
        return doc

    pointer = unquote(fragment)
    if not pointer.startswith("/"):
        raise PointerNotFound(f"Pointer '{pointer}' must start with '/'")

    def unescape(token: str) -> str:
        return token.replace("~1", "/").replace("~0", "~")

    cur = doc
    for raw in pointer.split("/")[1:]:
        tok = unescape(raw)
        if isinstance(cur, dict):
            if tok not in cur:
                raise PointerNotFound(f"Pointer '{pointer}' can not be found: no key {tok!r}")
            cur = cur[tok]
        elif isinstance(cur, list):
            # Leading zeros and '-' are not valid array indices
            canonical = tok.isascii() and tok.isdigit() and (tok == "0" or not tok.startswith("0"))
            if not canonical or int(tok) >= len(cur):
                raise PointerNotFound(f"Pointer '{pointer}' can not be found: bad array index {tok!r}")
            cur = cur[int(tok)]
        else:
            kind = type(cur).__name__
            raise PointerNotFound(f"Pointer '{pointer}' can not be found: {tok!r} in non-container {kind}")
    return cur


def path_to_uri(path: str | Path) -> str:
    return Path(path).resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    parts = urlsplit(uri)
    # file://host/share paths (UNC) keep their authority
    if parts.netloc and parts.netloc != "localhost":
        return Path(f"//{parts.netloc}{unquote(parts.path)}")
    return Path(unquote(parts.path))


def anonymous_uri() -> str:
    """Identifier used for documents supplied directly in memory."""
    return (Path.cwd() / ANON_DOCUMENT).as_uri()


def scheme_of(uri: str) -> str:
    try:
        return urlsplit(uri).scheme.lower()
    except ValueError as e:
        raise InvalidBaseUri(f"Cannot parse URI: {e}", base_uri=uri) from e
