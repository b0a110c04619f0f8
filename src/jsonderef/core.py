# src/jsonderef/core.py
"""
Core $ref dereferencing.

Walks a JSON Schema tree depth-first and replaces every {"$ref": ...} node
with the fully resolved content it points to. References may be internal
JSON Pointer fragments, relative file paths or absolute http(s)/file URLs.

Recursive references are expanded exactly once: a $ref already on the
current resolution path is stripped and left unexpanded.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from .cache import DocumentCache, Loader
from .errors import DerefError, InvalidBaseUri, PointerNotFound, UnsupportedScheme
from .loader import DEFAULT_TIMEOUT
from .uri import anonymous_uri, path_to_uri, rebase, resolve_pointer, resolve_ref, scheme_of

Json = dict[str, Any] | list[Any] | str | int | float | bool | None

_CYCLE = object()


class JsonRef:
    """Dereferences $ref attributes and produces a self-contained schema.

    Configuration is done through constructor arguments or the set_ methods.
    The document cache lives as long as the instance and is shared by every
    deref_* call made on it.

    Example:
        >>> jsonref = JsonRef()
        >>> jsonref.deref_value(
        ...     {"properties": {"prop1": {"title": "name"}, "prop2": {"$ref": "#/properties/prop1"}}}
        ... )
        {'properties': {'prop1': {'title': 'name'}, 'prop2': {'title': 'name'}}}
    """

    def __init__(
        self,
        reference_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verbose: int = 0,
        loader: Loader | None = None,
    ):
        self.reference_key = reference_key
        self.verbose = verbose
        self.cache = DocumentCache(loader=loader, timeout=timeout)

    def set_reference_key(self, reference_key: str) -> None:
        """Keep the data a $ref replaced under reference_key on the new node.

        {"$ref": "#/properties/prop1", "title": "old_title"} resolves to
        {"title": "name", "__reference__": {"title": "old_title"}} with
        reference_key "__reference__".
        """
        self.reference_key = reference_key

    set_reference_preservation_key = set_reference_key

    def deref_value(self, value: Json) -> Json:
        """Deref an in-memory document. Relative refs resolve against the working directory.

        Dict roots are also updated in place.
        """
        return self._deref_root(value, anonymous_uri())

    def deref_url(self, url: str) -> Json:
        scheme = scheme_of(url)
        if not scheme:
            raise InvalidBaseUri("URL has no scheme", base_uri=url)
        if scheme not in ("http", "https"):
            raise UnsupportedScheme(f"deref_url needs an http(s) URL, got scheme {scheme!r}", uri=url)

        self._log(1, f"[fetch] {url}")
        value = self.cache.refresh(url)
        return self._deref_root(value, url)

    def deref_file(self, file_path: str | Path) -> Json:
        uri = path_to_uri(file_path)
        self._log(1, f"[read] {uri}")
        value = self.cache.refresh(uri)
        return self._deref_root(value, uri)

    def deref(self, source: str | Path) -> Json:
        """Deref from a URL or a file path, whichever source names."""
        if isinstance(source, str) and scheme_of(source) in ("http", "https"):
            return self.deref_url(source)
        return self.deref_file(source)

    def _log(self, level: int, msg: str) -> None:
        if self.verbose >= level:
            typer.echo(msg, err=True)

    def _register_id(self, doc: Any, doc_uri: str, replace: bool = False) -> None:
        """Cache doc under its root $id too. replace overwrites an entry left by an earlier call."""
        if not isinstance(doc, dict) or not isinstance(doc.get("$id"), str):
            return
        id_uri = rebase(doc_uri, doc["$id"])
        if id_uri == doc_uri:
            return
        if replace:
            self.cache.seed(id_uri, doc)
        elif not self.cache.alias(id_uri, doc):
            return
        self._log(2, f"[alias] {id_uri} -> {doc_uri}")

    def _deref_root(self, value: Json, uri: str) -> Json:
        self.cache.seed(uri, value)
        self._register_id(value, uri, replace=True)
        return self._deref(value, uri, ())

    def _load(self, doc_uri: str) -> Any:
        if doc_uri in self.cache:
            self._log(2, f"[cache-hit] {doc_uri}")
        else:
            self._log(1, f"[fetch] {doc_uri}")
        doc = self.cache.get_or_load(doc_uri)
        self._register_id(doc, doc_uri)
        return doc

    def _resolve(self, ref: str, base_uri: str, used_refs: tuple[str, ...]) -> Any:
        target = resolve_ref(base_uri, ref)
        schema = self._load(target.doc_uri)

        if target.fragment is not None:
            try:
                schema = resolve_pointer(schema, target.fragment)
            except PointerNotFound as e:
                e.uri = target.uri
                raise

        if target.uri in used_refs:
            self._log(1, f"[cycle] {target.uri} already being resolved, not expanding again")
            return _CYCLE

        return self._deref(schema, target.doc_uri, used_refs + (target.uri,))

    def _deref(self, value: Json, base_uri: str, used_refs: tuple[str, ...]) -> Json:
        if isinstance(value, dict):
            # $id rebases before the $ref check so a node carrying both resolves against its own $id
            if isinstance(value.get("$id"), str):
                base_uri = rebase(base_uri, value["$id"])
                self._log(2, f"[rebase] {base_uri}")
            substituted = self._substitute(value, base_uri, used_refs)
            if substituted is _CYCLE:
                return value
            value = substituted

        if isinstance(value, dict):
            for key, child in value.items():
                value[key] = self._deref(child, base_uri, used_refs)
        elif isinstance(value, list):
            for i, item in enumerate(value):
                value[i] = self._deref(item, base_uri, used_refs)
        return value

    def _substitute(self, value: dict[str, Any], base_uri: str, used_refs: tuple[str, ...]) -> Any:
        """Replace value with what its $ref points to. Non-string $refs are dropped."""
        ref = value.pop("$ref", None)
        if isinstance(ref, str):
            try:
                schema = self._resolve(ref, base_uri, used_refs)
            except DerefError as e:
                e.with_context(ref, base_uri)
                raise

            if schema is _CYCLE:
                return _CYCLE

            if isinstance(schema, dict):
                old_value = dict(value)
                value.clear()
                value.update(schema)
            else:
                old_value = value
                value = schema

            if self.reference_key is not None and isinstance(value, dict):
                value[self.reference_key] = old_value
        return value
