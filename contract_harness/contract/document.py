from __future__ import annotations

import copy
from typing import Any, Iterator, Mapping

from referencing import Registry, Resource
from referencing.exceptions import Unresolvable

from .errors import MalformedSpec

_RESOLVER = Registry().resolver()


class OpenAPIDocument:
    """Read-only view over a parsed OpenAPI (or Swagger) document.

    The raw tree is copied on construction so later changes to the caller's
    mapping cannot leak into lookups. Accessors never raise on missing or
    mistyped sections; they return empty results instead.
    """

    def __init__(self, raw: Mapping[str, Any]) -> None:
        if not isinstance(raw, Mapping):
            raise MalformedSpec("OpenAPI document must be a JSON object")
        if "openapi" not in raw and "swagger" not in raw:
            raise MalformedSpec("Document does not appear to be a valid OpenAPI specification")
        self._raw: dict[str, Any] = copy.deepcopy(dict(raw))

    @property
    def raw(self) -> dict[str, Any]:
        return self._raw

    @property
    def openapi_version(self) -> str | None:
        version = self._raw.get("openapi", self._raw.get("swagger"))
        return str(version) if version is not None else None

    @property
    def is_oas31(self) -> bool:
        version = self.openapi_version
        return bool(version and version.startswith("3.1"))

    @property
    def info(self) -> dict[str, Any]:
        info = self._raw.get("info")
        return info if isinstance(info, dict) else {}

    @property
    def title(self) -> str | None:
        title = self.info.get("title")
        return title if isinstance(title, str) else None

    @property
    def version(self) -> str | None:
        version = self.info.get("version")
        return str(version) if version is not None else None

    def paths(self) -> dict[str, Any]:
        paths = self._raw.get("paths")
        return paths if isinstance(paths, dict) else {}

    def path_item(self, path: str) -> dict[str, Any] | None:
        item = self.paths().get(path)
        return item if isinstance(item, dict) else None

    def component_schemas(self) -> dict[str, Any]:
        components = self._raw.get("components")
        if not isinstance(components, dict):
            return {}
        schemas = components.get("schemas")
        return schemas if isinstance(schemas, dict) else {}

    def iter_component_schemas(self) -> Iterator[tuple[str, dict[str, Any]]]:
        for name, schema in self.component_schemas().items():
            if isinstance(schema, dict):
                yield name, schema

    def resolve(self, ref: str) -> Any | None:
        """Follow a local ``#/...`` pointer into the document, or ``None`` if it leads nowhere."""
        if not ref.startswith("#"):
            return None
        try:
            return Resource.opaque(self._raw).pointer(ref[1:], resolver=_RESOLVER).contents
        except (Unresolvable, LookupError, TypeError, ValueError):
            return None

    def inline_refs(self, value: Any) -> Any:
        """Copy ``value`` with every resolvable local ``$ref`` replaced by its target.

        A ref reached again while its own target is being expanded becomes ``{}``.
        """
        return self._inline(value, frozenset())

    def _inline(self, value: Any, expanding: frozenset[str]) -> Any:
        if isinstance(value, list):
            return [self._inline(item, expanding) for item in value]
        if not isinstance(value, dict):
            return value
        ref = value.get("$ref")
        if not isinstance(ref, str):
            return {key: self._inline(item, expanding) for key, item in value.items()}
        if ref in expanding:
            return {}
        target = self.resolve(ref)
        if target is None:
            return value
        return self._inline(target, expanding | {ref})

    def __repr__(self) -> str:
        return f"OpenAPIDocument(title={self.title!r}, version={self.version!r}, openapi={self.openapi_version!r})"
