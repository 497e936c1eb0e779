"""Read-only view over a parsed OpenAPI / Swagger document.

Accepts OpenAPI 3.x section names, falling back to the Swagger 2.0
equivalents (``definitions``, ``securityDefinitions``) where present.
Absent sections read as empty collections.
"""

import logging
from collections.abc import Iterator, Mapping

from openapi_analyzer.analysis.models import HTTP_METHODS
from openapi_analyzer.errors import InvalidSpecificationError

logger = logging.getLogger(__name__)

LOCAL_REF_PREFIX = "#/"


class SpecDocument:
    """Validated wrapper around a raw API description mapping."""

    def __init__(self, raw):
        if not isinstance(raw, Mapping):
            raise InvalidSpecificationError(
                f"Invalid specification document: expected a mapping, got {type(raw).__name__}"
            )
        if "paths" not in raw:
            raise InvalidSpecificationError("Invalid specification document: missing 'paths' section")
        self.raw = raw
        self._schemas = self._read_schemas()

    def _read_schemas(self) -> dict:
        components = _mapping(self.raw.get("components"))
        if "schemas" in components:
            return _mapping(components["schemas"])
        return _mapping(self.raw.get("definitions"))

    @property
    def info(self) -> dict:
        return _mapping(self.raw.get("info"))

    @property
    def title(self) -> str:
        return str(self.info.get("title", "Untitled API"))

    @property
    def version(self) -> str:
        return str(self.info.get("version", ""))

    @property
    def paths(self) -> dict:
        return _mapping(self.raw.get("paths"))

    @property
    def schemas(self) -> dict:
        """Named schemas, read once at construction."""
        return self._schemas

    @property
    def security_schemes(self) -> dict:
        components = _mapping(self.raw.get("components"))
        if "securitySchemes" in components:
            return _mapping(components["securitySchemes"])
        return _mapping(self.raw.get("securityDefinitions"))

    @property
    def has_webhooks_section(self) -> bool:
        return self.raw.get("webhooks") is not None

    @property
    def server_urls(self) -> list[str]:
        servers = self.raw.get("servers") or []
        if not isinstance(servers, list):
            return []
        return [s["url"] for s in servers if isinstance(s, Mapping) and isinstance(s.get("url"), str)]

    def iter_operations(self) -> Iterator[tuple[str, str, dict]]:
        """Yield (path, METHOD, operation) for every qualifying operation."""
        for path, path_item in self.paths.items():
            if not isinstance(path_item, Mapping):
                logger.debug("Skipping non-mapping path item at %s", path)
                continue
            for method, operation in path_item.items():
                if str(method).upper() not in HTTP_METHODS:
                    continue
                if not is_operation(operation):
                    logger.debug("Skipping %s %s: not an operation", method, path)
                    continue
                yield str(path), str(method).upper(), operation

    def resolve_ref_name(self, ref) -> str | None:
        """Return the schema name a local reference pointer targets.

        Non-string, external and unknown pointers resolve to None.
        """
        name = ref_target_name(ref)
        if name is None or name not in self.schemas:
            return None
        return name

    def resolve_schema(self, schema) -> dict | None:
        """Follow one level of ``$ref`` indirection to a schema mapping."""
        if not isinstance(schema, Mapping):
            return None
        if "$ref" in schema:
            name = self.resolve_ref_name(schema["$ref"])
            if name is None:
                return None
            return _mapping(self.schemas[name])
        return dict(schema)


def is_operation(entry) -> bool:
    """An entry is an operation if it has a summary, description or responses."""
    return isinstance(entry, Mapping) and any(
        key in entry for key in ("summary", "description", "responses")
    )


def ref_target_name(ref) -> str | None:
    """Final segment of a local JSON pointer, with ``~1``/``~0`` decoded."""
    if not isinstance(ref, str) or not ref.startswith(LOCAL_REF_PREFIX):
        return None
    segment = ref.rsplit("/", 1)[-1]
    if not segment:
        return None
    return segment.replace("~1", "/").replace("~0", "~")


def _mapping(value) -> dict:
    return dict(value) if isinstance(value, Mapping) else {}
