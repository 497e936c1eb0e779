"""Schema relationship extraction.

Looks one level deep into each named schema's properties for reference
pointers, either direct or as the item type of an array, and builds the
resource list and relationship graph from them.
"""

import copy
import logging
from collections.abc import Iterator, Mapping, Sequence

from openapi_analyzer.analysis.models import (
    AnalyzedEndpoint,
    AnalyzedResource,
    RelationshipType,
    ResourceRelationship,
)
from openapi_analyzer.analysis.predicates import is_core_resource_name
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS
from openapi_analyzer.parser.document import SpecDocument, ref_target_name

logger = logging.getLogger(__name__)


def property_refs(schema) -> Iterator[tuple[str, object]]:
    """Yield (property name, raw pointer) for each referencing property.

    A property referencing through both ``$ref`` and array ``items`` yields
    both pointers, direct one first.
    """
    properties = schema.get("properties") if isinstance(schema, Mapping) else None
    if not isinstance(properties, Mapping):
        return
    for prop_name, prop in properties.items():
        if not isinstance(prop, Mapping):
            continue
        if "$ref" in prop:
            yield str(prop_name), prop["$ref"]
        items = prop.get("items")
        if prop.get("type") == "array" and isinstance(items, Mapping) and "$ref" in items:
            yield str(prop_name), items["$ref"]


def find_schema_relationships(name: str, schema, doc: SpecDocument) -> list[str]:
    """Names of the schemas this schema references, in property order."""
    related: list[str] = []
    for prop_name, ref in property_refs(schema):
        target = doc.resolve_ref_name(ref)
        if target is None:
            logger.debug("Skipping unresolvable reference %r on %s.%s", ref, name, prop_name)
            continue
        if target == name or target in related:
            continue
        related.append(target)
    return related


def relationship_type(schema, target: str) -> RelationshipType:
    """Infer the relationship kind from the name of the referencing property.

    Returns UNKNOWN when no property references the target.
    """
    prop_name = next(
        (prop for prop, ref in property_refs(schema) if ref_target_name(ref) == target),
        None,
    )
    if prop_name is None:
        return RelationshipType.UNKNOWN
    if prop_name.endswith("Id") or prop_name.endswith("_id"):
        return RelationshipType.BELONGS_TO
    if prop_name.endswith("s") or prop_name.endswith("List"):
        return RelationshipType.HAS_MANY
    return RelationshipType.HAS_ONE


def extract_resources(
    doc: SpecDocument,
    endpoints: Sequence[AnalyzedEndpoint] = (),
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
) -> list[AnalyzedResource]:
    resources = []
    for name, schema in doc.schemas.items():
        name = str(name)
        schema = copy.deepcopy(dict(schema)) if isinstance(schema, Mapping) else {}
        resources.append(
            AnalyzedResource(
                name=name,
                schema=schema,
                is_core=is_core_resource_name(name, settings.core_resource_keywords),
                relationships=tuple(find_schema_relationships(name, schema, doc)),
                endpoints=tuple(_endpoints_using(name, endpoints)),
            )
        )
    logger.debug("Extracted %d resources", len(resources))
    return resources


def extract_relationships(resources: list[AnalyzedResource]) -> list[ResourceRelationship]:
    relationships = []
    for resource in resources:
        for target in resource.relationships:
            relationships.append(
                ResourceRelationship(
                    from_=resource.name,
                    to=target,
                    type=relationship_type(resource.schema_, target),
                )
            )
    return relationships


def _endpoints_using(name: str, endpoints) -> Iterator[str]:
    """Signatures of endpoints whose request body or 2xx responses use the schema."""
    for endpoint in endpoints:
        if name in _operation_schema_names(endpoint.operation):
            yield endpoint.signature


def _operation_schema_names(operation: Mapping) -> set[str]:
    bodies = []
    request_body = operation.get("requestBody")
    if isinstance(request_body, Mapping):
        bodies.append(request_body)
    responses = operation.get("responses")
    if isinstance(responses, Mapping):
        bodies.extend(
            resp for code, resp in responses.items()
            if str(code).startswith("2") and isinstance(resp, Mapping)
        )

    names = set()
    for body in bodies:
        content = body.get("content")
        if not isinstance(content, Mapping):
            continue
        for media in content.values():
            schema = media.get("schema") if isinstance(media, Mapping) else None
            if not isinstance(schema, Mapping):
                continue
            for candidate in (schema, schema.get("items")):
                if isinstance(candidate, Mapping):
                    target = ref_target_name(candidate.get("$ref"))
                    if target:
                        names.add(target)
    return names
