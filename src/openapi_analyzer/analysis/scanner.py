"""Path/operation scanner.

Walks every path + method pair of a document, keeps the ones that
qualify as operations, and classifies and scores each one.
"""

import copy
import logging
from collections.abc import Mapping

from openapi_analyzer.analysis.models import AnalyzedEndpoint
from openapi_analyzer.analysis.predicates import (
    JSON_MEDIA_TYPE,
    is_action_endpoint,
    is_resource_endpoint,
    parameters_of,
    tags_of,
)
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS
from openapi_analyzer.parser.document import SpecDocument

logger = logging.getLogger(__name__)


def scan_endpoints(doc: SpecDocument, settings: AnalyzerSettings = DEFAULT_SETTINGS) -> list[AnalyzedEndpoint]:
    """Scan all operations of the document into AnalyzedEndpoint records."""
    endpoints = []
    for path, method, operation in doc.iter_operations():
        tags = tags_of(operation)
        endpoints.append(
            AnalyzedEndpoint(
                path=path,
                method=method,
                operation=copy.deepcopy(dict(operation)),
                is_action=is_action_endpoint(method, operation),
                is_resource=is_resource_endpoint(method, operation),
                complexity=calculate_complexity(operation, doc, settings),
                category=tags[0] if tags else None,
                tags=tags,
            )
        )
    logger.debug("Scanned %d endpoints", len(endpoints))
    return endpoints


def calculate_complexity(
    operation: Mapping,
    doc: SpecDocument | None = None,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
) -> int:
    """Score an operation; starts at 1 and only ever grows with more signals."""
    complexity = 1
    complexity += len(parameters_of(operation)) // settings.params_per_complexity_point

    request_body = operation.get("requestBody")
    if request_body is not None:
        complexity += 1
        schema = _json_body_schema(request_body, doc)
        properties = schema.get("properties") if schema else None
        if isinstance(properties, Mapping) and len(properties) > settings.large_body_property_threshold:
            complexity += 1

    responses = operation.get("responses")
    if isinstance(responses, Mapping) and len(responses) > settings.many_responses_threshold:
        complexity += 1

    return complexity


def has_tools(endpoints: list[AnalyzedEndpoint], settings: AnalyzerSettings = DEFAULT_SETTINGS) -> bool:
    return any(e.is_action or e.complexity > settings.tool_complexity_threshold for e in endpoints)


def _json_body_schema(request_body, doc: SpecDocument | None) -> dict | None:
    if not isinstance(request_body, Mapping):
        return None
    content = request_body.get("content")
    if not isinstance(content, Mapping):
        return None
    media = content.get(JSON_MEDIA_TYPE)
    if not isinstance(media, Mapping):
        return None
    schema = media.get("schema")
    if doc is not None:
        return doc.resolve_schema(schema)
    return dict(schema) if isinstance(schema, Mapping) else None
