"""Document-wide capability flags.

A flag is only set on positive evidence; everything else reads False.
"""

import re
from collections.abc import Mapping, Sequence

from openapi_analyzer.analysis.models import AnalyzedEndpoint, ApiCapabilities
from openapi_analyzer.analysis.predicates import (
    EVENT_STREAM_MEDIA_TYPE,
    has_multipart_body,
    has_pagination_parameter,
    is_batch_path,
    is_graphql_path,
    is_webhook_path,
)
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS
from openapi_analyzer.parser.document import SpecDocument

_VERSION_SEGMENT = re.compile(r"/v\d+(/|$)")


def _responses(endpoint: AnalyzedEndpoint) -> dict:
    responses = endpoint.operation.get("responses")
    return {str(k): v for k, v in responses.items()} if isinstance(responses, Mapping) else {}


def declares_async_response(endpoint: AnalyzedEndpoint) -> bool:
    return "202" in _responses(endpoint)


def declares_rate_limit_header(endpoint: AnalyzedEndpoint, header_names) -> bool:
    wanted = {h.lower() for h in header_names}
    for response in _responses(endpoint).values():
        headers = response.get("headers") if isinstance(response, Mapping) else None
        if isinstance(headers, Mapping) and any(str(h).lower() in wanted for h in headers):
            return True
    return False


def declares_event_stream(endpoint: AnalyzedEndpoint) -> bool:
    for response in _responses(endpoint).values():
        content = response.get("content") if isinstance(response, Mapping) else None
        if isinstance(content, Mapping) and EVENT_STREAM_MEDIA_TYPE in content:
            return True
    return False


def evaluate_capabilities(
    doc: SpecDocument,
    endpoints: Sequence[AnalyzedEndpoint],
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
) -> ApiCapabilities:
    paths = [ep.path for ep in endpoints]
    server_urls = doc.server_urls

    return ApiCapabilities(
        has_pagination=any(
            has_pagination_parameter(ep.operation, settings.pagination_param_names) for ep in endpoints
        ),
        has_batch_operations=any(is_batch_path(p) for p in paths),
        has_webhooks=doc.has_webhooks_section or any(is_webhook_path(p) for p in paths),
        has_async_operations=any(declares_async_response(ep) for ep in endpoints),
        has_authentication=bool(doc.security_schemes),
        has_rate_limiting=any(declares_rate_limit_header(ep, settings.rate_limit_headers) for ep in endpoints),
        has_file_uploads=any(has_multipart_body(ep.operation) for ep in endpoints),
        has_versioning=any(_VERSION_SEGMENT.search(p) for p in paths + server_urls),
        has_streaming=any(declares_event_stream(ep) for ep in endpoints),
        has_web_sockets=any(url.startswith(("ws://", "wss://")) for url in server_urls),
        has_graphql=any(is_graphql_path(p) for p in paths),
    )
