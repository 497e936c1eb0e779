"""Keyword heuristics used to classify operations, paths and schemas.

Each heuristic is a standalone predicate so it can be tested and swapped
on its own.
"""

from collections.abc import Iterable, Mapping

ACTION_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
ACTION_SUMMARY_KEYWORDS = ("create", "update", "delete")
SIDE_EFFECT_SUMMARY_KEYWORDS = ("trigger", "send", "execute")
AUTH_PATH_KEYWORDS = ("auth", "login", "token")
BATCH_PATH_KEYWORDS = ("batch", "bulk")
WEBHOOK_PATH_KEYWORD = "webhook"
GRAPHQL_PATH_KEYWORD = "graphql"

MULTIPART_MEDIA_TYPE = "multipart/form-data"
JSON_MEDIA_TYPE = "application/json"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


def _summary(operation: Mapping) -> str:
    summary = operation.get("summary")
    return summary.lower() if isinstance(summary, str) else ""


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def summary_suggests_mutation(operation: Mapping) -> bool:
    return _contains_any(_summary(operation), ACTION_SUMMARY_KEYWORDS)


def summary_suggests_side_effects(operation: Mapping) -> bool:
    return _contains_any(_summary(operation), SIDE_EFFECT_SUMMARY_KEYWORDS)


def is_action_endpoint(method: str, operation: Mapping) -> bool:
    return method.upper() in ACTION_METHODS or summary_suggests_mutation(operation)


def is_resource_endpoint(method: str, operation: Mapping) -> bool:
    return method.upper() == "GET" and not summary_suggests_side_effects(operation)


def is_core_resource_name(name: str, keywords: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(k.lower() in lowered for k in keywords)


def is_auth_path(path: str) -> bool:
    return _contains_any(path, AUTH_PATH_KEYWORDS)


def is_batch_path(path: str) -> bool:
    return _contains_any(path, BATCH_PATH_KEYWORDS)


def is_webhook_path(path: str) -> bool:
    return WEBHOOK_PATH_KEYWORD in path


def is_graphql_path(path: str) -> bool:
    return GRAPHQL_PATH_KEYWORD in path.lower()


def parameters_of(operation: Mapping) -> list:
    params = operation.get("parameters")
    return params if isinstance(params, list) else []


def tags_of(operation: Mapping) -> tuple[str, ...]:
    tags = operation.get("tags")
    if not isinstance(tags, list):
        return ()
    return tuple(t for t in tags if isinstance(t, str))


def has_pagination_parameter(operation: Mapping, names: Iterable[str]) -> bool:
    wanted = {n.lower() for n in names}
    for param in parameters_of(operation):
        if not isinstance(param, Mapping):
            continue
        name = param.get("name")
        if isinstance(name, str) and name.lower() in wanted:
            return True
    return False


def request_body_media_types(operation: Mapping) -> list[str]:
    body = operation.get("requestBody")
    if not isinstance(body, Mapping):
        return []
    content = body.get("content")
    return list(content) if isinstance(content, Mapping) else []


def has_multipart_body(operation: Mapping) -> bool:
    return MULTIPART_MEDIA_TYPE in request_body_media_types(operation)


def is_recoverable_error(status_code: str, description: str, recoverable_codes: Iterable[str]) -> bool:
    return status_code in recoverable_codes or "retry" in description.lower()
