"""Workflow pattern detection.

Recognizes CRUD groups, authentication, pagination and file upload
patterns. Apart from the CRUD template, which is filled in with the
resource name, every workflow is a fixed skeleton.
"""

import logging
import re
from collections.abc import Sequence

from openapi_analyzer.analysis.models import (
    AnalyzedEndpoint,
    WorkflowPattern,
    WorkflowStep,
    WorkflowType,
)
from openapi_analyzer.analysis.predicates import (
    has_multipart_body,
    has_pagination_parameter,
    is_auth_path,
)
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

CRUD_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

# (action, method, item path?)
CRUD_TEMPLATE = (
    ("list", "GET", False),
    ("create", "POST", False),
    ("read", "GET", True),
    ("update", "PUT", True),
    ("delete", "DELETE", True),
)

AUTH_WORKFLOW = WorkflowPattern(
    name="authentication",
    type=WorkflowType.AUTH,
    description="Obtain and maintain access credentials",
    complexity=3,
    steps=(
        WorkflowStep(action="authenticate", description="Obtain credentials"),
        WorkflowStep(action="validate", description="Validate credentials"),
        WorkflowStep(action="authorize", description="Get access token"),
        WorkflowStep(action="refresh", description="Refresh token if needed", required=False),
    ),
)

PAGINATION_WORKFLOW = WorkflowPattern(
    name="pagination",
    type=WorkflowType.PAGINATION,
    description="Walk a paginated collection to the end",
    complexity=2,
    steps=(
        WorkflowStep(action="initial_request", description="Fetch first page"),
        WorkflowStep(action="check_more", description="Check if more pages exist"),
        WorkflowStep(action="fetch_next", description="Fetch next page"),
        WorkflowStep(action="aggregate", description="Combine results"),
    ),
)

FILE_UPLOAD_WORKFLOW = WorkflowPattern(
    name="file_upload",
    type=WorkflowType.MULTIPART,
    description="Upload a file as multipart form data",
    complexity=2,
    steps=(
        WorkflowStep(action="prepare", description="Prepare file for upload"),
        WorkflowStep(action="validate", description="Validate file requirements"),
        WorkflowStep(action="upload", description="Upload file"),
        WorkflowStep(action="verify", description="Verify upload success"),
    ),
)

_FIRST_SEGMENT = re.compile(r"^/([^/]+)")


def resource_segment(path: str) -> str | None:
    """The first path segment, e.g. ``widgets`` for ``/widgets/{id}``."""
    match = _FIRST_SEGMENT.match(path)
    return match.group(1) if match else None


def group_by_resource(endpoints: Sequence[AnalyzedEndpoint]) -> dict[str, list[AnalyzedEndpoint]]:
    groups: dict[str, list[AnalyzedEndpoint]] = {}
    for ep in endpoints:
        resource = resource_segment(ep.path)
        if resource is not None:
            groups.setdefault(resource, []).append(ep)
    return groups


def build_crud_workflow(resource: str) -> WorkflowPattern:
    steps = []
    for action, method, item in CRUD_TEMPLATE:
        path = f"/{resource}/{{id}}" if item else f"/{resource}"
        steps.append(WorkflowStep(action=action, endpoint=f"{method} {path}"))
    return WorkflowPattern(
        name=f"{resource}_crud",
        type=WorkflowType.CRUD,
        description=f"Create, read, update and delete {resource}",
        complexity=2,
        steps=tuple(steps),
    )


def detect_crud_patterns(endpoints: Sequence[AnalyzedEndpoint]) -> list[WorkflowPattern]:
    patterns = []
    for resource, group in group_by_resource(endpoints).items():
        methods = {ep.method for ep in group}
        if CRUD_METHODS <= methods:
            patterns.append(build_crud_workflow(resource))
    return patterns


def has_authentication_flow(endpoints: Sequence[AnalyzedEndpoint]) -> bool:
    return any(is_auth_path(ep.path) for ep in endpoints)


def has_pagination_pattern(
    endpoints: Sequence[AnalyzedEndpoint], settings: AnalyzerSettings = DEFAULT_SETTINGS
) -> bool:
    return any(has_pagination_parameter(ep.operation, settings.pagination_param_names) for ep in endpoints)


def has_file_upload_pattern(endpoints: Sequence[AnalyzedEndpoint]) -> bool:
    return any(has_multipart_body(ep.operation) for ep in endpoints)


def detect_workflows(
    endpoints: Sequence[AnalyzedEndpoint], settings: AnalyzerSettings = DEFAULT_SETTINGS
) -> list[WorkflowPattern]:
    """Detect all workflow patterns, CRUD groups first."""
    workflows = detect_crud_patterns(endpoints)
    if has_authentication_flow(endpoints):
        workflows.append(AUTH_WORKFLOW)
    if has_pagination_pattern(endpoints, settings):
        workflows.append(PAGINATION_WORKFLOW)
    if has_file_upload_pattern(endpoints):
        workflows.append(FILE_UPLOAD_WORKFLOW)
    logger.debug("Detected workflows: %s", [w.name for w in workflows])
    return workflows
