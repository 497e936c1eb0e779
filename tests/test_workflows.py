from openapi_analyzer.analysis.models import AnalyzedEndpoint, WorkflowType
from openapi_analyzer.analysis.workflows import (
    AUTH_WORKFLOW,
    FILE_UPLOAD_WORKFLOW,
    PAGINATION_WORKFLOW,
    build_crud_workflow,
    detect_crud_patterns,
    detect_workflows,
    group_by_resource,
    resource_segment,
)


def _ep(method, path, **operation) -> AnalyzedEndpoint:
    operation.setdefault("summary", f"{method} {path}")
    return AnalyzedEndpoint(
        path=path, method=method, operation=operation,
        is_action=method != "GET", is_resource=method == "GET", complexity=1,
    )


WIDGET_ENDPOINTS = [
    _ep("GET", "/widgets"),
    _ep("POST", "/widgets"),
    _ep("GET", "/widgets/{id}"),
    _ep("PUT", "/widgets/{id}"),
    _ep("DELETE", "/widgets/{id}"),
]


class TestGrouping:
    def test_resource_segment(self):
        assert resource_segment("/widgets/{id}") == "widgets"
        assert resource_segment("/") is None
        assert resource_segment("widgets") is None

    def test_group_by_first_segment(self):
        groups = group_by_resource(WIDGET_ENDPOINTS + [_ep("GET", "/health")])
        assert list(groups) == ["widgets", "health"]
        assert len(groups["widgets"]) == 5


class TestCrudDetection:
    def test_widgets_crud(self):
        patterns = detect_crud_patterns(WIDGET_ENDPOINTS)
        assert len(patterns) == 1
        crud = patterns[0]
        assert crud.name == "widgets_crud"
        assert crud.type is WorkflowType.CRUD
        assert [(s.action, s.endpoint) for s in crud.steps] == [
            ("list", "GET /widgets"),
            ("create", "POST /widgets"),
            ("read", "GET /widgets/{id}"),
            ("update", "PUT /widgets/{id}"),
            ("delete", "DELETE /widgets/{id}"),
        ]

    def test_missing_method_means_no_crud(self):
        endpoints = [e for e in WIDGET_ENDPOINTS if e.method != "DELETE"]
        assert detect_crud_patterns(endpoints) == []

    def test_patch_does_not_replace_put(self):
        endpoints = [e for e in WIDGET_ENDPOINTS if e.method != "PUT"] + [_ep("PATCH", "/widgets/{id}")]
        assert detect_crud_patterns(endpoints) == []

    def test_crud_template_uses_resource_name(self):
        wf = build_crud_workflow("orders")
        assert wf.steps[3].endpoint == "PUT /orders/{id}"


class TestFixedWorkflows:
    def test_auth_workflow_emitted_once(self):
        endpoints = [_ep("POST", "/auth/login"), _ep("POST", "/token"), _ep("POST", "/login")]
        workflows = detect_workflows(endpoints)
        assert workflows == [AUTH_WORKFLOW]
        assert [s.action for s in workflows[0].steps] == ["authenticate", "validate", "authorize", "refresh"]

    def test_pagination_workflow_emitted_once(self):
        endpoints = [
            _ep("GET", "/a", parameters=[{"name": "Cursor", "in": "query"}]),
            _ep("GET", "/b", parameters=[{"name": "page", "in": "query"}]),
            _ep("GET", "/c", parameters=[{"name": "offset", "in": "query"}]),
        ]
        workflows = detect_workflows(endpoints)
        assert [w.name for w in workflows] == ["pagination"]
        assert workflows[0].type is WorkflowType.PAGINATION
        assert [s.action for s in workflows[0].steps] == [
            "initial_request", "check_more", "fetch_next", "aggregate",
        ]

    def test_non_pagination_parameter_names(self):
        endpoints = [_ep("GET", "/a", parameters=[{"name": "page_size", "in": "query"}, {"in": "query"}])]
        assert detect_workflows(endpoints) == []

    def test_file_upload_workflow(self):
        body = {"content": {"multipart/form-data": {"schema": {"type": "object"}}}}
        workflows = detect_workflows([_ep("POST", "/files", requestBody=body)])
        assert workflows == [FILE_UPLOAD_WORKFLOW]
        assert workflows[0].type is WorkflowType.MULTIPART
        assert [s.action for s in workflows[0].steps] == ["prepare", "validate", "upload", "verify"]

    def test_emission_order(self):
        endpoints = WIDGET_ENDPOINTS + [
            _ep("POST", "/auth"),
            _ep("GET", "/feed", parameters=[{"name": "limit", "in": "query"}]),
            _ep("POST", "/files", requestBody={"content": {"multipart/form-data": {}}}),
        ]
        names = [w.name for w in detect_workflows(endpoints)]
        assert names == ["widgets_crud", "authentication", "pagination", "file_upload"]

    def test_no_endpoints_no_workflows(self):
        assert detect_workflows([]) == []

    def test_skeletons_are_shared_constants(self):
        first = detect_workflows([_ep("POST", "/auth")])[0]
        second = detect_workflows([_ep("POST", "/login")])[0]
        assert first == second == AUTH_WORKFLOW

    def test_refresh_step_is_optional(self):
        assert [s.action for s in AUTH_WORKFLOW.required_steps] == ["authenticate", "validate", "authorize"]
        assert AUTH_WORKFLOW.complexity == 3

    def test_crud_steps_are_sequential_and_required(self):
        wf = build_crud_workflow("widgets")
        assert wf.required_steps == wf.steps
        assert not any(s.parallel for s in wf.steps)
        assert wf.complexity == 2
