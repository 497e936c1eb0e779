"""Data models for the analysis of an API description document.

Every analysis stage produces these models, and the aggregate
AnalysisModel is what downstream generators consume. All models are
frozen: once an analysis is returned, nothing in it changes.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")


class RelationshipType(str, Enum):
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"
    MANY_TO_MANY = "many_to_many"
    UNKNOWN = "unknown"


class WorkflowType(str, Enum):
    CRUD = "crud"
    AUTH = "auth"
    PAGINATION = "pagination"
    MULTIPART = "multipart"
    ASYNC = "async"
    CUSTOM = "custom"


class AnalyzedEndpoint(BaseModel):
    """A single path + method pair that qualified as an operation."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: str  # GET / POST / PUT / DELETE / PATCH
    operation: dict
    is_action: bool
    is_resource: bool
    complexity: int = Field(ge=1)
    category: str | None = None  # first tag
    tags: tuple[str, ...] = ()

    @field_validator("method")
    @classmethod
    def _known_method(cls, value: str) -> str:
        value = value.upper()
        if value not in HTTP_METHODS:
            raise ValueError(f"unsupported HTTP method: {value}")
        return value

    @property
    def signature(self) -> str:
        return f"{self.method} {self.path}"


class AnalyzedResource(BaseModel):
    """A named schema definition and the schemas it points at."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    schema_: dict = Field(alias="schema")
    is_core: bool
    relationships: tuple[str, ...] = ()
    endpoints: tuple[str, ...] = ()


class ResourceRelationship(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    type: RelationshipType
    through: str | None = None


class WorkflowStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: str
    endpoint: str | None = None  # "GET /users/{id}"
    description: str | None = None
    required: bool = True
    parallel: bool = False


class WorkflowPattern(BaseModel):
    """A recognized multi-call usage pattern."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: WorkflowType
    steps: tuple[WorkflowStep, ...] = Field(min_length=1)
    description: str | None = None
    complexity: int | None = Field(default=None, ge=1)

    @property
    def required_steps(self) -> tuple[WorkflowStep, ...]:
        return tuple(s for s in self.steps if s.required)


class ErrorPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: str = Field(pattern=r"^[45]")
    endpoint: str  # "METHOD /path"
    description: str = ""
    recoverable: bool
    retry_strategy: str | None = None


class ApiCapabilities(BaseModel):
    """Document-wide feature flags. Every flag is always present."""

    model_config = ConfigDict(frozen=True)

    has_pagination: bool = False
    has_batch_operations: bool = False
    has_webhooks: bool = False
    has_async_operations: bool = False
    has_authentication: bool = False
    has_rate_limiting: bool = False
    has_file_uploads: bool = False
    has_versioning: bool = False
    has_streaming: bool = False
    has_web_sockets: bool = False
    has_graphql: bool = False
    # context overlays
    requires_strict_validation: bool = False
    has_test_mode: bool = False

    def enabled(self) -> list[str]:
        """Names of the flags that are set, in declaration order."""
        return [name for name, value in self.model_dump().items() if value]


class AnalysisModel(BaseModel):
    """Aggregate result of analyzing one API description document."""

    model_config = ConfigDict(frozen=True)

    endpoints: tuple[AnalyzedEndpoint, ...] = ()
    resources: tuple[AnalyzedResource, ...] = ()
    relationships: tuple[ResourceRelationship, ...] = ()
    workflows: tuple[WorkflowPattern, ...] = ()
    error_patterns: tuple[ErrorPattern, ...] = ()
    capabilities: ApiCapabilities = ApiCapabilities()

    has_tools: bool = False
    has_resources: bool = False
    has_prompts: bool = False
    requires_sampling: bool = False
    requires_context_management: bool = False
    requires_error_intelligence: bool = False

    @field_validator("workflows")
    @classmethod
    def _unique_workflow_names(cls, value: tuple[WorkflowPattern, ...]) -> tuple[WorkflowPattern, ...]:
        names = [w.name for w in value]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate workflow names: {names}")
        return value

    def summary(self) -> dict[str, int]:
        """Counts of each analyzed collection."""
        return {
            "endpoints": len(self.endpoints),
            "actions": sum(1 for e in self.endpoints if e.is_action),
            "resources": sum(1 for e in self.endpoints if e.is_resource),
            "schemas": len(self.resources),
            "relationships": len(self.relationships),
            "workflows": len(self.workflows),
            "error_patterns": len(self.error_patterns),
        }
