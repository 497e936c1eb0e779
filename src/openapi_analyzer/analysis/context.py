"""External context snapshots and the flags they overlay onto an analysis."""

from pydantic import BaseModel, ConfigDict

from openapi_analyzer.analysis.models import AnalysisModel

PRODUCTION = "production"
TEST_MARKER = "test"


class Root(BaseModel):
    """A workspace root advertised by the remote caller."""

    model_config = ConfigDict(frozen=True)

    uri: str
    name: str | None = None


class AnalysisContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    environment: str | None = None
    roots: tuple[Root, ...] = ()

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @property
    def has_test_root(self) -> bool:
        return any(TEST_MARKER in (root.name or "") for root in self.roots)


def apply_context(model: AnalysisModel, context: AnalysisContext) -> AnalysisModel:
    """Return a copy of ``model`` with context-derived flags forced on."""
    updates = {}
    if context.is_production:
        updates["requires_strict_validation"] = True
    if context.has_test_root:
        updates["has_test_mode"] = True
    if not updates:
        return model.model_copy()
    capabilities = model.capabilities.model_copy(update=updates)
    return model.model_copy(update={"capabilities": capabilities})
