"""Higher-order feature decisions derived from aggregate analysis counts.

The flags are advisory: they tell a hosting runtime which optional
capabilities are worth advertising, and trigger nothing here.
"""

from pydantic import BaseModel, ConfigDict

from openapi_analyzer.analysis.models import ApiCapabilities
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS


class FeatureDecisions(BaseModel):
    model_config = ConfigDict(frozen=True)

    requires_sampling: bool = False
    requires_context_management: bool = False
    requires_error_intelligence: bool = False


def decide_features(
    workflow_count: int,
    relationship_count: int,
    error_pattern_count: int,
    capabilities: ApiCapabilities,
    settings: AnalyzerSettings = DEFAULT_SETTINGS,
) -> FeatureDecisions:
    return FeatureDecisions(
        requires_sampling=(
            workflow_count > settings.sampling_workflow_threshold or capabilities.has_async_operations
        ),
        requires_context_management=relationship_count > settings.context_relationship_threshold,
        requires_error_intelligence=error_pattern_count > settings.error_intelligence_threshold,
    )
