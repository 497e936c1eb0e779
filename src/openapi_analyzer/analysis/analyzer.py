"""SpecAnalyzer: turns an API description document into an AnalysisModel.

Pipeline: scan operations, then extract resources and relationships,
detect workflows and error patterns, evaluate capability flags and
finally the feature decisions that depend on the counts above. Each call
builds a fresh model; nothing is cached or shared between calls.
"""

import logging

from openapi_analyzer.analysis.capabilities import evaluate_capabilities
from openapi_analyzer.analysis.context import AnalysisContext, apply_context
from openapi_analyzer.analysis.error_patterns import detect_error_patterns
from openapi_analyzer.analysis.features import decide_features
from openapi_analyzer.analysis.models import AnalysisModel
from openapi_analyzer.analysis.relationships import extract_relationships, extract_resources
from openapi_analyzer.analysis.scanner import has_tools, scan_endpoints
from openapi_analyzer.analysis.workflows import detect_workflows
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS
from openapi_analyzer.parser.document import SpecDocument

logger = logging.getLogger(__name__)


class SpecAnalyzer:
    """Analyzes one parsed API description document."""

    def __init__(self, document, settings: AnalyzerSettings | None = None):
        self.doc = document if isinstance(document, SpecDocument) else SpecDocument(document)
        self.settings = settings or DEFAULT_SETTINGS

    def analyze(self) -> AnalysisModel:
        logger.debug("Starting analysis of %s", self.doc.title)
        settings = self.settings

        endpoints = scan_endpoints(self.doc, settings)
        resources = extract_resources(self.doc, endpoints, settings)
        relationships = extract_relationships(resources)
        workflows = detect_workflows(endpoints, settings)
        error_patterns = detect_error_patterns(endpoints, settings)
        capabilities = evaluate_capabilities(self.doc, endpoints, settings)
        decisions = decide_features(
            workflow_count=len(workflows),
            relationship_count=len(relationships),
            error_pattern_count=len(error_patterns),
            capabilities=capabilities,
            settings=settings,
        )

        model = AnalysisModel(
            endpoints=tuple(endpoints),
            resources=tuple(resources),
            relationships=tuple(relationships),
            workflows=tuple(workflows),
            error_patterns=tuple(error_patterns),
            capabilities=capabilities,
            has_tools=has_tools(endpoints, settings),
            has_resources=bool(resources),
            has_prompts=bool(workflows),
            **decisions.model_dump(),
        )
        logger.debug("Analysis complete: %s", model.summary())
        return model

    def analyze_with_context(self, context: AnalysisContext | dict) -> AnalysisModel:
        """Run a fresh analysis and overlay flags derived from ``context``."""
        if not isinstance(context, AnalysisContext):
            context = AnalysisContext(**context)
        model = apply_context(self.analyze(), context)
        logger.debug(
            "Applied context (environment=%s, roots=%d)", context.environment, len(context.roots)
        )
        return model


def analyze_document(document, settings: AnalyzerSettings | None = None) -> AnalysisModel:
    """Shortcut for ``SpecAnalyzer(document, settings).analyze()``."""
    return SpecAnalyzer(document, settings).analyze()
