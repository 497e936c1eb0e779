"""Error response classification."""

import logging
import re
from collections.abc import Mapping, Sequence

from openapi_analyzer.analysis.models import AnalyzedEndpoint, ErrorPattern
from openapi_analyzer.analysis.predicates import is_recoverable_error
from openapi_analyzer.config import AnalyzerSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

ERROR_STATUS = re.compile(r"^[45]")

RETRY_AFTER = "respect_retry_after"
EXPONENTIAL_BACKOFF = "exponential_backoff"


def retry_strategy(status_code: str, recoverable: bool) -> str | None:
    if not recoverable:
        return None
    if status_code == "429":
        return RETRY_AFTER
    return EXPONENTIAL_BACKOFF


def detect_error_patterns(
    endpoints: Sequence[AnalyzedEndpoint], settings: AnalyzerSettings = DEFAULT_SETTINGS
) -> list[ErrorPattern]:
    """One ErrorPattern per declared 4xx/5xx response, in declaration order."""
    patterns = []
    for endpoint in endpoints:
        responses = endpoint.operation.get("responses")
        if not isinstance(responses, Mapping):
            continue
        for status_code, response in responses.items():
            status_code = str(status_code)
            if not ERROR_STATUS.match(status_code):
                continue
            description = response.get("description") if isinstance(response, Mapping) else None
            description = description if isinstance(description, str) else ""
            recoverable = is_recoverable_error(status_code, description, settings.recoverable_status_codes)
            patterns.append(
                ErrorPattern(
                    status_code=status_code,
                    endpoint=endpoint.signature,
                    description=description,
                    recoverable=recoverable,
                    retry_strategy=retry_strategy(status_code, recoverable),
                )
            )
    logger.debug("Detected %d error patterns", len(patterns))
    return patterns
