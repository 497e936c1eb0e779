"""Load an API description document from a file or URL.

Decodes JSON or YAML into a plain mapping; analysis happens elsewhere.
"""

import json
import logging
from pathlib import Path

import requests
import yaml

from openapi_analyzer.errors import DocumentLoadError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def detect_format(text: str) -> str:
    """Detect whether document text is JSON or YAML.

    Returns: 'json' or 'yaml'.
    """
    try:
        json.loads(text)
        return "json"
    except (json.JSONDecodeError, ValueError):
        return "yaml"


def read_source(source: str | Path) -> str:
    """Read raw document text from a local path or an http(s) URL."""
    source_str = str(source)
    if is_url(source_str):
        logger.debug("Fetching %s", source_str)
        try:
            response = requests.get(source_str, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DocumentLoadError(f"Failed to fetch {source_str}: {e}") from e
        return response.text

    path = Path(source)
    if not path.exists():
        raise DocumentLoadError(f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Could not read {path}: {e}") from e


def parse_text(text: str):
    fmt = detect_format(text)
    try:
        return json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Could not decode document: {e}") from e


def load_document(source: str | Path):
    """Read and decode a document from a path or URL."""
    return parse_text(read_source(source))
