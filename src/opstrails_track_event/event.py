"""
CloudEvent payload construction.
"""
import json
import logging
from typing import Any, Dict, Optional

from .config import ActionConfig

logger = logging.getLogger(__name__)

SPEC_VERSION = "1.0"
# The API stamps the event on receipt
EVENT_TIME = "NOW"


def resolve_source(source: str, repository: str) -> str:
    """
    Resolve the event source.

    Args:
        source: Explicit source input (used verbatim when set)
        repository: "owner/repo" from GITHUB_REPOSITORY, may be empty

    Returns:
        Source URI-reference
    """
    return source or f"//github.com/{repository}"


def build_event_data(description: str, raw_data: str) -> Optional[Dict[str, Any]]:
    """
    Build the event's data object from the description and raw JSON inputs.

    A data input that is not valid JSON, or not a JSON object, is logged as a
    warning and contributes nothing.

    Args:
        description: Description input
        raw_data: Raw JSON text from the data input

    Returns:
        Data object, or None when both inputs are empty
    """
    if not description and not raw_data:
        return None

    data: Dict[str, Any] = {}
    if description:
        data["description"] = description

    if raw_data:
        try:
            parsed = json.loads(raw_data)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            data.update(parsed)
        else:
            logger.warning(f"Failed to parse 'data' input as JSON, ignoring: {raw_data}")

    return data


def build_event(config: ActionConfig) -> Dict[str, Any]:
    """
    Assemble the CloudEvent payload. Empty optional inputs are left out.

    Args:
        config: Validated action configuration

    Returns:
        JSON-serializable event payload
    """
    event: Dict[str, Any] = {
        "specversion": SPEC_VERSION,
        "type": config.type,
        "source": resolve_source(config.source, config.repository),
        "time": EVENT_TIME
    }
    if config.subject:
        event["subject"] = config.subject
    if config.version:
        event["version"] = config.version
    if config.severity:
        event["severity"] = config.severity

    data = build_event_data(config.description, config.data)
    if data is not None:
        event["data"] = data

    return event
