#!/usr/bin/env python3
"""
Helpers shared by the sub-document handlers
"""

import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"


def parse_json_maybe(value: Any) -> Optional[Dict[str, Any]]:
    """
    Parse a serialized JSON object embedded in a BODACC field

    Args:
        value: Raw field value (usually a JSON string, sometimes already a dict)

    Returns:
        The decoded object, or None if absent or not a JSON object
    """
    if isinstance(value, dict):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        logger.debug(f"Unparseable sub-document: {value[:80]!r}")
        return None
    return parsed if isinstance(parsed, dict) else None


def text(value: Any) -> str:
    """Return a displayable string for scalar values, '' for anything else"""
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def first_text(*values: Any, default: str = PLACEHOLDER) -> str:
    """First non-empty displayable value, or `default`"""
    for value in values:
        candidate = text(value)
        if candidate:
            return candidate
    return default


def dig(data: Optional[Dict[str, Any]], *keys: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing"""
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
