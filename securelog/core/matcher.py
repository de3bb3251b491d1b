"""
SecureLog Matcher

Runs a set of detector patterns over a text blob. This is the function
executed inside the match worker, so it only takes and returns plain
data: pattern dicts in, result dicts out.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)


def match_secrets(
    text: str,
    patterns: list[dict[str, Any]],
    component_name: str,
) -> list[dict[str, Any]]:
    """
    Find every secret in ``text``.

    Args:
        text: The text to inspect.
        patterns: Pattern dicts as produced by ``SecretPattern.to_dict``.
        component_name: Label of the node the text came from.

    Returns:
        Result dicts in pattern order, then left-to-right within a pattern.
    """
    found: list[dict[str, Any]] = []

    for pattern in patterns:
        detector = pattern.get("detector", "Unknown")
        try:
            found.extend(_match_pattern(text, pattern, component_name))
        except (re.error, IndexError, TypeError) as exc:
            # A broken pattern only costs its own findings
            LOGGER.warning("Skipping detector %r: %s", detector, exc)

    return found


def _match_pattern(
    text: str,
    pattern: dict[str, Any],
    component_name: str,
) -> list[dict[str, Any]]:
    regex = re.compile(pattern["regex"], re.IGNORECASE)
    position = pattern.get("secret_position", 0)
    false_positive = _compile_optional(pattern.get("false_positive"))

    if position > regex.groups or position < 0:
        raise IndexError(f"secret_position {position} is out of range for {regex.groups} group(s)")

    results: list[dict[str, Any]] = []
    for match in regex.finditer(text):
        candidate = match.group(position)
        if candidate is None:
            continue
        candidate = candidate.strip()
        if not candidate:
            continue
        if false_positive is not None and false_positive.search(candidate):
            continue

        results.append(
            {
                "raw_value": candidate,
                "line": get_line_number(text, match.start()),
                "detector": pattern["detector"],
                "component_name": component_name,
            }
        )

    return results


def _compile_optional(regex: Optional[str]) -> Optional[re.Pattern]:
    if not regex:
        return None
    return re.compile(regex, re.IGNORECASE)


def get_line_number(text: str, index: int) -> int:
    """1-based line of ``index`` within ``text``."""
    return text.count("\n", 0, index) + 1
