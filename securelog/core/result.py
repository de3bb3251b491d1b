"""
SecureLog Inspection Result

A SecretInspectorResult represents one secret found during a scan.
When masking is enabled ``raw_value`` holds the masked form once the
scan has finished.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class SecretInspectorResult:
    raw_value: str
    detector: str
    line: Optional[int] = None
    component_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecretInspectorResult":
        """Rebuild a result from the plain data returned by the match worker."""
        return cls(
            raw_value=data["raw_value"],
            detector=data["detector"],
            line=data.get("line"),
            component_name=data.get("component_name"),
        )

    def display(self) -> str:
        """Human-readable output for console printing."""
        origin = self.component_name or "Unknown"
        if self.line is not None:
            origin = f"{origin}:{self.line}"
        return f"[{self.detector}] {self.raw_value} ({origin})"

    def to_dict(self) -> dict[str, Any]:
        """Convert result to a dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "raw_value": self.raw_value,
            "detector": self.detector,
        }
        if self.line is not None:
            result["line"] = self.line
        if self.component_name:
            result["component_name"] = self.component_name
        return result
