"""
SecureLog JSON Reporter

Generates machine-readable JSON output format:
{
    "version": "1.0",
    "summary": {
        "total_findings": N,
        "by_detector": {"Paystack": n, ...},
        "by_component": {"TextNode": n, ...},
        "masked": bool
    },
    "findings": [...]
}
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Optional

from securelog import __version__
from securelog.core.result import SecretInspectorResult


class JSONReporter:
    """Generates JSON-formatted scan reports."""

    def __init__(self, target: str, masked: bool = False) -> None:
        self.target = target
        self.masked = masked

    def report(
        self,
        results: list[SecretInspectorResult],
        output_file: Optional[str] = None,
    ) -> str:
        """
        Generate JSON report.

        Args:
            results: Every secret found by the scan.
            output_file: Optional file path to write the report to.

        Returns:
            The JSON string.
        """
        report_data = {
            "version": "1.0",
            "tool": {
                "name": "SecureLog",
                "version": __version__,
            },
            "target": self.target,
            "summary": {
                "total_findings": len(results),
                "by_detector": dict(Counter(r.detector for r in results)),
                "by_component": dict(Counter(r.component_name or "Unknown" for r in results)),
                "masked": self.masked,
            },
            "findings": [r.to_dict() for r in results],
        }

        json_str = json.dumps(report_data, indent=2, default=str)

        if output_file:
            Path(output_file).write_text(json_str, encoding="utf-8")

        return json_str
