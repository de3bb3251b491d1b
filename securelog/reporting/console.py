"""
SecureLog Console Reporter

Generates human-readable colored console output for a scan.
"""

from __future__ import annotations

import sys
from collections import Counter
from typing import Optional

import click

from securelog import __version__
from securelog.core.result import SecretInspectorResult


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)


class ConsoleReporter:
    """Prints a formatted secret inspection report to the console."""

    def __init__(self, target: str, masked: bool = False) -> None:
        self.target = target
        self.masked = masked

    def report(
        self,
        results: list[SecretInspectorResult],
        elapsed: Optional[float] = None,
    ) -> None:
        """
        Print the full scan report.

        Args:
            results: Every secret found by the scan.
            elapsed: Scan duration in seconds.
        """
        self._print_header()
        self._print_detector_summary(results, elapsed)

        if results:
            self._print_detailed_results(results)

        self._print_footer(results)

    def _print_header(self) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo(click.style("  SecureLog Secret Inspection Report", fg="bright_white", bold=True))
        _safe_echo(click.style(f"  Version: {__version__}", fg="white"))
        _safe_echo(click.style(f"  Target: {self.target}", fg="white"))
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

    def _print_detector_summary(
        self,
        results: list[SecretInspectorResult],
        elapsed: Optional[float],
    ) -> None:
        _safe_echo("")
        line = click.style("  Secrets Found: ", fg="bright_white", bold=True) + click.style(
            str(len(results)), fg="white"
        )
        if elapsed is not None:
            line += click.style(f" in {elapsed:.2f}s", fg="bright_black")
        _safe_echo(line)

        counter = Counter(r.detector for r in results)
        for detector, count in counter.most_common():
            _safe_echo(
                click.style(f"     {detector:20s}: ", fg="yellow") + click.style(str(count), fg="white")
            )

    def _print_detailed_results(self, results: list[SecretInspectorResult]) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Detailed Findings:", fg="bright_white", bold=True))
        _safe_echo(click.style("-" * 55, fg="bright_black"))

        for idx, result in enumerate(results, start=1):
            _safe_echo("")
            _safe_echo(click.style(f"  {idx}. ", fg="white") + click.style(result.display(), fg="red", bold=True))

    def _print_footer(self, results: list[SecretInspectorResult]) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

        if not results:
            _safe_echo(click.style("  [OK] PASSED - No secrets found", fg="green", bold=True))
        elif self.masked:
            _safe_echo(
                click.style("  [!] SECRETS FOUND - Masked in the rendered output", fg="yellow", bold=True)
            )
        else:
            _safe_echo(
                click.style(
                    "  [X] SECRETS FOUND - Rendered output exposes credentials",
                    fg="bright_red",
                    bold=True,
                )
            )

        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo("")
