"""
SecureLog CLI

Command-line interface for inspecting content trees.

Commands:
    securelog scan DOCUMENT         - Inspect a YAML/JSON content tree
    securelog patterns              - List the active detectors
    securelog init                  - Create a default config file
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Optional

import click
import yaml


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)

from securelog import __version__
from securelog.core.config import (
    CONFIG_FILENAME,
    ScanConfiguration,
    SecureLogSettings,
    generate_default_config,
)
from securelog.core.errors import PatternCatalogError
from securelog.core.patterns import DEFAULT_PATTERNS, SecretPattern, effective_patterns, load_pattern_catalog
from securelog.core.tree import render, tree_from_data
from securelog.inspector.coordinator import SecureLogContainer
from securelog.logging_setup import setup_logging
from securelog.reporting.console import ConsoleReporter
from securelog.reporting.json_reporter import JSONReporter


@click.group()
@click.version_option(version=__version__, prog_name="SecureLog")
@click.option("--log-level", type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
              default=None, help="Log level (default: $SECURELOG_LOG_LEVEL or warning).")
@click.option("--log-format", type=click.Choice(["text", "json"]), default=None,
              help="Log format (default: $SECURELOG_LOG_FORMAT or text).")
def cli(log_level: Optional[str], log_format: Optional[str]) -> None:
    """
    SecureLog - Secret inspection for rendered content

    Detect API keys, tokens and credentials in a content tree and
    optionally mask them in the rendered output.
    """
    setup_logging(level=log_level, json_format=None if log_format is None else log_format == "json")


# ═══════════════════════════════════════════════════════
#  securelog scan
# ═══════════════════════════════════════════════════════
@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--mask/--no-mask", default=None, help="Mask detected secrets in the rendered output.")
@click.option("--max-depth", type=click.IntRange(min=0), default=None,
              help="Deepest level of children to inspect (default: 10).")
@click.option("--exclude", multiple=True, help="Element tag to skip with its subtree.")
@click.option("--catalog", default=None, help="Detector catalog file or URL replacing the bundled one.")
@click.option("--format", "-f", "output_format", type=click.Choice(["console", "json"]),
              default=None, help="Output format (default: console).")
@click.option("--output", "-o", "output_file", type=click.Path(), default=None,
              help="Write report to a file.")
@click.option("--write-masked", type=click.Path(), default=None,
              help="Write the rendered (possibly masked) output tree as JSON.")
@click.option("--thread-worker", is_flag=True, help="Match in a thread instead of a separate process.")
@click.option("--fail-on-secret", is_flag=True, help="Exit with code 1 when any secret is found.")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .securelog.yaml configuration file.")
def scan(
    document: str,
    mask: Optional[bool],
    max_depth: Optional[int],
    exclude: tuple,
    catalog: Optional[str],
    output_format: Optional[str],
    output_file: Optional[str],
    write_masked: Optional[str],
    thread_worker: bool,
    fail_on_secret: bool,
    config_path: Optional[str],
) -> None:
    """Inspect a content tree document for secrets.

    The document is YAML or JSON: strings are text, mappings with a
    "type" are elements with optional "props" and "children".

    Examples:

        securelog scan page.yaml

        securelog scan page.json --mask --write-masked masked.json --fail-on-secret
    """
    doc_path = Path(document).resolve()

    # ── Load configuration ──
    cfg_path = Path(config_path) if config_path else doc_path.parent / CONFIG_FILENAME
    settings = SecureLogSettings.load(cfg_path)

    # CLI flags override config
    scan_config = settings.scan_configuration()
    scan_config = ScanConfiguration(
        custom_patterns=scan_config.custom_patterns,
        exclude_components=set(exclude) | scan_config.exclude_components,
        max_depth=scan_config.max_depth if max_depth is None else max_depth,
        mask=scan_config.mask if mask is None else mask,
    )
    fmt = output_format or settings.output.format
    out_file = output_file or settings.output.file

    default_patterns = _load_catalog(catalog or settings.catalog)

    try:
        with open(doc_path, encoding="utf-8") as f:
            children = tree_from_data(yaml.safe_load(f))
    except (OSError, yaml.YAMLError, ValueError) as exc:
        _safe_echo(click.style(f"  [X] Cannot load {doc_path}: {exc}", fg="red"), err=True)
        sys.exit(2)

    container = render(children)

    # ── Run scan ──
    t0 = time.time()
    with SecureLogContainer(
        scan_config,
        default_patterns=default_patterns,
        isolated=settings.worker.isolated and not thread_worker,
        match_timeout=settings.worker.match_timeout,
    ) as secure_log:
        results = secure_log.scan_sync(children, container)
    elapsed = time.time() - t0

    # ── Report ──
    if fmt == "json":
        reporter = JSONReporter(target=str(doc_path), masked=scan_config.mask)
        json_str = reporter.report(results, output_file=out_file)
        if not out_file:
            _safe_echo(json_str)
    else:
        console = ConsoleReporter(target=str(doc_path), masked=scan_config.mask)
        console.report(results, elapsed)
        if out_file:
            JSONReporter(target=str(doc_path), masked=scan_config.mask).report(results, output_file=out_file)

    if write_masked:
        Path(write_masked).write_text(json.dumps(container.to_data(), indent=2), encoding="utf-8")

    # ── Exit code ──
    if fail_on_secret and results:
        sys.exit(1)


# ═══════════════════════════════════════════════════════
#  securelog patterns
# ═══════════════════════════════════════════════════════
@cli.command()
@click.option("--catalog", default=None, help="Detector catalog file or URL replacing the bundled one.")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .securelog.yaml configuration file.")
def patterns(catalog: Optional[str], config_path: Optional[str]) -> None:
    """List the detectors a scan would use, in matching order."""
    settings = SecureLogSettings.load(Path(config_path) if config_path else None)
    defaults = _load_catalog(catalog or settings.catalog)

    for idx, pattern in enumerate(effective_patterns(settings.scan.custom_patterns, defaults), start=1):
        _safe_echo(
            click.style(f"  {idx:3d}. ", fg="white")
            + click.style(f"{pattern.detector:24s}", fg="bright_white")
            + click.style(f" {pattern.regex}", fg="bright_black")
        )


# ═══════════════════════════════════════════════════════
#  securelog init
# ═══════════════════════════════════════════════════════
@cli.command()
@click.option("--path", "-p", "target_path", type=click.Path(), default=".",
              help="Directory to create the config file in.")
def init(target_path: str) -> None:
    """Create a default .securelog.yaml."""
    target = Path(target_path).resolve()
    target.mkdir(parents=True, exist_ok=True)

    config_file = target / CONFIG_FILENAME

    if config_file.exists():
        _safe_echo(click.style(f"  [!] {config_file} already exists, skipping.", fg="yellow"))
    else:
        config_file.write_text(generate_default_config(), encoding="utf-8")
        _safe_echo(click.style(f"  [+] Created {config_file}", fg="green"))

    _safe_echo("")
    _safe_echo("  Edit this file to customize detection and masking.")
    _safe_echo("  Run 'securelog scan DOCUMENT' to start scanning.")


# ── Helpers ──

def _load_catalog(source: Optional[str]) -> list[SecretPattern]:
    """Load an external catalog, or return the bundled one."""
    if not source:
        return list(DEFAULT_PATTERNS)
    try:
        return load_pattern_catalog(source)
    except PatternCatalogError as exc:
        _safe_echo(click.style(f"  [X] {exc}", fg="red"), err=True)
        sys.exit(2)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
