"""
SecureLog Configuration Management

ScanConfiguration holds the options of one scan. SecureLogSettings loads
those options, plus worker and output settings, from .securelog.yaml files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from securelog.core.errors import PatternCatalogError
from securelog.core.patterns import SecretPattern
from securelog.core.result import SecretInspectorResult

LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME = ".securelog.yaml"

DEFAULT_MAX_DEPTH = 10
DEFAULT_MATCH_TIMEOUT = 10.0

SecretCallback = Callable[[list[SecretInspectorResult]], None]


def _ignore_secrets(records: list[SecretInspectorResult]) -> None:
    pass


@dataclass(frozen=True)
class ScanConfiguration:
    """Options of a single scan; not modified while the scan runs."""

    custom_patterns: tuple[SecretPattern, ...] = ()
    exclude_components: frozenset[str] = frozenset()
    max_depth: int = DEFAULT_MAX_DEPTH
    mask: bool = False
    on_secret_found: SecretCallback = _ignore_secrets

    def __post_init__(self) -> None:
        # accept any iterable from callers, store immutable copies
        object.__setattr__(self, "custom_patterns", tuple(self.custom_patterns))
        object.__setattr__(self, "exclude_components", frozenset(self.exclude_components))


@dataclass
class WorkerConfig:
    isolated: bool = True
    match_timeout: float = DEFAULT_MATCH_TIMEOUT


@dataclass
class OutputConfig:
    format: str = "console"
    file: Optional[str] = None


@dataclass
class ScanSettings:
    max_depth: int = DEFAULT_MAX_DEPTH
    mask: bool = False
    exclude_components: list[str] = field(default_factory=list)
    custom_patterns: list[SecretPattern] = field(default_factory=list)


@dataclass
class SecureLogSettings:
    """Root configuration object for SecureLog."""

    scan: ScanSettings = field(default_factory=ScanSettings)
    worker: WorkerConfig = field(default_factory=WorkerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    catalog: Optional[str] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "SecureLogSettings":
        """Load configuration from a YAML file, falling back to defaults."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            LOGGER.warning("Ignoring unreadable config %s: %s", config_path, exc)
            return cls()

        if not isinstance(raw, dict):
            LOGGER.warning("Ignoring config %s: top level must be a mapping", config_path)
            return cls()

        return cls._from_dict(raw)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SecureLogSettings":
        """Build settings from a parsed YAML dictionary."""
        scan_data = data.get("scan") or {}
        custom_patterns = []
        for entry in scan_data.get("custom_patterns") or []:
            try:
                custom_patterns.append(SecretPattern.from_dict(entry))
            except PatternCatalogError as exc:
                LOGGER.warning("Ignoring custom pattern %r: %s", entry, exc)

        scan = ScanSettings(
            max_depth=int(scan_data.get("max_depth", DEFAULT_MAX_DEPTH)),
            mask=bool(scan_data.get("mask", False)),
            exclude_components=list(scan_data.get("exclude_components") or []),
            custom_patterns=custom_patterns,
        )

        worker_data = data.get("worker") or {}
        worker = WorkerConfig(
            isolated=bool(worker_data.get("isolated", True)),
            match_timeout=float(worker_data.get("match_timeout", DEFAULT_MATCH_TIMEOUT)),
        )

        output_data = data.get("output") or {}
        output = OutputConfig(
            format=output_data.get("format", "console"),
            file=output_data.get("file"),
        )

        return cls(
            scan=scan,
            worker=worker,
            output=output,
            catalog=data.get("catalog"),
        )

    def scan_configuration(
        self,
        on_secret_found: Optional[SecretCallback] = None,
    ) -> ScanConfiguration:
        """Build the ScanConfiguration described by these settings."""
        return ScanConfiguration(
            custom_patterns=self.scan.custom_patterns,
            exclude_components=self.scan.exclude_components,
            max_depth=self.scan.max_depth,
            mask=self.scan.mask,
            on_secret_found=on_secret_found or _ignore_secrets,
        )


def generate_default_config() -> str:
    """Generate a default .securelog.yaml configuration file content."""
    return """\
# SecureLog Configuration

# Scan settings
scan:
  max_depth: 10       # children deeper than this are not inspected
  mask: false         # rewrite detected secrets in the rendered output
  exclude_components:
    - script
    - style
  # custom_patterns:
  #   - detector: Internal Token
  #     regex: "\\\\b(itk_[a-z0-9]{32})\\\\b"
  #     secret_position: 1
  #     false_positive: "^itk_0+$"

# External detector catalog (file path or http(s) URL)
# catalog: https://example.com/detectors.json

# Match worker
worker:
  isolated: true      # run matching in a separate process
  match_timeout: 10.0

# Output settings
output:
  format: console     # console, json
  # file: securelog-report.json
"""
