"""
SecureLog Detector Patterns

A SecretPattern is one named detector: a regular expression kept as a
plain string (it has to travel to the match worker as data), the capture
group that holds the secret, and an optional false-positive rule.

The bundled DEFAULT_PATTERNS catalog can be replaced or extended with an
external catalog loaded from a YAML/JSON file or an http(s) URL.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import requests
import yaml

from securelog.core.errors import PatternCatalogError

CATALOG_TIMEOUT = 10


@dataclass(frozen=True)
class SecretPattern:
    detector: str
    regex: str
    secret_position: int = 0
    false_positive: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecretPattern":
        """Build a pattern from a catalog entry (camelCase or snake_case keys)."""
        try:
            detector = data["detector"]
            regex = data["regex"]
        except (KeyError, TypeError) as exc:
            raise PatternCatalogError(
                f"Pattern entry is missing a required key: {exc}"
            ) from exc

        position = data.get("secret_position", data.get("secretPosition", 0))
        false_positive = data.get("false_positive", data.get("falsePositive"))

        try:
            position = int(position)
        except (TypeError, ValueError) as exc:
            raise PatternCatalogError(
                f"Pattern {detector!r} has an invalid secret position: {position!r}"
            ) from exc

        return cls(
            detector=str(detector),
            regex=str(regex),
            secret_position=position,
            false_positive=false_positive or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form sent to the match worker."""
        return {
            "detector": self.detector,
            "regex": self.regex,
            "secret_position": self.secret_position,
            "false_positive": self.false_positive,
        }


def _p(detector: str, regex: str, position: int = 1, false_positive: Optional[str] = None) -> SecretPattern:
    return SecretPattern(detector, regex, position, false_positive)


DEFAULT_PATTERNS: list[SecretPattern] = [
    # ── Payment ──
    _p("Paystack", r"\b(sk_[a-z]{1,}_[A-Za-z0-9]{40})\b"),
    # Paystack live keys share the sk_live_ prefix but are 40 hex chars
    _p("Stripe", r"\b([rs]k_live_[A-Za-z0-9]{20,247})\b",
       false_positive=r"^sk_live_[0-9a-f]{40}$"),
    _p("Flutterwave", r"\b(FLWSECK-[0-9a-z]{32}-X)\b"),
    _p("Square", r"\b(sq0atp-[0-9A-Za-z_-]{22})\b"),
    _p("Razorpay", r"\b(rzp_live_[A-Za-z0-9]{14})\b"),

    # ── Cloud Providers ──
    _p("AWS", r"\b((?:AKIA|ABIA|ACCA|ASIA)[0-9A-Z]{16})\b"),
    _p("GCP API Key", r"\b(AIza[0-9A-Za-z_-]{35})"),
    _p("Alibaba", r"\b(LTAI[a-z0-9]{20})\b"),
    _p("DigitalOcean", r"\b(dop_v1_[a-f0-9]{64})\b"),
    _p("Heroku", r"(?:heroku)[\w\s.-]{0,20}[=:]\s*['\"]?([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})\b"),

    # ── Version Control ──
    _p("Github", r"\b((?:ghp|gho|ghu|ghs|ghr)_[a-zA-Z0-9]{36,255})\b"),
    _p("Github Fine-Grained", r"\b(github_pat_[0-9a-zA-Z_]{82})\b"),
    _p("Gitlab", r"\b(glpat-[a-zA-Z0-9_-]{20,22})\b"),

    # ── Communication ──
    _p("Slack", r"\b(xox[baprs]-[0-9]{10,13}-[0-9]{10,13}[a-zA-Z0-9-]*)\b"),
    _p("Slack Webhook", r"(https://hooks\.slack\.com/services/[A-Za-z0-9+/]{43,46})"),
    _p("Discord Webhook", r"(https://discord(?:app)?\.com/api/webhooks/[0-9]{18,19}/[0-9a-zA-Z_-]{68})"),
    _p("Twilio", r"\b(AC[0-9a-f]{32})\b"),
    _p("Telegram Bot Token", r"\b([0-9]{8,10}:AA[0-9A-Za-z_-]{33})\b"),
    _p("SendGrid", r"\b(SG\.[\w-]{22}\.[\w-]{43})\b"),
    _p("Mailgun", r"\b(key-[a-z0-9]{32})\b"),

    # ── AI Providers ──
    _p("OpenAI", r"\b(sk-(?:proj-)?[A-Za-z0-9]{20}T3BlbkFJ[A-Za-z0-9]{20})\b"),
    _p("Anthropic", r"\b(sk-ant-(?:admin01|api03)-[\w-]{93}AA)\b"),

    # ── SaaS / Third-Party ──
    _p("NpmToken", r"\b(npm_[0-9a-zA-Z]{36})\b"),
    _p("PyPI", r"\b(pypi-AgEIcHlwaS5vcmc[\w-]{50,1000})\b"),
    _p("Dockerhub", r"\b(dckr_pat_[a-zA-Z0-9_-]{27})\b"),
    _p("Shopify", r"\b(shp(?:at|ca|pa|ss)_[a-fA-F0-9]{32})\b"),
    _p("NewRelic", r"\b(NRAK-[a-z0-9]{27})\b"),
    _p("HashiCorp Vault", r"\b(hvs\.[\w-]{90,120})\b"),
    _p("Mapbox", r"\b(sk\.[a-zA-Z0-9.-]{80,240})\b"),

    # ── Databases ──
    _p("MongoDB", r"\b(mongodb(?:\+srv)?://[\S]{3,50}:[\S]{3,88}@[-.%\w/:]+)\b"),
    _p("Postgres", r"\b(postgres(?:ql)?://[\S]{3,50}:[\S]{3,88}@[-.%\w/:]+)\b"),
    _p("Redis", r"\b(rediss?://[\S]{3,50}:[\S]{3,88}@[-.%\w/:]+)\b"),

    # ── Keys and Tokens ──
    _p("PrivateKey", r"(-----BEGIN[ A-Z0-9_-]{0,100}PRIVATE KEY(?: BLOCK)?-----[\s\S-]*?KEY(?: BLOCK)?-----)"),
    _p("JWT", r"\b(ey[a-zA-Z0-9]{17,}\.ey[a-zA-Z0-9/_-]{17,}\.(?:[a-zA-Z0-9/_-]{10,}={0,2})?)"),
]


def effective_patterns(
    custom_patterns: Iterable[SecretPattern],
    default_patterns: Optional[Iterable[SecretPattern]] = None,
) -> list[SecretPattern]:
    """Default catalog followed by custom patterns, order kept, no de-duplication."""
    defaults = DEFAULT_PATTERNS if default_patterns is None else default_patterns
    return [*defaults, *custom_patterns]


def load_pattern_catalog(source: Union[str, Path]) -> list[SecretPattern]:
    """
    Load a detector catalog from a YAML/JSON file or an http(s) URL.

    The document is either a list of pattern entries or a mapping with a
    ``patterns`` list.

    Raises:
        PatternCatalogError: The catalog could not be fetched, parsed, or
            does not have the expected shape.
    """
    source_str = str(source)
    if source_str.startswith(("http://", "https://")):
        raw = _fetch_remote_catalog(source_str)
    else:
        path = Path(source_str)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PatternCatalogError(f"Cannot read catalog {path}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise PatternCatalogError(f"Catalog {source_str} is not valid YAML/JSON: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("patterns")
    if not isinstance(data, list):
        raise PatternCatalogError(
            f"Catalog {source_str} must be a list of patterns or contain a 'patterns' list."
        )

    return [SecretPattern.from_dict(entry) for entry in data]


def _fetch_remote_catalog(url: str) -> str:
    try:
        resp = requests.get(url, timeout=CATALOG_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise PatternCatalogError(f"Cannot fetch catalog {url}: {exc}") from exc

    # JSON catalogs parse with the YAML loader as well
    return resp.text
