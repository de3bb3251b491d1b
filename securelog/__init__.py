"""
SecureLog - Secret inspection for rendered content trees

Walks a tree of renderable content and its mirrored output structure,
detects leaked credentials:
- API keys and access tokens
- Payment provider secrets
- Database connection strings and private keys
- Any custom detector supplied by the caller

and optionally masks them in the output before they reach a user.

Copyright (c) 2026 SecureLog Contributors
Licensed under the Apache License 2.0
"""

__version__ = "1.0.0"
__author__ = "chiakiichan"

from securelog.core.config import ScanConfiguration
from securelog.core.masking import mask_string
from securelog.core.patterns import DEFAULT_PATTERNS, SecretPattern
from securelog.core.result import SecretInspectorResult
from securelog.core.tree import Element, OutputElement, OutputText, render
from securelog.inspector.coordinator import SecureLogContainer


__all__ = [
    "__version__",
    "DEFAULT_PATTERNS",
    "Element",
    "OutputElement",
    "OutputText",
    "ScanConfiguration",
    "SecretInspectorResult",
    "SecretPattern",
    "SecureLogContainer",
    "mask_string",
    "render",
]
