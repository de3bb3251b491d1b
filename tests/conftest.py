"""
Pytest Configuration and Fixtures

Shared fixtures for SecureLog tests.
"""

import logging
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from securelog.core.config import ScanConfiguration
from securelog.core.patterns import SecretPattern
from securelog.core.result import SecretInspectorResult
from securelog.core.tree import Element
from securelog.inspector.coordinator import SecureLogContainer

PAYSTACK_KEY = "sk_live_" + "0123456789abcdef" * 2 + "01234567"
TOKEN = "tok_a1b2c3d4"

TOKEN_PATTERN = SecretPattern(detector="Token", regex=r"\b(tok_[a-z0-9]{8})\b", secret_position=1)


class CallbackRecorder:
    """Stands in for on_secret_found and remembers every call."""

    def __init__(self) -> None:
        self.calls: list[list[SecretInspectorResult]] = []

    def __call__(self, records: list[SecretInspectorResult]) -> None:
        self.calls.append(list(records))


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo the handler changes setup_logging makes when the CLI runs."""
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in before and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def paystack_key() -> str:
    return PAYSTACK_KEY


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()


@pytest.fixture
def token_catalog() -> list[SecretPattern]:
    """A minimal detector catalog used instead of the bundled one."""
    return [TOKEN_PATTERN]


@pytest.fixture
def make_container(
    token_catalog: list[SecretPattern],
    recorder: CallbackRecorder,
) -> Generator[Callable[..., SecureLogContainer], None, None]:
    """Build mounted thread-worker containers on the token catalog; unmounted on teardown."""
    created: list[SecureLogContainer] = []

    def factory(**options) -> SecureLogContainer:
        default_patterns = options.pop("default_patterns", token_catalog)
        options.setdefault("on_secret_found", recorder)
        container = SecureLogContainer(
            ScanConfiguration(**options),
            default_patterns=default_patterns,
            isolated=False,
        )
        container.mount()
        created.append(container)
        return container

    yield factory

    for container in created:
        container.unmount()


@pytest.fixture
def nested_tree() -> list:
    """
    Content three levels deep:

        div (depth 0)
          "Welcome" (depth 1)
          section (depth 1)
            p (depth 2)
              "token tok_a1b2c3d4" (depth 3)
    """
    return [
        Element(
            "div",
            children=[
                "Welcome",
                Element("section", children=Element("p", children=f"token {TOKEN}")),
            ],
        )
    ]


@pytest.fixture
def tree_document(temp_dir: Path, paystack_key: str) -> Path:
    """Create a YAML content tree document holding one secret."""
    doc = temp_dir / "page.yaml"
    doc.write_text(f'''
- type: div
  props:
    className: banner
  children:
    - "Your key={paystack_key}"
    - type: span
      children: nothing to see
''')
    return doc
