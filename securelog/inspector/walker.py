"""
SecureLog Tree Walker

Depth-first, left-to-right traversal of a logical tree and its mirrored
output tree. Text nodes and string props are sent to the match worker
one at a time; each call is awaited before the walk moves on, so
results come out in document order.

Policy:
- nodes deeper than ``max_depth`` are skipped (``max_depth`` itself is
  still inspected)
- elements whose tag is in ``exclude_components`` are skipped with their
  whole subtree; constructed types are never excluded
- the first prop that contains a secret flags its element: remaining
  props and the children are not inspected
- masked text is written back into the mirrored text node; mirrored
  attributes are never touched
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from securelog.core.config import ScanConfiguration
from securelog.core.masking import mask_string
from securelog.core.patterns import SecretPattern
from securelog.core.result import SecretInspectorResult
from securelog.core.tree import Element, OutputElement, OutputNode, OutputText, iter_children
from securelog.inspector.worker import MatchWorker

LOGGER = logging.getLogger(__name__)

TEXT_NODE = "TextNode"


class TreeWalker:
    """Inspects one tree for one scan."""

    def __init__(
        self,
        config: ScanConfiguration,
        patterns: list[SecretPattern],
        worker: MatchWorker,
        is_stale: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.config = config
        self.worker = worker
        self._patterns = [pattern.to_dict() for pattern in patterns]
        self._is_stale = is_stale or (lambda: False)

    async def inspect_children(
        self,
        children: Any,
        output_node: Optional[OutputNode],
        depth: int,
        found: list[SecretInspectorResult],
    ) -> bool:
        """Inspect every child; ``True`` if any of them held a secret."""
        found_secret = False

        for index, child in enumerate(iter_children(children)):
            output_child = output_node.child(index) if isinstance(output_node, OutputElement) else None
            if await self.inspect_node(child, output_child, depth, found):
                found_secret = True

        return found_secret

    async def inspect_node(
        self,
        node: Any,
        output_node: Optional[OutputNode],
        depth: int,
        found: list[SecretInspectorResult],
    ) -> bool:
        if depth > self.config.max_depth:
            return False

        if isinstance(node, str):
            return await self._inspect_text(node, output_node, found)

        if not isinstance(node, Element):
            return False

        if isinstance(node.type, str) and node.type in self.config.exclude_components:
            return False

        component_name = node.name
        for key, value in node.props.items():
            if not isinstance(value, str):
                continue

            secrets = await self._match(value, component_name)
            if secrets:
                LOGGER.debug("Prop %r of %s holds %d secret(s)", key, component_name, len(secrets))
                if self.config.mask:
                    for secret in secrets:
                        secret.raw_value = mask_string(secret.raw_value)
                found.extend(secrets)
                return True

        if node.children is not None:
            return await self.inspect_children(node.children, output_node, depth + 1, found)

        return False

    async def _inspect_text(
        self,
        text: str,
        output_node: Optional[OutputNode],
        found: list[SecretInspectorResult],
    ) -> bool:
        secrets = await self._match(text, TEXT_NODE)
        if not secrets:
            return False

        for secret in secrets:
            if self.config.mask:
                original = secret.raw_value
                secret.raw_value = mask_string(original)
                _rewrite_text(output_node, original, secret.raw_value)
            found.append(secret)

        return True

    async def _match(self, text: str, component_name: str) -> list[SecretInspectorResult]:
        if self._is_stale():
            return []
        records = await self.worker.run(text, self._patterns, component_name)
        return [SecretInspectorResult.from_dict(record) for record in records]


def _rewrite_text(output_node: Optional[OutputNode], original: str, masked: str) -> None:
    # first textual occurrence, not the matched position
    if isinstance(output_node, OutputText) and original in output_node.text:
        output_node.text = output_node.text.replace(original, masked, 1)
