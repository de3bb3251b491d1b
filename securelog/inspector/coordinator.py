"""
SecureLog Container

SecureLogContainer is the scan coordinator: it owns the match worker for
as long as it is mounted and runs one full scan per content change,
reporting every secret of that scan through a single callback.

Example:

    config = ScanConfiguration(mask=True, on_secret_found=print)
    with SecureLogContainer(config) as container:
        output = render(children)
        container.scan_sync(children, output)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Optional

from securelog.core.config import DEFAULT_MATCH_TIMEOUT, ScanConfiguration
from securelog.core.patterns import SecretPattern, effective_patterns
from securelog.core.result import SecretInspectorResult
from securelog.core.tree import OutputElement
from securelog.inspector.walker import TreeWalker
from securelog.inspector.worker import MatchWorker

LOGGER = logging.getLogger(__name__)


class SecureLogContainer:
    """Coordinates scans of rendered content for leaked secrets."""

    def __init__(
        self,
        config: Optional[ScanConfiguration] = None,
        *,
        default_patterns: Optional[Iterable[SecretPattern]] = None,
        isolated: bool = True,
        match_timeout: Optional[float] = DEFAULT_MATCH_TIMEOUT,
    ) -> None:
        """
        Args:
            config: Scan options; defaults to ``ScanConfiguration()``.
            default_patterns: Detector catalog used before the custom
                patterns. Defaults to the bundled ``DEFAULT_PATTERNS``.
            isolated: Match in a separate process rather than a thread.
            match_timeout: Seconds allowed for a single match request.
        """
        self.config = config or ScanConfiguration()
        self.patterns = effective_patterns(self.config.custom_patterns, default_patterns)
        self._worker = MatchWorker(isolated=isolated, timeout=match_timeout)
        self._generation = 0

    @property
    def mounted(self) -> bool:
        return self._worker.running

    def mount(self) -> None:
        self._worker.start()

    def unmount(self) -> None:
        self._worker.stop()

    def __enter__(self) -> "SecureLogContainer":
        self.mount()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.unmount()

    async def __aenter__(self) -> "SecureLogContainer":
        self.mount()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.unmount()

    async def scan(
        self,
        children: Any,
        container: Optional[OutputElement] = None,
    ) -> list[SecretInspectorResult]:
        """
        Inspect ``children`` and report what was found.

        Args:
            children: Logical content: a node or a sequence of nodes.
            container: Mirrored output element whose children line up with
                ``children``. Masking only rewrites text it can reach here.

        Returns:
            Every secret found, in document order. ``on_secret_found`` is
            called once with the same list when it is not empty and no
            newer scan started meanwhile.
        """
        self._generation += 1
        generation = self._generation
        found: list[SecretInspectorResult] = []

        if children is None:
            return found
        if not self.mounted:
            LOGGER.warning("Scan %d started on an unmounted container; nothing will match", generation)

        walker = TreeWalker(
            self.config,
            self.patterns,
            self._worker,
            is_stale=lambda: generation != self._generation,
        )
        await walker.inspect_children(children, container, 0, found)

        if generation != self._generation:
            LOGGER.info("Scan %d superseded by scan %d; results discarded", generation, self._generation)
            return found

        LOGGER.info("Scan %d finished: %d secret(s) found", generation, len(found))
        if found:
            self.config.on_secret_found(found)
        return found

    def scan_sync(
        self,
        children: Any,
        container: Optional[OutputElement] = None,
    ) -> list[SecretInspectorResult]:
        """Run :meth:`scan` to completion from synchronous code."""
        return asyncio.run(self.scan(children, container))


def scan_tree(
    children: Any,
    container: Optional[OutputElement] = None,
    config: Optional[ScanConfiguration] = None,
    **options: Any,
) -> list[SecretInspectorResult]:
    """Mount a container, scan once and unmount it again."""
    with SecureLogContainer(config, **options) as secure_log:
        return secure_log.scan_sync(children, container)
