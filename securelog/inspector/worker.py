"""
SecureLog Match Worker

Runs ``match_secrets`` away from the caller: in a dedicated child process
by default, or a single background thread. Requests and responses are
plain data, so nothing the walker holds is shared with the worker.
Requests are handled one at a time in submission order.

A request that cannot be served (worker not started, already stopped,
broken, or too slow) resolves to no matches instead of failing the scan.
A request that times out gets its child process killed, so a runaway
regular expression cannot outlive the scan. The thread worker cannot be
killed: a thread stuck in a runaway match keeps running, and delays
interpreter exit, until the match finishes on its own.
"""

from __future__ import annotations

import asyncio
import logging
import multiprocessing
import threading
from concurrent.futures import BrokenExecutor, ThreadPoolExecutor
from multiprocessing.connection import Connection
from typing import Any, Optional

from securelog.core.config import DEFAULT_MATCH_TIMEOUT
from securelog.core.errors import WorkerUnavailableError
from securelog.core.matcher import match_secrets

LOGGER = logging.getLogger(__name__)


def _serve(conn: Connection) -> None:
    """Child process loop: answer match requests until the pipe closes."""
    while True:
        try:
            text, patterns, component_name = conn.recv()
        except EOFError:
            return
        conn.send(match_secrets(text, patterns, component_name))


class _MatchProcess:
    """A child process serving match requests over a pipe."""

    def __init__(self) -> None:
        ctx = multiprocessing.get_context("spawn")
        self._conn, child_conn = ctx.Pipe()
        self.process = ctx.Process(target=_serve, args=(child_conn,), name="securelog-match", daemon=True)
        self.process.start()
        child_conn.close()
        self._lock = threading.Lock()

    def request(
        self,
        text: str,
        patterns: list[dict[str, Any]],
        component_name: str,
    ) -> list[dict[str, Any]]:
        with self._lock:
            try:
                self._conn.send((text, patterns, component_name))
                return self._conn.recv()
            except (EOFError, OSError) as exc:
                raise WorkerUnavailableError("match process exited") from exc

    def kill(self) -> None:
        # a pending request() sees EOFError once the child is gone
        if self.process.is_alive():
            self.process.kill()
        self.process.join()


class MatchWorker:
    """Owns the process or thread that pattern matching is dispatched to."""

    def __init__(
        self,
        *,
        isolated: bool = True,
        timeout: Optional[float] = DEFAULT_MATCH_TIMEOUT,
    ) -> None:
        """
        Args:
            isolated: Match in a separate process (``True``) or a thread.
            timeout: Seconds a single request may take before it is
                abandoned. ``None`` waits forever.
        """
        self.isolated = isolated
        self.timeout = timeout
        # isolated: relays requests to the child; otherwise runs the match
        self._executor: Optional[ThreadPoolExecutor] = None
        self._process: Optional[_MatchProcess] = None

    @property
    def running(self) -> bool:
        return self._executor is not None

    def start(self) -> None:
        """Start the worker if it is not already running."""
        if self._executor is not None:
            return
        if self.isolated:
            self._process = _MatchProcess()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="securelog-match")
        LOGGER.debug("Match worker started (isolated=%s)", self.isolated)

    def stop(self) -> None:
        """Tear the worker down, killing its process and dropping queued requests."""
        executor, process = self._executor, self._process
        if executor is None:
            return
        self._executor = None
        self._process = None
        if process is not None:
            process.kill()
        executor.shutdown(wait=False, cancel_futures=True)
        LOGGER.debug("Match worker stopped")

    def restart(self) -> None:
        self.stop()
        self.start()

    async def run(
        self,
        text: str,
        patterns: list[dict[str, Any]],
        component_name: str,
    ) -> list[dict[str, Any]]:
        """
        Send one match request and wait for its response.

        Returns:
            The result dicts produced by the worker, or an empty list when
            the request could not be served.
        """
        try:
            future = self._submit(text, patterns, component_name)
            return await asyncio.wait_for(future, timeout=self.timeout)
        except asyncio.TimeoutError:
            LOGGER.warning(
                "Match request for %s timed out after %ss; restarting worker",
                component_name,
                self.timeout,
            )
            self.restart()
        except WorkerUnavailableError as exc:
            LOGGER.warning("Match request for %s dropped: %s", component_name, exc)
        except (BrokenExecutor, RuntimeError) as exc:
            # RuntimeError: executor shut down while the request was queued
            LOGGER.warning("Match request for %s failed: %s", component_name, exc)
        return []

    def _submit(
        self,
        text: str,
        patterns: list[dict[str, Any]],
        component_name: str,
    ) -> asyncio.Future:
        if self._executor is None:
            raise WorkerUnavailableError("match worker is not running")
        loop = asyncio.get_running_loop()
        target = self._process.request if self._process is not None else match_secrets
        return loop.run_in_executor(self._executor, target, text, patterns, component_name)
