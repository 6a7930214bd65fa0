"""
Module: engine.dispatch

Purpose:
    Background hand-off for slow external calls. Persisting a finished
    session runs on a small thread pool so gameplay never waits on the
    network. Report summaries run on a separate pool that shutdown never
    waits for, so a hung summarizer cannot hold up the caller.

Key Classes:
    - BackgroundDispatcher: Thread pool-based dispatcher

Dependencies:
    - concurrent.futures: Thread pool execution

Used By:
    - engine.reporting: Summary requests
    - cli: Recording simulated sessions to the history file
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING, List, Optional, Sequence

from psci_toolkit.core.models.results import SessionResult
from psci_toolkit.errors import PersistenceFailure, SummaryFailure

from .capabilities import RecordStore, Summarizer

if TYPE_CHECKING:
    from .config import EngineConfig

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """
    Thread pool-based dispatcher for persistence and summaries.

    Record failures never propagate to the caller: they are logged and
    left on the returned future as PersistenceFailure. Scores already
    final are unaffected.

    Usage:
        with BackgroundDispatcher(max_workers=2) as dispatcher:
            session.add_finish_listener(
                lambda *_: dispatcher.record(store, session.result)
            )
            ...
        # shutdown() waits for outstanding records, not for summaries

    Attributes:
        max_workers: Maximum concurrent background threads.
    """

    def __init__(self, max_workers: int = 2):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="psci-dispatch"
        )
        self._summary_executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="psci-summary"
        )
        self._futures: List[Future] = []
        self._summaries: List[Future] = []
        self._enabled = True

    @classmethod
    def from_config(cls, config: "EngineConfig") -> "BackgroundDispatcher":
        """Build a dispatcher sized by ``config.dispatcher_workers``."""
        return cls(max_workers=config.dispatcher_workers)

    def record(self, store: RecordStore, result: SessionResult) -> Optional[Future]:
        """
        Queue a session result for the record store.

        Returns:
            Future resolving to None, or failing with PersistenceFailure.
            None if the dispatcher is disabled (the record ran inline).
        """
        if not self._enabled:
            try:
                _record_sync(store, result)
            except PersistenceFailure as e:
                logger.error(f"Record failed: {e}")
            return None

        future = self._executor.submit(_record_sync, store, result)
        future.add_done_callback(_log_record_failure)
        self._futures.append(future)
        return future

    def summarize(
        self,
        summarizer: Summarizer,
        history: Sequence[SessionResult],
        timeout: Optional[float] = None,
    ) -> str:
        """
        Ask the summarizer for report text, waiting at most ``timeout`` seconds.

        Raises:
            SummaryFailure: The summarizer raised or did not answer in time
        """
        snapshot = tuple(history)
        future = self._summary_executor.submit(summarizer.summarize, snapshot)
        self._summaries = [f for f in self._summaries if not f.done()]
        self._summaries.append(future)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            raise SummaryFailure(f"Summarizer did not answer within {timeout}s") from None
        except Exception as e:
            raise SummaryFailure(f"Summarizer failed: {e}") from e

    def wait_all(self, timeout: Optional[float] = None) -> int:
        """
        Wait for all queued records to complete.

        Args:
            timeout: Max seconds to wait per record (None = indefinite).

        Returns:
            Number of records stored successfully.
        """
        completed = 0
        for future in self._futures:
            try:
                future.result(timeout=timeout)
                completed += 1
            except PersistenceFailure:
                pass  # Logged by the done callback
            except FutureTimeoutError:
                logger.warning("Record still pending after wait timeout")
        self._futures.clear()
        return completed

    def shutdown(self) -> None:
        """
        Wait for queued records, then release both pools.

        Summaries still running (a timed-out summarizer) are abandoned:
        queued ones are cancelled and the running one finishes on its own.
        """
        self.wait_all()
        self._executor.shutdown(wait=True)
        stuck = sum(1 for f in self._summaries if not f.done())
        if stuck:
            logger.warning(f"Abandoning {stuck} unfinished summary request(s)")
        self._summary_executor.shutdown(wait=False, cancel_futures=True)
        self._summaries.clear()

    def disable(self) -> None:
        """Disable background records (run them inline)."""
        self._enabled = False

    def __enter__(self) -> "BackgroundDispatcher":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()


def _record_sync(store: RecordStore, result: SessionResult) -> None:
    try:
        store.record_session(result)
    except Exception as e:
        raise PersistenceFailure(f"Could not record {result.game_id}: {e}") from e


def _log_record_failure(future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Record failed: {error}")
