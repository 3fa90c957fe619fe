"""
Index lifecycle management.

IndexManager owns the published IndexSnapshot. Rebuilds run on a single
worker thread and publish by swapping one reference, so a reader holding a
snapshot always sees records and index from the same generation. Rebuild
requests coalesce: at most one rebuild runs and at most one waits behind it.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from enum import Enum
from typing import Optional

from ..core import get_logger, PDFLibraryError
from .index_builder import IndexBuilder
from .models import IndexSnapshot

logger = get_logger(__name__)


class IndexState(str, Enum):
    """Lifecycle states of the managed index."""
    BUILDING = "building"
    READY = "ready"
    STALE = "stale"


class IndexManager:
    """
    Single owner of the current index generation.

    Readers call snapshot() and use the returned object for the whole
    operation. Store mutations call request_rebuild(); the returned
    future resolves to the newly published snapshot or raises the
    rebuild's error.
    """

    def __init__(self, builder: IndexBuilder = None):
        """
        Initialize the manager. No rebuild starts until start().

        Args:
            builder: Rebuild pipeline. Defaults to a configured IndexBuilder.
        """
        self.builder = builder or IndexBuilder()

        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="index-rebuild")

        self._snapshot: Optional[IndexSnapshot] = None
        self._state = IndexState.BUILDING
        self._queued: Optional[Future] = None
        self._generation = 0
        self._last_error: Optional[Exception] = None
        self._closed = False

    @property
    def state(self) -> IndexState:
        """Current lifecycle state."""
        return self._state

    @property
    def last_error(self) -> Optional[Exception]:
        """Error of the most recent failed rebuild, cleared on success."""
        return self._last_error

    def snapshot(self) -> Optional[IndexSnapshot]:
        """
        Get the published snapshot.

        Returns:
            The current IndexSnapshot, or None before the first
            successful rebuild.
        """
        return self._snapshot

    def start(self) -> Future:
        """Trigger the initial rebuild."""
        return self.request_rebuild(reason="startup")

    def request_rebuild(self, reason: str = "requested") -> Future:
        """
        Ask for a rebuild from the current store contents.

        If a rebuild is already waiting to run, the request joins it
        instead of scheduling another one.

        Args:
            reason: Short description for the log.

        Returns:
            Future resolving to the published IndexSnapshot.

        Raises:
            PDFLibraryError: If the manager has been closed.
        """
        with self._lock:
            if self._closed:
                raise PDFLibraryError("Index manager is closed")

            if self._queued is not None:
                logger.debug(f"Rebuild request ({reason}) joined the queued rebuild")
                return self._queued

            future = self._executor.submit(self._rebuild, reason)
            self._queued = future

        future.add_done_callback(self._log_outcome)
        return future

    def wait_until_ready(self, timeout: float = None) -> bool:
        """
        Block until a first snapshot has been published.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            True if a snapshot is available.
        """
        return self._ready.wait(timeout)

    def close(self) -> None:
        """Stop accepting rebuilds, wait for running work, drop the index."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._executor.shutdown(wait=True)

        snapshot = self._snapshot
        self._snapshot = None
        self._state = IndexState.BUILDING
        self._ready.clear()

        if snapshot is not None:
            snapshot.index.close()

        logger.info("Index manager closed")

    def _rebuild(self, reason: str) -> IndexSnapshot:
        """Worker body: build, then publish or keep the previous snapshot."""
        with self._lock:
            # The worker is single-threaded, so the queued rebuild is this one.
            self._queued = None
            if self._snapshot is not None:
                self._state = IndexState.STALE

        logger.info(f"Rebuilding index ({reason})")

        try:
            result = self.builder.build()
        except Exception as e:
            with self._lock:
                self._last_error = e
                self._state = IndexState.READY if self._snapshot is not None else IndexState.BUILDING
            raise

        with self._lock:
            self._generation += 1
            snapshot = IndexSnapshot(
                generation=self._generation,
                records=result.records,
                index=result.index,
                stats=result.stats,
                built_at=datetime.now()
            )
            self._snapshot = snapshot
            self._state = IndexState.READY
            self._last_error = None

        self._ready.set()

        return snapshot

    @staticmethod
    def _log_outcome(future: Future) -> None:
        """Report every rebuild's result, whether or not anyone waits on it."""
        if future.cancelled():
            logger.warning("Index rebuild was cancelled")
            return

        error = future.exception()
        if error is None:
            snapshot = future.result()
            logger.info(
                f"Published index generation {snapshot.generation} "
                f"with {len(snapshot)} documents"
            )
        elif isinstance(error, PDFLibraryError):
            logger.error(f"Index rebuild failed: {error.message}")
        else:
            logger.error(f"Index rebuild failed: {error}", exc_info=error)
