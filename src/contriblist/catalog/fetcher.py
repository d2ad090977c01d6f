"""Background refresh of the advertised catalog.

A CatalogFetcher downloads the catalog through an injected downloader,
parses it and hands the records to the registry. RefreshTask runs a fetcher
on a daemon thread. Failures never reach the caller's thread: they are
reported to the progress monitor and the registry keeps its contents.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from ..errors import CatalogError, CatalogIOError
from .parser import CatalogParser

if TYPE_CHECKING:
    from ..registry import Registry

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressMonitor(Protocol):
    """Receives progress and errors from a download/refresh."""

    def start(self, total: Optional[int]) -> None: ...

    def update(self, amount: int) -> None: ...

    def set_message(self, text: str) -> None: ...

    def error(self, exc: BaseException) -> None: ...

    def finished(self) -> None: ...

    def is_cancelled(self) -> bool: ...


@runtime_checkable
class Downloader(Protocol):
    """Obtains the raw catalog document."""

    def download(self, progress: ProgressMonitor) -> bytes: ...


class NullProgressMonitor:
    """Progress monitor that ignores everything."""

    def start(self, total: Optional[int]) -> None:
        pass

    def update(self, amount: int) -> None:
        pass

    def set_message(self, text: str) -> None:
        pass

    def error(self, exc: BaseException) -> None:
        pass

    def finished(self) -> None:
        pass

    def is_cancelled(self) -> bool:
        return False


class CatalogFetcher:
    """One download-parse-apply pass over the remote catalog."""

    def __init__(
        self,
        registry: "Registry",
        downloader: Downloader,
        progress: Optional[ProgressMonitor] = None,
        parser: Optional[CatalogParser] = None,
    ):
        self.registry = registry
        self.downloader = downloader
        self.progress = progress or NullProgressMonitor()
        self.parser = parser or CatalogParser()
        self.error: Optional[CatalogError] = None
        self._cancel = threading.Event()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set() or self.progress.is_cancelled()

    def run(self) -> bool:
        """Run the refresh. Returns True if the registry was updated."""
        try:
            return self._refresh()
        except CatalogError as e:
            self.error = e
            logger.warning("Contribution list refresh failed: %s", e)
            self.progress.error(e)
            return False
        except Exception as e:
            self.error = CatalogError(f"Contribution list refresh failed: {e}")
            self.error.__cause__ = e
            logger.exception("Contribution list refresh failed")
            self.progress.error(self.error)
            return False
        finally:
            self.progress.finished()

    def _refresh(self) -> bool:
        self.progress.set_message("Downloading contribution list")
        try:
            data = self.downloader.download(self.progress)
        except CatalogError:
            raise
        except Exception as e:
            raise CatalogIOError(f"Download failed: {e}") from e

        if self.cancelled:
            logger.info("Refresh cancelled after download")
            return False
        if not data:
            raise CatalogIOError("Downloaded contribution list is empty")

        self.progress.set_message("Reading contribution list")
        records = self.parser.parse(data)
        if self.cancelled:
            logger.info("Refresh cancelled after parse")
            return False

        self.registry.set_advertised_list(records)
        logger.info("Refreshed contribution list: %d advertised", len(records))
        return True


class RefreshTask:
    """Runs a CatalogFetcher on a background thread."""

    def __init__(self, fetcher: CatalogFetcher):
        self.fetcher = fetcher
        self.succeeded = False
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._run, name="contriblist-refresh", daemon=True)

    def _run(self) -> None:
        try:
            self.succeeded = self.fetcher.run()
        finally:
            self._done.set()

    def start(self) -> "RefreshTask":
        logger.info("Starting contribution list refresh")
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Ask the task to stop; the registry is left alone from then on."""
        self.fetcher.cancel()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the task. Returns True once it has finished."""
        self._thread.join(timeout)
        return self._done.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def cancelled(self) -> bool:
        return self.fetcher.cancelled

    @property
    def error(self) -> Optional[CatalogError]:
        return self.fetcher.error
