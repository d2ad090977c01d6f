"""HTTP downloader for the contributions catalog.

Default Downloader used by the refresh pipeline. Streams the catalog with
requests and reports byte progress to the monitor.
"""

from __future__ import annotations

from typing import Optional

import requests

from ..config import CatalogConfig
from ..errors import CatalogError, CatalogIOError
from .fetcher import ProgressMonitor

CHUNK_SIZE = 8192


class HttpDownloader:
    """Fetch the catalog document over HTTP(S)."""

    def __init__(self, config: Optional[CatalogConfig] = None):
        self.config = config or CatalogConfig.load()
        self._session = requests.Session()
        self._session.headers["User-Agent"] = self.config.user_agent
        self._session.headers["Accept"] = "application/xml, text/xml"

    def download(self, progress: ProgressMonitor) -> bytes:
        if not self.config.url:
            raise CatalogError("Catalog URL not configured.")

        try:
            with self._session.get(self.config.url, timeout=self.config.timeout_s, stream=True) as response:
                response.raise_for_status()

                length = response.headers.get("Content-Length")
                progress.start(int(length) if length and length.isdigit() else None)

                chunks = []
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if progress.is_cancelled():
                        break
                    if chunk:
                        chunks.append(chunk)
                        progress.update(len(chunk))
                return b"".join(chunks)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise CatalogIOError(f"HTTP error {status} fetching {self.config.url}") from e
        except requests.exceptions.ConnectionError as e:
            raise CatalogIOError(f"Cannot connect to {self.config.url}") from e
        except requests.exceptions.Timeout as e:
            raise CatalogIOError(f"Timed out fetching {self.config.url}") from e
        except requests.exceptions.RequestException as e:
            raise CatalogIOError(f"Request failed: {e}") from e
