"""Tests for the HTTP catalog downloader and console progress monitor."""

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests
from rich.console import Console

from contriblist.catalog.downloader import HttpDownloader
from contriblist.catalog.fetcher import ProgressMonitor
from contriblist.catalog.progress import ConsoleProgressMonitor
from contriblist.config import CatalogConfig
from contriblist.errors import CatalogError, CatalogIOError


def _progress(cancelled=False):
    progress = Mock()
    progress.is_cancelled.return_value = cancelled
    return progress


def _response(chunks, length=None):
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    response.headers = {"Content-Length": str(length)} if length is not None else {}
    response.iter_content.return_value = chunks
    return response


class TestHttpDownloader:
    """Tests for HttpDownloader."""

    def test_init_with_config(self):
        """Test initializing downloader with config."""
        config = CatalogConfig(url="http://localhost/contributions.xml", user_agent="test-agent")
        downloader = HttpDownloader(config)
        assert downloader.config.url == "http://localhost/contributions.xml"
        assert downloader._session.headers["User-Agent"] == "test-agent"

    @patch("contriblist.catalog.downloader.requests.Session")
    def test_download(self, mock_session_class):
        """Chunks are joined and progress reported."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        mock_session.get.return_value = _response([b"<contri", b"butions/>"], length=16)

        config = CatalogConfig(url="http://localhost/c.xml", timeout_s=5.0)
        progress = _progress()
        data = HttpDownloader(config).download(progress)

        assert data == b"<contributions/>"
        mock_session.get.assert_called_once_with("http://localhost/c.xml", timeout=5.0, stream=True)
        progress.start.assert_called_once_with(16)
        assert [c.args[0] for c in progress.update.call_args_list] == [7, 9]

    @patch("contriblist.catalog.downloader.requests.Session")
    def test_unknown_length(self, mock_session_class):
        """Missing Content-Length starts progress with no total."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        mock_session.get.return_value = _response([b"x"])

        progress = _progress()
        HttpDownloader(CatalogConfig(url="http://localhost/c.xml")).download(progress)
        progress.start.assert_called_once_with(None)

    @patch("contriblist.catalog.downloader.requests.Session")
    def test_cancelled_download_stops(self, mock_session_class):
        """Cancellation stops reading chunks."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        mock_session.get.return_value = _response([b"a", b"b"])

        data = HttpDownloader(CatalogConfig(url="http://localhost/c.xml")).download(_progress(cancelled=True))
        assert data == b""
        response = mock_session.get.return_value
        response.__exit__.assert_called_once()

    @patch("contriblist.catalog.downloader.requests.Session")
    def test_http_error(self, mock_session_class):
        """HTTP errors map to CatalogIOError."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        failed = Mock()
        failed.status_code = 404
        response = _response([])
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=failed)
        mock_session.get.return_value = response

        with pytest.raises(CatalogIOError, match="404"):
            HttpDownloader(CatalogConfig(url="http://localhost/c.xml")).download(_progress())
        response.__exit__.assert_called_once()

    @patch("contriblist.catalog.downloader.requests.Session")
    def test_connection_error(self, mock_session_class):
        """Connection failures map to CatalogIOError."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        mock_session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(CatalogIOError, match="Cannot connect"):
            HttpDownloader(CatalogConfig(url="http://localhost/c.xml")).download(_progress())

    @patch("contriblist.catalog.downloader.requests.Session")
    def test_timeout(self, mock_session_class):
        """Timeouts map to CatalogIOError."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session
        mock_session.get.side_effect = requests.exceptions.ReadTimeout("slow")

        with pytest.raises(CatalogIOError, match="Timed out"):
            HttpDownloader(CatalogConfig(url="http://localhost/c.xml")).download(_progress())

    def test_download_without_url(self):
        """Download fails without URL configured."""
        with pytest.raises(CatalogError, match="not configured"):
            HttpDownloader(CatalogConfig(url="")).download(_progress())


class TestConsoleProgressMonitor:
    """Tests for ConsoleProgressMonitor."""

    def _monitor(self):
        console = Console(record=True, width=120)
        return ConsoleProgressMonitor(console), console

    def test_is_progress_monitor(self):
        """Implements the ProgressMonitor protocol."""
        monitor, _ = self._monitor()
        assert isinstance(monitor, ProgressMonitor)

    def test_progress_output(self):
        """Messages and byte counts are printed."""
        monitor, console = self._monitor()
        monitor.set_message("Downloading contribution list")
        monitor.start(10)
        monitor.update(4)
        monitor.update(6)
        monitor.finished()

        text = console.export_text()
        assert "Downloading contribution list" in text
        assert "10/10 bytes" in text

    def test_error_output(self):
        """Errors are printed and suppress the done line."""
        monitor, console = self._monitor()
        monitor.error(CatalogIOError("Cannot connect"))
        monitor.finished()

        text = console.export_text()
        assert "Cannot connect" in text
        assert "Done" not in text
        assert monitor.failed is True

    def test_cancel(self):
        """The host can cancel through the monitor."""
        monitor, _ = self._monitor()
        assert monitor.is_cancelled() is False
        monitor.cancel()
        assert monitor.is_cancelled() is True
