"""Catalog Module for contriblist.

Handles the remote contributions catalog:
- Parsing the XML catalog document
- Downloading it (HTTP by default)
- Refreshing the registry from it on a background thread
"""

from .parser import CatalogParser, parse_bytes, parse_file, split_library_names
from .fetcher import CatalogFetcher, Downloader, NullProgressMonitor, ProgressMonitor, RefreshTask
from .downloader import HttpDownloader
from .progress import ConsoleProgressMonitor

__all__ = [
    "CatalogParser",
    "parse_bytes",
    "parse_file",
    "split_library_names",
    "CatalogFetcher",
    "Downloader",
    "NullProgressMonitor",
    "ProgressMonitor",
    "RefreshTask",
    "HttpDownloader",
    "ConsoleProgressMonitor",
]
