"""Contribution registry.

Keeps the advertised catalog and the working set of contributions
(installed ones plus advertised ones surfaced for browsing) indexed by
category and sorted by name. Every mutation and every read goes through a
single re-entrant lock, so a background refresh can feed the registry while
the host thread queries it.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Set, Union

from .errors import MalformedDocumentError
from .filters import FilterEngine, split_query
from .models import ContributionRecord, ContributionType
from .notifier import ChangeNotifier, ContributionChangeListener

if TYPE_CHECKING:
    from .catalog.fetcher import Downloader, ProgressMonitor, RefreshTask

logger = logging.getLogger(__name__)


def _sort_key(record: ContributionRecord):
    return record.sort_key


class Registry:
    """Authoritative index of advertised and installed contributions.

    Records are tracked by identity. Replacing a record keeps its slot so
    listeners can diff the old record against the new one.
    """

    def __init__(
        self,
        notifier: Optional[ChangeNotifier] = None,
        filter_engine: Optional[FilterEngine] = None,
    ):
        self._lock = threading.RLock()
        self._notifier = notifier or ChangeNotifier()
        self._filters = filter_engine or FilterEngine()
        self._advertised: List[ContributionRecord] = []
        self._all: List[ContributionRecord] = []
        self._by_category: Dict[Optional[str], List[ContributionRecord]] = {}

    # --- Advertised catalog ---

    def set_advertised_list(self, records: Iterable[ContributionRecord]) -> None:
        """Replace the advertised catalog and surface its entries for browsing.

        Raises MalformedDocumentError without touching the registry if any
        item is not a ContributionRecord. Records that came from the previous
        catalog and are missing from this one are removed unless installed;
        records the host added itself are left alone.
        """
        records = list(records)
        for record in records:
            if not isinstance(record, ContributionRecord):
                raise MalformedDocumentError(f"Not a contribution record: {record!r}")

        with self._lock:
            previous_pool = self._advertised
            self._advertised = records
            keys = {r.key for r in records}

            # Advertised-only entries that dropped out of the catalog
            stale = [
                r for r in self._all
                if not r.installed and r.key not in keys and r in previous_pool
            ]
            for record in stale:
                self.remove_contribution(record)

            for record in records:
                existing = self._find(record.key)
                if existing is None:
                    self.add_contribution(record)
                elif not existing.installed:
                    self.replace_contribution(existing, record)

            for record in [r for r in self._all if r.installed]:
                previous = record.advertised_counterpart
                category = record.category
                self.merge_advertised_metadata(record)
                if record.advertised_counterpart is not previous or record.category != category:
                    self._reindex(record)

            self._all.sort(key=_sort_key)

        logger.info("Advertised list set: %d contributions", len(records))

    def merge_advertised_metadata(self, record: ContributionRecord) -> None:
        """Link a record to its advertised counterpart and take its category."""
        with self._lock:
            advertised = self.get_advertised_contribution(record.name, record.type)
            record.advertised_counterpart = advertised
            if advertised is not None and advertised.category is not None:
                record.category = advertised.category

    def get_advertised_contribution(
        self, name: str, contribution_type: ContributionType
    ) -> Optional[ContributionRecord]:
        """Get the advertised record with this exact name and type."""
        with self._lock:
            for advertised in self._advertised:
                if advertised.type == contribution_type and advertised.name == name:
                    return advertised
        return None

    def get_advertised_contributions(self) -> List[ContributionRecord]:
        with self._lock:
            return list(self._advertised)

    # --- Working set ---

    def update_installed_list(self, installed: Iterable[ContributionRecord]) -> None:
        """Merge installed contributions, replacing records with the same name and type."""
        with self._lock:
            for record in installed:
                record.installed = True
                self.merge_advertised_metadata(record)

                existing = self._find(record.key)
                if existing is None:
                    self.add_contribution(record)
                elif existing is record:
                    self._reindex(record)
                else:
                    self.replace_contribution(existing, record)

    def add_contribution(self, record: ContributionRecord) -> None:
        """Add a record to the working set.

        A different record with the same name and type is replaced instead,
        so the working set never holds two records for one contribution.
        """
        with self._lock:
            existing = self._find(record.key)
            if existing is record:
                return
            if existing is not None:
                self.replace_contribution(existing, record)
                return

            bucket = self._by_category.setdefault(record.category, [])
            bucket.append(record)
            bucket.sort(key=_sort_key)
            self._all.append(record)
            self._all.sort(key=_sort_key)

            logger.debug("Added %s %r", record.type.value, record.name)
            self._notifier.notify_added(record)

    def remove_contribution(self, record: Optional[ContributionRecord]) -> None:
        """Remove a record from the working set. Unknown records are ignored."""
        if record is None:
            return
        with self._lock:
            if record not in self._all:
                return
            self._detach(record)
            self._all.remove(record)

            logger.debug("Removed %s %r", record.type.value, record.name)
            self._notifier.notify_removed(record)

    def replace_contribution(
        self, old: Optional[ContributionRecord], new: Optional[ContributionRecord]
    ) -> None:
        """Put ``new`` in the slot held by ``old``, without re-sorting.

        If the new record has a different category it moves to that bucket.
        """
        if old is None or new is None:
            return
        with self._lock:
            if old not in self._all:
                return
            if old is new:
                self._reindex(new)
                return

            self._all[self._all.index(old)] = new

            category = self._bucket_of(old)
            bucket = self._by_category[category]
            if new.category == category:
                bucket[bucket.index(old)] = new
            else:
                self._detach(old)
                self._attach(new)

            logger.debug("Replaced %s %r", new.type.value, new.name)
            self._notifier.notify_changed(old, new)

    # --- Queries ---

    def get_categories(self) -> Set[Optional[str]]:
        with self._lock:
            return set(self._by_category)

    def get_all_contributions(self) -> List[ContributionRecord]:
        with self._lock:
            return list(self._all)

    def get_contributions_by_category(self, category: Optional[str]) -> List[ContributionRecord]:
        with self._lock:
            records = list(self._by_category.get(category, []))
        records.sort(key=_sort_key)
        return records

    def get_filtered_list(
        self,
        category: Optional[str],
        filters: Union[str, Sequence[str], None] = None,
    ) -> List[ContributionRecord]:
        """Records in ``category`` (any if None) matching every filter token.

        ``filters`` may be a list of tokens or a raw search string.
        """
        if filters is None or isinstance(filters, str):
            filters = split_query(filters)
        records = self.get_all_contributions()
        return self._filters.filter(category, filters, records)

    def has_updates(self) -> bool:
        with self._lock:
            return any(r.has_updates() for r in self._all)

    def get_updatable_contributions(self) -> List[ContributionRecord]:
        with self._lock:
            return [r for r in self._all if r.has_updates()]

    # --- Listeners ---

    def add_listener(self, listener: ContributionChangeListener) -> None:
        self._notifier.add_listener(listener)

    def remove_listener(self, listener: ContributionChangeListener) -> None:
        self._notifier.remove_listener(listener)

    def get_listeners(self) -> List[ContributionChangeListener]:
        return self._notifier.get_listeners()

    # --- Refresh ---

    def refresh_advertised_list_async(
        self,
        downloader: "Downloader",
        progress: Optional["ProgressMonitor"] = None,
    ) -> "RefreshTask":
        """Fetch, parse and apply the remote catalog on a background thread."""
        from .catalog.fetcher import CatalogFetcher, RefreshTask

        task = RefreshTask(CatalogFetcher(self, downloader, progress))
        task.start()
        return task

    # --- Internals (caller holds the lock) ---

    def _find(self, key) -> Optional[ContributionRecord]:
        for record in self._all:
            if record.key == key:
                return record
        return None

    def _bucket_of(self, record: ContributionRecord):
        # Search by identity; the record's category may have changed since it was filed
        if record in self._by_category.get(record.category, ()):
            return record.category
        for category, bucket in self._by_category.items():
            if record in bucket:
                return category
        raise KeyError(record.name)

    def _attach(self, record: ContributionRecord) -> None:
        bucket = self._by_category.setdefault(record.category, [])
        bucket.append(record)
        bucket.sort(key=_sort_key)

    def _detach(self, record: ContributionRecord) -> None:
        category = self._bucket_of(record)
        bucket = self._by_category[category]
        bucket.remove(record)
        if not bucket:
            del self._by_category[category]

    def _reindex(self, record: ContributionRecord) -> None:
        """Refile a record whose metadata changed in place and report the change."""
        if self._bucket_of(record) != record.category:
            self._detach(record)
            self._attach(record)
        self._notifier.notify_changed(record, record)
