"""Change notification for registry observers.

Listeners are called synchronously, in registration order, at the point
where the registry mutates. A listener may query the registry but must not
call its mutating methods while being notified.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .models import ContributionRecord


@runtime_checkable
class ContributionChangeListener(Protocol):
    """Observer of registry changes."""

    def contribution_added(self, record: ContributionRecord) -> None: ...

    def contribution_removed(self, record: ContributionRecord) -> None: ...

    def contribution_changed(self, old: ContributionRecord, new: ContributionRecord) -> None: ...


class ContributionChangeAdapter:
    """Listener base class with no-op callbacks; override what you need."""

    def contribution_added(self, record: ContributionRecord) -> None:
        pass

    def contribution_removed(self, record: ContributionRecord) -> None:
        pass

    def contribution_changed(self, old: ContributionRecord, new: ContributionRecord) -> None:
        pass


class ChangeNotifier:
    """Ordered fan-out of add/remove/change events."""

    def __init__(self) -> None:
        self._listeners: List[ContributionChangeListener] = []

    def add_listener(self, listener: ContributionChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ContributionChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_listeners(self) -> List[ContributionChangeListener]:
        return list(self._listeners)

    def notify_added(self, record: ContributionRecord) -> None:
        for listener in list(self._listeners):
            listener.contribution_added(record)

    def notify_removed(self, record: ContributionRecord) -> None:
        for listener in list(self._listeners):
            listener.contribution_removed(record)

    def notify_changed(self, old: ContributionRecord, new: ContributionRecord) -> None:
        for listener in list(self._listeners):
            listener.contribution_changed(old, new)
