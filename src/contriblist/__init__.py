"""contriblist - contribution catalog registry.

Reconciles a remotely published catalog of contributions (libraries,
library compilations, modes, tools) with the ones installed locally:
- Category index kept sorted by name
- Update detection against advertised versions
- Filter queries (has:updates, is:installed, not:installed, free text)
- Change notifications for observers
- Background refresh of the advertised catalog
"""

from .errors import (
    CatalogError,
    CatalogIOError,
    FilterError,
    MalformedDocumentError,
    ParseConfigurationError,
)
from .models import Author, ContributionRecord, ContributionType
from .filters import FilterEngine, split_query
from .notifier import ChangeNotifier, ContributionChangeAdapter, ContributionChangeListener
from .registry import Registry
from .config import CatalogConfig

__all__ = [
    "CatalogError",
    "CatalogIOError",
    "FilterError",
    "MalformedDocumentError",
    "ParseConfigurationError",
    "Author",
    "ContributionRecord",
    "ContributionType",
    "FilterEngine",
    "split_query",
    "ChangeNotifier",
    "ContributionChangeAdapter",
    "ContributionChangeListener",
    "Registry",
    "CatalogConfig",
]
