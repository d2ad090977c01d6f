"""Contribution data models.

Defines the records tracked by the registry: contribution types, authors,
and the contribution record itself (libraries, library compilations,
modes and tools).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ContributionType(str, Enum):
    """Kinds of contributions. Values match the catalog element names."""
    LIBRARY = "library"
    LIBRARY_COMPILATION = "librarycompilation"
    MODE = "mode"
    TOOL = "tool"


@dataclass
class Author:
    """An author credited on a contribution."""
    name: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> dict:
        return {"name": self.name, "url": self.url}

    @classmethod
    def from_dict(cls, data: dict) -> "Author":
        return cls(name=data.get("name"), url=data.get("url"))


@dataclass(eq=False)
class ContributionRecord:
    """Metadata for one installable contribution.

    Records compare by identity: two records with the same fields are still
    different slots in the registry. ``advertised_counterpart`` points at the
    advertised record with the same ``(name, type)`` and is only consulted to
    compare versions.
    """
    name: str
    type: ContributionType = ContributionType.LIBRARY
    category: Optional[str] = None
    version: int = 0
    pretty_version: Optional[str] = None
    authors: List[Author] = field(default_factory=list)
    url: Optional[str] = None                   # Project homepage
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    download_link: Optional[str] = None
    installed: bool = False

    # Library compilations only
    member_library_names: List[str] = field(default_factory=list)

    advertised_counterpart: Optional["ContributionRecord"] = field(default=None, repr=False)

    def __post_init__(self):
        if isinstance(self.type, str) and not isinstance(self.type, ContributionType):
            self.type = ContributionType(self.type)

    @property
    def key(self) -> Tuple[str, ContributionType]:
        """Identity key within the registry."""
        return (self.name, self.type)

    @property
    def sort_key(self) -> Tuple[str, str]:
        return (self.name.casefold(), self.type.value)

    @property
    def is_compilation(self) -> bool:
        return self.type == ContributionType.LIBRARY_COMPILATION

    @property
    def latest_version(self) -> int:
        """Version of the advertised counterpart, or our own if none."""
        if self.advertised_counterpart is None:
            return self.version
        return self.advertised_counterpart.version

    def has_updates(self) -> bool:
        """True if the advertised counterpart carries a newer version."""
        advertised = self.advertised_counterpart
        return advertised is not None and advertised.version > self.version

    def to_dict(self) -> dict:
        """Serialize to dictionary. The advertised counterpart is not included."""
        data = {
            "name": self.name,
            "type": self.type.value,
            "category": self.category,
            "version": self.version,
            "pretty_version": self.pretty_version,
            "authors": [a.to_dict() for a in self.authors],
            "url": self.url,
            "short_description": self.short_description,
            "long_description": self.long_description,
            "download_link": self.download_link,
            "installed": self.installed,
        }
        if self.is_compilation:
            data["member_library_names"] = list(self.member_library_names)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ContributionRecord":
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            type=ContributionType(data.get("type", "library")),
            category=data.get("category"),
            version=int(data.get("version", 0)),
            pretty_version=data.get("pretty_version"),
            authors=[Author.from_dict(a) for a in data.get("authors", [])],
            url=data.get("url"),
            short_description=data.get("short_description"),
            long_description=data.get("long_description"),
            download_link=data.get("download_link"),
            installed=data.get("installed", False),
            member_library_names=list(data.get("member_library_names", [])),
        )
