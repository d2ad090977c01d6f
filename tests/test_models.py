"""Tests for the contribution models module."""

import pytest

from contriblist.models import Author, ContributionRecord, ContributionType


class TestContributionType:
    """Tests for ContributionType enum."""

    def test_values(self):
        """Values match the catalog element names."""
        assert ContributionType.LIBRARY.value == "library"
        assert ContributionType.LIBRARY_COMPILATION.value == "librarycompilation"
        assert ContributionType.MODE.value == "mode"
        assert ContributionType.TOOL.value == "tool"


class TestContributionRecord:
    """Tests for ContributionRecord."""

    def test_default_values(self):
        """Test default record values."""
        record = ContributionRecord(name="Minim")
        assert record.type == ContributionType.LIBRARY
        assert record.category is None
        assert record.version == 0
        assert record.authors == []
        assert record.installed is False
        assert record.advertised_counterpart is None
        assert record.member_library_names == []

    def test_type_from_string(self):
        """A plain string type is converted to the enum."""
        record = ContributionRecord(name="Tweak", type="tool")
        assert record.type is ContributionType.TOOL

    def test_identity_equality(self):
        """Records with identical fields are still different records."""
        a = ContributionRecord(name="Minim", version=1)
        b = ContributionRecord(name="Minim", version=1)
        assert a != b
        assert a == a
        assert a in [a]
        assert b not in [a]

    def test_key_and_sort_key(self):
        """Key is (name, type); sort key ignores case."""
        record = ContributionRecord(name="OpenCV", type=ContributionType.LIBRARY)
        assert record.key == ("OpenCV", ContributionType.LIBRARY)
        assert record.sort_key == ("opencv", "library")

    def test_has_updates(self):
        """Update detection compares against the advertised counterpart."""
        installed = ContributionRecord(name="Minim", version=2, installed=True)
        assert installed.has_updates() is False

        installed.advertised_counterpart = ContributionRecord(name="Minim", version=3)
        assert installed.has_updates() is True
        assert installed.latest_version == 3

        installed.advertised_counterpart = ContributionRecord(name="Minim", version=2)
        assert installed.has_updates() is False

        installed.advertised_counterpart = ContributionRecord(name="Minim", version=1)
        assert installed.has_updates() is False

    def test_latest_version_without_counterpart(self):
        """Without a counterpart the record's own version is the latest."""
        record = ContributionRecord(name="Minim", version=4)
        assert record.latest_version == 4

    def test_to_dict(self):
        """Test serialization; the counterpart is not included."""
        record = ContributionRecord(
            name="Minim",
            category="Sound",
            version=3,
            pretty_version="2.1",
            authors=[Author(name="Damien", url="http://example.com")],
            installed=True,
        )
        record.advertised_counterpart = ContributionRecord(name="Minim", version=4)

        data = record.to_dict()
        assert data["name"] == "Minim"
        assert data["type"] == "library"
        assert data["category"] == "Sound"
        assert data["version"] == 3
        assert data["authors"] == [{"name": "Damien", "url": "http://example.com"}]
        assert data["installed"] is True
        assert "advertised_counterpart" not in data
        assert "member_library_names" not in data

    def test_compilation_to_dict(self):
        """Compilations include their member libraries."""
        record = ContributionRecord(
            name="Bundle",
            type=ContributionType.LIBRARY_COMPILATION,
            member_library_names=["a", "b"],
        )
        assert record.is_compilation is True
        assert record.to_dict()["member_library_names"] == ["a", "b"]

    def test_from_dict(self):
        """Test deserialization."""
        data = {
            "name": "Bundle",
            "type": "librarycompilation",
            "category": "Sound",
            "version": "5",
            "authors": [{"name": "A"}, {"name": "B", "url": "http://b"}],
            "installed": True,
            "member_library_names": ["x", "y"],
        }
        record = ContributionRecord.from_dict(data)
        assert record.type == ContributionType.LIBRARY_COMPILATION
        assert record.version == 5
        assert [a.name for a in record.authors] == ["A", "B"]
        assert record.authors[1].url == "http://b"
        assert record.installed is True
        assert record.member_library_names == ["x", "y"]

    def test_from_dict_requires_name(self):
        """Name is mandatory."""
        with pytest.raises(KeyError):
            ContributionRecord.from_dict({"type": "library"})
