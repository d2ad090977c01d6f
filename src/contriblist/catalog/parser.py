"""Catalog document parser.

Reads the XML contributions catalog:

    <contributions>
      <category name="Sound">
        <library name="Minim" url="http://...">
          <author name="..." url="..."/>
          <description sentence="..." paragraph="..."/>
          <version id="3" pretty="2.1"/>
          <location url="http://.../minim.zip"/>
        </library>
        <librarycompilation name="..." libraryNames="a; b; c"> ... </librarycompilation>
      </category>
    </contributions>

The document comes from the network, so it is parsed with defusedxml
(no entity expansion, no external DTDs). Parsing is all-or-nothing: any
error raises and no records are returned.
"""

from __future__ import annotations

import io
import logging
import xml.sax
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import defusedxml
import defusedxml.sax

from ..errors import CatalogIOError, MalformedDocumentError, ParseConfigurationError
from ..models import Author, ContributionRecord, ContributionType

logger = logging.getLogger(__name__)

RECORD_ELEMENTS = {t.value: t for t in (ContributionType.LIBRARY, ContributionType.LIBRARY_COMPILATION)}
CHILD_ELEMENTS = ("author", "description", "version", "location")


def split_library_names(value: Optional[str]) -> List[str]:
    """Split a ``libraryNames`` attribute on ';' and trim each piece."""
    if not value:
        return []
    names = [n.strip() for n in value.split(";")]
    return [n for n in names if n]


class _CatalogHandler(xml.sax.ContentHandler, xml.sax.ErrorHandler):
    """SAX handler building contribution records in document order."""

    def __init__(self):
        super().__init__()
        self.records: List[ContributionRecord] = []
        self._category: Optional[str] = None
        self._current: Optional[ContributionRecord] = None
        self._locator = None

    def setDocumentLocator(self, locator):
        self._locator = locator

    def _line(self) -> Optional[int]:
        if self._locator is None:
            return None
        return self._locator.getLineNumber()

    def _fail(self, message: str):
        raise MalformedDocumentError(message, self._line())

    def startElement(self, name, attrs):
        if name == "category":
            self._category = attrs.get("name")

        elif name in RECORD_ELEMENTS:
            if self._current is not None:
                self._fail(f"<{name}> nested inside <{self._current.type.value}>")
            record_name = attrs.get("name")
            if not record_name:
                self._fail(f"<{name}> is missing its name")
            record = ContributionRecord(
                name=record_name,
                type=RECORD_ELEMENTS[name],
                category=self._category,
                url=attrs.get("url"),
            )
            if record.is_compilation:
                record.member_library_names = split_library_names(attrs.get("libraryNames"))
            self._current = record

        elif name in CHILD_ELEMENTS:
            if self._current is None:
                self._fail(f"<{name}> outside of a contribution")
            self._child(name, attrs)

    def _child(self, name, attrs):
        record = self._current
        if name == "author":
            record.authors.append(Author(name=attrs.get("name"), url=attrs.get("url")))
        elif name == "description":
            record.short_description = attrs.get("sentence")
            record.long_description = attrs.get("paragraph")
        elif name == "version":
            try:
                record.version = int(attrs.get("id", ""))
            except ValueError:
                self._fail(f"Invalid version id {attrs.get('id')!r} for {record.name!r}")
            record.pretty_version = attrs.get("pretty")
        elif name == "location":
            record.download_link = attrs.get("url")

    def endElement(self, name):
        if name in RECORD_ELEMENTS and self._current is not None:
            self.records.append(self._current)
            self._current = None

    # ErrorHandler

    def warning(self, exception):
        logger.warning("Catalog line %s: %s", exception.getLineNumber(), exception.getMessage())

    def error(self, exception):
        logger.warning("Catalog error at line %s: %s", exception.getLineNumber(), exception.getMessage())

    def fatalError(self, exception):
        raise exception


class CatalogParser:
    """Decode a catalog document into an ordered list of records."""

    def _make_reader(self):
        try:
            reader = defusedxml.sax.make_parser()
            reader.setFeature(xml.sax.handler.feature_namespaces, False)
            reader.setFeature(xml.sax.handler.feature_external_ges, False)
        except (xml.sax.SAXException, ImportError) as e:
            raise ParseConfigurationError(f"Cannot create XML parser: {e}") from e
        return reader

    def parse(self, source: Union[bytes, str, BinaryIO]) -> List[ContributionRecord]:
        """Parse catalog bytes, text, or a binary file object."""
        if isinstance(source, str):
            source = source.encode("utf-8")
        if isinstance(source, bytes):
            source = io.BytesIO(source)

        reader = self._make_reader()
        handler = _CatalogHandler()
        reader.setContentHandler(handler)
        reader.setErrorHandler(handler)

        try:
            reader.parse(source)
        except MalformedDocumentError:
            raise
        except xml.sax.SAXParseException as e:
            raise MalformedDocumentError(e.getMessage(), e.getLineNumber()) from e
        except xml.sax.SAXException as e:
            raise MalformedDocumentError(str(e)) from e
        except defusedxml.DefusedXmlException as e:
            raise MalformedDocumentError(f"Forbidden construct in catalog: {e}") from e
        except OSError as e:
            raise CatalogIOError(f"Cannot read catalog: {e}") from e

        logger.debug("Parsed %d contributions from catalog", len(handler.records))
        return handler.records


def parse_bytes(data: bytes) -> List[ContributionRecord]:
    return CatalogParser().parse(data)


def parse_file(path: Union[str, Path]) -> List[ContributionRecord]:
    """Parse a catalog stored on disk."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise CatalogIOError(f"Cannot read catalog {path}: {e}") from e
    return CatalogParser().parse(data)
