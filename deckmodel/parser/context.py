"""Per-parse state shared by the extractors.

A ``ParseContext`` lives for exactly one ``PPTXReader.read`` call. It owns
the relationship-table cache and the diagnostics counters, so nothing is
shared between documents.
"""

import itertools
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from deckmodel.dsl.schema import ParseReport, ThemeColors
from deckmodel.parser import xml_tree
from deckmodel.parser.archive import PackageArchive
from deckmodel.parser.errors import PartNotFoundError
from deckmodel.parser.relationships import (
    RelationshipTable,
    parse_relationships,
    relationships_path,
)

logger = logging.getLogger(__name__)

IdFactory = Callable[[str], str]


def uuid_ids(prefix: str) -> str:
    """Default id factory: random, unique across processes."""
    return f"{prefix}_{uuid.uuid4().hex}"


def sequential_ids() -> IdFactory:
    """Id factory producing ``prefix_1``, ``prefix_2``, ... from one shared counter."""
    counter = itertools.count(1)

    def next_id(prefix: str) -> str:
        return f"{prefix}_{next(counter)}"

    return next_id


@dataclass
class ParseDiagnostics:
    """Counters for problems recovered during one parse."""

    skipped_slides: list[int] = field(default_factory=list)
    missing_media: int = 0
    malformed_values: int = 0
    unsupported_nodes: int = 0

    def to_report(self) -> ParseReport:
        """Freeze the counters into the report attached to the document."""
        return ParseReport(
            skipped_slides=list(self.skipped_slides),
            missing_media=self.missing_media,
            malformed_values=self.malformed_values,
            unsupported_nodes=self.unsupported_nodes,
        )


@dataclass
class ParseContext:
    """Everything one parse needs besides the node being visited."""

    archive: PackageArchive
    id_factory: IdFactory = uuid_ids
    max_depth: int = 64
    theme_colors: ThemeColors = field(default_factory=ThemeColors)
    diagnostics: ParseDiagnostics = field(default_factory=ParseDiagnostics)
    _relationships: dict[str, RelationshipTable] = field(default_factory=dict, repr=False)

    def new_id(self, prefix: str) -> str:
        """Generate an identifier unique within this document."""
        return self.id_factory(prefix)

    def relationships(self, part_path: str) -> RelationshipTable:
        """Relationship table of a part, parsed once per parse call.

        Raises:
            CorruptPartError: If the .rels entry cannot be decompressed.
            MalformedPartError: If the .rels XML cannot be parsed.
        """
        table = self._relationships.get(part_path)
        if table is None:
            xml = self.archive.read_binary(relationships_path(part_path))
            if xml is None:
                logger.debug(f"No relationships file for {part_path}")
            table = parse_relationships(xml, part_path)
            self._relationships[part_path] = table
        return table

    def read_part(self, part_path: str) -> xml_tree.Element:
        """Read and parse an XML part.

        Raises:
            PartNotFoundError: If the part is absent.
            CorruptPartError: If its zip entry cannot be decompressed.
            MalformedPartError: If its XML cannot be parsed.
        """
        data = self.archive.read_binary(part_path)
        if data is None:
            raise PartNotFoundError(part_path)
        return xml_tree.parse_xml(data, part_path)

    def read_optional_part(self, part_path: Optional[str]) -> Optional[xml_tree.Element]:
        """Read an XML part, or None when it is absent."""
        if not part_path:
            return None
        data = self.archive.read_binary(part_path)
        if data is None:
            return None
        return xml_tree.parse_xml(data, part_path)
