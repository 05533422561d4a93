"""Read Dublin Core document properties from docProps/core.xml.

XML structure example:
    <cp:coreProperties xmlns:cp="..." xmlns:dc="..." xmlns:dcterms="...">
        <dc:title>Quarterly Review</dc:title>
        <dc:creator>Jane Doe</dc:creator>
        <cp:lastModifiedBy>John Roe</cp:lastModifiedBy>
        <cp:revision>3</cp:revision>
        <dcterms:created xsi:type="dcterms:W3CDTF">2024-01-15T09:30:00Z</dcterms:created>
        <dcterms:modified xsi:type="dcterms:W3CDTF">2024-02-01T17:00:00Z</dcterms:modified>
    </cp:coreProperties>
"""

import logging
from datetime import datetime
from typing import Any, Optional

from deckmodel.parser import xml_tree
from deckmodel.parser.context import ParseContext
from deckmodel.parser.errors import CorruptPartError, MalformedPartError
from deckmodel.parser.relationships import REL_CORE_PROPERTIES

logger = logging.getLogger(__name__)

DEFAULT_CORE_PROPERTIES_PART = "docProps/core.xml"

# core.xml element names mapped to DocumentMetadata fields
TEXT_PROPERTIES = {
    "title": "title",
    "creator": "author",
    "subject": "subject",
    "description": "description",
    "keywords": "keywords",
    "category": "category",
    "lastModifiedBy": "last_modified_by",
}

DATE_PROPERTIES = {
    "created": "created",
    "modified": "modified",
}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a W3CDTF timestamp; None when absent or unparsable."""
    if not value:
        return None
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


class PropertiesParser:
    """Extracts core document properties."""

    def extract(self, context: ParseContext) -> dict[str, Any]:
        """Read core properties into DocumentMetadata keyword arguments.

        Only properties present in the package appear in the result, so the
        metadata defaults apply to everything else.
        """
        root = self._read_core_part(context)
        if root is None:
            return {}

        properties: dict[str, Any] = {}
        for node in xml_tree.children(root):
            name = xml_tree.local_name(node)
            text = (node.text or "").strip()

            if name in TEXT_PROPERTIES:
                if text:
                    properties[TEXT_PROPERTIES[name]] = text
            elif name in DATE_PROPERTIES:
                timestamp = parse_timestamp(text)
                if timestamp is None and text:
                    logger.debug(f"Malformed timestamp {name}={text!r}")
                    context.diagnostics.malformed_values += 1
                properties[DATE_PROPERTIES[name]] = timestamp
            elif name == "revision" and text:
                try:
                    properties["revision"] = int(text)
                except ValueError:
                    logger.debug(f"Malformed revision {text!r}")
                    context.diagnostics.malformed_values += 1

        return properties

    def _read_core_part(self, context: ParseContext) -> Optional[xml_tree.Element]:
        rel = context.relationships("").first_of_type(REL_CORE_PROPERTIES)
        part_path = rel.target if rel is not None and not rel.external else DEFAULT_CORE_PROPERTIES_PART

        try:
            return context.read_optional_part(part_path)
        except (CorruptPartError, MalformedPartError) as e:
            logger.warning(f"Ignoring unreadable core properties: {e}")
            return None
