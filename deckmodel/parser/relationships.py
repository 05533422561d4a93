"""Resolve relationship IDs to package part paths.

Each part ``dir/name.xml`` may carry a sidecar ``dir/_rels/name.xml.rels``
mapping relationship IDs to targets relative to ``dir``::

    <Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
        <Relationship Id="rId2" Type=".../image" Target="../media/image1.png"/>
    </Relationships>
"""

import posixpath
from dataclasses import dataclass, field
from typing import Optional

from deckmodel.parser import xml_tree

# Relationship type suffixes
REL_OFFICE_DOCUMENT = "/officeDocument"
REL_SLIDE = "/slide"
REL_SLIDE_MASTER = "/slideMaster"
REL_THEME = "/theme"
REL_NOTES_SLIDE = "/notesSlide"
REL_CORE_PROPERTIES = "/core-properties"


@dataclass(frozen=True)
class Relationship:
    """A single relationship entry."""

    id: str
    type: str
    target: str
    external: bool = False


@dataclass
class RelationshipTable:
    """Relationship ID to normalized target mapping for one part."""

    part_path: str
    relationships: dict[str, Relationship] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.relationships)

    def __contains__(self, rel_id: str) -> bool:
        return rel_id in self.relationships

    def get(self, rel_id: Optional[str]) -> Optional[Relationship]:
        """Look up a relationship entry."""
        if not rel_id:
            return None
        return self.relationships.get(rel_id)

    def resolve(self, rel_id: Optional[str]) -> Optional[str]:
        """Normalized package path for an ID, or None if unknown or external."""
        rel = self.get(rel_id)
        if rel is None or rel.external:
            return None
        return rel.target

    def first_of_type(self, type_suffix: str) -> Optional[Relationship]:
        """First relationship whose type URI ends with the suffix."""
        for rel in self.relationships.values():
            if rel.type.endswith(type_suffix):
                return rel
        return None


def relationships_path(part_path: str) -> str:
    """Path of the relationship file belonging to a part.

    ``ppt/slides/slide1.xml`` -> ``ppt/slides/_rels/slide1.xml.rels``;
    the package root (``""``) -> ``_rels/.rels``.
    """
    directory, name = posixpath.split(part_path.lstrip("/"))
    return posixpath.join(directory, "_rels", f"{name}.rels")


def resolve_target(part_path: str, target: str) -> str:
    """Resolve a relationship target against its owning part's directory.

    Leading ``/`` makes the target package-absolute. ``..`` segments and
    repeated separators are collapsed; segments that would escape the
    package root are dropped.
    """
    if target.startswith("/"):
        joined = target.lstrip("/")
    else:
        base = posixpath.dirname(part_path.lstrip("/"))
        joined = posixpath.join(base, target) if base else target

    normalized = posixpath.normpath(joined)
    segments = [segment for segment in normalized.split("/") if segment not in ("", ".", "..")]
    return "/".join(segments)


def parse_relationships(xml: Optional[bytes], part_path: str) -> RelationshipTable:
    """Build the relationship table for a part.

    Args:
        xml: Contents of the part's .rels file, or None when it is missing.
        part_path: The owning part, used as the base for relative targets.

    Returns:
        The table; empty when the file is missing.

    Raises:
        MalformedPartError: If the file exists but its XML cannot be parsed.
    """
    table = RelationshipTable(part_path=part_path)
    if xml is None:
        return table

    root = xml_tree.parse_xml(xml, relationships_path(part_path))

    for node in xml_tree.children(root, "Relationship"):
        rel_id = xml_tree.attr(node, "Id")
        target = xml_tree.attr(node, "Target")
        if not rel_id or target is None:
            continue

        external = (xml_tree.attr(node, "TargetMode") or "").lower() == "external"
        table.relationships[rel_id] = Relationship(
            id=rel_id,
            type=xml_tree.attr(node, "Type", ""),
            target=target if external else resolve_target(part_path, target),
            external=external,
        )

    return table
