"""Namespace-agnostic lookups over lxml element trees.

Every lookup accepts either a prefixed name (``p:sp``) or a bare local name
(``sp``); both resolve to the same logical element. Lookups return ``None``
(or an empty list) when nothing matches, and callers substitute their own
documented default at each step.
"""

import logging
from typing import Iterator, Optional, Union

from lxml import etree

from deckmodel.parser.errors import MalformedPartError

logger = logging.getLogger(__name__)

Element = etree._Element

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=False)

TRUE_VALUES = ("1", "true")


def parse_xml(data: Union[bytes, str], part_path: str = "<memory>") -> Element:
    """Parse a part's XML into an element tree.

    Raises:
        MalformedPartError: If the markup cannot be parsed.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return etree.fromstring(data, parser=_PARSER)
    except etree.XMLSyntaxError as e:
        raise MalformedPartError(part_path, str(e)) from e


def _local(name: str) -> str:
    return name.rsplit(":", 1)[-1]


def local_name(element: Element) -> str:
    """Tag name without namespace; empty for comments and processing instructions."""
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def child(element: Optional[Element], name: str) -> Optional[Element]:
    """First direct child with the given name."""
    if element is None:
        return None
    wanted = _local(name)
    for node in element:
        if local_name(node) == wanted:
            return node
    return None


def children(element: Optional[Element], name: Optional[str] = None) -> list[Element]:
    """Direct children with the given name (all element children if no name)."""
    if element is None:
        return []
    if name is None:
        return [node for node in element if local_name(node)]
    wanted = _local(name)
    return [node for node in element if local_name(node) == wanted]


def path(element: Optional[Element], *names: str) -> Optional[Element]:
    """Follow a chain of direct children, e.g. ``path(sp, "p:spPr", "a:xfrm")``."""
    current = element
    for name in names:
        current = child(current, name)
        if current is None:
            return None
    return current


def iter_descendants(element: Optional[Element], name: str) -> Iterator[Element]:
    """Descendants with the given name in document order, excluding the element itself."""
    if element is None:
        return
    wanted = _local(name)
    for node in element.iterdescendants():
        if local_name(node) == wanted:
            yield node


def find_first(element: Optional[Element], name: str) -> Optional[Element]:
    """First descendant with the given name."""
    return next(iter_descendants(element, name), None)


def find_all(element: Optional[Element], name: str) -> list[Element]:
    """All descendants with the given name."""
    return list(iter_descendants(element, name))


def attr(element: Optional[Element], name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an attribute.

    A prefixed name (``r:embed``) matches a namespaced attribute with that
    local name; a bare name (``id``) matches only the unqualified attribute,
    so ``r:id`` and ``id`` on the same element stay distinct.
    """
    if element is None:
        return default
    if ":" not in name:
        return element.get(name, default)
    wanted = _local(name)
    for key, value in element.attrib.items():
        if key.startswith("{") and etree.QName(key).localname == wanted:
            return value
    return default


def int_attr(
    element: Optional[Element],
    name: str,
    default: int = 0,
    diagnostics=None,
) -> int:
    """Read an integer attribute, defaulting when absent or unparsable.

    Args:
        element: Element to read from.
        name: Attribute name.
        default: Value used when the attribute is absent or malformed.
        diagnostics: Optional ParseDiagnostics that counts malformed values.
    """
    raw = attr(element, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        try:
            return int(float(raw))
        except (ValueError, OverflowError):
            logger.debug(f"Malformed integer {name}={raw!r} on <{local_name(element)}>")
            if diagnostics is not None:
                diagnostics.malformed_values += 1
            return default


def bool_attr(element: Optional[Element], name: str, default: bool = False) -> bool:
    """Read a boolean attribute; "1" and "true" are true."""
    raw = attr(element, name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUE_VALUES


def text_of(element: Optional[Element]) -> Optional[str]:
    """Element text, or None when the element is missing."""
    if element is None:
        return None
    return element.text or ""
