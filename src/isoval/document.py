"""XML document access for rule evaluation.

Parses payment message text into an ElementTree and answers the small set of
queries the validators need: resolve a relative element path, read the root
element and read node names and text. Parsing goes through defusedxml so that
entity expansion and external references in untrusted messages are refused.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser

logger = logging.getLogger(__name__)

# A plain element step, optionally followed by an ElementPath predicate
_STEP_PATTERN = re.compile(r"^(?P<name>[A-Za-z_][\w.\-]*)(?P<predicate>\[.*\])?$")


class DocumentParseError(Exception):
    """Raised when document text is not well-formed XML."""


# ElementPath reports uncompilable expressions with any of these
_PATH_ERRORS = (SyntaxError, KeyError, StopIteration, TypeError)


class _DoctypeTolerantParser(DefusedXMLParser):
    """Defused parser that accepts and ignores a DOCTYPE.

    Entity declarations and external references are still refused.
    """

    def __init__(self):
        super().__init__(
            target=ET.TreeBuilder(),
            forbid_dtd=True,
            forbid_entities=True,
            forbid_external=True,
        )

    def defused_start_doctype_decl(self, name, sysid, pubid, has_internal_subset):
        logger.debug(f"Ignoring document type declaration '{name}'")


@dataclass
class XmlDocument:
    """A parsed XML document plus the non-fatal warnings raised while parsing."""

    root: ET.Element
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Search anchor so that the first path step can also match the root
        self._anchor = ET.Element("document")
        self._anchor.append(self.root)

    def resolve(self, path: str) -> ET.Element | None:
        """Return the first element matching a relative path anywhere in the document.

        ``"SvcLvl/Prtry"`` behaves like the XPath ``//SvcLvl/Prtry``. Plain
        steps match on local name, so default-namespaced ISO 20022 messages
        need no prefixes in rule files.

        Args:
            path: Slash separated element path

        Returns:
            First matching element, or None if nothing matches or the path
            cannot be interpreted
        """
        element_path = to_element_path(path)
        if element_path is None:
            return None

        try:
            return self._anchor.find(element_path)
        except _PATH_ERRORS as e:
            logger.debug(f"Cannot resolve path {path!r}: {e}")
            return None

    def exists(self, path: str) -> bool:
        return self.resolve(path) is not None

    @property
    def root_name(self) -> str:
        return node_name(self.root)

    @property
    def root_text(self) -> str:
        return node_text(self.root).strip()


def to_element_path(path: str) -> str | None:
    """Translate a rule path into a descendant ElementPath expression.

    Args:
        path: Rule path such as ``"CdtrAgt/FinInstnId/BIC"``

    Returns:
        ElementPath string (``".//{*}CdtrAgt/{*}FinInstnId/{*}BIC"``), or None
        for an empty path
    """
    steps = [step.strip() for step in path.strip().lstrip("/").split("/")]
    if not steps or not all(steps):
        return None

    translated = []
    for step in steps:
        match = _STEP_PATTERN.match(step)
        if match:
            translated.append("{*}" + match.group("name") + (match.group("predicate") or ""))
        else:
            # Wildcards, namespaced tags and relative steps pass through untouched
            translated.append(step)

    return ".//" + "/".join(translated)


def check_path(path: str) -> str:
    """Make sure a rule path compiles to an ElementPath expression.

    Raises:
        ValueError: If ElementPath rejects the translated expression
    """
    element_path = to_element_path(path)
    if element_path is not None:
        try:
            ET.Element("document").find(element_path)
        except _PATH_ERRORS as e:
            raise ValueError(f"Invalid element path '{path}': {e}") from e
    return path


def node_name(node: ET.Element | None) -> str | None:
    """Local tag name of an element, without namespace."""
    if node is None:
        return None
    tag = node.tag
    if isinstance(tag, str) and tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def node_text(node: ET.Element) -> str:
    """All descendant text of an element, concatenated in document order."""
    return "".join(node.itertext())


def parse_document(content: str | bytes) -> XmlDocument:
    """Parse XML text into an XmlDocument.

    Args:
        content: Raw XML message

    Returns:
        XmlDocument with the root element and any parse warnings

    Raises:
        DocumentParseError: If the text is not well-formed or uses forbidden
            constructs (entity declarations, external references)
    """
    parser = _DoctypeTolerantParser()

    try:
        parser.feed(content)
        root = parser.close()
    except DefusedXmlException as e:
        raise DocumentParseError(f"Forbidden XML construct: {e}") from e
    except SyntaxError as e:
        # ET.ParseError is a SyntaxError subclass
        raise DocumentParseError(str(e)) from e

    if root is None:
        raise DocumentParseError("no element found")

    logger.debug(f"Parsed document with root <{node_name(root)}>")
    return XmlDocument(root=root)
