"""
XML query helpers.

Evaluates the compact path expressions used against SugarSync resource
documents, for example::

    /user/quota/limit/text()
    /collectionContents/collection[@type="folder"]/displayName/text()
    /receivedShares/receivedShare[displayName="Team"]/sharedFolder/text()

Absolute paths start at the document root; relative paths are evaluated
from the root element. Predicates are handled by ElementTree's limited
XPath support.
"""
from typing import List, Mapping, Union
import xml.etree.ElementTree as ET

from .exceptions import XMLQueryError

XmlInput = Union[bytes, str]

_TEXT_SELECTOR = 'text()'


def parse_document(xml: XmlInput) -> ET.Element:
    """Parse a document and return its root element, or raise XMLQueryError."""
    if isinstance(xml, str):
        xml = xml.encode('utf-8')
    try:
        return ET.fromstring(xml)
    except ET.ParseError as e:
        raise XMLQueryError(f"Malformed XML document: {e}") from e


def _split_path(path_expr: str):
    """
    Split an expression into (absolute, steps); a trailing text() is dropped.

    Raises:
        XMLQueryError: If the expression is empty
    """
    expr = path_expr.strip()
    if not expr or expr == '/':
        raise XMLQueryError(f"Malformed path expression: {path_expr!r}")

    absolute = expr.startswith('/')
    steps = expr.strip('/').split('/') if expr.strip('/') else []

    if steps and steps[-1] == _TEXT_SELECTOR:
        steps = steps[:-1]

    if any(not step for step in steps):
        raise XMLQueryError(f"Malformed path expression: {path_expr!r}")
    return absolute, steps


def _evaluate(root: ET.Element, path_expr: str):
    absolute, steps = _split_path(path_expr)

    if absolute:
        if not steps:
            return [root]
        # The first step names the root element (optionally with a predicate)
        first, steps = steps[0], steps[1:]
        holder = ET.Element('_')
        holder.append(root)
        try:
            if root not in holder.findall(first):
                return []
        except (SyntaxError, KeyError, TypeError) as e:
            raise XMLQueryError(f"Malformed path expression: {path_expr!r}") from e
        if not steps:
            return [root]

    if not steps:
        return [root]

    try:
        return root.findall('/'.join(steps))
    except (SyntaxError, KeyError, TypeError) as e:
        raise XMLQueryError(f"Malformed path expression: {path_expr!r}") from e


def elements(xml: XmlInput, path_expr: str) -> List[ET.Element]:
    """
    Return the elements matched by a path expression.

    A trailing ``/text()`` is accepted and ignored.

    Args:
        xml: XML document
        path_expr: Absolute or relative path expression

    Returns:
        Matched elements in document order

    Raises:
        XMLQueryError: On malformed XML or expression
    """
    return _evaluate(parse_document(xml), path_expr)


def text_values(xml: XmlInput, path_expr: str) -> List[str]:
    """
    Return the text of every element matched by a path expression.

    Args:
        xml: XML document
        path_expr: Absolute or relative path expression, optionally ending
            in ``/text()``

    Returns:
        Ordered text values; empty when nothing matches

    Raises:
        XMLQueryError: On malformed XML or expression
    """
    matched = _evaluate(parse_document(xml), path_expr)
    return [el.text or '' for el in matched]


def pretty_print(xml: XmlInput) -> str:
    """
    Best-effort indented rendering of an XML document.

    Returns the input decoded as-is when it is not XML.
    """
    raw = xml.decode('utf-8', errors='replace') if isinstance(xml, bytes) else xml
    try:
        root = ET.fromstring(xml)
        ET.indent(root, space='  ')
        return ET.tostring(root, encoding='unicode')
    except Exception:
        return raw


def build_document(root_tag: str, fields: Mapping[str, str]) -> bytes:
    """
    Serialise a flat request document.

    Args:
        root_tag: Name of the root element
        fields: Child element names and their text, in order

    Returns:
        UTF-8 encoded document with an XML declaration
    """
    root = ET.Element(root_tag)
    for tag, value in fields.items():
        ET.SubElement(root, tag).text = value
    return ET.tostring(root, encoding='utf-8', xml_declaration=True)
