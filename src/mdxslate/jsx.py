#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/jsx.py
"""Attribute scanning for JSX tags embedded in MDX documents.

MDX documents carry component tags such as ``<YouTube id="1234" />`` as raw
text fragments. This module reads and rewrites the root opening element of
such a fragment without a general JavaScript parser: it locates the first
opening tag, reads its name and attributes, and splices new attribute text
into the same span.

Only static string attributes are exposed as props. Expression attributes
(``count={3}``), bare boolean attributes and spreads (``{...rest}``) are
scanned so the tag can be delimited correctly, but are otherwise ignored.

Examples
--------
    >>> parse_tag('<YouTube id="1234" autoplay />')
    ParsedTag(type='YouTube', props={'id': '1234'})
    >>> apply_props('<YouTube id="1234" />', {"start": "30"})
    '<YouTube id="1234" start="30" />'

"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

from mdxslate.exceptions import MarkupSyntaxError

logger = logging.getLogger(__name__)

AttributeKind = Literal["string", "expression", "boolean", "spread"]

_NAME_PART = r"[A-Za-z_$][\w$\-]*"
_TAG_NAME = re.compile(rf"{_NAME_PART}(?:[.:]{_NAME_PART})*")
_ATTRIBUTE_NAME = re.compile(rf"{_NAME_PART}(?::{_NAME_PART})?")
_WHITESPACE = re.compile(r"\s*")
_CLOSING_TAG = re.compile(rf"\s*</\s*({_NAME_PART}(?:[.:]{_NAME_PART})*)?\s*>\s*")
_SELF_CLOSING_END = re.compile(r"\s*/>\s*$")


@dataclass(frozen=True)
class TagAttribute:
    """One attribute of an opening tag, with its span in the source text.

    Parameters
    ----------
    name : str or None
        Attribute name; None for spread attributes
    kind : {"string", "expression", "boolean", "spread"}
        Syntactic form of the attribute
    value : str or None
        Decoded value for string attributes, otherwise None
    start, end : int
        Offsets of the whole attribute (name through value) in the source

    """

    name: Optional[str]
    kind: AttributeKind
    value: Optional[str]
    start: int
    end: int


@dataclass(frozen=True)
class TagSpan:
    """Location and contents of the root opening tag in a fragment."""

    name: str
    attributes: tuple[TagAttribute, ...]
    start: int
    name_end: int
    end: int
    self_closing: bool

    def find_attribute(self, name: str) -> Optional[TagAttribute]:
        """Return the first attribute with ``name`` by position, if any."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


@dataclass(frozen=True)
class ParsedTag:
    """Component name and static string props extracted from a fragment.

    ``type`` is None when the fragment holds no element or could not be
    scanned; such fragments must be carried through as opaque text.
    """

    type: Optional[str] = None
    props: dict[str, str] = field(default_factory=dict)

    def to_data(self) -> dict[str, Any]:
        """Return the ``{"type", "props"}`` payload stored on Slate JSX blocks."""
        return {"type": self.type, "props": dict(self.props)}


def _skip_whitespace(text: str, pos: int) -> int:
    match = _WHITESPACE.match(text, pos)
    return match.end() if match else pos


def _scan_quoted(text: str, pos: int) -> int:
    """Return the offset just past the JSX string starting at ``pos``.

    JSX attribute strings have no backslash escapes, so the string ends at
    the next matching quote.
    """
    end = text.find(text[pos], pos + 1)
    if end < 0:
        raise MarkupSyntaxError("Unterminated attribute string", pos)
    return end + 1


def _scan_script_string(text: str, pos: int) -> int:
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    raise MarkupSyntaxError("Unterminated string inside expression", pos)


def _scan_expression(text: str, pos: int) -> int:
    """Return the offset just past the balanced ``{...}`` starting at ``pos``."""
    depth = 0
    i = pos
    while i < len(text):
        char = text[i]
        if char in "\"'`":
            i = _scan_script_string(text, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    raise MarkupSyntaxError("Unterminated attribute expression", pos)


def _find_element_start(text: str) -> Optional[re.Match[str]]:
    """Find the tag name of the first opening element in ``text``.

    Closing tags, fragments (``<>``), comments and stray ``<`` characters
    are skipped.
    """
    pos = 0
    while True:
        start = text.find("<", pos)
        if start < 0:
            return None
        if text.startswith("<!--", start):
            comment_end = text.find("-->", start + 4)
            if comment_end < 0:
                raise MarkupSyntaxError("Unterminated comment", start)
            pos = comment_end + 3
            continue
        match = _TAG_NAME.match(text, start + 1)
        if match:
            return match
        pos = start + 1


def _scan_attribute(text: str, name_match: re.Match[str]) -> TagAttribute:
    name = name_match.group(0)
    start = name_match.start()
    value_pos = _skip_whitespace(text, name_match.end())

    if value_pos >= len(text) or text[value_pos] != "=":
        return TagAttribute(name=name, kind="boolean", value=None, start=start, end=name_match.end())

    value_pos = _skip_whitespace(text, value_pos + 1)
    if value_pos >= len(text):
        raise MarkupSyntaxError(f"Missing value for attribute '{name}'", value_pos)

    char = text[value_pos]
    if char in "\"'":
        end = _scan_quoted(text, value_pos)
        value = html.unescape(text[value_pos + 1 : end - 1])
        return TagAttribute(name=name, kind="string", value=value, start=start, end=end)
    if char == "{":
        end = _scan_expression(text, value_pos)
        return TagAttribute(name=name, kind="expression", value=None, start=start, end=end)

    raise MarkupSyntaxError(f"Unsupported value for attribute '{name}'", value_pos)


def scan_opening_tag(text: str) -> Optional[TagSpan]:
    """Locate and scan the root opening tag of a JSX fragment.

    Parameters
    ----------
    text : str
        Raw fragment text

    Returns
    -------
    TagSpan or None
        The scanned tag, or None when the fragment contains no element

    Raises
    ------
    MarkupSyntaxError
        If the first element's opening tag is malformed

    """
    name_match = _find_element_start(text)
    if name_match is None:
        return None

    name = name_match.group(0)
    start = name_match.start() - 1
    attributes: list[TagAttribute] = []
    pos = name_match.end()

    while True:
        pos = _skip_whitespace(text, pos)
        if pos >= len(text):
            raise MarkupSyntaxError(f"Unterminated <{name}> tag", start)

        char = text[pos]
        if char == ">":
            return TagSpan(name, tuple(attributes), start, name_match.end(), pos + 1, self_closing=False)
        if char == "/":
            close = _skip_whitespace(text, pos + 1)
            if close < len(text) and text[close] == ">":
                return TagSpan(name, tuple(attributes), start, name_match.end(), close + 1, self_closing=True)
            raise MarkupSyntaxError("Expected '>' after '/'", pos)
        if char == "{":
            end = _scan_expression(text, pos)
            attributes.append(TagAttribute(name=None, kind="spread", value=None, start=pos, end=end))
            pos = end
            continue

        attribute_match = _ATTRIBUTE_NAME.match(text, pos)
        if attribute_match is None:
            raise MarkupSyntaxError(f"Unexpected character {char!r} in <{name}> tag", pos)
        attribute = _scan_attribute(text, attribute_match)
        attributes.append(attribute)
        pos = attribute.end


def parse_tag(text: str) -> ParsedTag:
    """Extract the root element's name and static string props.

    Parameters
    ----------
    text : str
        Raw JSX fragment, e.g. ``'<Note kind="info">'`` or ``'<Video id="1" />'``

    Returns
    -------
    ParsedTag
        Component name and props. ``type`` is None and ``props`` empty when
        no element is found or the fragment is malformed; this function never
        raises.

    """
    try:
        span = scan_opening_tag(text)
    except MarkupSyntaxError as exc:
        logger.debug("Treating JSX fragment as opaque: %s", exc)
        return ParsedTag()

    if span is None:
        return ParsedTag()

    props: dict[str, str] = {}
    for attribute in span.attributes:
        if attribute.kind == "string" and attribute.name is not None and attribute.value is not None:
            props[attribute.name] = attribute.value
    return ParsedTag(type=span.name, props=props)


def _encode_value(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def apply_props(text: str, props: Mapping[str, Any]) -> str:
    """Insert or overwrite attributes on the root opening tag of a fragment.

    Each key of ``props`` replaces the first attribute of that name, or is
    appended after the last attribute when absent. Every other character of
    ``text`` is left untouched.

    Parameters
    ----------
    text : str
        Raw JSX fragment
    props : Mapping[str, Any]
        Attribute values to write; values are written as strings

    Returns
    -------
    str
        The rewritten fragment, or ``text`` unchanged when it holds no
        element or cannot be scanned

    Examples
    --------
        >>> apply_props('<X a="1" />', {"a": "9"})
        '<X a="9" />'

    """
    try:
        span = scan_opening_tag(text)
    except MarkupSyntaxError as exc:
        logger.debug("Leaving unscannable JSX fragment unchanged: %s", exc)
        return text

    if span is None:
        return text

    edits: list[tuple[int, int, str]] = []
    appended: list[str] = []
    for key, raw_value in props.items():
        if not _ATTRIBUTE_NAME.fullmatch(key):
            logger.warning("Skipping prop %r: not a valid JSX attribute name", key)
            continue
        value = str(raw_value)
        rendered = f'{key}="{_encode_value(value)}"'
        attribute = span.find_attribute(key)
        if attribute is None:
            appended.append(rendered)
        elif attribute.kind != "string" or attribute.value != value:
            edits.append((attribute.start, attribute.end, rendered))

    if appended:
        insert_at = span.attributes[-1].end if span.attributes else span.name_end
        edits.append((insert_at, insert_at, "".join(f" {item}" for item in appended)))

    result = text
    for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
        result = result[:start] + replacement + result[end:]
    return result


def is_opening_tag(text: str) -> bool:
    """Return True when ``text`` is exactly one non-self-closing opening tag."""
    try:
        span = scan_opening_tag(text)
    except MarkupSyntaxError:
        return False
    if span is None or span.self_closing:
        return False
    return not text[: span.start].strip() and not text[span.end :].strip()


def closing_tag_name(text: str) -> Optional[str]:
    """Return the element name when ``text`` is a lone closing tag.

    A fragment closer ``</>`` yields an empty string; anything else None.
    """
    match = _CLOSING_TAG.fullmatch(text)
    if match is None:
        return None
    return match.group(1) or ""


def to_opening_tag(text: str) -> str:
    """Turn a self-closing tag such as ``<Note a="1" />`` into ``<Note a="1">``."""
    return _SELF_CLOSING_END.sub(">", text, count=1)
