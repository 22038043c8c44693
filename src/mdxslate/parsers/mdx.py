#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/parsers/mdx.py
"""MDX text to mdast parser.

This module tokenizes Markdown with mistune and maps the token stream onto
mdast dictionaries (``{"type": ..., "children": [...]}``). Raw HTML and JSX,
whether block-level or inline, becomes ``jsx`` nodes holding the fragment
text.

Block-level JSX that wraps Markdown, such as::

    <Note kind="info">

    Some **Markdown** here.

    </Note>

arrives from the tokenizer as a lone opening tag, the blocks in between and
a lone closing tag. The parser regroups these into one ``jsx`` node whose
``children`` are ``[opening, ...blocks, closing]``. An opening tag without a
matching closing tag stays a flat ``jsx`` node. A top-level paragraph that
holds only a JSX fragment is treated as that fragment.

"""

from __future__ import annotations

import html
import logging
import re
from typing import Any, Optional

from mdxslate.constants import DEPS_MDX
from mdxslate.jsx import closing_tag_name, is_opening_tag, parse_tag
from mdxslate.utils.decorators import requires_dependencies
from mdxslate.utils.dependencies import Requirement

logger = logging.getLogger(__name__)

MdastNode = dict[str, Any]

MDX_REQUIREMENTS = tuple(Requirement(*spec) for spec in DEPS_MDX)

# CommonMark only decodes character references that end in a semicolon
_CHARACTER_REFERENCE = re.compile(r"&(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{0,31});")


def _decode_references(text: str) -> str:
    if "&" not in text:
        return text
    return _CHARACTER_REFERENCE.sub(lambda m: html.unescape(m.group(0)), text)


def _flatten_text(tokens: list[dict[str, Any]]) -> str:
    """Collect the plain text of inline tokens, descending into formatting and links."""
    parts = []
    for token in tokens:
        token_type = token.get("type")
        if token_type == "text":
            parts.append(_decode_references(token.get("raw", "")))
        elif token_type == "codespan":
            parts.append(token.get("raw", ""))
        elif token_type == "softbreak":
            parts.append("\n")
        elif token.get("children"):
            parts.append(_flatten_text(token["children"]))
    return "".join(parts)


class MdxParser:
    """Parse MDX text into an mdast tree.

    The parser is stateless; one instance may be reused across documents.

    Examples
    --------
        >>> root = MdxParser().parse("# Hello")
        >>> root["children"][0]["type"], root["children"][0]["depth"]
        ('heading', 1)

    """

    @requires_dependencies("mdx", MDX_REQUIREMENTS)
    def parse(self, text: str) -> MdastNode:
        """Parse MDX text into an mdast ``root`` node.

        Parameters
        ----------
        text : str
            MDX source

        Returns
        -------
        dict
            mdast root ``{"type": "root", "children": [...]}``

        """
        import mistune

        markdown = mistune.create_markdown(renderer=None)
        tokens, _state = markdown.parse(text)

        children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        return {"type": "root", "children": self._group_jsx(self._promote_jsx_paragraphs(children))}

    # ------------------------------------------------------------------
    # JSX grouping
    # ------------------------------------------------------------------

    def _promote_jsx_paragraphs(self, nodes: list[MdastNode]) -> list[MdastNode]:
        """Replace paragraphs holding nothing but one JSX fragment with that fragment.

        mistune only starts an HTML block for tags ending in a plain ``>``, so
        a self-closing component such as ``<Video id="1" />`` on its own line
        arrives as a paragraph wrapping inline HTML.
        """
        promoted: list[MdastNode] = []
        for node in nodes:
            if node.get("type") == "paragraph":
                significant = [
                    child
                    for child in node.get("children", [])
                    if not (child.get("type") == "text" and not child.get("value", "").strip())
                ]
                if len(significant) == 1 and significant[0].get("type") == "jsx":
                    promoted.append({"type": "jsx", "value": significant[0].get("value", "")})
                    continue
            promoted.append(node)
        return promoted

    def _group_jsx(self, nodes: list[MdastNode]) -> list[MdastNode]:
        """Fold opening tag, content and closing tag runs into jsx containers."""
        grouped: list[MdastNode] = []
        index = 0
        while index < len(nodes):
            node = nodes[index]
            if node.get("type") == "jsx" and is_opening_tag(node.get("value", "")):
                name = parse_tag(node["value"]).type
                close = self._find_closing(nodes, index, name)
                if close is not None:
                    inner = self._group_jsx(nodes[index + 1 : close])
                    grouped.append({"type": "jsx", "children": [node, *inner, nodes[close]]})
                    index = close + 1
                    continue
                logger.debug("No closing tag for <%s>; keeping it as a standalone fragment", name)
            grouped.append(node)
            index += 1
        return grouped

    def _find_closing(self, nodes: list[MdastNode], start: int, name: Optional[str]) -> Optional[int]:
        depth = 0
        for index in range(start + 1, len(nodes)):
            node = nodes[index]
            if node.get("type") != "jsx":
                continue
            value = node.get("value", "")
            if is_opening_tag(value) and parse_tag(value).type == name:
                depth += 1
            elif closing_tag_name(value) == name:
                if depth == 0:
                    return index
                depth -= 1
        return None

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[MdastNode]:
        nodes: list[MdastNode] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Optional[MdastNode]:
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            # block_text is what mistune emits for tight list items
            return {"type": "paragraph", "children": self._process_inline_tokens(token.get("children", []))}
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return {"type": "blockquote", "children": self._process_tokens(token.get("children", []))}
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "list_item":
            return {"type": "listItem", "children": self._process_tokens(token.get("children", []))}
        elif token_type == "thematic_break":
            return {"type": "thematicBreak"}
        elif token_type == "block_html":
            return {"type": "jsx", "value": token.get("raw", "").strip()}
        elif token_type == "blank_line":
            return None

        logger.debug("Skipping unsupported block token: %s", token_type)
        return None

    def _process_heading(self, token: dict[str, Any]) -> MdastNode:
        attrs = token.get("attrs") or {}
        depth = attrs.get("level", 1)
        if not isinstance(depth, int) or depth < 1 or depth > 6:
            depth = 1
        return {"type": "heading", "depth": depth, "children": self._process_inline_tokens(token.get("children", []))}

    def _process_code_block(self, token: dict[str, Any]) -> MdastNode:
        """Process a fenced or indented code block.

        The info string splits into ``lang`` (first word) and ``meta`` (the
        rest); the tokenizer's trailing newline is not part of the value.
        """
        value = token.get("raw", "")
        if value.endswith("\n"):
            value = value[:-1]

        node: MdastNode = {"type": "code", "value": value}
        info = ((token.get("attrs") or {}).get("info") or "").strip()
        if info:
            parts = info.split(maxsplit=1)
            node["lang"] = parts[0]
            if len(parts) > 1:
                node["meta"] = parts[1]
        return node

    def _process_list(self, token: dict[str, Any]) -> MdastNode:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        tight = token.get("tight", attrs.get("tight", True))

        node: MdastNode = {"type": "list", "ordered": ordered, "spread": not tight}
        if ordered:
            node["start"] = attrs.get("start", 1)
        node["children"] = [
            self._process_token(child) for child in token.get("children", []) if child.get("type") == "list_item"
        ]
        return node

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[MdastNode]:
        """Process inline tokens, merging runs of plain text.

        Soft line breaks stay separate ``"\\n"`` text nodes.
        """
        nodes: list[MdastNode] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            previous = nodes[-1] if nodes else None
            if (
                token.get("type") == "text"
                and previous is not None
                and previous["type"] == "text"
                and previous["value"] != "\n"
            ):
                previous["value"] += node["value"]
            else:
                nodes.append(node)
        return nodes

    def _handle_text_token(self, token: dict[str, Any]) -> MdastNode:
        return {"type": "text", "value": _decode_references(token.get("raw", ""))}

    def _handle_strong_token(self, token: dict[str, Any]) -> MdastNode:
        return {"type": "strong", "children": self._process_inline_tokens(token.get("children", []))}

    def _handle_emphasis_token(self, token: dict[str, Any]) -> MdastNode:
        return {"type": "emphasis", "children": self._process_inline_tokens(token.get("children", []))}

    def _handle_codespan_token(self, token: dict[str, Any]) -> MdastNode:
        return {"type": "inlineCode", "value": token.get("raw", "")}

    def _handle_link_token(self, token: dict[str, Any]) -> MdastNode:
        attrs = token.get("attrs") or {}
        return {
            "type": "link",
            "url": attrs.get("url", ""),
            "title": attrs.get("title"),
            "children": self._process_inline_tokens(token.get("children", [])),
        }

    def _handle_image_token(self, token: dict[str, Any]) -> MdastNode:
        """Handle image token; alt text is carried in the token's children."""
        attrs = token.get("attrs") or {}
        alt = _flatten_text(token.get("children", []))
        return {"type": "image", "url": attrs.get("url", ""), "alt": alt, "title": attrs.get("title")}

    def _handle_inline_html_token(self, token: dict[str, Any]) -> MdastNode:
        return {"type": "jsx", "value": token.get("raw", "").strip()}

    def _process_inline_token(self, token: dict[str, Any]) -> Optional[MdastNode]:
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": lambda _token: {"type": "break"},
            "softbreak": lambda _token: {"type": "text", "value": "\n"},
            "inline_html": self._handle_inline_html_token,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)
        logger.debug("Skipping unsupported inline token: %s", token_type)
        return None


def parse_mdx(text: str) -> MdastNode:
    """Parse MDX text into an mdast root.

    Parameters
    ----------
    text : str
        MDX source

    Returns
    -------
    dict
        mdast ``root`` node

    """
    return MdxParser().parse(text)
