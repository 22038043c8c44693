#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/renderers/mdx.py
"""MDX rendering from mdast.

This module provides the MdxRenderer class which prints mdast dictionaries
as Markdown text with embedded JSX. Output is CommonMark that parses back to
the same tree: text is escaped wherever it could start markup, code fences
and inline code delimiters grow past any backtick run in their content, and
adjacent lists of the same kind switch marker so they stay separate.

JSX nodes are printed verbatim. A ``jsx`` container (a node with
``children``) prints each child as its own block, so the opening and closing
tags sit on their own lines surrounded by blank lines.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional

from mdxslate.constants import DEFAULT_CODE_FENCE_MIN, INDENTED_CODE_PREFIX, THEMATIC_BREAK
from mdxslate.exceptions import InvalidOptionsError, RenderingError
from mdxslate.options.mdx import MdxRendererOptions

logger = logging.getLogger(__name__)

MdastNode = dict[str, Any]

INLINE_TYPES = frozenset({"text", "strong", "emphasis", "inlineCode", "link", "image", "break"})

_ALWAYS_ESCAPE = frozenset("\\`*_[]<")
_CHARACTER_REFERENCE = re.compile(r"&(?=#[0-9]{1,7};|#[xX][0-9a-fA-F]{1,6};|[A-Za-z][A-Za-z0-9]{0,31};)")
_LINE_START_MARKER = re.compile(r"^( {0,3})([#>+\-=~])")
_ORDERED_MARKER = re.compile(r"^( {0,3}\d{1,9})([.)])")
_BACKTICK_RUN = re.compile(r"`+")
_ALTERNATE_BULLETS = {"*": "-", "-": "*", "+": "*"}


def _longest_backtick_run(text: str) -> int:
    return max((len(run) for run in _BACKTICK_RUN.findall(text)), default=0)


def _indent_lines(text: str, first_prefix: str, rest_prefix: str) -> str:
    """Prefix the first line with ``first_prefix`` and later non-blank lines with ``rest_prefix``."""
    lines = text.split("\n")
    result = [first_prefix + lines[0]]
    for line in lines[1:]:
        result.append(rest_prefix + line if line else "")
    return "\n".join(result)


class MdxRenderer:
    """Render mdast nodes to MDX text.

    Parameters
    ----------
    options : MdxRendererOptions or None, default = None
        Output formatting options (bullet marker, fenced code)

    Examples
    --------
        >>> renderer = MdxRenderer()
        >>> renderer.render_to_string({
        ...     "type": "root",
        ...     "children": [{"type": "heading", "depth": 1, "children": [{"type": "text", "value": "Title"}]}],
        ... })
        '# Title\\n'

    """

    def __init__(self, options: MdxRendererOptions | None = None):
        """Initialize the renderer with options."""
        if options is not None and not isinstance(options, MdxRendererOptions):
            raise InvalidOptionsError(
                component_name="mdx",
                expected_type=MdxRendererOptions,
                received_type=type(options),
            )
        self.options: MdxRendererOptions = options or MdxRendererOptions()

        self._block_visitors: dict[str, Callable[..., str]] = {
            "heading": self.visit_heading,
            "paragraph": self.visit_paragraph,
            "code": self.visit_code_block,
            "blockquote": self.visit_block_quote,
            "list": self.visit_list,
            "thematicBreak": self.visit_thematic_break,
            "jsx": self.visit_jsx_block,
        }
        self._inline_visitors: dict[str, Callable[..., str]] = {
            "text": self.visit_text,
            "strong": self.visit_strong,
            "emphasis": self.visit_emphasis,
            "inlineCode": self.visit_inline_code,
            "link": self.visit_link,
            "image": self.visit_image,
            "break": self.visit_break,
            "jsx": self.visit_jsx_inline,
        }

    def render_to_string(self, root: MdastNode) -> str:
        """Render an mdast root to MDX text.

        Parameters
        ----------
        root : dict
            mdast ``root`` node

        Returns
        -------
        str
            MDX text ending in a single newline, or an empty string for an
            empty document

        Raises
        ------
        RenderingError
            If the tree contains a node type the renderer does not support

        """
        if root.get("type") != "root":
            raise RenderingError(f"Expected an mdast root node, got '{root.get('type')}'", rendering_stage="document")

        text = self._render_blocks(root.get("children") or [])
        text = text.strip("\n")
        return f"{text}\n" if text else ""

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _render_blocks(self, nodes: list[MdastNode], separator: str = "\n\n") -> str:
        """Render sibling blocks; runs of bare inline nodes are printed as one paragraph."""
        rendered: list[str] = []
        previous: Optional[MdastNode] = None
        alternate = False
        inline_run: list[MdastNode] = []

        def flush_inline_run() -> None:
            if inline_run:
                rendered.append(self._render_inlines(list(inline_run)))
                inline_run.clear()

        for node in nodes:
            node_type = node.get("type")
            if node_type in INLINE_TYPES:
                inline_run.append(node)
                previous = node
                continue
            flush_inline_run()
            if node_type == "list":
                # Flip the marker whenever this list would merge into the one before it
                alternate = self._continues_list(previous, node) and not alternate
                output = self.visit_list(node, alternate=alternate)
            else:
                output = self._render_block(node)
            rendered.append(output)
            previous = node
        flush_inline_run()

        return separator.join(block for block in rendered if block)

    @staticmethod
    def _continues_list(previous: Optional[MdastNode], node: MdastNode) -> bool:
        return (
            previous is not None
            and previous.get("type") == "list"
            and bool(previous.get("ordered")) == bool(node.get("ordered"))
        )

    def _render_block(self, node: MdastNode) -> str:
        node_type = node.get("type", "")
        visitor = self._block_visitors.get(node_type)
        if visitor is None:
            raise RenderingError(f"Cannot render mdast node of type '{node_type}' as a block", rendering_stage="block")
        return visitor(node)

    def visit_heading(self, node: MdastNode) -> str:
        """Render a heading, ATX style unless its content spans lines."""
        depth = node.get("depth", 1)
        content = self._render_inlines(node.get("children") or [])
        if "\n" in content:
            if depth <= 2:
                underline = "=" if depth == 1 else "-"
                return f"{content}\n{underline * 3}"
            logger.debug("Joining multi-line content of a level %d heading", depth)
            content = content.replace("\n", " ")
        if content.endswith("#") and not content.endswith("\\#"):
            # Otherwise read back as an ATX closing sequence
            content = content[:-1] + "\\#"
        return f"{'#' * depth} {content}" if content else "#" * depth

    def visit_paragraph(self, node: MdastNode) -> str:
        return self._render_inlines(node.get("children") or [])

    def visit_code_block(self, node: MdastNode) -> str:
        """Render a code block.

        Code is fenced unless fences are disabled and the block has no
        language. The fence is one backtick longer than the longest run of
        backticks in the code.
        """
        value = node.get("value") or ""
        lang = node.get("lang") or ""

        if not self.options.fences and not lang and value.strip():
            return "\n".join(INDENTED_CODE_PREFIX + line if line else "" for line in value.split("\n"))

        fence = "`" * max(DEFAULT_CODE_FENCE_MIN, _longest_backtick_run(value) + 1)
        info = lang
        if lang and node.get("meta"):
            info = f"{lang} {node['meta']}"
        body = f"{value}\n" if value else ""
        return f"{fence}{info}\n{body}{fence}"

    def visit_block_quote(self, node: MdastNode) -> str:
        content = self._render_blocks(node.get("children") or [])
        return "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))

    def visit_list(self, node: MdastNode, alternate: bool = False) -> str:
        """Render a list.

        Parameters
        ----------
        node : dict
            mdast ``list`` node
        alternate : bool, default False
            Use the alternate bullet (or ``)`` delimiter) so the list is not
            merged into an identical list directly before it

        """
        ordered = bool(node.get("ordered"))
        spread = bool(node.get("spread"))
        start = node.get("start")
        if not isinstance(start, int):
            start = 1

        bullet = self.options.bullet
        if alternate:
            bullet = _ALTERNATE_BULLETS[bullet]
        delimiter = ")" if alternate else "."

        items: list[str] = []
        for index, item in enumerate(node.get("children") or []):
            marker = f"{start + index}{delimiter} " if ordered else f"{bullet} "
            items.append(self.visit_list_item(item, marker, spread))

        return ("\n\n" if spread else "\n").join(items)

    def visit_list_item(self, node: MdastNode, marker: str, spread: bool) -> str:
        """Render a list item; content after the first line is indented by the marker width."""
        if node.get("type") != "listItem":
            raise RenderingError(
                f"List children must be listItem nodes, got '{node.get('type')}'", rendering_stage="list"
            )
        content = self._render_blocks(node.get("children") or [], separator="\n\n" if spread else "\n")
        if not content:
            return marker.rstrip()
        return _indent_lines(content, marker, " " * len(marker))

    def visit_thematic_break(self, node: MdastNode) -> str:
        return THEMATIC_BREAK

    def visit_jsx_block(self, node: MdastNode) -> str:
        children = node.get("children")
        if children:
            return self._render_blocks(children)
        return node.get("value") or ""

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _render_inlines(self, nodes: list[MdastNode], at_line_start: bool = True, in_strong: bool = False) -> str:
        """Render inline siblings, tracking whether output is at the start of a line.

        Emphasis at either edge of a strong node is delimited with ``_`` so
        ``***`` never appears and the nesting reads back unchanged.
        """
        parts: list[str] = []
        last = len(nodes) - 1
        for index, node in enumerate(nodes):
            node_type = node.get("type", "")
            visitor = self._inline_visitors.get(node_type)
            if visitor is None:
                raise RenderingError(
                    f"Cannot render mdast node of type '{node_type}' inline", rendering_stage="inline"
                )
            if node_type == "text":
                output = self.visit_text(node, at_line_start)
                following = nodes[index + 1] if index < last else None
                if output.endswith("!") and following is not None and following.get("type") == "link":
                    # "![" opens an image
                    output = output[:-1] + "\\!"
            elif node_type == "emphasis" and in_strong and index in (0, last):
                output = self.visit_emphasis(node, delimiter="_")
            else:
                output = visitor(node)
            parts.append(output)
            if output:
                at_line_start = output.endswith("\n")
        return "".join(parts)

    def _escape_text(self, text: str, at_line_start: bool) -> str:
        """Escape text so it cannot be read back as Markdown syntax.

        Backslashes, backticks, emphasis markers, brackets and ``<`` are
        always escaped. Characters that start a block (``#``, ``>``, list
        markers, setext underlines, code fences) are escaped only at the
        start of a line, as is the delimiter of an ordered list marker.
        ``&`` is escaped only where it would begin a character reference.
        """
        lines = text.split("\n")
        escaped_lines = []
        for index, line in enumerate(lines):
            escaped = "".join(f"\\{char}" if char in _ALWAYS_ESCAPE else char for char in line)
            escaped = _CHARACTER_REFERENCE.sub(r"\\&", escaped)
            if index > 0 or at_line_start:
                escaped = _LINE_START_MARKER.sub(r"\1\\\2", escaped, count=1)
                escaped = _ORDERED_MARKER.sub(r"\1\\\2", escaped, count=1)
            escaped_lines.append(escaped)
        return "\n".join(escaped_lines)

    def visit_text(self, node: MdastNode, at_line_start: bool = False) -> str:
        return self._escape_text(node.get("value") or "", at_line_start)

    def visit_strong(self, node: MdastNode) -> str:
        return f"**{self._render_inlines(node.get('children') or [], at_line_start=False, in_strong=True)}**"

    def visit_emphasis(self, node: MdastNode, delimiter: str = "*") -> str:
        content = self._render_inlines(node.get("children") or [], at_line_start=False)
        return f"{delimiter}{content}{delimiter}"

    def visit_inline_code(self, node: MdastNode) -> str:
        """Render inline code with a backtick run longer than any it contains."""
        value = (node.get("value") or "").replace("\n", " ")
        fence = "`" * (_longest_backtick_run(value) + 1)
        if value.startswith("`") or value.endswith("`") or (
            value.startswith(" ") and value.endswith(" ") and value.strip()
        ):
            value = f" {value} "
        return f"{fence}{value}{fence}"

    def _format_destination(self, url: str, title: Optional[str]) -> str:
        if not url or re.search(r"[\s()<>]", url):
            destination = "<" + url.replace("<", "%3C").replace(">", "%3E") + ">" if url else ""
        else:
            destination = url
        if title:
            escaped_title = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'{destination} "{escaped_title}"'
        return destination

    def visit_link(self, node: MdastNode) -> str:
        content = self._render_inlines(node.get("children") or [], at_line_start=False)
        return f"[{content}]({self._format_destination(node.get('url') or '', node.get('title'))})"

    def visit_image(self, node: MdastNode) -> str:
        alt = self._escape_text(node.get("alt") or "", at_line_start=False)
        return f"![{alt}]({self._format_destination(node.get('url') or '', node.get('title'))})"

    def visit_break(self, node: MdastNode) -> str:
        return "\\\n"

    def visit_jsx_inline(self, node: MdastNode) -> str:
        return node.get("value") or ""


def stringify_mdx(root: MdastNode, options: MdxRendererOptions | None = None) -> str:
    """Render an mdast root to MDX text.

    Parameters
    ----------
    root : dict
        mdast ``root`` node
    options : MdxRendererOptions or None, default = None
        Output formatting options

    Returns
    -------
    str
        MDX text

    """
    return MdxRenderer(options).render_to_string(root)
