#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/serializer.py
"""Rule-driven conversion between mdast and Slate trees.

A :class:`MarkdownSerializer` walks a tree in one direction and, for each
node, asks its :class:`RuleTable` for the first rule that accepts the node.
The rule's converter builds the output node and recurses into the node's
children through the :class:`ConversionContext` it is handed.

Directions
----------
``"deserialize"``
    mdast (``type``/``children``) to Slate (``object``/``nodes``); rules are
    selected with ``match_mdast`` and run ``from_mdast``.
``"serialize"``
    Slate to mdast; rules are selected with ``match`` and run ``to_mdast``.

Converters may return a single node, a list of nodes (spliced into the
parent in place) or None (nothing emitted). Input trees are never mutated.

Examples
--------
    >>> from mdxslate.rules import DEFAULT_RULES
    >>> serializer = MarkdownSerializer(DEFAULT_RULES)
    >>> value = serializer.deserialize({"type": "root", "children": []})
    >>> value["document"]["nodes"]
    []

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from mdxslate.constants import DIRECTION_DESERIALIZE, DIRECTION_SERIALIZE, ConversionDirection
from mdxslate.exceptions import ConversionError, InvalidOptionsError, UnknownNodeError
from mdxslate.options.serializer import SerializerOptions
from mdxslate.slate import get_document, make_value

logger = logging.getLogger(__name__)

Node = dict[str, Any]
ConvertResult = Union[Node, list[Node], None]
MatchFn = Callable[[Node, int, Optional[Node]], bool]
ConvertFn = Callable[[Node, int, Optional[Node], "ConversionContext"], ConvertResult]


@dataclass(frozen=True)
class Rule:
    """A node-type mapping between mdast and Slate.

    A rule may implement only one direction; a rule without the converter
    for a direction is never selected in that direction.

    Parameters
    ----------
    name : str
        Identifier used in diagnostics
    match : callable, optional
        ``(slate_node, index, parent) -> bool`` predicate for serialization
    match_mdast : callable, optional
        ``(mdast_node, index, parent) -> bool`` predicate for deserialization
    from_mdast : callable, optional
        ``(mdast_node, index, parent, context)`` converter to Slate
    to_mdast : callable, optional
        ``(slate_node, index, parent, context)`` converter to mdast

    """

    name: str
    match: Optional[MatchFn] = None
    match_mdast: Optional[MatchFn] = None
    from_mdast: Optional[ConvertFn] = None
    to_mdast: Optional[ConvertFn] = None

    def handles(self, direction: ConversionDirection) -> bool:
        """Return True if the rule has both predicate and converter for ``direction``."""
        if direction == DIRECTION_DESERIALIZE:
            return self.match_mdast is not None and self.from_mdast is not None
        return self.match is not None and self.to_mdast is not None

    def accepts(self, direction: ConversionDirection, node: Node, index: int, parent: Optional[Node]) -> bool:
        """Evaluate the direction's predicate for ``node``."""
        predicate = self.match_mdast if direction == DIRECTION_DESERIALIZE else self.match
        return predicate is not None and bool(predicate(node, index, parent))

    def converter(self, direction: ConversionDirection) -> ConvertFn:
        """Return the direction's converter.

        Raises
        ------
        ValueError
            If the rule does not convert in ``direction``.

        """
        converter = self.from_mdast if direction == DIRECTION_DESERIALIZE else self.to_mdast
        if converter is None:
            raise ValueError(f"Rule '{self.name}' has no {direction} converter")
        return converter


class RuleTable:
    """Immutable, ordered collection of rules.

    Lookup is first-match in declared order, so a specific rule (a paragraph
    inside a list item) must be declared before the general rule it
    overlaps (any paragraph).

    Parameters
    ----------
    rules : iterable of Rule
        Rules in precedence order

    """

    def __init__(self, rules: Iterable[Rule]):
        """Freeze the rule sequence."""
        self._rules: tuple[Rule, ...] = tuple(rules)

    def __iter__(self) -> Iterator[Rule]:
        """Iterate rules in precedence order."""
        return iter(self._rules)

    def __len__(self) -> int:
        """Return the number of rules."""
        return len(self._rules)

    @property
    def names(self) -> list[str]:
        """Rule names in precedence order."""
        return [rule.name for rule in self._rules]

    def rule_for(
        self, direction: ConversionDirection, node: Node, index: int = 0, parent: Optional[Node] = None
    ) -> Optional[Rule]:
        """Return the first rule converting ``node`` in ``direction``.

        Parameters
        ----------
        direction : {"deserialize", "serialize"}
            Conversion direction
        node : dict
            Node to convert
        index : int, default 0
            Position of ``node`` among its siblings
        parent : dict, optional
            Parent of ``node`` in the tree being converted

        Returns
        -------
        Rule or None
            The matching rule, or None if no rule accepts the node

        """
        for rule in self._rules:
            if rule.handles(direction) and rule.accepts(direction, node, index, parent):
                return rule
        return None


@dataclass(frozen=True)
class ConversionContext:
    """Helper handed to every converter.

    Attributes
    ----------
    direction : {"deserialize", "serialize"}
        Direction of the conversion in progress
    visit_children : callable
        ``visit_children(node)`` converts every child of ``node`` in the same
        direction and returns the flattened list of results

    """

    direction: ConversionDirection
    visit_children: Callable[[Node], list[Node]]


def _node_type(direction: ConversionDirection, node: Node) -> str:
    if direction == DIRECTION_DESERIALIZE:
        return str(node.get("type"))
    kind = node.get("object")
    node_type = node.get("type")
    return f"{kind}:{node_type}" if node_type else str(kind)


def _children_of(direction: ConversionDirection, node: Node) -> list[Node]:
    key = "children" if direction == DIRECTION_DESERIALIZE else "nodes"
    return list(node.get(key) or ())


class MarkdownSerializer:
    """Convert between mdast and Slate trees with an ordered rule table.

    The serializer holds no per-conversion state, so one instance may be
    shared across threads.

    Parameters
    ----------
    rules : iterable of Rule or RuleTable
        Rules in precedence order
    options : SerializerOptions or None, default = None
        Conversion options (unknown node policy)

    Examples
    --------
        >>> from mdxslate.rules import DEFAULT_RULES
        >>> serializer = MarkdownSerializer(DEFAULT_RULES)
        >>> mdast = serializer.serialize(serializer.deserialize(tree))

    """

    def __init__(self, rules: Union[Iterable[Rule], RuleTable], options: SerializerOptions | None = None):
        """Initialize the serializer with its rules and options."""
        if options is not None and not isinstance(options, SerializerOptions):
            raise InvalidOptionsError(
                component_name="MarkdownSerializer",
                expected_type=SerializerOptions,
                received_type=type(options),
            )
        self.rules: RuleTable = rules if isinstance(rules, RuleTable) else RuleTable(rules)
        self.options: SerializerOptions = options or SerializerOptions()

    def deserialize(self, root: Node) -> Node:
        """Convert an mdast root into a Slate value.

        Parameters
        ----------
        root : dict
            mdast ``root`` node

        Returns
        -------
        dict
            Slate value ``{"object": "value", "document": {...}}``

        Raises
        ------
        ConversionError
            If a rule fails, or no rule matches a node under the ``"raise"`` policy

        """
        return make_value(self.visit_children(DIRECTION_DESERIALIZE, root))

    def serialize(self, value: Node) -> Node:
        """Convert a Slate value (or bare document) into an mdast root.

        Parameters
        ----------
        value : dict
            Slate value or document

        Returns
        -------
        dict
            mdast ``root`` node

        Raises
        ------
        ConversionError
            If a rule fails, or no rule matches a node under the ``"raise"`` policy

        """
        document = get_document(value)
        return {"type": "root", "children": self.visit_children(DIRECTION_SERIALIZE, document)}

    def visit_children(self, direction: ConversionDirection, node: Node) -> list[Node]:
        """Convert every child of ``node`` and flatten the results.

        Parameters
        ----------
        direction : {"deserialize", "serialize"}
            Conversion direction
        node : dict
            Parent node whose children are converted

        Returns
        -------
        list of dict
            Converted children; list results are spliced in, None results dropped

        """
        results: list[Node] = []
        for index, child in enumerate(_children_of(direction, node)):
            converted = self.convert(direction, child, index, node)
            if converted is None:
                continue
            if isinstance(converted, list):
                results.extend(converted)
            else:
                results.append(converted)
        return results

    def convert(
        self, direction: ConversionDirection, node: Node, index: int = 0, parent: Optional[Node] = None
    ) -> ConvertResult:
        """Convert one node with the first matching rule.

        Parameters
        ----------
        direction : {"deserialize", "serialize"}
            Conversion direction
        node : dict
            Node to convert
        index : int, default 0
            Position of ``node`` among its siblings
        parent : dict, optional
            Parent of ``node``

        Returns
        -------
        dict, list of dict, or None
            The converted node(s); None when the node is dropped

        Raises
        ------
        UnknownNodeError
            If no rule matches and the policy is ``"raise"``
        ConversionError
            If the selected rule's predicate or converter raises

        """
        node_type = _node_type(direction, node)
        try:
            rule = self.rules.rule_for(direction, node, index, parent)
        except Exception as exc:
            raise ConversionError(
                f"Rule lookup failed for '{node_type}' ({direction}): {exc}",
                node_type=node_type,
                direction=direction,
                original_error=exc,
            ) from exc

        if rule is None:
            if self.options.unknown_node_policy == "raise":
                raise UnknownNodeError(node_type, direction)
            logger.warning("Dropping node of type '%s': no rule converts it (%s)", node_type, direction)
            return None

        context = ConversionContext(direction=direction, visit_children=partial(self.visit_children, direction))
        try:
            return rule.converter(direction)(node, index, parent, context)
        except ConversionError:
            raise
        except Exception as exc:
            raise ConversionError(
                f"Rule '{rule.name}' failed on '{node_type}' ({direction}): {exc}",
                node_type=node_type,
                direction=direction,
                original_error=exc,
            ) from exc
