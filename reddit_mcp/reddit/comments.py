"""
Comment tree flattening.

Reddit returns a thread as nested Listings: each t1 (comment) node carries
its own ``replies`` Listing, or an empty string when it has none, and
"more" nodes stand in for comments that were not loaded. This module
parses that shape into typed nodes and flattens it depth-first, parent
first, so every comment is immediately followed by its whole subtree.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

from reddit_mcp.models.entities import Comment

from .exceptions import MalformedResponseError
from .normalizer import to_comment

COMMENT_KIND = "t1"


@dataclass(frozen=True)
class CommentNode:
    """A t1 node and its parsed replies."""

    data: Dict[str, Any]
    children: List["Node"] = field(default_factory=list)


@dataclass(frozen=True)
class PlaceholderNode:
    """Any non-comment node, typically a "more" stub."""

    kind: str
    data: Any = None


Node = Union[CommentNode, PlaceholderNode]


def _reply_children(data: Dict[str, Any]) -> List[Any]:
    # "replies" is "" (or missing) for leaf comments
    replies = data.get("replies")
    if not isinstance(replies, dict):
        return []
    listing = replies.get("data") or {}
    return listing.get("children") or []


def _parse_shallow(raw: Any) -> Node:
    if not isinstance(raw, dict) or "kind" not in raw:
        raise MalformedResponseError(f"Expected a Reddit thing, got {type(raw).__name__}")

    kind = raw["kind"]
    data = raw.get("data")
    if kind == COMMENT_KIND and isinstance(data, dict) and data:
        return CommentNode(data=data)
    return PlaceholderNode(kind=kind, data=data)


def parse_nodes(raw_children: Sequence[Any]) -> List[Node]:
    """
    Parse the ``children`` array of a comment Listing.

    Uses an explicit stack, so reply chains of any depth are parsed
    without recursion.

    Raises:
        MalformedResponseError: If any element is not a Reddit thing
    """
    parsed: List[Node] = []
    # (raw thing, list its node is appended to)
    stack = [(raw, parsed) for raw in reversed(raw_children)]
    while stack:
        raw, siblings = stack.pop()
        node = _parse_shallow(raw)
        siblings.append(node)
        if isinstance(node, CommentNode):
            for child in reversed(_reply_children(node.data)):
                stack.append((child, node.children))
    return parsed


def parse_node(raw: Any) -> Node:
    """
    Parse one raw thing into a CommentNode or PlaceholderNode.

    Raises:
        MalformedResponseError: If the value is not a Reddit thing
    """
    return parse_nodes([raw])[0]


def _walk(nodes: Sequence[Node]) -> List[Comment]:
    flat: List[Comment] = []
    stack: List[Node] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        if isinstance(node, CommentNode):
            flat.append(to_comment(node.data))
            stack.extend(reversed(node.children))
    return flat


def flatten(children: Sequence[Any]) -> List[Comment]:
    """
    Flatten a comment tree into a pre-order list.

    Args:
        children: Raw ``children`` array of the thread's comment Listing

    Returns:
        Every comment of the thread, each parent followed by its replies,
        siblings in their original order. "more" placeholders are skipped.

    Example:
        >>> # A -> [B -> [D], C]
        >>> [c.id for c in flatten(children)]
        ['A', 'B', 'D', 'C']
    """
    return _walk(parse_nodes(children))
