"""
Comma-separated list editing on tree-sitter nodes.

Object literals, array literals and named-import braces share one shape: an
opening token, members separated by commas, an optional trailing comma and a
closing token. These helpers compute the splices that add or remove a member
while keeping the layout the author chose.
"""

from typing import List, Optional

from tree_sitter import Node

from flatmorph.parser import SourceDocument
from flatmorph.parser.config import TRIVIA_NODE_TYPES


def list_members(node: Node) -> List[Node]:
    """Named children that are not comments."""
    return [child for child in node.named_children if child.type not in TRIVIA_NODE_TYPES]


def _comma_after(node: Node) -> Optional[Node]:
    sibling = node.next_sibling
    while sibling is not None and sibling.type in TRIVIA_NODE_TYPES:
        sibling = sibling.next_sibling
    if sibling is not None and sibling.type == ",":
        return sibling
    return None


def _comma_before(node: Node) -> Optional[Node]:
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in TRIVIA_NODE_TYPES:
        sibling = sibling.prev_sibling
    if sibling is not None and sibling.type == ",":
        return sibling
    return None


def _indent_continuation(text: str, indent: str) -> str:
    lines = text.split("\n")
    return lines[0] + "".join("\n" + (indent + line if line else line) for line in lines[1:])


def _same_node(a: Node, b: Node) -> bool:
    return a.start_byte == b.start_byte and a.end_byte == b.end_byte


def _own_line(document: SourceDocument, container: Node, member: Node) -> bool:
    return member.start_point[0] != container.start_point[0] and document.blank_before(member.start_byte)


def spread_text(document: SourceDocument, spread: Node) -> str:
    """Expression text of a spread member, without the dots."""
    operands = list_members(spread)
    if not operands:
        return ""
    return document.node_text(operands[0])


def find_property(document: SourceDocument, obj: Node, name: str) -> Optional[Node]:
    """
    Find a ``key: value`` pair in an object literal.

    The raw name is tried first, then its single- and double-quoted forms.
    """
    pairs = [member for member in list_members(obj) if member.type == "pair"]
    for candidate in (name, f"'{name}'", f'"{name}"'):
        for pair in pairs:
            key = pair.child_by_field_name("key")
            if key is not None and document.node_text(key) == candidate:
                return pair
    return None


def find_spread(document: SourceDocument, obj: Node, expression: str) -> Optional[Node]:
    """First spread member whose expression text equals expression."""
    for member in list_members(obj):
        if member.type == "spread_element" and spread_text(document, member) == expression:
            return member
    return None


def append_member(document: SourceDocument, container: Node, text: str, indent_unit: str = "  ") -> None:
    """
    Append a member to a bracketed, comma-separated list.

    Args:
        document: Document owning the container
        container: object / array / named_imports node
        text: Member source; continuation lines are re-indented
        indent_unit: Indent added when the container has no members to copy from
    """
    opener, closer = container.children[0], container.children[-1]
    members = list_members(container)

    if not members:
        comments = [child for child in container.named_children if child.type in TRIVIA_NODE_TYPES]
        if comments:
            last_comment = comments[-1]
            if _own_line(document, container, last_comment):
                indent = document.line_indent(last_comment.start_byte)
            else:
                indent = document.line_indent(container.start_byte) + indent_unit
            body = _indent_continuation(text, indent)
            document.apply_edits([(last_comment.end_byte, last_comment.end_byte, "\n" + indent + body)])
            return

        inner = document.source[opener.end_byte:closer.start_byte]
        if b"\n" in inner or "\n" in text:
            base = document.line_indent(container.start_byte)
            indent = base + indent_unit
            replacement = "\n" + indent + _indent_continuation(text, indent) + "\n" + base
        elif opener.type == "[":
            replacement = text
        else:
            replacement = f" {text} "
        document.apply_edits([(opener.end_byte, closer.start_byte, replacement)])
        return

    last = members[-1]
    trailing = _comma_after(last)
    anchor = trailing or last
    anchor_end = anchor.end_byte
    following = anchor.next_sibling
    if (
        following is not None
        and following.type in TRIVIA_NODE_TYPES
        and following.start_point[0] == anchor.end_point[0]
    ):
        anchor_end = following.end_byte

    edits = []
    if _own_line(document, container, last):
        indent = document.line_indent(last.start_byte)
        body = _indent_continuation(text, indent)
        if trailing is None:
            edits.append((last.end_byte, last.end_byte, ","))
        edits.append((anchor_end, anchor_end, "\n" + indent + body + ("," if trailing is not None else "")))
    else:
        body = _indent_continuation(text, document.line_indent(last.start_byte))
        if trailing is not None:
            edits.append((trailing.end_byte, trailing.end_byte, " " + body + ","))
        else:
            edits.append((last.end_byte, last.end_byte, ", " + body))

    document.apply_edits(edits)


def remove_member(document: SourceDocument, container: Node, member: Node) -> None:
    """Remove a member together with its separating comma."""
    opener, closer = container.children[0], container.children[-1]
    members = list_members(container)
    index = next(i for i, candidate in enumerate(members) if _same_node(candidate, member))
    own_line = _own_line(document, container, member)
    size = len(document.source)

    after = _comma_after(member)
    if after is not None:
        start, end = member.start_byte, document.skip_spaces(after.end_byte)
        if own_line and document.blank_after(after.end_byte):
            start = document.line_start(member.start_byte)
            end = min(document.line_end(after.end_byte) + 1, size)
        document.apply_edits([(start, end, "")])
        return

    before = _comma_before(member) if index > 0 else None
    if before is not None:
        if own_line and document.blank_after(member.end_byte):
            line_start = document.line_start(member.start_byte)
            line_end = min(document.line_end(member.end_byte) + 1, size)
            document.apply_edits([(before.start_byte, before.end_byte, ""), (line_start, line_end, "")])
        else:
            document.apply_edits([(before.start_byte, member.end_byte, "")])
        return

    # Only member left in the list
    has_comments = any(child.type in TRIVIA_NODE_TYPES for child in container.named_children)
    if own_line and document.blank_after(member.end_byte):
        start = document.line_start(member.start_byte)
        end = min(document.line_end(member.end_byte) + 1, size)
        document.apply_edits([(start, end, "")])
    elif not has_comments and len(members) == 1:
        document.apply_edits([(opener.end_byte, closer.start_byte, "")])
    else:
        document.apply_edits([(member.start_byte, member.end_byte, "")])


def remove_statement(document: SourceDocument, statement: Node) -> None:
    """Delete a top-level statement, including its line when it stands alone."""
    start, end = statement.start_byte, statement.end_byte
    if document.blank_before(start) and document.blank_after(end):
        start = document.line_start(start)
        end = min(document.line_end(end) + 1, len(document.source))
    document.apply_edits([(start, end, "")])
