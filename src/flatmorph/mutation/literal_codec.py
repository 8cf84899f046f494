"""
Literal value codec: JS/TS literal syntax <-> Python values.

Decoding is total. Strings, numbers, keywords, array and object literals and
the ``await import('x')`` shape become structured values; anything else is
kept as ``Opaque`` source text and re-emitted verbatim.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from tree_sitter import Node

from flatmorph.parser import SourceDocument
from .syntax import list_members, spread_text

# Keys starting with this marker stand for a spread member ("...expr")
SPREAD_PREFIX = "..."

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class _Undefined:
    """Singleton for the JavaScript ``undefined`` value."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class DynamicImport:
    """An ``await import('<module_path>')`` expression."""
    module_path: str


@dataclass(frozen=True)
class Opaque:
    """Source text of an expression the codec does not interpret."""
    text: str

    def __str__(self) -> str:
        return self.text


PropertyValue = Union[str, int, float, bool, None, _Undefined, list, dict, DynamicImport, Opaque]


def is_spread_key(key: str) -> bool:
    return key.startswith(SPREAD_PREFIX)


def spread_key(expression: str) -> str:
    return f"{SPREAD_PREFIX}{expression}"


def spread_expression(key: str) -> str:
    return key[len(SPREAD_PREFIX):]


# ----------------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------------

def _unescape_char(match: "re.Match") -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    if seq in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        # Line continuation
        return ""
    return _SIMPLE_ESCAPES.get(seq, seq)


def string_value(document: SourceDocument, node: Optional[Node]) -> Optional[str]:
    """Value of a string literal node, or None for any other node."""
    if node is None or node.type != "string":
        return None
    raw = document.node_text(node)[1:-1]
    return _ESCAPE_RE.sub(_unescape_char, raw)


def _number_value(text: str) -> Union[int, float]:
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        return int(cleaned[:-1], 0)
    lowered = cleaned.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        return int(cleaned, 0)
    try:
        return int(cleaned)
    except ValueError:
        return float(cleaned)


def decode_key(document: SourceDocument, key: Node) -> str:
    """Property name with surrounding quotes removed."""
    value = string_value(document, key)
    if value is not None:
        return value
    return document.node_text(key)


def _dynamic_import_path(document: SourceDocument, node: Node) -> Optional[str]:
    operands = list_members(node)
    if not operands or operands[0].type != "call_expression":
        return None
    call = operands[0]
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type != "import" and not (
        callee.type == "identifier" and document.node_text(callee) == "import"
    ):
        return None
    arguments = call.child_by_field_name("arguments")
    args = list_members(arguments) if arguments is not None else []
    if len(args) != 1:
        return None
    return string_value(document, args[0])


def decode(document: SourceDocument, node: Optional[Node], spread_value: Any = UNDEFINED) -> PropertyValue:
    """
    Convert an expression node into a Python value.

    Args:
        document: Document the node belongs to
        node: Expression node (None decodes to UNDEFINED)
        spread_value: Value stored under spread-marker keys of nested objects

    Returns:
        Structured value, or Opaque text for unsupported expressions
    """
    if node is None:
        return UNDEFINED

    kind = node.type
    if kind == "string":
        return string_value(document, node)
    if kind == "number":
        return _number_value(document.node_text(node))
    if kind == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        if operator is not None and operator.type == "-" and argument is not None and argument.type == "number":
            return -_number_value(document.node_text(argument))
    if kind == "true":
        return True
    if kind == "false":
        return False
    if kind == "null":
        return None
    if kind == "undefined" or (kind == "identifier" and document.node_text(node) == "undefined"):
        return UNDEFINED
    if kind == "array":
        return [decode(document, element, spread_value) for element in list_members(node)]
    if kind == "object":
        return decode_object(document, node, spread_value)
    if kind == "await_expression":
        module_path = _dynamic_import_path(document, node)
        if module_path is not None:
            return DynamicImport(module_path)

    return Opaque(document.node_text(node))


def decode_object(document: SourceDocument, node: Node, spread_value: Any = UNDEFINED) -> Dict[str, PropertyValue]:
    """Decode an object literal; spread members become marker keys."""
    result: Dict[str, PropertyValue] = {}
    for member in list_members(node):
        if member.type == "pair":
            name = decode_key(document, member.child_by_field_name("key"))
            result[name] = decode(document, member.child_by_field_name("value"), spread_value)
        elif member.type == "spread_element":
            result[spread_key(spread_text(document, member))] = spread_value
        elif member.type == "shorthand_property_identifier":
            name = document.node_text(member)
            result[name] = Opaque(name)
    return result


# ----------------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------------

def quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def encode_key(name: str) -> str:
    """Bare identifier when legal, single-quoted string otherwise."""
    if _IDENTIFIER_RE.match(name):
        return name
    return quote(name)


def _encode_number(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def encode(value: Any) -> str:
    """
    Render a Python value as JS source text.

    Mapping keys are single-quoted; spread-marker keys render as bare spread
    syntax. Opaque values render their stored text unchanged.
    """
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, Opaque):
        return value.text
    if isinstance(value, DynamicImport):
        return f"await import({quote(value.module_path)})"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _encode_number(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(encode(item) for item in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        members = []
        for key, item in value.items():
            if is_spread_key(key):
                members.append(key)
            else:
                members.append(f"{quote(key)}: {encode(item)}")
        return "{ " + ", ".join(members) + " }"
    return quote(str(value))
