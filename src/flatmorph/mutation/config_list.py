"""
ConfigList: the exported array of an ESLint flat config as editable entries.

Entries are the object literals of ``export default [...]``; other elements
(spreads of shared configs, identifiers, calls) stay in place but are never
reported or edited. An entry is identified by its ``files`` patterns compared
as a set, so repeated upserts for the same files land in the same entry.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from tree_sitter import Node

from flatmorph.exceptions import StructuralError
from flatmorph.logging_config import logger
from flatmorph.parser import SourceDocument
from .config import INDENT_DETECTION, LANGUAGE_OPTIONS_KEY, RULES_KEY, STRING_LIST_KEYS
from .literal_codec import (
    UNDEFINED,
    Opaque,
    decode,
    decode_key,
    decode_object,
    encode,
    encode_key,
    is_spread_key,
    quote,
    spread_expression,
    spread_key,
    string_value,
)
from .syntax import (
    append_member,
    find_property,
    find_spread,
    list_members,
    remove_member,
    spread_text,
)

ConfigEntry = Dict[str, Any]
KeyPath = Tuple[str, ...]


def patterns_equal(a: Sequence[str], b: Sequence[str]) -> bool:
    """Order-independent comparison of two file pattern lists."""
    if len(a) != len(b):
        return False
    return sorted(a) == sorted(b)


class ConfigList:
    """
    Ordered list of config entries backed by the live syntax tree.

    Node references are re-resolved from the entry index after every edit,
    since each edit re-parses the document.
    """

    def __init__(self, document: SourceDocument):
        """
        Args:
            document: Parsed flat config file

        Raises:
            StructuralError: If the file has no ``export default [...]``.
        """
        self.document = document
        self.array_node()

    # ------------------------------------------------------------------
    # Locating
    # ------------------------------------------------------------------

    def array_node(self) -> Node:
        """The array literal exported as default."""
        path = self.document.path or "<memory>"
        for statement in self.document.root_node.named_children:
            if statement.type != "export_statement":
                continue
            if not any(child.type == "default" for child in statement.children):
                continue
            value = statement.child_by_field_name("value")
            # `export default [...] satisfies Config[]`
            while value is not None and value.type in ("satisfies_expression", "as_expression"):
                operands = list_members(value)
                value = operands[0] if operands else None
            if value is None or value.type != "array":
                raise StructuralError(path, "Export default is not an array literal")
            return value
        raise StructuralError(path, "No export default found in ESLint config file")

    def entry_nodes(self) -> List[Node]:
        return [element for element in list_members(self.array_node()) if element.type == "object"]

    def entry_node(self, index: int) -> Node:
        return self.entry_nodes()[index]

    def entry_files(self, entry: Node) -> Optional[List[str]]:
        """String patterns of an entry's ``files`` array, or None."""
        pair = find_property(self.document, entry, "files")
        if pair is None:
            return None
        value = pair.child_by_field_name("value")
        if value is None or value.type != "array":
            return None
        return self._string_elements(value)

    def find_index(self, patterns: Sequence[str]) -> Optional[int]:
        """
        Index of the first entry whose files set-equal patterns.

        First match wins when several entries share a pattern set.
        """
        for index, entry in enumerate(self.entry_nodes()):
            files = self.entry_files(entry)
            if files is not None and patterns_equal(files, patterns):
                return index
        return None

    def find(self, patterns: Sequence[str]) -> Optional[ConfigEntry]:
        index = self.find_index(patterns)
        if index is None:
            return None
        return self.decode_entry(self.entry_node(index))

    def object_at(self, index: int, path: KeyPath = ()) -> Optional[Node]:
        """
        Follow object-literal properties from an entry.

        Returns None when a property along the path is missing or is not an
        object literal.
        """
        node = self.entry_node(index)
        for name in path:
            pair = find_property(self.document, node, name)
            if pair is None:
                return None
            value = pair.child_by_field_name("value")
            if value is None or value.type != "object":
                return None
            node = value
        return node

    def property_node(self, index: int, name: str, path: KeyPath = ()) -> Optional[Node]:
        obj = self.object_at(index, path)
        if obj is None:
            return None
        return find_property(self.document, obj, name)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _string_elements(self, array: Node) -> List[str]:
        values = (string_value(self.document, element) for element in list_members(array))
        return [value for value in values if value is not None]

    def decode_rules(self, obj: Node) -> Dict[str, Any]:
        """Rules mapping; spread members map to None."""
        rules: Dict[str, Any] = {}
        for member in list_members(obj):
            if member.type == "pair":
                name = decode_key(self.document, member.child_by_field_name("key"))
                rules[name] = decode(self.document, member.child_by_field_name("value"))
            elif member.type == "spread_element":
                rules[spread_key(spread_text(self.document, member))] = None
        return rules

    def decode_entry(self, entry: Node) -> ConfigEntry:
        config: ConfigEntry = {}
        for member in list_members(entry):
            if member.type == "pair":
                name = decode_key(self.document, member.child_by_field_name("key"))
                value = member.child_by_field_name("value")
                if name in STRING_LIST_KEYS:
                    if value is not None and value.type == "array":
                        config[name] = self._string_elements(value)
                elif name == RULES_KEY:
                    if value is not None and value.type == "object":
                        config[name] = self.decode_rules(value)
                elif name == LANGUAGE_OPTIONS_KEY:
                    if value is not None and value.type == "object":
                        config[name] = decode_object(self.document, value)
                else:
                    config[name] = decode(self.document, value)
            elif member.type == "spread_element":
                config[spread_key(spread_text(self.document, member))] = UNDEFINED
            elif member.type == "shorthand_property_identifier":
                name = self.document.node_text(member)
                config[name] = Opaque(name)
        return config

    def entries(self) -> List[ConfigEntry]:
        return [self.decode_entry(entry) for entry in self.entry_nodes()]

    def rules(self, index: int) -> Optional[Dict[str, Any]]:
        obj = self.object_at(index, (RULES_KEY,))
        if obj is None:
            return None
        return self.decode_rules(obj)

    # ------------------------------------------------------------------
    # Member edits
    # ------------------------------------------------------------------

    @property
    def indent_unit(self) -> str:
        return self.document.detect_indent_unit(
            INDENT_DETECTION["default_indent"],
            INDENT_DETECTION["max_sample_lines"],
        )

    def _render_member(self, name: str, value: Any, quote_key: bool) -> str:
        if is_spread_key(name):
            return name
        key = quote(name) if quote_key else encode_key(name)
        return f"{key}: {encode(value)}"

    def append_property(self, index: int, name: str, value: Any, path: KeyPath = (), quote_key: bool = False) -> None:
        """Append ``name: value`` without looking for an existing key."""
        obj = self.object_at(index, path)
        if obj is None:
            raise KeyError(f"No object literal at {'.'.join(path) or 'entry'}")
        append_member(self.document, obj, self._render_member(name, value, quote_key), self.indent_unit)

    def set_property(self, index: int, name: str, value: Any, path: KeyPath = (), quote_key: bool = False) -> None:
        """Replace a property's value in place, or append the property."""
        pair = self.property_node(index, name, path)
        value_node = pair.child_by_field_name("value") if pair is not None else None
        if value_node is not None:
            self.document.replace_node(value_node, encode(value))
        else:
            self.append_property(index, name, value, path, quote_key)

    def remove_property(self, index: int, name: str, path: KeyPath = ()) -> bool:
        obj = self.object_at(index, path)
        if obj is None:
            return False
        pair = find_property(self.document, obj, name)
        if pair is None:
            return False
        remove_member(self.document, obj, pair)
        return True

    def add_spread(self, index: int, expression: str, path: KeyPath = ()) -> None:
        obj = self.object_at(index, path)
        if obj is None:
            raise KeyError(f"No object literal at {'.'.join(path) or 'entry'}")
        append_member(self.document, obj, spread_key(expression), self.indent_unit)

    def ensure_spread(self, index: int, expression: str, path: KeyPath = ()) -> None:
        obj = self.object_at(index, path)
        if obj is not None and find_spread(self.document, obj, expression) is None:
            self.add_spread(index, expression, path)

    def remove_spread(self, index: int, expression: str, path: KeyPath = ()) -> bool:
        """Remove the first spread member with exactly this expression text."""
        obj = self.object_at(index, path)
        if obj is None:
            return False
        spread = find_spread(self.document, obj, expression)
        if spread is None:
            return False
        remove_member(self.document, obj, spread)
        return True

    # ------------------------------------------------------------------
    # Entry edits
    # ------------------------------------------------------------------

    def render_entry(self, config: ConfigEntry) -> str:
        """Source text for a new entry, one property per line."""
        if not config:
            return "{}"
        unit = self.indent_unit
        lines = [unit + self._render_member(name, value, quote_key=False) for name, value in config.items()]
        return "{\n" + ",\n".join(lines) + "\n}"

    def merge_rules(self, index: int, rules: Dict[str, Any]) -> None:
        """
        Merge rules rule-by-rule into an entry.

        Existing rules get their new value in place, new ones are appended in
        the given order. A ``rules`` value that is not an object literal is
        replaced as a whole.
        """
        pair = self.property_node(index, RULES_KEY)
        if pair is None or self.object_at(index, (RULES_KEY,)) is None:
            self.set_property(index, RULES_KEY, rules)
            return

        for name, value in rules.items():
            if is_spread_key(name):
                self.ensure_spread(index, spread_expression(name), (RULES_KEY,))
            else:
                self.set_property(index, name, value, (RULES_KEY,), quote_key=True)

    def upsert(self, config: ConfigEntry) -> int:
        """
        Patch the entry matching config's files, or append a new entry.

        Returns:
            Index of the patched or created entry
        """
        patterns = config.get("files") or []
        index = self.find_index(patterns)

        if index is None:
            append_member(self.document, self.array_node(), self.render_entry(config), self.indent_unit)
            logger.debug(f"Appended config entry for files {list(patterns)}")
            return len(self.entry_nodes()) - 1

        for name, value in config.items():
            if name == "files":
                # Matched as a set; keep the authored order
                continue
            if is_spread_key(name):
                self.ensure_spread(index, spread_expression(name))
            elif name == RULES_KEY and isinstance(value, dict):
                self.merge_rules(index, value)
            else:
                self.set_property(index, name, value)

        logger.debug(f"Updated config entry {index} for files {list(patterns)}")
        return index

    def remove(self, patterns: Sequence[str]) -> bool:
        index = self.find_index(patterns)
        if index is None:
            return False
        remove_member(self.document, self.array_node(), self.entry_node(index))
        logger.debug(f"Removed config entry for files {list(patterns)}")
        return True
