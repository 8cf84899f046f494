"""
ImportEditor: idempotent management of a file's import declarations.

Each declaration holds at most one default binding, at most one namespace
binding and any number of named bindings. ensure_import() adds what is
missing, remove_import() drops a binding and deletes the declaration once it
binds nothing.
"""

import re
from typing import List, Optional, Tuple, Union

from tree_sitter import Node

from flatmorph.logging_config import logger
from flatmorph.parser import SourceDocument
from flatmorph.schemas import ImportInfo, ImportKind, ImportSpecifierInfo, ParsedImport
from flatmorph.workspace import Workspace
from .config import MUTATION_CONFIG
from .literal_codec import string_value
from .syntax import append_member, list_members, remove_member, remove_statement
from .session import EditSession

KindLike = Union[ImportKind, str]

# Tried in order; the first match wins
_STATEMENT_PATTERNS = [
    (re.compile(r"^import\s+(\w+)\s+from\s+['\"`]([^'\"`]+)['\"`]"), ImportKind.DEFAULT),
    (re.compile(r"^import\s+\*\s+as\s+(\w+)\s+from\s+['\"`]([^'\"`]+)['\"`]"), ImportKind.NAMESPACE),
    (re.compile(r"^import\s+\{\s*([^}]+)\s*\}\s+from\s+['\"`]([^'\"`]+)['\"`]"), ImportKind.NAMED),
    (re.compile(r"^import\s+['\"`]([^'\"`]+)['\"`]"), ImportKind.FULL),
]

_PLAIN_NAME_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def parse_import_statement(statement: str) -> Optional[ParsedImport]:
    """
    Parse a simple one-line import statement.

    Supports ``import X from 'm'``, ``import * as X from 'm'``,
    ``import { a, b } from 'm'`` and ``import 'm'``.

    Returns:
        ParsedImport, or None when no pattern matches
    """
    text = statement.strip()
    for pattern, kind in _STATEMENT_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        if kind is ImportKind.FULL:
            return ParsedImport(specifier="", module=match.group(1), type=kind)
        return ParsedImport(specifier=match.group(1).strip(), module=match.group(2), type=kind)
    return None


class ImportEditor(EditSession):
    """
    Ensure, remove and list import declarations of a JS/TS file.

    Any text is accepted; only top-level import statements are considered.
    Lookups use the first declaration of a module.
    """

    def __init__(self, source: Union[SourceDocument, Workspace], file_path: Optional[str] = None):
        super().__init__(source, file_path)

    # ------------------------------------------------------------------
    # Node access
    # ------------------------------------------------------------------

    def _declarations(self) -> List[Node]:
        return [node for node in self.document.root_node.named_children if node.type == "import_statement"]

    def _module_of(self, declaration: Node) -> Optional[str]:
        return string_value(self.document, declaration.child_by_field_name("source"))

    def find_declaration(self, module: str) -> Optional[Node]:
        """First import statement whose module string equals module exactly."""
        for declaration in self._declarations():
            if self._module_of(declaration) == module:
                return declaration
        return None

    def _clause(self, declaration: Node) -> Optional[Node]:
        for child in declaration.named_children:
            if child.type == "import_clause":
                return child
        return None

    def _clause_child(self, declaration: Node, node_type: str) -> Optional[Node]:
        clause = self._clause(declaration)
        if clause is None:
            return None
        for child in clause.named_children:
            if child.type == node_type:
                return child
        return None

    def _default_node(self, declaration: Node) -> Optional[Node]:
        return self._clause_child(declaration, "identifier")

    def _namespace_import(self, declaration: Node) -> Optional[Node]:
        return self._clause_child(declaration, "namespace_import")

    def _namespace_node(self, declaration: Node) -> Optional[Node]:
        namespace = self._namespace_import(declaration)
        if namespace is None:
            return None
        for child in namespace.named_children:
            if child.type == "identifier":
                return child
        return None

    def _named_imports(self, declaration: Node) -> Optional[Node]:
        return self._clause_child(declaration, "named_imports")

    def _named_specifiers(self, declaration: Node) -> List[Node]:
        named = self._named_imports(declaration)
        if named is None:
            return []
        return [node for node in list_members(named) if node.type == "import_specifier"]

    def _specifier_parts(self, specifier: Node) -> Tuple[str, Optional[str]]:
        name = specifier.child_by_field_name("name")
        alias = specifier.child_by_field_name("alias")
        name_text = string_value(self.document, name)
        if name_text is None:
            name_text = self.document.node_text(name)
        return name_text, self.document.node_text(alias) if alias is not None else None

    def _text(self, node: Optional[Node]) -> Optional[str]:
        return self.document.node_text(node) if node is not None else None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _has_specifier(self, declaration: Node, name: str, kind: ImportKind) -> bool:
        if kind is ImportKind.DEFAULT:
            return self._text(self._default_node(declaration)) == name
        if kind is ImportKind.NAMESPACE:
            return self._text(self._namespace_node(declaration)) == name
        for specifier in self._named_specifiers(declaration):
            imported, alias = self._specifier_parts(specifier)
            if name in (imported, alias):
                return True
        return False

    def has_import(self, name: str, module: str, kind: KindLike = ImportKind.NAMED) -> bool:
        """
        Check if a specific import exists.

        For ``full`` any declaration of the module counts.
        """
        kind = ImportKind(kind)
        declaration = self.find_declaration(module)
        if declaration is None:
            return False
        if kind is ImportKind.FULL:
            return True
        return self._has_specifier(declaration, name, kind)

    def get_imports(self) -> List[ImportInfo]:
        """Get all import declarations in file order."""
        imports = []
        for declaration in self._declarations():
            specifiers = []
            default = self._default_node(declaration)
            if default is not None:
                specifiers.append(ImportSpecifierInfo(name=self._text(default), type="default"))
            namespace = self._namespace_node(declaration)
            if namespace is not None:
                specifiers.append(ImportSpecifierInfo(name=self._text(namespace), type="namespace"))
            for specifier in self._named_specifiers(declaration):
                imported, alias = self._specifier_parts(specifier)
                specifiers.append(ImportSpecifierInfo(name=imported, type="named", alias=alias))
            imports.append(ImportInfo(module=self._module_of(declaration) or "", specifiers=specifiers))
        return imports

    # ------------------------------------------------------------------
    # Ensure
    # ------------------------------------------------------------------

    def ensure_import(self, name: str, module: str, kind: KindLike = ImportKind.NAMED) -> None:
        """
        Ensure an import exists in the file.

        Examples:
            ensure_import('logger', '@nx/devkit')            -> import { logger } from '@nx/devkit'
            ensure_import('React', 'react', 'default')       -> import React from 'react'
            ensure_import('fs', 'fs', 'namespace')           -> import * as fs from 'fs'
            ensure_import('', './config', 'full')            -> import './config'
        """
        kind = ImportKind(kind)
        declaration = self.find_declaration(module)

        if declaration is None:
            self._create_declaration(name, module, kind)
            return

        if kind is ImportKind.FULL or self._has_specifier(declaration, name, kind):
            return

        self._add_specifier(declaration, name, kind)

    def ensure_full_import(self, statement: str) -> None:
        """
        Ensure the bindings of a one-line import statement exist.

        Named lists are split into separate names; aliased names are not
        supported here and are skipped.
        """
        parsed = parse_import_statement(statement)
        if parsed is None:
            logger.debug(f"Unrecognised import statement ignored: {statement!r}")
            return

        if parsed.type is not ImportKind.NAMED:
            self.ensure_import(parsed.specifier, parsed.module, parsed.type)
            return

        for name in (piece.strip() for piece in parsed.specifier.split(",")):
            if not name:
                continue
            if not _PLAIN_NAME_RE.match(name):
                logger.warning(f"Skipping unsupported import specifier '{name}' from '{parsed.module}'")
                continue
            self.ensure_import(name, parsed.module, ImportKind.NAMED)

    def _add_specifier(self, declaration: Node, name: str, kind: ImportKind) -> None:
        module = self._module_of(declaration)
        source = declaration.child_by_field_name("source")
        clause = self._clause(declaration)
        default = self._default_node(declaration)

        if kind is ImportKind.DEFAULT:
            if default is not None:
                # One default binding per declaration
                return
            if clause is None:
                self.document.insert(source.start_byte, f"{name} from ")
            else:
                self.document.insert(clause.start_byte, f"{name}, ")

        elif kind is ImportKind.NAMESPACE:
            if self._namespace_node(declaration) is not None:
                return
            if self._named_imports(declaration) is not None:
                logger.warning(f"Cannot add namespace import '{name}' next to named imports of '{module}'")
                return
            if clause is None:
                self.document.insert(source.start_byte, f"* as {name} from ")
            else:
                self.document.insert(default.end_byte, f", * as {name}")

        else:
            if self._namespace_node(declaration) is not None:
                logger.warning(f"Cannot add named import '{name}' next to namespace import of '{module}'")
                return
            named = self._named_imports(declaration)
            if named is not None:
                append_member(self.document, named, name, self.indent_unit)
            elif clause is None:
                self.document.insert(source.start_byte, f"{{ {name} }} from ")
            else:
                self.document.insert(default.end_byte, f", {{ {name} }}")

        logger.debug(f"Added {kind.value} import '{name}' to '{module}'")

    def _import_style(self) -> Tuple[str, bool]:
        """Quote character and semicolon use of the first import."""
        quote_char = MUTATION_CONFIG["quote_char"]
        semicolons = MUTATION_CONFIG["semicolons"]
        declarations = self._declarations()
        if declarations:
            first = declarations[0]
            source = first.child_by_field_name("source")
            if source is not None:
                quote_char = self.document.node_text(source)[0]
            semicolons = self.document.node_text(first).rstrip().endswith(";")
        return quote_char, semicolons

    def _create_declaration(self, name: str, module: str, kind: ImportKind) -> None:
        quote_char, semicolons = self._import_style()
        escaped = module.replace("\\", "\\\\").replace(quote_char, "\\" + quote_char)
        source = f"{quote_char}{escaped}{quote_char}"
        clause = {
            ImportKind.DEFAULT: f"{name} from ",
            ImportKind.NAMESPACE: f"* as {name} from ",
            ImportKind.NAMED: f"{{ {name} }} from ",
            ImportKind.FULL: "",
        }[kind]
        statement = f"import {clause}{source}{';' if semicolons else ''}"

        declarations = self._declarations()
        if declarations:
            offset = self.document.line_end(declarations[-1].end_byte)
            if self.document.source[offset - 1:offset] == b"\r":
                offset -= 1
            self.document.insert(offset, "\n" + statement)
        else:
            offset = 0
            for child in self.document.root_node.children:
                if child.type == "hash_bang_line":
                    offset = min(self.document.line_end(child.end_byte) + 1, len(self.document.source))
            rest = self.document.source[offset:]
            separator = "\n" if rest.strip() and not rest.startswith((b"\n", b"\r\n")) else ""
            self.document.insert(offset, statement + "\n" + separator)

        logger.debug(f"Created import declaration: {statement}")

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove_import(self, name: str, module: str, kind: KindLike = ImportKind.NAMED) -> None:
        """
        Remove an import binding from the file.

        ``full`` removes the whole declaration; otherwise the declaration is
        deleted once it binds nothing.
        """
        kind = ImportKind(kind)
        declaration = self.find_declaration(module)
        if declaration is None:
            return

        if kind is ImportKind.FULL:
            remove_statement(self.document, declaration)
            logger.debug(f"Removed import declaration of '{module}'")
            return

        if self._remove_specifier(declaration, name, kind):
            logger.debug(f"Removed {kind.value} import '{name}' from '{module}'")

    def _remove_specifier(self, declaration: Node, name: str, kind: ImportKind) -> bool:
        default = self._default_node(declaration)
        namespace = self._namespace_import(declaration)
        named = self._named_imports(declaration)
        specifiers = self._named_specifiers(declaration)

        if kind is ImportKind.DEFAULT:
            if self._text(default) != name:
                return False
            if namespace is None and not specifiers:
                remove_statement(self.document, declaration)
                return True
            # `X, { a }` / `X, * as ns` -> drop `X, `
            comma = default.next_sibling
            end = self.document.skip_spaces(comma.end_byte) if comma is not None and comma.type == "," else default.end_byte
            self.document.apply_edits([(default.start_byte, end, "")])
            return True

        if kind is ImportKind.NAMESPACE:
            if self._text(self._namespace_node(declaration)) != name:
                return False
            if default is None:
                remove_statement(self.document, declaration)
            else:
                self.document.apply_edits([(default.end_byte, namespace.end_byte, "")])
            return True

        match = None
        for specifier in specifiers:
            if name in self._specifier_parts(specifier):
                match = specifier
                break
        if match is None:
            return False

        if len(specifiers) > 1:
            remove_member(self.document, named, match)
        elif default is None:
            remove_statement(self.document, declaration)
        else:
            # Last named binding next to a default: `import X from 'm'`
            self.document.apply_edits([(default.end_byte, named.end_byte, "")])
        return True
