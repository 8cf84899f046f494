"""
SourceDocument: the live, editable syntax tree of one JS/TS source file.

Edits are byte-range splices applied to the source buffer followed by a
re-parse, so untouched text is reproduced byte-for-byte. Node objects handed
out before an edit describe the previous tree and must be looked up again.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from tree_sitter import Node, Tree

from flatmorph.exceptions import WorkspaceError
from flatmorph.logging_config import logger
from .config import language_for_path
from .language_manager import get_parser

Edit = Tuple[int, int, str]


class SourceDocument:
    """
    Parsed source text plus the tree-sitter tree describing it.

    Features:
    - Byte-exact re-printing of everything that was not edited
    - Batched, non-overlapping splices with a single re-parse
    - Indentation and line-ending detection for synthesized text
    - Atomic save to the document's own path
    """

    def __init__(self, text: str = "", path: Optional[str] = None, language: Optional[str] = None):
        """
        Parse source text.

        Args:
            text: Source code
            path: Optional path the document is saved to
            language: Grammar name; detected from the path when omitted
        """
        self.path = str(path) if path is not None else None
        self.language = language or language_for_path(self.path)
        self._parser = get_parser(self.language)
        self._source = text.encode("utf-8")
        self.newline = "\r\n" if b"\r\n" in self._source else "\n"
        self.tree: Tree = self._parser.parse(self._source)

    @classmethod
    def from_file(cls, path: str, language: Optional[str] = None) -> "SourceDocument":
        """Read and parse a file from disk."""
        text = Path(path).read_bytes().decode("utf-8")
        return cls(text, path=path, language=language)

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    @property
    def source(self) -> bytes:
        return self._source

    def get_full_text(self) -> str:
        """Return the current text of the document."""
        return self._source.decode("utf-8")

    def node_text(self, node: Node) -> str:
        return self._source[node.start_byte:node.end_byte].decode("utf-8")

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def apply_edits(self, edits: Iterable[Edit]) -> None:
        """
        Apply byte-range replacements and re-parse.

        Args:
            edits: (start_byte, end_byte, new_text) tuples. Ranges must not
                overlap; insertions at the same offset keep their given order.
        """
        ordered: List[Tuple[int, int, int, bytes]] = []
        for position, (start, end, text) in enumerate(edits):
            if start > end:
                raise ValueError(f"Invalid edit range {start}-{end}")
            if self.newline != "\n":
                text = text.replace("\r\n", "\n").replace("\n", self.newline)
            ordered.append((start, end, position, text.encode("utf-8")))

        if not ordered:
            return

        ordered.sort(key=lambda item: (item[0], item[1], item[2]))
        for previous, current in zip(ordered, ordered[1:]):
            if current[0] < previous[1]:
                raise ValueError(
                    f"Overlapping edits at bytes {previous[0]}-{previous[1]} and {current[0]}-{current[1]}"
                )

        buffer = self._source
        # Splice from the end so earlier offsets stay valid
        for start, end, _, data in reversed(ordered):
            buffer = buffer[:start] + data + buffer[end:]

        self._source = buffer
        self.tree = self._parser.parse(self._source)
        if self.tree.root_node.has_error:
            logger.warning(f"Edited source of {self.path or '<memory>'} no longer parses cleanly")

    def replace_node(self, node: Node, text: str) -> None:
        self.apply_edits([(node.start_byte, node.end_byte, text)])

    def insert(self, offset: int, text: str) -> None:
        self.apply_edits([(offset, offset, text)])

    # ------------------------------------------------------------------
    # Line helpers
    # ------------------------------------------------------------------

    def line_start(self, offset: int) -> int:
        return self._source.rfind(b"\n", 0, offset) + 1

    def line_end(self, offset: int) -> int:
        """Offset of the newline ending the line (or end of buffer)."""
        index = self._source.find(b"\n", offset)
        return len(self._source) if index == -1 else index

    def line_indent(self, offset: int) -> str:
        """Leading whitespace of the line containing offset."""
        start = self.line_start(offset)
        line = self._source[start:self.line_end(offset)].decode("utf-8")
        return line[:len(line) - len(line.lstrip())]

    def blank_before(self, offset: int) -> bool:
        """True when only whitespace precedes offset on its line."""
        return not self._source[self.line_start(offset):offset].strip()

    def blank_after(self, offset: int) -> bool:
        """True when only whitespace follows offset on its line."""
        return not self._source[offset:self.line_end(offset)].strip()

    def skip_spaces(self, offset: int) -> int:
        """Advance past spaces and tabs (not newlines)."""
        while offset < len(self._source) and self._source[offset:offset + 1] in (b" ", b"\t"):
            offset += 1
        return offset

    def detect_indent_unit(self, default: str = "  ", max_lines: int = 100) -> str:
        """
        Detect indentation style from the document.

        Returns:
            Indent unit string (e.g., "  ", "    " or "\\t")
        """
        tab_count = 0
        space_widths = []

        for line in self.get_full_text().splitlines()[:max_lines]:
            if not line.strip():
                continue
            indent = line[:len(line) - len(line.lstrip())]
            if "\t" in indent:
                tab_count += 1
            elif indent:
                space_widths.append(len(indent))

        if tab_count > len(space_widths):
            return "\t"
        if space_widths:
            narrowest = min(space_widths)
            if narrowest >= 4:
                return "    "
            if narrowest >= 2:
                return "  "
        return default

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """
        Write the document atomically to its path (temp file + rename).

        Raises:
            WorkspaceError: If the document has no path or the write fails.
        """
        if not self.path:
            raise WorkspaceError("<memory>", "document has no path")

        path = Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(self._source)
            os.replace(temp_path, str(path))
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise WorkspaceError(self.path, str(e)) from e

        logger.info(f"Saved {self.path}")
