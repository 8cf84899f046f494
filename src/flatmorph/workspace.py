"""
Workspace abstractions used by the editors for reading and writing files.

A workspace maps project-relative paths to file contents. Generators work
against an InMemoryWorkspace and flush it later; the CLI edits files in
place through a FileSystemWorkspace.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from flatmorph.exceptions import WorkspaceError
from flatmorph.logging_config import logger


@runtime_checkable
class Workspace(Protocol):
    """Anything that can read and write files by path."""

    def read(self, path: str) -> Optional[bytes]:
        ...

    def write(self, path: str, content: bytes) -> None:
        ...


class FileSystemWorkspace:
    """Workspace backed by a directory on disk."""

    def __init__(self, root: Optional[Path] = None):
        """
        Args:
            root: Directory paths are resolved against (defaults to CWD)
        """
        self.root = Path(root) if root is not None else Path.cwd()

    def _resolve(self, path: str) -> Path:
        return self.root / path

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: str) -> Optional[bytes]:
        target = self._resolve(path)
        if not target.is_file():
            return None
        return target.read_bytes()

    def write(self, path: str, content: bytes) -> None:
        """
        Write file atomically using temp file + rename.

        Raises:
            WorkspaceError: If the file cannot be written.
        """
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Temp file in the target directory keeps the rename on one filesystem
            fd, temp_path = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=f".{target.name}.",
                suffix=".tmp"
            )
        except OSError as e:
            raise WorkspaceError(str(target), str(e)) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(temp_path, str(target))
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise WorkspaceError(str(target), str(e)) from e

        logger.debug(f"Atomic write completed: {target}")


class InMemoryWorkspace:
    """Dict-backed workspace; nothing touches the disk."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self._files: Dict[str, bytes] = {
            path: content.encode("utf-8") for path, content in (files or {}).items()
        }

    def exists(self, path: str) -> bool:
        return path in self._files

    def read(self, path: str) -> Optional[bytes]:
        return self._files.get(path)

    def write(self, path: str, content: bytes) -> None:
        self._files[path] = bytes(content)

    def read_text(self, path: str) -> Optional[str]:
        content = self.read(path)
        return content.decode("utf-8") if content is not None else None

    def paths(self):
        return sorted(self._files)
