"""
EditSession: shared construction and persistence for the source editors.
"""

from typing import Optional, Union

from flatmorph.logging_config import logger
from flatmorph.parser import SourceDocument
from flatmorph.workspace import Workspace
from .config import INDENT_DETECTION


class EditSession:
    """
    One open source file being edited.

    A session is built either from an already parsed SourceDocument (saved
    back through the document itself) or from a Workspace plus a path (read
    once here, written once on save). A missing workspace file reads as
    empty text.
    """

    def __init__(self, source: Union[SourceDocument, Workspace], file_path: Optional[str] = None):
        """
        Args:
            source: Parsed document or workspace to read from
            file_path: Path of the file (defaults to the document's own path)
        """
        self.workspace: Optional[Workspace] = None

        if isinstance(source, SourceDocument):
            self.document = source
            self.file_path = file_path or source.path
            if self.document.path is None:
                self.document.path = self.file_path
        elif isinstance(source, Workspace):
            if not file_path:
                raise ValueError("file_path is required when editing through a workspace")
            self.workspace = source
            self.file_path = file_path
            content = source.read(file_path)
            text = content.decode("utf-8") if content is not None else ""
            self.document = SourceDocument(text, path=file_path)
        else:
            raise TypeError(f"Expected SourceDocument or Workspace, got {type(source).__name__}")

        logger.debug(f"{type(self).__name__} opened {self.file_path or '<memory>'}")

    @property
    def indent_unit(self) -> str:
        return self.document.detect_indent_unit(
            INDENT_DETECTION["default_indent"],
            INDENT_DETECTION["max_sample_lines"],
        )

    def get_content(self) -> str:
        """Get the current file content as string."""
        return self.document.get_full_text()

    def save(self) -> None:
        """
        Save changes back to the file.

        Workspace sessions perform a single workspace write; document
        sessions save the document to its own path.
        """
        if self.workspace is not None:
            self.workspace.write(self.file_path, self.document.source)
            logger.info(f"Wrote {self.file_path} to workspace")
        else:
            self.document.save()
