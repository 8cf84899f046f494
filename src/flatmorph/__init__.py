"""
Flatmorph - structure-preserving editing of ESLint flat configs and imports.
"""

__version__ = "0.1.0"

# Core exports
from flatmorph.mutation import (
    EslintConfigEditor,
    ImportEditor,
    UNDEFINED,
    DynamicImport,
    Opaque,
)
from flatmorph.parser import SourceDocument
from flatmorph.schemas import ImportInfo, ImportKind, ImportSpecifierInfo, ParsedImport
from flatmorph.workspace import FileSystemWorkspace, InMemoryWorkspace, Workspace

__all__ = [
    "__version__",
    "EslintConfigEditor",
    "ImportEditor",
    "UNDEFINED",
    "DynamicImport",
    "Opaque",
    "SourceDocument",
    "ImportInfo",
    "ImportKind",
    "ImportSpecifierInfo",
    "ParsedImport",
    "FileSystemWorkspace",
    "InMemoryWorkspace",
    "Workspace",
]
