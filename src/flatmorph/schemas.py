from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ImportKind(str, Enum):
    """How a name is bound by an import declaration."""
    NAMED = "named"
    DEFAULT = "default"
    NAMESPACE = "namespace"
    FULL = "full"  # side-effect import, binds nothing


class ImportSpecifierInfo(BaseModel):
    """
    One binding of an import declaration.
    """
    name: str
    type: Literal["named", "default", "namespace"]
    alias: Optional[str] = None


class ImportInfo(BaseModel):
    """
    An import declaration: module plus its bindings.

    Specifiers list the default binding first, then the namespace binding,
    then named imports in source order.
    """
    module: str
    specifiers: List[ImportSpecifierInfo] = Field(default_factory=list)


class ParsedImport(BaseModel):
    """
    Result of parsing a one-line import statement.
    """
    specifier: str  # Empty for side-effect imports
    module: str
    type: ImportKind
