"""
Mutation package: structure-preserving edits of ESLint flat configs and
import sections.

Edits are splices into the live source text; everything an operation does
not touch is re-emitted byte for byte.
"""

from .session import EditSession
from .config_list import ConfigList, patterns_equal
from .eslint_config import EslintConfigEditor
from .import_editor import ImportEditor, parse_import_statement
from .literal_codec import (
    SPREAD_PREFIX,
    UNDEFINED,
    DynamicImport,
    Opaque,
    PropertyValue,
)
from .config import (
    MUTATION_CONFIG,
    INDENT_DETECTION,
)

__all__ = [
    # Sessions
    "EditSession",
    "EslintConfigEditor",
    "ImportEditor",

    # Models
    "ConfigList",
    "patterns_equal",
    "parse_import_statement",

    # Value model
    "SPREAD_PREFIX",
    "UNDEFINED",
    "DynamicImport",
    "Opaque",
    "PropertyValue",

    # Configuration
    "MUTATION_CONFIG",
    "INDENT_DETECTION",
]
