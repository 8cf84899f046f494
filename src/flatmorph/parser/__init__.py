"""
This facade exposes the public API for the parser module.
"""
from .source_document import SourceDocument
from .language_manager import get_language, get_parser
from .config import SUPPORTED_LANGUAGES, language_for_path

__all__ = [
    "SourceDocument",
    "get_language",
    "get_parser",
    "SUPPORTED_LANGUAGES",
    "language_for_path",
]
