from typing import Dict

from tree_sitter import Language, Parser
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript

from flatmorph.logging_config import logger
from .config import validate_language

# Global cache for loaded languages to avoid repeated loading
_language_cache: Dict[str, Language] = {}

_GRAMMARS = {
    "javascript": tsjavascript.language,
    "typescript": tstypescript.language_typescript,
    "tsx": tstypescript.language_tsx,
}


def get_language(language_name: str) -> Language:
    """
    Loads a tree-sitter language from the bundled grammar packages.

    Caches the loaded language object for efficiency.
    """
    validate_language(language_name)

    if language_name in _language_cache:
        return _language_cache[language_name]

    lang = Language(_GRAMMARS[language_name]())
    _language_cache[language_name] = lang
    logger.debug(f"Successfully loaded language '{language_name}'")
    return lang


def get_parser(language_name: str) -> Parser:
    """Create a parser bound to the requested grammar."""
    parser = Parser()
    parser.language = get_language(language_name)
    return parser
