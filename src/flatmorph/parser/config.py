from typing import Optional

from flatmorph.exceptions import ConfigError

# Mapping of file extensions to tree-sitter grammar names
SUPPORTED_LANGUAGES = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

DEFAULT_LANGUAGE = "typescript"

# Node types that carry no value in a comma-separated list
TRIVIA_NODE_TYPES = frozenset({"comment", "html_comment"})


def validate_language(language: str) -> str:
    """
    Validate that a grammar name is supported.

    Raises:
        ConfigError: If no grammar is bundled for the language.
    """
    known = sorted(set(SUPPORTED_LANGUAGES.values()))
    if language not in known:
        raise ConfigError(
            f"Language '{language}' is not supported. Supported languages: {', '.join(known)}"
        )
    return language


def language_for_path(path: Optional[str]) -> str:
    """
    Pick the grammar for a file path.

    Paths without a recognised extension fall back to TypeScript, whose
    grammar accepts plain JavaScript config files as well.
    """
    if not path:
        return DEFAULT_LANGUAGE
    lowered = str(path).lower()
    for extension, language in SUPPORTED_LANGUAGES.items():
        if lowered.endswith(extension):
            return language
    return DEFAULT_LANGUAGE


def validate_extension(extension: str) -> str:
    """
    Validate a file extension and return its language.

    Raises:
        ConfigError: If the extension is not supported.
    """
    if extension not in SUPPORTED_LANGUAGES:
        supported = ", ".join(SUPPORTED_LANGUAGES.keys())
        raise ConfigError(
            f"File extension '{extension}' is not supported. Supported extensions: {supported}"
        )

    return SUPPORTED_LANGUAGES[extension]
