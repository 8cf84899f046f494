"""
Configuration for structure-preserving edits.

Contains defaults for synthesized source text and indentation detection.
"""

MUTATION_CONFIG = {
    "quote_char": "'",           # Quote for new import sources
    "semicolons": True,          # Terminate new import statements
}

INDENT_DETECTION = {
    "default_indent": "  ",  # 2 spaces, the usual JS/TS style
    "max_sample_lines": 100,   # Lines to sample for indent detection
}

# Top-level config properties decoded with a fixed shape
STRING_LIST_KEYS = ("files", "ignores")
RULES_KEY = "rules"
LANGUAGE_OPTIONS_KEY = "languageOptions"
