"""
EslintConfigEditor: rule-level editing of ESLint flat config files.

Wraps a ConfigList with the verbs generators need: add, update and remove
rules per file pattern, toggle spread directives, and a few bulk helpers and
presets. Creation-style operations create the entry they need; removals are
no-ops when nothing matches; spread operations require the entry to exist.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from flatmorph.exceptions import PreconditionError
from flatmorph.logging_config import logger
from flatmorph.parser import SourceDocument
from flatmorph.workspace import Workspace
from .config import LANGUAGE_OPTIONS_KEY, RULES_KEY
from .config_list import ConfigEntry, ConfigList, patterns_equal
from .literal_codec import is_spread_key, spread_expression
from .presets import (
    ANGULAR_DEFAULT_FILES,
    DEPRECATED_RULES,
    NX_DEFAULT_FILES,
    NX_DEFAULT_IGNORED_FILES,
    RENAMED_RULES,
    RULE_PRESETS,
    angular_selector_rules,
    nx_module_boundaries_rule,
)
from .session import EditSession

RuleConfig = Any


class EslintConfigEditor(EditSession):
    """
    Edit an ESLint flat config (``export default [...]``) in place.

    Features:
    - Entries matched by file patterns, independent of pattern order
    - Rule add/update/remove with comments and formatting preserved
    - Spread directives in entries and in rules mappings
    - Works on a SourceDocument or on a Workspace path
    """

    def __init__(self, source: Union[SourceDocument, Workspace], file_path: Optional[str] = None):
        """
        Args:
            source: Parsed document or workspace
            file_path: Config path (required for workspaces)

        Raises:
            StructuralError: If the file does not export an array literal.
        """
        super().__init__(source, file_path)
        self.configs = ConfigList(self.document)

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get_configs(self) -> List[ConfigEntry]:
        """Get all configuration objects from the config array."""
        return self.configs.entries()

    def add_or_update_config(self, config: ConfigEntry) -> None:
        """
        Add or update a configuration object.

        If a config with the same files pattern exists, it is patched field by
        field; otherwise a new config is appended.
        """
        self.configs.upsert(config)

    def remove_config(self, file_patterns: Sequence[str]) -> None:
        self.configs.remove(file_patterns)

    def add_rule(self, file_patterns: Sequence[str], rule_name: str, rule_config: RuleConfig) -> None:
        """
        Add a rule to the config matching the file patterns.

        The rule is appended without checking for an existing rule of the
        same name; use update_rule() or ensure_rule() to replace in place.
        """
        index = self.configs.find_index(file_patterns)
        if index is None:
            self.configs.upsert({"files": list(file_patterns), "rules": {rule_name: rule_config}})
            return

        if self.configs.property_node(index, RULES_KEY) is None:
            self.configs.set_property(index, RULES_KEY, {rule_name: rule_config})
        elif self.configs.object_at(index, (RULES_KEY,)) is None:
            logger.warning(f"Rules for {list(file_patterns)} are not an object literal; '{rule_name}' not added")
            return
        elif is_spread_key(rule_name):
            self.configs.ensure_spread(index, spread_expression(rule_name), (RULES_KEY,))
        else:
            self.configs.append_property(index, rule_name, rule_config, (RULES_KEY,), quote_key=True)

        logger.debug(f"Added rule '{rule_name}' for files {list(file_patterns)}")

    def remove_rule(self, file_patterns: Sequence[str], rule_name: str) -> None:
        index = self.configs.find_index(file_patterns)
        if index is None:
            return
        if self.configs.remove_property(index, rule_name, (RULES_KEY,)):
            logger.debug(f"Removed rule '{rule_name}' for files {list(file_patterns)}")

    def update_rule(self, file_patterns: Sequence[str], rule_name: str, rule_config: RuleConfig) -> None:
        """Replace a rule's value in place, adding the rule (or config) if absent."""
        index = self.configs.find_index(file_patterns)
        if index is None or self.configs.object_at(index, (RULES_KEY,)) is None:
            self.add_rule(file_patterns, rule_name, rule_config)
            return

        if is_spread_key(rule_name):
            self.configs.ensure_spread(index, spread_expression(rule_name), (RULES_KEY,))
        else:
            self.configs.set_property(index, rule_name, rule_config, (RULES_KEY,), quote_key=True)
        logger.debug(f"Updated rule '{rule_name}' for files {list(file_patterns)}")

    # ------------------------------------------------------------------
    # Spread directives
    # ------------------------------------------------------------------

    def _require_entry(self, file_patterns: Sequence[str]) -> int:
        index = self.configs.find_index(file_patterns)
        if index is None:
            raise PreconditionError(f"No config found for files: {', '.join(file_patterns)}")
        return index

    def _require_rules(self, file_patterns: Sequence[str]) -> int:
        index = self._require_entry(file_patterns)
        if self.configs.object_at(index, (RULES_KEY,)) is None:
            raise PreconditionError("Rules property must be an object literal")
        return index

    def add_spread_to_rules(self, file_patterns: Sequence[str], spread: str) -> None:
        """
        Add ``...spread`` to the rules of an existing config.

        Raises:
            PreconditionError: If the config or its rules object is missing.
        """
        index = self._require_rules(file_patterns)
        self.configs.add_spread(index, spread, (RULES_KEY,))

    def remove_spread_from_rules(self, file_patterns: Sequence[str], spread: str) -> None:
        index = self._require_rules(file_patterns)
        self.configs.remove_spread(index, spread, (RULES_KEY,))

    def add_spread_to_config(self, file_patterns: Sequence[str], spread: str) -> None:
        """
        Add ``...spread`` at the top level of an existing config.

        Raises:
            PreconditionError: If no config matches the file patterns.
        """
        index = self._require_entry(file_patterns)
        self.configs.add_spread(index, spread)

    def remove_spread_from_config(self, file_patterns: Sequence[str], spread: str) -> None:
        index = self._require_entry(file_patterns)
        self.configs.remove_spread(index, spread)

    # ------------------------------------------------------------------
    # Usability helpers
    # ------------------------------------------------------------------

    def ensure_rule(self, file_patterns: Sequence[str], rule_name: str, rule_config: RuleConfig) -> None:
        """Ensure a rule exists with the given configuration."""
        self.update_rule(file_patterns, rule_name, rule_config)

    def remove_rule_if_exists(self, file_patterns: Sequence[str], rule_name: str) -> None:
        self.remove_rule(file_patterns, rule_name)

    def add_multiple_rules(self, file_patterns: Sequence[str], rules: Dict[str, RuleConfig]) -> None:
        for rule_name, rule_config in rules.items():
            self.add_rule(file_patterns, rule_name, rule_config)

    def remove_multiple_rules(self, file_patterns: Sequence[str], rule_names: Iterable[str]) -> None:
        for rule_name in rule_names:
            self.remove_rule(file_patterns, rule_name)

    def get_rules_for_pattern(self, file_patterns: Sequence[str]) -> Optional[Dict[str, RuleConfig]]:
        index = self.configs.find_index(file_patterns)
        if index is None:
            return None
        return self.configs.rules(index)

    def has_rule(self, file_patterns: Sequence[str], rule_name: str) -> bool:
        rules = self.get_rules_for_pattern(file_patterns)
        return rules is not None and rule_name in rules

    def get_rule(self, file_patterns: Sequence[str], rule_name: str, default: Any = None) -> RuleConfig:
        rules = self.get_rules_for_pattern(file_patterns) or {}
        return rules.get(rule_name, default)

    def clear_all_rules(self, file_patterns: Sequence[str]) -> None:
        """Drop the rules property of a config, keeping the config itself."""
        index = self.configs.find_index(file_patterns)
        if index is not None:
            self.configs.remove_property(index, RULES_KEY)

    def has_config_for_pattern(self, file_patterns: Sequence[str]) -> bool:
        return self.configs.find_index(file_patterns) is not None

    def get_all_configured_patterns(self) -> List[List[str]]:
        return [config["files"] for config in self.get_configs() if isinstance(config.get("files"), list)]

    def merge_rules_from_pattern(self, source_patterns: Sequence[str], target_patterns: Sequence[str]) -> None:
        rules = self.get_rules_for_pattern(source_patterns)
        if rules:
            self.add_multiple_rules(target_patterns, rules)

    def copy_config_to_pattern(self, source_patterns: Sequence[str], target_patterns: Sequence[str]) -> None:
        """Copy every field of a config into the config for target_patterns."""
        for config in self.get_configs():
            files = config.get("files")
            if files is not None and patterns_equal(files, source_patterns):
                copied = dict(config)
                copied["files"] = list(target_patterns)
                self.configs.upsert(copied)
                return

    def set_language_options(
        self,
        file_patterns: Sequence[str],
        parser: Optional[Union[str, Dict[str, Any]]] = None,
        parser_options: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Set languageOptions.parser / parserOptions for a config."""
        options: Dict[str, Any] = {}
        if parser:
            options["parser"] = parser
        if parser_options:
            options["parserOptions"] = parser_options

        index = self.configs.find_index(file_patterns)
        if index is None:
            self.configs.upsert({"files": list(file_patterns), LANGUAGE_OPTIONS_KEY: options})
            return

        if self.configs.property_node(index, LANGUAGE_OPTIONS_KEY) is None:
            self.configs.set_property(index, LANGUAGE_OPTIONS_KEY, options)
            return

        if self.configs.object_at(index, (LANGUAGE_OPTIONS_KEY,)) is None:
            logger.warning(f"languageOptions for {list(file_patterns)} is not an object literal; left unchanged")
            return

        for name, value in options.items():
            self.configs.set_property(index, name, value, (LANGUAGE_OPTIONS_KEY,))

    # ------------------------------------------------------------------
    # Presets and migrations
    # ------------------------------------------------------------------

    def _apply_preset(self, name: str, file_patterns: Optional[Sequence[str]]) -> None:
        preset = RULE_PRESETS[name]
        patterns = list(file_patterns) if file_patterns is not None else list(preset["files"])
        for rule_name, rule_config in preset["rules"].items():
            self.ensure_rule(patterns, rule_name, rule_config)

    def add_typescript_rules(self, file_patterns: Optional[Sequence[str]] = None) -> None:
        self._apply_preset("typescript", file_patterns)

    def add_react_rules(self, file_patterns: Optional[Sequence[str]] = None) -> None:
        self._apply_preset("react", file_patterns)

    def add_playwright_rules(self, file_patterns: Optional[Sequence[str]] = None) -> None:
        self._apply_preset("playwright", file_patterns)

    def add_jest_rules(self, file_patterns: Optional[Sequence[str]] = None) -> None:
        self._apply_preset("jest", file_patterns)

    def add_angular_rules(self, file_patterns: Optional[Sequence[str]] = None, component_prefix: str = "app") -> None:
        patterns = list(file_patterns) if file_patterns is not None else list(ANGULAR_DEFAULT_FILES)
        for rule_name, rule_config in angular_selector_rules(component_prefix).items():
            self.ensure_rule(patterns, rule_name, rule_config)

    def add_nx_workspace_rules(self, file_patterns: Optional[Sequence[str]] = None) -> None:
        patterns = list(file_patterns) if file_patterns is not None else list(NX_DEFAULT_FILES)
        self.ensure_rule(patterns, "@nx/enforce-module-boundaries", nx_module_boundaries_rule())

    def add_nx_dependency_checks(
        self,
        file_patterns: Optional[Sequence[str]] = None,
        ignored_files: Optional[Sequence[str]] = None,
    ) -> None:
        patterns = list(file_patterns) if file_patterns is not None else list(NX_DEFAULT_FILES)
        all_ignored = list(NX_DEFAULT_IGNORED_FILES) + list(ignored_files or [])
        self.ensure_rule(patterns, "@nx/dependency-checks", ["error", {"ignoredFiles": all_ignored}])

    def remove_deprecated_rules(self, file_patterns: Sequence[str]) -> None:
        """Remove rules dropped by past ESLint plugin releases."""
        self.remove_multiple_rules(file_patterns, DEPRECATED_RULES)

    def update_renamed_rules(self, file_patterns: Sequence[str]) -> None:
        """Move configs of renamed rules to their new names."""
        for old_name, new_name in RENAMED_RULES:
            rules = self.get_rules_for_pattern(file_patterns) or {}
            if old_name in rules:
                self.remove_rule(file_patterns, old_name)
                self.ensure_rule(file_patterns, new_name, rules[old_name])
