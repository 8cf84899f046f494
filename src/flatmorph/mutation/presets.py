"""
Rule presets applied through ensure_rule().

Each preset maps to its default file patterns and the rules it guarantees.
"""

RULE_PRESETS = {
    "typescript": {
        "files": ["**/*.ts", "**/*.tsx"],
        "rules": {
            "@typescript-eslint/no-unused-vars": "error",
            "@typescript-eslint/explicit-function-return-type": "off",
            "@typescript-eslint/explicit-module-boundary-types": "off",
            "@typescript-eslint/no-explicit-any": "warn",
        },
    },
    "react": {
        "files": ["**/*.tsx", "**/*.jsx"],
        "rules": {
            "react/prop-types": "off",
            "react/react-in-jsx-scope": "off",
            "react-hooks/rules-of-hooks": "error",
            "react-hooks/exhaustive-deps": "warn",
        },
    },
    "playwright": {
        "files": ["**/*.e2e.ts", "e2e/**/*.ts"],
        "rules": {
            "playwright/expect-expect": "error",
            "playwright/no-wait-for-timeout": "warn",
            "playwright/no-force-option": "error",
            "playwright/prefer-web-first-assertions": "error",
        },
    },
    "jest": {
        "files": ["**/*.spec.ts", "**/*.test.ts"],
        "rules": {
            "jest/expect-expect": "error",
            "jest/no-disabled-tests": "warn",
            "jest/no-focused-tests": "error",
            "jest/valid-expect": "error",
        },
    },
}

ANGULAR_DEFAULT_FILES = ["**/*.ts"]
NX_DEFAULT_FILES = ["**/*.ts", "**/*.js"]
NX_DEFAULT_IGNORED_FILES = ["{projectRoot}/eslint.config.{js,cjs,mjs,ts,cts,mts}"]

DEPRECATED_RULES = [
    "babel/new-cap",
    "babel/no-invalid-this",
    "babel/object-curly-spacing",
    "babel/quotes",
    "babel/semi",
    "babel/no-unused-expressions",
    "babel/valid-typeof",
    "@typescript-eslint/ban-ts-ignore",
    "@typescript-eslint/camelcase",
    "@typescript-eslint/no-angle-bracket-type-assertion",
]

# (old name, new name)
RENAMED_RULES = [
    ("@typescript-eslint/ban-ts-ignore", "@typescript-eslint/ban-ts-comment"),
    ("@typescript-eslint/camelcase", "@typescript-eslint/naming-convention"),
    ("no-spaced-func", "func-call-spacing"),
]


def angular_selector_rules(prefix: str) -> dict:
    return {
        "@angular-eslint/component-selector": [
            "error",
            {"type": "element", "prefix": prefix, "style": "kebab-case"},
        ],
        "@angular-eslint/directive-selector": [
            "error",
            {"type": "attribute", "prefix": prefix, "style": "camelCase"},
        ],
    }


def nx_module_boundaries_rule() -> list:
    return [
        "error",
        {
            "enforceBuildableLibDependency": True,
            "allow": ["^.*/eslint(\\.base)?\\.config\\.[cm]?[jt]s$"],
            "depConstraints": [
                {"sourceTag": "*", "onlyDependOnLibsWithTags": ["*"]},
            ],
        },
    ]
