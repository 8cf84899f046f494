"""
Pytest configuration for the flatmorph test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temporary directory and workspace fixtures
- A sample multi-line flat config shared by the editor tests
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

# Must be set before flatmorph configures its logger on import
os.environ.setdefault("FLATMORPH_MACHINE_MODE", "1")

from flatmorph.cli.config import CLIConfig
from flatmorph.logging_config import reset_logging, setup_logging
from flatmorph.workspace import InMemoryWorkspace


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet, machine-readable runs."""
    os.environ.setdefault("FLATMORPH_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False)
    CLIConfig.reset()
    yield
    CLIConfig.reset()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="flatmorph_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# ============================================================================
# SOURCE FIXTURES
# ============================================================================

MULTILINE_CONFIG = """\
import js from '@eslint/js';

export default [
  ...js.configs.recommended,
  {
    files: ['**/*.ts'],
    // project rules
    rules: {
      'no-console': 'error',
      'no-debugger': 'warn',
    },
  },
];
"""


@pytest.fixture
def multiline_config():
    return MULTILINE_CONFIG


@pytest.fixture
def workspace():
    """In-memory workspace holding one flat config and one source file."""
    return InMemoryWorkspace({
        "eslint.config.mjs": MULTILINE_CONFIG,
        "src/main.ts": "import { a } from './a';\n\nconsole.log(a);\n",
    })

