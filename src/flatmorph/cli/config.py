"""
CLI Configuration

Centralized configuration for the flatmorph CLI.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    # Paths are resolved against this directory
    DEFAULT_ROOT = "."

    # Machine mode (plain output, no presentation)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: bool) -> None:
        """Set machine mode (pure data output, no presentation)"""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Machine mode is the default; FLATMORPH_HUMAN_MODE opts out.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("FLATMORPH_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True

    @classmethod
    def reset(cls) -> None:
        """Forget any explicit mode (used between test invocations)."""
        cls._machine_mode = None
