"""Configuration management for the stream interceptor.

This module handles loading user configuration from
~/.config/stream-interceptor/init.py and provides a sandboxed execution
environment for user settings.
"""

from __future__ import annotations

import os
import traceback
from pathlib import Path
from typing import Any, Optional

DEFAULT_OPEN_COMMAND = "openspace.editor.open"
DEFAULT_RUN_COMMAND = "openspace.terminal.execute"
DEFAULT_COMMAND_PREFIX = "openspace."


class InterceptorConfig:
    """Configuration container for interceptor settings.

    This class stores configuration values that can be set by the user's init.py file.
    All settings have sensible defaults.
    """

    def __init__(self):
        # Plain-text fallback grammar
        self.fallback_enabled: bool = True
        self.open_command: str = DEFAULT_OPEN_COMMAND
        self.run_command: str = DEFAULT_RUN_COMMAND

        # Consumer-side validation
        self.command_prefix: str = DEFAULT_COMMAND_PREFIX

        # CLI streaming simulation (None feeds the whole input at once)
        self.chunk_size: Optional[int] = None

        # Custom settings (user can add any additional settings)
        self._custom: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Set a custom configuration value."""
        self._custom[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a custom configuration value."""
        return self._custom.get(key, default)


def get_config_path() -> Path:
    """Get the path to the user's config directory."""
    config_home = os.environ.get('XDG_CONFIG_HOME')
    if config_home:
        return Path(config_home) / 'stream-interceptor'
    return Path.home() / '.config' / 'stream-interceptor'


def get_init_script_path() -> Path:
    """Get the path to the user's init.py script."""
    return get_config_path() / 'init.py'


def load_config() -> tuple[InterceptorConfig, Optional[str]]:
    """Load configuration from ~/.config/stream-interceptor/init.py.

    The init.py file is executed in a sandboxed environment where it can set
    configuration values on a 'config' object.

    Returns:
        A tuple of (config, error_message). If loading fails, error_message
        will contain details about the failure.
    """
    config = InterceptorConfig()
    init_path = get_init_script_path()

    # If no init.py exists, return default config
    if not init_path.exists():
        return config, None

    sandbox = {
        '__builtins__': {
            'True': True,
            'False': False,
            'None': None,
            'str': str,
            'int': int,
            'float': float,
            'bool': bool,
            'list': list,
            'dict': dict,
            'tuple': tuple,
            'set': set,
            'len': len,
            'range': range,
            'print': print,  # Allow print for debugging config
            # Explicitly deny dangerous operations
            '__import__': None,
            'open': None,
            'exec': None,
            'eval': None,
            'compile': None,
        },
        'config': config,
    }

    try:
        with open(init_path, 'r') as f:
            code = f.read()

        exec(code, sandbox)
        return config, None

    except Exception:
        error_msg = f"Error loading config from {init_path}:\n{traceback.format_exc()}"
        return config, error_msg
