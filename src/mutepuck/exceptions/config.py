"""Configuration-related exceptions.

This module defines exceptions for configuration errors:
- ConfigurationError: Base class for configuration errors
- ConfigFileInvalidError: Config file has invalid syntax
- ConfigValidationError: Config values fail validation
"""

from typing import Any

from .base import MutePuckError


class ConfigurationError(MutePuckError):
    """Configuration is invalid or cannot be loaded."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file is empty, unreadable or not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Initialize config file invalid error.

        Args:
            file_path: Path to the invalid config file
            parse_error: Parser or I/O error message (includes line/column for JSON errors)
        """
        super().__init__(
            user_message=f"Configuration file could not be loaded: {parse_error}",
            technical_message=f"Cannot load {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=(
                f"Fix {file_path} or recreate it with 'mutepuck config init --force'.\n"
                "Without a config file the built-in defaults are used."
            ),
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """Configuration values fail validation."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Initialize config validation error.

        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Path to the config file (optional)
        """
        user_msg = f"Invalid configuration value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' value in your configuration"
        if file_path:
            recovery += f"\nConfig file: {file_path}"

        if field.endswith("_codes"):
            recovery += "\nRun with -vv and press the button to see the codes your puck sends"
        elif field.endswith("_id"):
            recovery += "\nRun 'lsusb' to find the vendor:product id of your puck"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Config validation failed for {field}={value}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.field = field
        self.value = value
        self.file_path = file_path
