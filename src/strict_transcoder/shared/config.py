"""Configuration for the transcoder facade and command-line tool.

Configuration objects are frozen dataclasses validated on construction, so a
single instance can be shared between threads.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

VALID_BYTE_ORDERS = ["big", "little"]
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class TranscoderConfig:
    """Settings shared by every facade operation.

    Attributes:
        add_bom: Prefix serialized output with a BOM where one exists
        utf16_byte_order: Byte order used when UTF-16 output is requested
            without an explicit order
        substitution_char: Replacement for units a legacy encoding lacks
        raise_on_error: Re-raise failures instead of returning failed results
        enable_diagnostics: Collect diagnostic entries on results
        logging_level: Level applied by the command-line tool
        correlation_id: Identifier attached to log records and diagnostics
    """

    add_bom: bool = False
    utf16_byte_order: str = "big"
    substitution_char: str = "?"
    raise_on_error: bool = True
    enable_diagnostics: bool = True
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.utf16_byte_order not in VALID_BYTE_ORDERS:
            raise ConfigValidationError(
                f"utf16_byte_order must be one of {VALID_BYTE_ORDERS}",
                field_name="utf16_byte_order",
            )
        if (not isinstance(self.substitution_char, str)
                or len(self.substitution_char) != 1
                or ord(self.substitution_char) > 0x7F):
            raise ConfigValidationError(
                "substitution_char must be a single ASCII character",
                field_name="substitution_char",
                suggestions=["Use '?' to match the Windows default"],
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "TranscoderConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = TranscoderConfig()
            >>> config.override(add_bom=True).add_bom
            True
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscoderConfig":
        """Create configuration from a dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "TranscoderConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TranscoderConfig":
        """Load configuration from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "TranscoderConfig":
        """Raise on the first malformed unit; no BOMs written."""
        return cls(name="strict", description="Fail fast on malformed input")

    @classmethod
    def lenient(cls) -> "TranscoderConfig":
        """Return failed results instead of raising."""
        return cls(
            raise_on_error=False,
            enable_diagnostics=True,
            name="lenient",
            description="Report failures as results with diagnostics",
        )

    @classmethod
    def windows_interop(cls) -> "TranscoderConfig":
        """BOM-prefixed, little-endian UTF-16 output."""
        return cls(
            add_bom=True,
            utf16_byte_order="little",
            name="windows_interop",
            description="Output matching Windows Notepad style files",
        )
