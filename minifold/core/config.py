import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from minifold.core.errors import FileSystemError, MissingMandatoryField, SettingsError
from minifold.utils.logger import get_logger


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_BUFFER = 1000 * 1024

# Check order matters: the first missing field is the one reported.
FILE_MANDATORY_FIELDS = ("compressor", "input", "output")
MEMORY_MANDATORY_FIELDS = ("compressor", "content")

VALID_TYPES = ("js", "css")

# camelCase keys accepted for compatibility with JSON/JS style settings
_KEY_ALIASES = {
    "publicFolder": "public_folder",
    "replaceInPlace": "replace_in_place",
    "javaPath": "java_path",
}


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class MinifySettings:
    """User supplied settings for one minification run."""

    compressor: Optional[str] = None
    input: Optional[Union[str, List[str]]] = None
    output: Optional[Union[str, List[str]]] = None
    content: Optional[str] = None
    public_folder: Optional[str] = None
    replace_in_place: bool = False
    sync: bool = False
    options: Dict[str, Any] = field(default_factory=dict)
    buffer: int = DEFAULT_BUFFER
    callback: Optional[Callable] = None
    type: Optional[str] = None
    executable: Optional[str] = None
    java_path: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def in_memory(self) -> bool:
        """True when the settings describe an in-memory run."""
        return self.content is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MinifySettings":
        """
        Build settings from a mapping, filling missing keys with defaults.

        Both snake_case and camelCase keys are accepted. Unknown keys are ignored.

        Args:
            data: Mapping of setting names to values

        Returns:
            New MinifySettings instance
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                get_logger().debug(f"Ignoring unknown setting: {key}")
                continue
            values[name] = value

        # Explicit nulls fall back to defaults like a missing key would
        if values.get("options") is None:
            values.pop("options", None)
        if values.get("buffer") is None:
            values.pop("buffer", None)

        return cls(**values)

    @classmethod
    def from_json_file(cls, path: Union[str, Path], **overrides: Any) -> "MinifySettings":
        """
        Load settings from a JSON file.

        Args:
            path: Path to the JSON settings file
            **overrides: Values that take precedence over the file contents

        Returns:
            New MinifySettings instance
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise FileSystemError(path, "Cannot read settings file") from e
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid JSON in settings file {path}: {e}") from e

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a JSON object")

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls.from_dict(data)


# ============================================================================
# Settings Validator
# ============================================================================


class SettingsValidator:
    """Validates minification settings."""

    @staticmethod
    def validate(settings: MinifySettings) -> None:
        """Validate all fields of the settings."""
        SettingsValidator.validate_mandatory(settings)
        SettingsValidator.validate_mode(settings)
        SettingsValidator.validate_input(settings.input)
        SettingsValidator.validate_options(settings.options)
        SettingsValidator.validate_buffer(settings.buffer)
        SettingsValidator.validate_timeout(settings.timeout)
        SettingsValidator.validate_type(settings.type)

    @staticmethod
    def validate_mandatory(settings: MinifySettings) -> None:
        """Check the mandatory fields of the profile selected by ``content``."""
        required = MEMORY_MANDATORY_FIELDS if settings.in_memory else FILE_MANDATORY_FIELDS
        for name in required:
            if not getattr(settings, name):
                raise MissingMandatoryField(name)

    @staticmethod
    def validate_mode(settings: MinifySettings) -> None:
        """Reject settings mixing in-memory content with input/output paths."""
        if settings.in_memory and (settings.input or settings.output):
            raise SettingsError("content cannot be combined with input or output. Choose one mode.")

    @staticmethod
    def validate_input(value: Optional[Union[str, List[str]]]) -> None:
        """Validate that input is a path string or a sequence of path strings."""
        if value is None or isinstance(value, str):
            return
        if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
            raise SettingsError(f"input must be a path or a list of paths, got {value!r}")

    @staticmethod
    def validate_options(options: Any) -> None:
        """Validate compressor options."""
        if not isinstance(options, Mapping):
            raise SettingsError(f"options must be a mapping, got {type(options).__name__}")

    @staticmethod
    def validate_buffer(buffer: int) -> None:
        """Validate buffer size."""
        if not isinstance(buffer, int) or buffer <= 0:
            raise SettingsError(f"buffer must be a positive integer, got {buffer}")

    @staticmethod
    def validate_timeout(timeout: Optional[float]) -> None:
        """Validate process timeout."""
        if timeout is not None and timeout <= 0:
            raise SettingsError(f"timeout must be positive, got {timeout}")

    @staticmethod
    def validate_type(value: Optional[str]) -> None:
        """Validate the js/css type hint."""
        if value is not None and value not in VALID_TYPES:
            raise SettingsError(f"type must be one of {list(VALID_TYPES)}, got {value}")
