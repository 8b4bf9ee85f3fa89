"""
mbstub Server Configuration

Settings come from, lowest to highest precedence: dataclass defaults, an
optional YAML file, MBSTUB_* environment variables, then explicit overrides
(CLI flags).
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional

import yaml


ENV_PREFIX = "MBSTUB_"

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass
class ServerConfig:
    """Configuration for the stub builder server."""

    # Server options
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "info"

    # Storage
    stubs_dir: str = "stubs"
    file_extension: str = ".ejs"
    lock_writes: bool = True  # Per-filename lock around save/append

    # Stub generation
    match_headers: bool = True  # Form headers become a predicate equality
    include_response_headers: bool = True  # Content-Type default + form headers

    # Form UI
    ui_enabled: bool = True

    def __post_init__(self):
        """Apply MBSTUB_<FIELD> environment variable overrides."""
        self.apply_env(os.environ)

    def apply_env(self, environ: Dict[str, str]):
        """
        Override fields from environment-style variables.

        Args:
            environ: Mapping of variable names to string values
        """
        for f in fields(self):
            env_value = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if env_value is not None:
                setattr(self, f.name, _coerce(f.type, env_value))

    def update(self, **overrides: Any) -> 'ServerConfig':
        """Apply explicit overrides, ignoring None values."""
        known = {f.name for f in fields(self)}
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in known:
                raise ValueError(f"Unknown config option: {key}")
            setattr(self, key, value)
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServerConfig':
        """
        Create config from a dictionary.

        Environment variables still take precedence over the values given.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config option(s): {', '.join(sorted(unknown))}")

        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'ServerConfig':
        """Load config from a YAML file."""
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Unexpected YAML format in {path}. "
                f"Expected a mapping, got {type(data).__name__}"
            )

        # Allow the settings to be nested under a top-level "server" key
        if 'server' in data and isinstance(data['server'], dict):
            data = data['server']

        return cls.from_dict(data)

    @classmethod
    def load(cls, yaml_path: Optional[str] = None, **overrides: Any) -> 'ServerConfig':
        """Load config from an optional YAML file plus explicit overrides."""
        config = cls.from_yaml(yaml_path) if yaml_path else cls()
        return config.update(**overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(field_type: Any, value: str) -> Any:
    """Convert an environment string to the field's type."""
    if field_type in (bool, 'bool'):
        return value.lower() in _TRUE_VALUES
    if field_type in (int, 'int'):
        return int(value)
    return value
