"""
Configuration models for lintkit.

Handles loader options, resolved config file locations, and global settings
read from the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Literal, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_path(base: Union[str, Path], target: Union[str, Path] = ".") -> Path:
    """Resolve `target` against `base` lexically (symlinks are not followed)"""
    joined = os.path.join(os.path.abspath(os.fspath(base)), os.fspath(target))
    return Path(os.path.normpath(joined))


@dataclass(frozen=True)
class ResolvedLocation:
    """Where the config for a directory comes from"""
    source_path: Optional[Path]
    base_path: Path

    @property
    def is_disabled(self) -> bool:
        """No config file is in effect"""
        return self.source_path is None


class LoaderOptions(BaseModel):
    """Immutable inputs for the config loaders"""
    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True
    )

    # Paths
    cwd: Path = Field(default_factory=Path.cwd)
    config_file_path: Union[Literal[False], Path, None] = None

    # Ignore handling
    ignore_enabled: bool = True
    ignore_patterns: List[str] = Field(default_factory=list)

    # Layers, lowest to highest precedence
    base_config: Any = None
    default_configs: List[Any] = Field(default_factory=list)
    override_config: Any = None

    @field_validator('cwd')
    @classmethod
    def validate_cwd(cls, v: Path) -> Path:
        """Make cwd absolute and normalized"""
        return normalize_path(v)

    @field_validator('config_file_path', mode='before')
    @classmethod
    def validate_config_file_path(cls, v: Any) -> Any:
        """Reject empty paths and `True`; `False` disables lookup"""
        if v is True:
            raise ValueError('config_file_path must be a path, False, or None')
        if isinstance(v, str) and not v.strip():
            raise ValueError('config_file_path cannot be an empty string')
        return v

    @field_validator('ignore_patterns')
    @classmethod
    def validate_ignore_patterns(cls, v: List[str]) -> List[str]:
        """
        Drop blank ignore patterns.

        A blank pattern matches nothing, and layer validation rejects blank
        globs, so passing one through would fail every layer sequence build.
        """
        return [pattern for pattern in v if pattern.strip()]

    @property
    def lookup_disabled(self) -> bool:
        """Config file use is explicitly turned off"""
        return self.config_file_path is False

    @property
    def override_path(self) -> Optional[Path]:
        """Absolute override config path, if one was given"""
        if isinstance(self.config_file_path, Path):
            return normalize_path(self.cwd, self.config_file_path)
        return None

    @classmethod
    def from_settings(cls, settings: "GlobalSettings", **overrides: Any) -> "LoaderOptions":
        """Build options from global settings; keyword arguments win"""
        data: dict = {"ignore_enabled": settings.ignore_enabled}
        if settings.no_config_lookup:
            data["config_file_path"] = False
        elif settings.config_file:
            data["config_file_path"] = settings.config_file
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)


class GlobalSettings(BaseSettings):
    """Global application settings with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix="LINTKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Config file lookup
    config_file: Optional[str] = None
    no_config_lookup: bool = False
    legacy_lookup: bool = False

    # Ignore handling
    ignore_enabled: bool = True

    # Logging
    log_level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Accept lowercase level names"""
        return v.upper() if isinstance(v, str) else v
