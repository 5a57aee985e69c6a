"""Configuration management for vrux."""

import tomllib
from enum import Enum
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field

from .constants import DEFAULT_KEY_PREFIX, DEFAULT_MAX_VERSIONS, DEFAULT_STORAGE_DIR


class BackendKind(str, Enum):
    """Supported storage backends."""

    MEMORY = "memory"
    FILE = "file"


class HistoryConfig(BaseModel):
    """Version history behavior."""

    max_versions: int = Field(default=DEFAULT_MAX_VERSIONS, ge=1)
    auto_tag: bool = True


class StorageConfig(BaseModel):
    """Where histories are persisted."""

    backend: BackendKind = BackendKind.FILE
    directory: str = DEFAULT_STORAGE_DIR  # Relative paths resolve against .vrux/
    key_prefix: str = DEFAULT_KEY_PREFIX

    def resolve_directory(self, vrux_dir: Path) -> Path:
        """Get the absolute storage directory."""
        path = Path(self.directory).expanduser()
        return path if path.is_absolute() else vrux_dir / path


class VruxConfig(BaseModel):
    """Root configuration for vrux."""

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def load_config(vrux_dir: Path) -> VruxConfig:
    """Load config from .vrux/config.toml.

    Args:
        vrux_dir: Path to .vrux directory

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist
    """
    config_path = vrux_dir / "config.toml"
    if not config_path.exists():
        return VruxConfig()
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return VruxConfig.model_validate(data)


def write_config_template(vrux_dir: Path) -> Path:
    """Write default config.toml template.

    Args:
        vrux_dir: Path to .vrux directory

    Returns:
        Path to the written config file
    """
    config_path = vrux_dir / "config.toml"
    template = {
        "history": {"max_versions": DEFAULT_MAX_VERSIONS, "auto_tag": True},
        "storage": {
            "backend": BackendKind.FILE.value,
            "directory": DEFAULT_STORAGE_DIR,
            "key_prefix": DEFAULT_KEY_PREFIX,
        },
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
