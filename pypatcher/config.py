#!/usr/bin/env python3

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

DEFAULT_CONFIG_PATH = Path("~/.config/pypatcher.json")


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""
    pass


class PatcherConfig(BaseModel):
    """Settings for a single patching run."""

    patches_dir: str | None = None
    reverse: bool = False
    dry_run: bool = False

    # external program used to apply patches
    patch_program: str = "patch"

    def normalized_patches_dir(self) -> str | None:
        """Return patches_dir with "~" expanded and any trailing path separator stripped."""
        if not self.patches_dir:
            return None
        patches_dir = os.path.expanduser(self.patches_dir)
        stripped = patches_dir.rstrip(os.sep)
        if os.altsep:
            stripped = stripped.rstrip(os.altsep)
        # keep "/" meaning the filesystem root
        return stripped or patches_dir

    def merged(self, **overrides) -> "PatcherConfig":
        """Return a copy with every non-None override applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return self.model_copy(update=updates)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "PatcherConfig":
        """Load configuration from a JSON file."""
        try:
            args = json.loads(config_path.read_text())
        except OSError as e:
            raise ConfigError(f"Can't read config file '{config_path}': {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file '{config_path}': {e}") from e

        try:
            return cls.model_validate(args)
        except ValidationError as e:
            raise ConfigError(f"Invalid config file '{config_path}': {e}") from e

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        # run flags are per-invocation and not persisted
        data = self.model_dump(exclude={"reverse", "dry_run"})
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2))

    @classmethod
    def find_config(cls, config_path: Path | None = None) -> Optional["PatcherConfig"]:
        """Load the given config file, or the default one if it exists."""
        if config_path is not None:
            return cls.load_from_file(config_path)

        default_path = DEFAULT_CONFIG_PATH.expanduser()
        if default_path.exists():
            return cls.load_from_file(default_path)
        return None
