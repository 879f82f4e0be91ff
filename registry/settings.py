"""Registry settings stored in a JSON file, with environment overrides."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import AdminConfig


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


class RegistrySettings:
    """
    Manages registry settings stored in a JSON file.

    Values from the file win over the defaults; the defaults themselves can
    be overridden through REGISTRY_* environment variables.
    """

    @staticmethod
    def defaults() -> Dict[str, Any]:
        return {
            "owner": os.environ.get("REGISTRY_OWNER", ""),
            "base_fee": _env_int("REGISTRY_BASE_FEE", 0),
            "bytes_fee_multiplier": _env_int("REGISTRY_BYTES_FEE_MULTIPLIER", 0),
            "grant_fee": _env_int("REGISTRY_GRANT_FEE", 0),
            "state_path": os.environ.get("REGISTRY_STATE_PATH", "registry.json"),
            "log_level": os.environ.get("LOG_LEVEL", "INFO"),
        }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Args:
            config_path: Path to settings JSON file. None keeps settings in memory only.
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self.data = self._load()

    def _load(self) -> Dict[str, Any]:
        config = self.defaults()
        if self.config_path is None:
            return config

        if self.config_path.exists():
            with open(self.config_path, "r", encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2)
        return config

    def save(self) -> None:
        if self.config_path is None:
            return
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    def admin_config(self) -> AdminConfig:
        """Initial admin parameters for a registry with no saved state."""
        return AdminConfig(
            owner=self.data["owner"],
            base_fee=int(self.data["base_fee"]),
            bytes_fee_multiplier=int(self.data["bytes_fee_multiplier"]),
            grant_fee=int(self.data["grant_fee"]),
        )

    @property
    def state_path(self) -> Path:
        path = Path(self.data["state_path"])
        if not path.is_absolute() and self.config_path is not None:
            path = self.config_path.parent / path
        return path

    @property
    def log_level(self) -> str:
        return self.data.get("log_level", "INFO")
