"""Configuration management."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.yaml"


class Config(BaseModel):
    """Application configuration."""

    db_path: Path = PROJECT_ROOT / "data" / "tracker.sqlite"
    storage_key: str = "jst-pro-data-v1"
    sample_size: int = 34
    export_filename: str = "job-search-data.csv"
    log_level: str = "INFO"
    log_dir: Path = PROJECT_ROOT / "logs"
    lock_file: Path = Path("/tmp/job_tracker.lock")
    lock_timeout: float = 10.0

    def resolve_paths(self, base_dir: Path) -> "Config":
        """Anchor relative paths at base_dir."""
        updates = {}
        for name in ("db_path", "log_dir", "lock_file"):
            value = getattr(self, name)
            if not value.is_absolute():
                updates[name] = base_dir / value
        return self.model_copy(update=updates)


_config: Optional[Config] = None


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    An explicit path must exist. Without one, the default config file is
    used when present and the built-in defaults otherwise.
    """
    global _config

    if config_path is None:
        if _config is not None:
            return _config
        if not DEFAULT_CONFIG_PATH.exists():
            _config = Config()
            return _config
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Copy config/config.yaml.example to config/config.yaml and adjust it."
        )

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    _config = Config(**data).resolve_paths(config_path.parent)
    return _config


def get_config() -> Config:
    """Get the loaded configuration."""
    if _config is None:
        return load_config()
    return _config
