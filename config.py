"""Configuration management for Cashpath.

Reads configuration from ~/.config/cashpath.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    log_level: str
    log_dir: Path
    recurrence_cache_enabled: bool = True
    default_window_days: int = 365

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "cashpath"
        return cls(
            base_dir=base_dir,
            log_level="INFO",
            log_dir=base_dir / "logs",
            recurrence_cache_enabled=True,
            default_window_days=365,
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "cashpath.toml"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "cashpath"))

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    projection_config = data.get("projection", {})
    recurrence_cache_enabled = projection_config.get("recurrence_cache", True)
    default_window_days = int(projection_config.get("default_window_days", 365))

    return Config(
        base_dir=base_dir,
        log_level=log_level,
        log_dir=log_dir,
        recurrence_cache_enabled=recurrence_cache_enabled,
        default_window_days=default_window_days,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "projection": {
            "recurrence_cache": config.recurrence_cache_enabled,
            "default_window_days": config.default_window_days,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
