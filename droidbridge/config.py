"""Configuration management for droidbridge."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ruamel.yaml import YAML

from .adb.toolpath import ADB, FASTBOOT, validate_path

DEFAULT_CONFIG_PATH = Path.home() / ".config/droidbridge/config.yaml"


class LabelConfig(BaseModel):
    """Configuration for background app label fetching."""

    max_count: int = Field(default=40, ge=1, description="Packages labelled per run")
    delay_seconds: float = Field(default=0.2, ge=0, description="Pause between label lookups")


class BridgeConfig(BaseModel):
    """Main configuration for droidbridge."""

    model_config = ConfigDict(validate_assignment=True)

    adb_path: str = Field(default="", description="Path to adb binary; empty means auto-detect")
    fastboot_path: str = Field(default="", description="Path to fastboot binary; empty means auto-detect")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Optional log file receiving DEBUG records")
    trace_commands: bool = Field(default=False, description="Show every adb/fastboot command line on the console")
    batch_delay_seconds: float = Field(default=0.1, ge=0, description="Pause between batch operations")
    last_device: Optional[str] = Field(default=None, description="Serial of the last selected device")

    labels: LabelConfig = Field(default_factory=LabelConfig)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value

    def use_adb_path(self, candidate: str) -> str:
        """Validate a new adb location and store it.

        Raises:
            ToolPathError: If the candidate is not a usable adb
        """
        self.adb_path = validate_path(candidate, ADB)
        return self.adb_path

    def use_fastboot_path(self, candidate: str) -> str:
        self.fastboot_path = validate_path(candidate, FASTBOOT)
        return self.fastboot_path


def load_config(config_path: Optional[Path] = None) -> BridgeConfig:
    """Load configuration from file, or defaults when there is none."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        yaml = YAML(typ="safe")
        with open(config_path, "r") as f:
            data = yaml.load(f) or {}
        return BridgeConfig(**data)

    return BridgeConfig()


def save_config(config: BridgeConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f)


def get_config() -> BridgeConfig:
    """Get the global configuration instance."""

    if not hasattr(get_config, "_config"):
        get_config._config = load_config()

    return get_config._config


def set_config(config: BridgeConfig) -> None:
    """Replace the global configuration instance."""
    get_config._config = config
