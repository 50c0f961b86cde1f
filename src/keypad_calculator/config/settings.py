"""
Calculator settings loaded from YAML.

Reads calculator.yaml (shipped next to this module, or a path given by
the caller) and validates it into CalculatorSettings. A missing, empty or
broken file falls back to the defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "calculator.yaml"


class CalculatorSettings(BaseModel):
    """Validated calculator configuration."""

    precision: int = Field(default=6, ge=0, le=15)
    angle_mode: str = "radians"
    history_limit: int = Field(default=20, ge=1)
    undo_limit: int = Field(default=100, ge=1)

    # Store keys
    history_key: str = "calc_history"
    memory_key: str = "memory_value"
    theme_key: str = "theme_mode"

    model_config = ConfigDict(extra="forbid")

    @field_validator("angle_mode")
    @classmethod
    def check_angle_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in ("radians", "degrees"):
            raise ValueError("angle_mode must be 'radians' or 'degrees'")
        return value

    @classmethod
    def from_yaml_dict(cls, config: Dict[str, Any]) -> "CalculatorSettings":
        """Flatten the sectioned YAML layout into settings fields."""
        formatting = config.get("formatting") or {}
        evaluation = config.get("evaluation") or {}
        limits = config.get("limits") or {}
        storage = config.get("storage") or {}

        fields: Dict[str, Any] = {}
        if "precision" in formatting:
            fields["precision"] = formatting["precision"]
        if "angle_mode" in evaluation:
            fields["angle_mode"] = evaluation["angle_mode"]
        if "history" in limits:
            fields["history_limit"] = limits["history"]
        if "undo" in limits:
            fields["undo_limit"] = limits["undo"]
        for key in ("history_key", "memory_key", "theme_key"):
            if key in storage:
                fields[key] = storage[key]

        return cls(**fields)


def load_settings(config_path: Optional[Union[str, Path]] = None) -> CalculatorSettings:
    """Load and validate settings, falling back to defaults on any problem."""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    try:
        if not path.exists():
            logger.error(f"YAML config file not found: {path}")
            return CalculatorSettings()

        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if not config:
            logger.warning("Empty YAML config, using defaults")
            return CalculatorSettings()

        if not isinstance(config, dict):
            logger.warning(f"YAML config {path} is not a mapping, using defaults")
            return CalculatorSettings()

        settings = CalculatorSettings.from_yaml_dict(config)
        logger.info(f"Loaded calculator settings from {path}")
        return settings

    except (OSError, yaml.YAMLError, ValidationError, AttributeError, TypeError) as e:
        logger.error(f"Failed to load YAML config: {e}")
        return CalculatorSettings()
