"""
Configuration loader for YAML-based match configurations.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from .game_config import Ability, GameConfig, default_config
from ..errors import ValidationError


def parse_abilities(entries: Any) -> List[Ability]:
    """Turn an `abilities` list (YAML or lobby settings) into Ability values."""
    if not isinstance(entries, list):
        raise ValidationError("'abilities' must be a list of {name, description} mappings")

    abilities = []
    for entry in entries:
        if isinstance(entry, Ability):
            abilities.append(entry)
        elif isinstance(entry, str):
            abilities.append(Ability(name=entry))
        elif isinstance(entry, dict):
            abilities.append(Ability(
                name=str(entry.get("name") or ""),
                description=str(entry.get("description") or ""),
            ))
        else:
            raise ValidationError(f"Invalid ability entry: {entry!r}")
    return abilities


def config_from_dict(config_dict: Dict[str, Any]) -> GameConfig:
    """
    Build a validated GameConfig from a plain mapping.

    Unknown keys are reported and ignored.
    """
    config = GameConfig()

    for key, value in config_dict.items():
        if key == "abilities":
            config.abilities = parse_abilities(value)
        elif hasattr(config, key):
            setattr(config, key, value)
        else:
            # Warn about unknown keys but don't fail
            print(f"Warning: Unknown config key '{key}' in YAML file")

    config.validate()
    return config


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load match configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValidationError: If a setting is out of range
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return GameConfig()

    if not isinstance(config_dict, dict):
        raise ValidationError(f"Config file must contain a mapping: {config_path}")

    return config_from_dict(config_dict)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return default.

    Args:
        config_path: Optional path to YAML config file. If None, returns default config.

    Returns:
        GameConfig instance
    """
    if config_path is None:
        return default_config

    return load_config_from_yaml(config_path)
