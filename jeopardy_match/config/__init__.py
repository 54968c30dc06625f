"""Match configuration module."""

from .game_config import Ability, GameConfig, default_config, default_abilities
from .config_loader import load_config, load_config_from_yaml, config_from_dict

__all__ = [
    'Ability',
    'GameConfig',
    'default_config',
    'default_abilities',
    'load_config',
    'load_config_from_yaml',
    'config_from_dict',
]
