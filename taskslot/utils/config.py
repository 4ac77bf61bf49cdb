"""Configuration management."""

import json
import yaml
from pathlib import Path
from typing import Dict, Any


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

    return data or {}


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'scheduling': {
            'planning_horizon_days': 14,
            'working_hours_start': 9,
            'working_hours_end': 17,
            'working_days': [1, 2, 3, 4, 5],  # Monday to Friday, 0 = Sunday
            'min_break_minutes': 15,
            'default_task_duration': 60,
            'min_task_minutes': 15,
        },
        'tie_break': {
            'secondary': 'deadline',
        },
    }


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a partial config on the defaults, section by section."""
    config = get_default_config()
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section] = {**config[section], **values}
        else:
            config[section] = values
    return config
