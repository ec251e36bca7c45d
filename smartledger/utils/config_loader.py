"""Configuration file loader with validation"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any, Optional
from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "settings.yaml"

REQUIRED_KEYS = ['version', 'rules', 'collaborator', 'report']


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load YAML configuration file with validation.

    Resolution order: explicit path, SMARTLEDGER_CONFIG env var, packaged
    settings.yaml.

    Args:
        config_path: Path to configuration file

    Returns:
        Dictionary with configuration

    Raises:
        ConfigurationError: If file doesn't exist, is invalid YAML or misses keys
    """
    config_path = config_path or os.getenv("SMARTLEDGER_CONFIG") or str(DEFAULT_CONFIG_PATH)
    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    missing_keys = [key for key in REQUIRED_KEYS if key not in config]
    if missing_keys:
        raise ConfigurationError(f"Missing required configuration keys: {missing_keys}")

    return config


def get_rules(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    """
    Get a rules section (e.g. 'anomaly_detection')

    Args:
        config: Full configuration dictionary
        section: Rules section name

    Returns:
        Section dictionary, empty if absent
    """
    return (config.get('rules') or {}).get(section) or {}


def get_agent_profile(config: Dict[str, Any], agent_id: str) -> Dict[str, Any]:
    """
    Look up the collaborator agent profile registered under agent_id

    Args:
        config: Full configuration dictionary
        agent_id: Agent identifier

    Returns:
        Profile dictionary (model, system_prompt, ...), empty if unknown
    """
    agents = (config.get('collaborator') or {}).get('agents') or {}
    for profile in agents.values():
        if profile.get('agent_id') == agent_id:
            return profile
    return {}
