"""
Configuration management for Zeitgeist.
"""
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from zeitgeist.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = 'ZEITGEIST_'
# Separates nested keys in environment variable names, since keys themselves
# contain single underscores (ZEITGEIST_ANALYSIS__MIN_SOURCES_PER_TOPIC=3).
ENV_NESTING = '__'

# Default configuration
DEFAULT_CONFIG = {
    "analysis": {
        "min_articles_per_topic": 4,
        "max_articles_per_topic": 12,
        "min_sources_per_topic": 3,
        "min_article_relevance": 8.0,
        "feature_count": None,
        "max_document_fraction": None,
        "max_iterations": 200,
        "seed": None,
    },
    "feeds": {
        "cutoff_hours": 36,
        "max_concurrent": 8,
        "timeout_seconds": 30,
        "include_inline_images": True,
        "cache_path": "cache/feeds.db",
    },
    "filters": {
        "banned_headlines": [],
    },
    "output": {
        "directory": "output",
        "title": "Zeitgeist",
        "expiry_minutes": 30,
        "link": "",
    },
}

ANALYSIS_KEYS = tuple(DEFAULT_CONFIG["analysis"])


class Config:
    """
    Configuration manager for Zeitgeist.

    Settings come from DEFAULT_CONFIG, overridden by an optional YAML or JSON
    file, overridden in turn by ZEITGEIST_* environment variables.
    """
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the Config.

        Args:
            config_path: Path to a YAML or JSON configuration file

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            user_config = self._read_file(Path(self.config_path))
            if user_config:
                if not isinstance(user_config, dict):
                    raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
                self._update_dict(config, user_config)
            logger.debug(f"Loaded configuration from {self.config_path}")

        self._override_from_env(config)
        return config

    @staticmethod
    def _read_file(path: Path) -> Any:
        suffix = path.suffix.lower()
        if suffix not in ('.yaml', '.yml', '.json'):
            raise ConfigurationError(f"Unsupported config file format: {path.suffix}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                if suffix == '.json':
                    return json.load(f)
                return yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Error reading config from {path}: {e}") from e
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Error parsing config from {path}: {e}") from e

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """
        Recursively update a dictionary.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _override_from_env(self, config: Dict, prefix: str = ENV_PREFIX) -> None:
        """
        Override configuration with environment variables.

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in os.environ.items():
            if not key.startswith(prefix) or ENV_NESTING not in key:
                continue
            parts = key[len(prefix):].lower().split(ENV_NESTING)

            current = config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            try:
                current[parts[-1]] = json.loads(value)
            except json.JSONDecodeError:
                # Not valid JSON, use as string
                current[parts[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'feeds.cutoff_hours')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        current = self.config
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def analysis_settings(self) -> Dict[str, Any]:
        """
        Get the keyword arguments for constructing a Zeitgeist.

        Returns:
            Dict of analysis settings
        """
        analysis = self.config.get("analysis", {})
        return {key: analysis.get(key, DEFAULT_CONFIG["analysis"][key]) for key in ANALYSIS_KEYS}


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Load the configuration.

    Args:
        config_path: Path to a config file, defaulting to $ZEITGEIST_CONFIG_PATH

    Returns:
        Config instance
    """
    return Config(config_path or os.getenv('ZEITGEIST_CONFIG_PATH'))
