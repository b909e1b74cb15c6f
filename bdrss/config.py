"""
Configuration management for bdrss.
"""
import os
import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    "site": {
        "base": "https://bdnews24.com",
        "target": "https://bdnews24.com/opinion",
    },
    "proxy": {
        "url": "http://localhost:8191",
        "maxtimeout": 60000,  # milliseconds, spent inside the proxy
        "timeout": 65,  # seconds, for the outer HTTP call
    },
    "feed": {
        "title": "bdnews24.com – Opinion",
        "description": "Latest opinion pieces from bdnews24.com",
        "url": "https://bdnews24.com/opinion",
        "language": "en",
        "limit": 20,
    },
    "output": {
        "path": "./feeds/feed.xml",
    },
}

class Config:
    """
    Configuration manager for bdrss.
    """
    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize the Config.

        Args:
            config_path: Path to a YAML or JSON configuration file
            environ: Environment mapping to read overrides from (defaults to os.environ)
        """
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Load configuration from file or use defaults.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            try:
                path = Path(self.config_path)
                if path.exists():
                    if path.suffix.lower() in ['.yaml', '.yml']:
                        with open(path, 'r') as f:
                            user_config = yaml.safe_load(f) or {}
                    elif path.suffix.lower() == '.json':
                        with open(path, 'r') as f:
                            user_config = json.load(f)
                    else:
                        raise ValueError(f"Unsupported config file format: {path.suffix}")

                    # Update config with user settings
                    self._update_dict(config, user_config)
                else:
                    logger.warning(f"Config file {self.config_path} not found")
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.warning(f"Error loading config from {self.config_path}: {e}")
                logger.warning("Using default configuration")

        # Override with environment variables
        self._override_from_env(config)

        # The proxy location keeps its conventional variable name
        proxy_url = self.environ.get('FLARESOLVERR_URL')
        if proxy_url:
            config['proxy']['url'] = proxy_url

        return config

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

    def _override_from_env(self, config: Dict, prefix: str = 'BDRSS_') -> None:
        """
        Override configuration with environment variables.

        BDRSS_OUTPUT_PATH=/tmp/feed.xml sets output.path, and so on.

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in self.environ.items():
            if not key.startswith(prefix) or key in ('BDRSS_CONFIG_PATH', 'BDRSS_LOG_LEVEL'):
                continue

            # Remove prefix and split by underscore
            parts = key[len(prefix):].lower().split('_')

            # Navigate to the right place in the config
            current = config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            # Set the value
            try:
                # Try to parse as JSON
                current[parts[-1]] = json.loads(value)
            except json.JSONDecodeError:
                # If not valid JSON, use as string
                current[parts[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'proxy.url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        parts = key.split('.')
        current = self.config

        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current


@dataclass(frozen=True)
class FeedSettings:
    """
    Explicit values one feed generation run depends on.
    """
    base_url: str
    target_url: str
    proxy_url: str
    output_path: Path
    feed_title: str
    feed_description: str
    feed_url: str
    language: str = "en"
    limit: int = 20
    proxy_max_timeout_ms: int = 60000
    proxy_timeout: float = 65

    @classmethod
    def from_config(cls, config: Config) -> "FeedSettings":
        """
        Build settings from a loaded Config.

        Args:
            config: Configuration to read

        Returns:
            FeedSettings instance
        """
        return cls(
            base_url=config.get('site.base'),
            target_url=config.get('site.target'),
            proxy_url=config.get('proxy.url'),
            output_path=Path(config.get('output.path')),
            feed_title=config.get('feed.title'),
            feed_description=config.get('feed.description'),
            feed_url=config.get('feed.url'),
            language=config.get('feed.language', 'en'),
            limit=int(config.get('feed.limit', 20)),
            proxy_max_timeout_ms=int(config.get('proxy.maxtimeout', 60000)),
            proxy_timeout=float(config.get('proxy.timeout', 65)),
        )


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load the .env file and build a Config.

    Args:
        config_path: Path to the configuration file; BDRSS_CONFIG_PATH is used when omitted

    Returns:
        Config instance
    """
    load_dotenv()
    return Config(config_path or os.getenv('BDRSS_CONFIG_PATH'))
