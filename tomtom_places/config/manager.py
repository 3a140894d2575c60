"""
Configuration management for TomTom Places client.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

from .. import utils
from ..exceptions import ConfigurationError
from ..models import AutoCompleteOptions, FuzzySearchOptions

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholders with actual values.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in strings, dicts and lists.

    Unset variables are left as is.
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def isUnsubstituted(value: Any) -> bool:
    """Check if value is a lone placeholder whose variable was not set, dood!"""
    return isinstance(value, str) and ENV_VAR_PATTERN.fullmatch(value.strip()) is not None


class ConfigManager:
    """Manages configuration loading and validation for TomTom Places client.

    The main TOML file is loaded first, then every *.toml file found in the
    config directories is merged on top of it (sorted by path, later wins).
    A .env file is loaded before ${VAR} placeholders are substituted.
    """

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories.

        Raises:
            SystemExit: If the main config file is missing and no config directories are given,
                        or if the main config file can't be parsed
        """
        self.config_path = configPath
        self.config_dirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        dirPath = Path(directory)

        if not dirPath.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return []

        if not dirPath.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return []

        tomlFiles = [path for path in dirPath.rglob("*.toml") if path.is_file()]
        for tomlFile in tomlFiles:
            logger.debug(f"Found config file: {tomlFile}")

        return sorted(tomlFiles)

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, arrays and scalars are replaced."""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories."""
        configFile = Path(self.config_path)
        hasConfigFile = configFile.exists()
        if not hasConfigFile and not self.config_dirs:
            logger.error(f"Configuration file {self.config_path} not found!")
            sys.exit(1)

        config: Dict[str, Any] = {}
        if hasConfigFile:
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration from {self.config_path}: {e}")
                sys.exit(1)
            logger.info(f"Loaded main config from {self.config_path}")

        for configDir in self.config_dirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    # Continue with other files instead of exiting
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue

                config = self._mergeConfigs(config, dirConfig)
                logger.info(f"Merged config from {tomlFile}")

        logger.info("Configuration loaded successfully, dood!")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getTomTomConfig(self) -> Dict[str, Any]:
        """
        Get TomTom API configuration

        Returns:
            Dict with TomTom settings (api-key, delay, limit, timeout),
            placeholders of unset environment variables are dropped
        """
        section = self.get("tomtom", {})
        if not isinstance(section, dict):
            raise ConfigurationError(f"[tomtom] must be a table, got {type(section).__name__}")
        return {k: v for k, v in section.items() if not isUnsubstituted(v)}

    def getFuzzySearchOptions(self) -> FuzzySearchOptions:
        """Get FuzzySearch constructor options from the [tomtom] section.

        Raises:
            ConfigurationError: If delay or limit have a wrong type or delay is not positive
        """
        tomtomConfig = self.getTomTomConfig()

        apiKey = tomtomConfig.get("api-key")
        if apiKey is not None and not isinstance(apiKey, str):
            raise ConfigurationError("tomtom.api-key must be a string")

        delay = _getNumber(tomtomConfig, "delay")
        if delay is not None and delay <= 0:
            raise ConfigurationError(f"tomtom.delay must be positive, got {delay}")

        limit = _getNumber(tomtomConfig, "limit")
        if limit is not None and not isinstance(limit, int):
            raise ConfigurationError(f"tomtom.limit must be an integer, got {limit}")

        return FuzzySearchOptions(apiKey=apiKey or None, delay=delay, limit=limit)

    def getAutoCompleteOptions(self) -> AutoCompleteOptions:
        """Get per-call options (request timeout) from the [tomtom] section."""
        return AutoCompleteOptions(timeout=_getNumber(self.getTomTomConfig(), "timeout"))


def _getNumber(config: Dict[str, Any], key: str) -> Optional[float]:
    """Get a numeric value from config, accepting numeric strings from env substitution."""
    value = config.get(key)
    if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
    raise ConfigurationError(f"tomtom.{key} must be a number, got {value!r}")
