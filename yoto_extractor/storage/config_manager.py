"""
Manages loading and validation of the optional INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from yoto_extractor.exceptions import ConfigurationError
from yoto_extractor.models.config import ExtractConfig

log = logging.getLogger(__name__)

_INT_KEYS = {"max_workers", "max_redirects", "retries"}
_FLOAT_KEYS = {"timeout"}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ExtractConfig:
        """
        Loads settings from the INI file if present, applies CLI overrides, and
        validates the result.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated ExtractConfig object.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            config_from_file = self._get_config_as_dict()
            log.debug(f"Loaded settings from [dim]{self.config_file_path}[/dim]")
        else:
            log.debug(
                f"No configuration file at [dim]{self.config_file_path}[/dim], "
                "using defaults."
            )

        # Override with CLI options
        if cli_options:
            config_from_file.update(cli_options)

        try:
            return ExtractConfig(**config_from_file)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the known keys of the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        known_keys = ExtractConfig.get_ini_keys()

        for key in section:
            if key not in known_keys:
                log.warning(
                    f"[yellow]Ignoring unknown configuration key '{key}'.[/yellow]"
                )

        values: dict[str, Any] = {}
        for key in known_keys:
            if key not in section:
                continue
            try:
                if key in _INT_KEYS:
                    values[key] = section.getint(key)
                elif key in _FLOAT_KEYS:
                    values[key] = section.getfloat(key)
                else:
                    values[key] = section.get(key)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for '{key}' in configuration file: {e}"
                ) from e
        return values
