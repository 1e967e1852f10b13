"""
Configuration management for csv-safe.

This module provides configuration utilities for controlling the behavior
of csv-safe, including the CSV dialect, key derivation cost and the naming
of derived output files.
"""

import os
from copy import deepcopy
from pathlib import Path

import yaml


class ConfigurationError(ValueError):
    """
    Raised for fatal configuration problems.

    Configuration errors are detected before any row is processed: bad
    invocation options, a blank password, blank or duplicate header names,
    or an unreadable configuration file.
    """


class CsvSafeConfig:
    """
    Configuration for csv-safe.

    Values come from built-in defaults, then an optional YAML file, then
    environment variables, in increasing order of precedence.
    """

    # Default configuration values
    _default_config: dict[str, object] = {
        "encryption": {
            # Deliberately low: every protected cell runs its own derivation.
            "key_iterations": 10000,
            "salt_bytes": 4,
        },
        "csv": {
            "delimiter": ",",
            "quotechar": '"',
            "comment": "#",  # None disables comment lines
            "encoding": "utf-8",
            "trim_fields": True,
            "line_terminator": "\r\n",
        },
        "output": {
            "encrypt_suffix": "_safe",
            "decrypt_suffix": "_decrypted",
        },
    }

    # Instance configuration values, loaded from file or environment
    _config: dict[str, object] = {}

    # Flag indicating if the configuration has been initialized
    _initialized: bool = False

    @classmethod
    def initialize(cls, config_path: str | None = None) -> None:
        """
        Initialize the configuration.

        Args:
            config_path: Optional path to a YAML configuration file

        Raises:
            ConfigurationError: If the configuration file cannot be loaded
        """
        # Start with default configuration (deep copy to avoid shared nested dictionaries)
        cls._config = deepcopy(cls._default_config)

        if config_path:
            cls._load_from_file(config_path)

        # Environment always wins over the file
        cls._load_from_env()

        cls._initialized = True

    @classmethod
    def _load_from_file(cls, config_path: str) -> None:
        """
        Load configuration from a YAML file.

        Nested sections are merged key by key, so a file may override a
        single value without restating the rest of its section.

        Args:
            config_path: Path to the YAML configuration file
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Error loading configuration file: {e}") from e

        if file_config is None:
            return
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {config_path}"
            )

        for section, values in file_config.items():
            current = cls._config.get(section)
            if isinstance(values, dict) and isinstance(current, dict):
                current.update(values)
            else:
                cls._config[section] = values

    @classmethod
    def _load_from_env(cls) -> None:
        """Load configuration from environment variables."""
        env_iterations = os.environ.get("CSVSAFE_KEY_ITERATIONS")
        if env_iterations:
            try:
                cls._config["encryption"]["key_iterations"] = int(env_iterations)
            except ValueError as e:
                raise ConfigurationError(
                    f"CSVSAFE_KEY_ITERATIONS must be an integer, got {env_iterations!r}"
                ) from e

        env_delimiter = os.environ.get("CSVSAFE_DELIMITER")
        if env_delimiter:
            cls._config["csv"]["delimiter"] = env_delimiter

        env_encoding = os.environ.get("CSVSAFE_ENCODING")
        if env_encoding:
            cls._config["csv"]["encoding"] = env_encoding

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Ensure the configuration is initialized."""
        if not cls._initialized:
            cls.initialize()

    @classmethod
    def get(cls, key: str, default: object = None) -> object:
        """
        Get a configuration value.

        Args:
            key: The configuration key to retrieve, dotted for nested values
            default: Default value to return if key is not found

        Returns:
            The configuration value, or default if not found
        """
        cls._ensure_initialized()

        if "." in key:
            value = cls._config
            for part in key.split("."):
                if isinstance(value, dict) and part in value:
                    value = value[part]
                else:
                    return default
            return value

        return cls._config.get(key, default)

    @classmethod
    def get_key_iterations(cls) -> int:
        """
        Get the PBKDF2 iteration count used for value encryption.

        Returns:
            The iteration count (always at least 1)
        """
        iterations = int(cls.get("encryption.key_iterations", 10000))
        if iterations < 1:
            raise ConfigurationError("encryption.key_iterations must be at least 1")
        return iterations

    @classmethod
    def get_salt_bytes(cls) -> int:
        """Get the size of the per-value random salt, in bytes."""
        salt_bytes = int(cls.get("encryption.salt_bytes", 4))
        if salt_bytes < 1:
            raise ConfigurationError("encryption.salt_bytes must be at least 1")
        return salt_bytes

    @classmethod
    def get_csv_settings(cls) -> dict:
        """
        Get the CSV dialect settings.

        Returns:
            Dictionary of the ``csv`` section
        """
        return dict(cls.get("csv", {}))

    @classmethod
    def get_output_suffix(cls, encrypt: bool) -> str:
        """
        Get the file name suffix used when deriving an output path.

        Args:
            encrypt: True for the encrypt direction, False for decrypt

        Returns:
            The configured suffix
        """
        if encrypt:
            return str(cls.get("output.encrypt_suffix", "_safe"))
        return str(cls.get("output.decrypt_suffix", "_decrypted"))
