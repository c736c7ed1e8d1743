"""Configuration management for the chat client."""

import logging
import os
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


class Configuration:
    """Manages configuration and environment variables for the chat client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables."""
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.load_env()  # Load .env for OLLAMA_CHAT_LOG_LEVEL
        self._config = self._load_yaml_config()

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    def get_ollama_config(self) -> dict[str, Any]:
        """Get the Ollama server configuration from YAML.

        Returns:
            Ollama configuration dictionary.

        Raises:
            ValueError: If required parameters are missing.
        """
        ollama_config = self._config.get("ollama", {})

        required_keys = ["chat_url", "default_model"]
        for key in required_keys:
            if key not in ollama_config:
                raise ValueError(
                    f"ollama.{key} must be explicitly configured in config.yaml"
                )

        return ollama_config

    @property
    def chat_url(self) -> str:
        """Chat endpoint URL. Not overridable from the environment."""
        return self.get_ollama_config()["chat_url"]

    @property
    def default_model(self) -> str:
        """Model used when -model is not given on the command line."""
        return self.get_ollama_config()["default_model"]

    def get_http_client_config(self) -> dict[str, Any]:
        """Get HTTP client configuration.

        Returns:
            HTTP client configuration dictionary with validated values.

        Raises:
            ValueError: If the timeout is negative or not a number.
        """
        http_config = self.get_ollama_config().get("http_client") or {}
        timeout = http_config.get("timeout")

        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, int | float):
                raise ValueError("ollama.http_client.timeout must be a number or null")
            if timeout < 0:
                raise ValueError("ollama.http_client.timeout must be non-negative")

        return {"timeout": timeout}

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration, with OLLAMA_CHAT_LOG_LEVEL applied.

        Returns:
            Logging configuration dictionary.

        Raises:
            ValueError: If the log level is not a known level name.
        """
        logging_config = {**self._config.get("logging", {})}
        level = os.getenv("OLLAMA_CHAT_LOG_LEVEL") or logging_config.get("level", "INFO")
        level = str(level).upper()

        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{level}'")

        logging_config["level"] = level
        return logging_config
