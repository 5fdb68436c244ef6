"""Configuration management for brandquiz."""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from brandquiz.core.logging import get_logger

logger = get_logger("brandquiz.config")

USER_CONFIG_PATH = Path.home() / ".brandquiz" / "config.yaml"
PROJECT_CONFIG_NAME = ".brandquiz.yaml"
API_KEY_ENV_VAR = "BRANDQUIZ_API_KEY"


class Config:
    """Configuration with hierarchy: CLI args > project config > user config > environment > defaults."""

    def __init__(self):
        """Initialize configuration with default values."""
        # Generation collaborator
        self.provider: str = "openrouter"
        self.model: Optional[str] = None
        self.base_url: Optional[str] = None
        self.api_key: Optional[str] = None
        self.temperature: float = 0.0

        # Orchestrator
        self.max_retries: int = 3
        self.backoff_base_seconds: float = 3.0
        self.max_output_tokens: int = 4096
        self.mapping_max_output_tokens: int = 8192
        self.min_mappings_per_result_type: int = 2

        # Website text extraction
        self.fetch_timeout: float = 10.0
        self.max_website_chars: int = 16000

        # Storage and logging
        self.store_path: Optional[str] = None
        self.log_level: str = "INFO"
        self.json_logs: bool = False
        self.log_file: Optional[str] = None

    @classmethod
    def load(
        cls,
        cli_args: Optional[dict[str, Any]] = None,
        config_file: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from the hierarchy.

        Args:
            cli_args: Dictionary of CLI arguments to override config
            config_file: Explicit config file, read after the user and project files

        Returns:
            Config instance with loaded values
        """
        config = cls()

        env_key = os.getenv(API_KEY_ENV_VAR)
        if env_key:
            config.api_key = env_key

        if USER_CONFIG_PATH.exists():
            config._load_file(USER_CONFIG_PATH)

        project_config_path = Path.cwd() / PROJECT_CONFIG_NAME
        if project_config_path.exists():
            config._load_file(project_config_path)

        if config_file is not None:
            config._load_file(Path(config_file))

        if cli_args:
            for key, value in cli_args.items():
                if value is not None and hasattr(config, key):
                    setattr(config, key, value)

        config.validate()
        return config

    def _load_file(self, config_path: Path) -> None:
        """Load configuration values from a YAML or JSON file."""
        content = config_path.read_text(encoding="utf-8")
        if config_path.suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(content)
        elif config_path.suffix == ".json":
            data = json.loads(content)
        else:
            logger.warning(
                f"Ignoring config file with unknown format: {config_path}",
                context={"path": str(config_path)},
            )
            return

        if not isinstance(data, dict):
            logger.warning(
                f"Ignoring config file without a mapping at top level: {config_path}",
                context={"path": str(config_path)},
            )
            return

        for key, value in data.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)
            else:
                logger.debug(f"Unknown config key '{key}' in {config_path}")

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ValueError: If an option is out of range
        """
        if int(self.max_retries) < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        if float(self.backoff_base_seconds) < 0:
            raise ValueError(
                f"backoff_base_seconds must not be negative, got {self.backoff_base_seconds}"
            )
        if int(self.min_mappings_per_result_type) < 1:
            raise ValueError(
                "min_mappings_per_result_type must be at least 1, "
                f"got {self.min_mappings_per_result_type}"
            )
        if self.provider not in ("openrouter", "ollama"):
            raise ValueError(
                f"Unknown provider: {self.provider}. Supported providers: openrouter, ollama"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "provider": self.provider,
            "model": self.model,
            "base_url": self.base_url,
            "api_key": self.api_key,
            "temperature": self.temperature,
            "max_retries": self.max_retries,
            "backoff_base_seconds": self.backoff_base_seconds,
            "max_output_tokens": self.max_output_tokens,
            "mapping_max_output_tokens": self.mapping_max_output_tokens,
            "min_mappings_per_result_type": self.min_mappings_per_result_type,
            "fetch_timeout": self.fetch_timeout,
            "max_website_chars": self.max_website_chars,
            "store_path": self.store_path,
            "log_level": self.log_level,
            "json_logs": self.json_logs,
            "log_file": self.log_file,
        }

    def save(self, path: Path, format: str = "yaml") -> None:
        """
        Save configuration to file.

        Args:
            path: Path to save config file
            format: Format to save as ('yaml' or 'json')
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {k: v for k, v in self.to_dict().items() if v is not None}

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")

    def get_store_path(self) -> Path:
        """Get the JSON store path, creating its directory if needed."""
        if self.store_path:
            path = Path(self.store_path)
        else:
            path = Path.home() / ".brandquiz" / "store.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
