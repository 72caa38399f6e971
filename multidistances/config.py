"""
Configuration management for multidistances.

Settings come from (lowest to highest precedence) the dataclass defaults,
a YAML file, ``MULTIDISTANCES_*`` environment variables and finally the
command-line options.
"""

import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .errors import ConfigurationError
from .utils.logging_setup import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "MULTIDISTANCES_"


@dataclass
class MultiDistancesConfig:
    """Settings for distance computation and sequencing."""

    # Metric selection
    metric: str = "ncd-xz"
    modifier: Optional[str] = None
    q: int = 2  # Gram length for q-gram metrics
    compression_level: Optional[int] = None  # None = codec default

    # Matrix computation
    precalc: bool = True
    workers: int = 1

    # Sequencing and queries
    strategy: str = "maximin"
    top_n: int = 5

    # File collection
    extensions: List[str] = field(default_factory=list)
    recursive: bool = True

    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MultiDistancesConfig':
        """Create from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in sorted(set(data) - set(known)):
            logger.warning(f"Ignoring unknown config key '{key}'")
        return cls(**known)

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ConfigurationError: Listing every invalid parameter
        """
        errors = self._type_errors()
        if errors:
            raise ConfigurationError("; ".join(errors), details={'errors': errors})

        if self.q < 1:
            errors.append(f"q must be >= 1, got {self.q}")
        if self.workers < 1:
            errors.append(f"workers must be >= 1, got {self.workers}")
        if self.top_n < 1:
            errors.append(f"top_n must be >= 1, got {self.top_n}")
        if self.strategy.lower().replace("-", "").replace("_", "") not in ("maximin", "maximean"):
            errors.append(f"strategy must be maximin or maximean, got {self.strategy}")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"log_level is not a logging level: {self.log_level}")

        if errors:
            raise ConfigurationError("; ".join(errors), details={'errors': errors})


    def _type_errors(self) -> List[str]:
        """Values of the wrong type, as read from a hand-edited YAML file."""
        errors = []

        def is_int(value) -> bool:
            return isinstance(value, int) and not isinstance(value, bool)

        for name in ("q", "workers", "top_n"):
            value = getattr(self, name)
            if not is_int(value):
                errors.append(f"{name} must be an integer, got {value!r}")
        if self.compression_level is not None and not is_int(self.compression_level):
            errors.append(f"compression_level must be an integer or null, got {self.compression_level!r}")
        for name in ("metric", "strategy", "log_level"):
            value = getattr(self, name)
            if not isinstance(value, str):
                errors.append(f"{name} must be a string, got {value!r}")
        if self.modifier is not None and not isinstance(self.modifier, str):
            errors.append(f"modifier must be a string or null, got {self.modifier!r}")
        for name in ("precalc", "recursive"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                errors.append(f"{name} must be true or false, got {value!r}")
        if not isinstance(self.extensions, list) or not all(isinstance(e, str) for e in self.extensions):
            errors.append(f"extensions must be a list of strings, got {self.extensions!r}")
        return errors


class ConfigManager:
    """Loads, saves and displays the configuration file."""

    DEFAULT_CONFIG_FILE = ".multidistances.yml"

    def __init__(self, config_path: Optional[Path] = None, console: Optional[Console] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file
            console: Rich console for display output
        """
        self.console = console or Console()
        self.config_path = Path(config_path) if config_path else self.default_path()
        self._config: Optional[MultiDistancesConfig] = None

    @classmethod
    def default_path(cls) -> Path:
        """Config in the current directory, else in the home directory."""
        local = Path(cls.DEFAULT_CONFIG_FILE)
        if local.exists():
            return local
        return Path.home() / cls.DEFAULT_CONFIG_FILE

    def load(self) -> MultiDistancesConfig:
        """
        Load configuration from file or fall back to defaults.

        Returns:
            Loaded or default configuration

        Raises:
            ConfigurationError: The file exists but is not a YAML mapping
        """
        if self._config is not None:
            return self._config

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"Config file {self.config_path} must hold a mapping")
            self._config = MultiDistancesConfig.from_dict(data)
            logger.info(f"Loaded config from {self.config_path}")
        else:
            self._config = MultiDistancesConfig()
            logger.debug("Using default configuration")

        self._apply_env_overrides()
        return self._config

    def save(self, config: Optional[MultiDistancesConfig] = None) -> Path:
        """
        Save configuration to file.

        Args:
            config: Configuration to save (uses current if None)

        Returns:
            The path written
        """
        config = config or self._config or MultiDistancesConfig()
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        logger.info(f"Saved config to {self.config_path}")
        return self.config_path

    def display(self, config: Optional[MultiDistancesConfig] = None):
        """
        Display configuration in a formatted panel.

        Args:
            config: Configuration to display (uses current if None)
        """
        config = config or self.load()
        yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=False)
        panel = Panel(
            syntax,
            title=f"[bold cyan]multidistances configuration[/bold cyan] ({self.config_path})",
            border_style="cyan"
        )
        self.console.print(panel)

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        config = self._config
        if config is None:
            return

        if value := os.getenv(f"{ENV_PREFIX}METRIC"):
            config.metric = value
        if value := os.getenv(f"{ENV_PREFIX}MODIFIER"):
            config.modifier = value
        if value := os.getenv(f"{ENV_PREFIX}STRATEGY"):
            config.strategy = value

        for attr, env_name in (("q", "Q"), ("compression_level", "LEVEL"), ("workers", "WORKERS")):
            value = os.getenv(f"{ENV_PREFIX}{env_name}")
            if value is None:
                continue
            try:
                setattr(config, attr, int(value))
            except ValueError:
                raise ConfigurationError(
                    f"Invalid integer in {ENV_PREFIX}{env_name}: {value!r}", parameter=attr
                ) from None
            logger.debug(f"Applied env override: {attr}={value}")

        if value := os.getenv(f"{ENV_PREFIX}PRECALC"):
            config.precalc = value.strip().lower() in ("1", "true", "yes", "on")
