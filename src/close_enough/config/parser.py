"""
Reading and writing the close-enough YAML configuration.

The file is chosen in this order: an explicit path (``--config``), the
CLE_CONFIG environment variable, then the first of ``.cle.yaml``,
``.cle.yml``, ``cle.yaml`` and ``cle.yml`` found in the working directory,
the home directory or ``~/.config/close-enough``. Without a file the
built-in defaults apply.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import yaml

from ..models.config import CloseEnoughConfig, ResolverConfig, validate_config_dict


logger = logging.getLogger(__name__)


CONFIG_ENV_VAR = 'CLE_CONFIG'

CONFIG_FILE_NAMES = ('.cle.yaml', '.cle.yml', 'cle.yaml', 'cle.yml')

# Directory names a fresh configuration leaves out of searches
TEMPLATE_IGNORE = ['.git', 'node_modules', '__pycache__']

SECTION_COMMENTS = {
    'resolver': "Directory resolution (sort_listings, ancestor_overflow: saturate|error, ignore globs)",
    'history': "Directory history file used by 'cle history' and the cj script",
    'log_level': "Logging level: DEBUG, INFO, WARNING, ERROR or CRITICAL",
}

LARGE_HISTORY = 100000


class ConfigurationError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""
    pass


@dataclass
class ConfigParseResult:
    """
    A loaded configuration and where it came from.

    Attributes:
        config: The validated configuration
        warnings: Settings that are valid but probably unintended
        config_path: File the configuration was read from, None for defaults
    """
    config: CloseEnoughConfig
    warnings: List[str] = field(default_factory=list)
    config_path: Optional[Path] = None

    @property
    def is_default(self) -> bool:
        return self.config_path is None


def template_config() -> CloseEnoughConfig:
    """The configuration written by ``cle config init``."""
    return CloseEnoughConfig(resolver=ResolverConfig(ignore=TEMPLATE_IGNORE))


class ConfigParser:
    """
    Locates, reads and writes close-enough configuration files.

    In strict mode every warning about a loaded file is raised as a
    ConfigurationError instead of being returned.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def search_locations(self) -> Iterator[Path]:
        """Yield the candidate files checked when no path is given."""
        home = Path.home()
        for directory in (Path.cwd(), home, home / '.config' / 'close-enough'):
            for name in CONFIG_FILE_NAMES:
                yield directory / name

    def locate(self, config_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """
        Pick the file to load.

        Returns:
            The configuration file, or None when defaults apply

        Raises:
            ConfigurationError: If an explicitly named file does not exist
        """
        explicit = config_path or os.getenv(CONFIG_ENV_VAR)
        if explicit:
            path = Path(explicit).expanduser()
            if not path.is_file():
                raise ConfigurationError(f"Configuration file not found: {path}")
            return path

        for candidate in self.search_locations():
            if candidate.is_file():
                logger.debug(f"Found configuration file: {candidate}")
                return candidate

        logger.debug("No configuration file found, using defaults")
        return None

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load the configuration named by ``config_path`` or found by lookup.

        Raises:
            ConfigurationError: If the file is unreadable, is not a YAML
                mapping, fails validation, or has warnings in strict mode
        """
        path = self.locate(config_path)
        data = self.read_yaml(path) if path is not None else {}

        try:
            config = CloseEnoughConfig.from_dict(validate_config_dict(data))
        except ValueError as e:
            raise ConfigurationError(f"Configuration validation failed for {path or 'defaults'}: {e}") from e

        warnings = self.check(config, path)
        if self.strict and warnings:
            raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")

        logger.debug(f"Configuration loaded from {path or 'defaults'}")
        return ConfigParseResult(config=config, warnings=warnings, config_path=path)

    def read_yaml(self, path: Path) -> Dict[str, Any]:
        """
        Parse one YAML file into a mapping.

        Empty files and files holding only comments read as ``{}``.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a YAML mapping, got {type(data).__name__}")
        return data

    def check(self, config: CloseEnoughConfig, path: Optional[Path]) -> List[str]:
        """Collect warnings about a validated configuration."""
        warnings = config.validate_configuration()

        if path is None:
            warnings.append("No configuration file found, using default settings")
        elif Path(config.history.path).resolve() == path.resolve():
            warnings.append("History file points at the configuration file and would overwrite it")

        if config.history.max_entries > LARGE_HISTORY:
            warnings.append("Very high history max_entries makes every cd rewrite a large file")

        return warnings

    def validate(self, config_path: Optional[Union[str, Path]] = None) -> List[str]:
        """
        Report the problems of a configuration file without raising.

        Returns:
            Error messages, empty when the file loads cleanly
        """
        try:
            self.load_config(config_path)
        except ConfigurationError as e:
            return [str(e)]
        return []

    def render(self, config: CloseEnoughConfig) -> str:
        """Render a configuration as YAML with a comment above each section."""
        config_dict = config.to_dict()
        lines = [
            "# close-enough configuration",
            "# Controls how abbreviated directory names are resolved and where history is kept",
            "",
        ]

        for section, comment in SECTION_COMMENTS.items():
            lines.append(f"# {comment}")
            lines.append(yaml.safe_dump({section: config_dict[section]},
                                        default_flow_style=False, sort_keys=False).rstrip())
            lines.append("")

        return "\n".join(lines)

    def save_config(self, config: CloseEnoughConfig, output_path: Union[str, Path]) -> Path:
        """
        Write ``config`` as commented YAML, creating parent directories.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        output_path = Path(output_path).expanduser()
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(self.render(config), encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file {output_path}: {e}") from e

        logger.info(f"Configuration saved to {output_path}")
        return output_path


def load_config(config_path: Optional[Union[str, Path]] = None, strict: bool = False) -> ConfigParseResult:
    """Load the configuration with a fresh parser."""
    return ConfigParser(strict=strict).load_config(config_path)
