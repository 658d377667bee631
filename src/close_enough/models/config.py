"""
Configuration data models for close-enough.

This module defines the settings that shape directory resolution and the
history store, plus the logging level used by the command-line tools.
"""

from typing import Dict, List, Optional, Any
from pathlib import Path
from enum import Enum
import fnmatch
import logging
from pydantic import BaseModel, Field, field_validator


class AncestorOverflow(Enum):
    """What to do when an ancestor pop goes past the filesystem root."""
    SATURATE = "saturate"
    ERROR = "error"


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

KNOWN_SECTIONS = {'resolver', 'history', 'log_level'}


class ResolverConfig(BaseModel):
    """
    Configuration for the directory resolver.

    Attributes:
        sort_listings: Visit directory entries in name order instead of the
            order the filesystem returns them
        ancestor_overflow: Policy for popping past the filesystem root
        ignore: Glob patterns for directory names to leave out of the search
        follow_symlinks: Whether recursive search descends into symlinked
            directories
        max_depth: Depth limit for recursive search (None for unlimited)
    """

    sort_listings: bool = Field(True, description="Sort directory listings by name")
    ancestor_overflow: AncestorOverflow = Field(
        AncestorOverflow.SATURATE,
        description="Policy for ancestor pops past the filesystem root"
    )
    ignore: List[str] = Field(default_factory=list, description="Directory name globs to skip")
    follow_symlinks: bool = Field(False, description="Descend into symlinked directories")
    max_depth: Optional[int] = Field(None, gt=0, description="Recursive search depth limit")

    @field_validator('ancestor_overflow', mode='before')
    @classmethod
    def validate_ancestor_overflow(cls, v) -> AncestorOverflow:
        """Validate and convert the overflow policy to enum."""
        if isinstance(v, str):
            try:
                return AncestorOverflow(v.lower())
            except ValueError:
                raise ValueError(f"Invalid ancestor overflow policy: {v}")
        return v

    @field_validator('ignore')
    @classmethod
    def validate_ignore(cls, v: List[str]) -> List[str]:
        """Drop blank patterns and comments."""
        patterns = []
        for pattern in v:
            if not pattern or not pattern.strip() or pattern.strip().startswith('#'):
                continue
            patterns.append(pattern.strip())
        return patterns

    def should_ignore(self, name: str) -> bool:
        """
        Check if a directory name matches any ignore pattern.

        Args:
            name: Directory entry name (not a full path)

        Returns:
            True if the entry should be skipped
        """
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.ignore)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['ancestor_overflow'] = self.ancestor_overflow.value
        return data


class HistoryConfig(BaseModel):
    """
    Configuration for the directory history file.

    Attributes:
        path: Location of the history file
        max_entries: Maximum number of entries kept in the file
    """

    path: str = Field("~/.cle_history", description="Path of the history file")
    max_entries: int = Field(1000, gt=0, description="Maximum number of history entries")

    def model_post_init(self, __context) -> None:
        """Expand user path after initialization."""
        self.path = str(Path(self.path).expanduser())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class CloseEnoughConfig(BaseModel):
    """
    Main configuration class for close-enough.

    Attributes:
        resolver: Directory resolver settings
        history: History file settings
        log_level: Default logging level for the command-line tools
    """

    resolver: ResolverConfig = Field(default_factory=ResolverConfig, description="Resolver settings")
    history: HistoryConfig = Field(default_factory=HistoryConfig, description="History settings")
    log_level: str = Field("WARNING", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {LOG_LEVELS}")
        return level

    def get_log_level(self) -> int:
        """Get the numeric logging level."""
        return logging.getLevelName(self.log_level)

    def validate_configuration(self) -> List[str]:
        """
        Check for settings that are valid but probably unintended.

        Returns:
            List of warning messages
        """
        warnings = []

        history_dir = Path(self.history.path).parent
        if not history_dir.exists():
            warnings.append(f"History directory does not exist: {history_dir}")

        for pattern in self.resolver.ignore:
            if '/' in pattern:
                warnings.append(f"Ignore pattern '{pattern}' contains '/' but only matches directory names")

        if self.resolver.follow_symlinks and self.resolver.max_depth is None:
            warnings.append("Following symlinks without max_depth may revisit directories through link cycles")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'resolver': self.resolver.to_dict(),
            'history': self.history.to_dict(),
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CloseEnoughConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Sorted listings: {self.resolver.sort_listings}"]
        parts.append(f"Ancestor overflow: {self.resolver.ancestor_overflow.value}")
        parts.append(f"Ignore patterns: {len(self.resolver.ignore)}")
        parts.append(f"History: {self.history.path}")
        parts.append(f"Log level: {self.log_level}")

        return " | ".join(parts)


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated and normalized configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    unknown = set(config_data) - KNOWN_SECTIONS
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

    for section in ('resolver', 'history'):
        value = config_data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Section '{section}' must be a mapping, got {type(value).__name__}")

    present = {key: value for key, value in config_data.items() if value is not None}

    try:
        return CloseEnoughConfig.from_dict(present).to_dict()
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e
