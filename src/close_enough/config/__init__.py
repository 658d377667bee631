"""
Configuration management package for close-enough.

This package locates, validates and writes the YAML configuration used by
the command-line tools.
"""

from .parser import (
    ConfigParser,
    ConfigParseResult,
    ConfigurationError,
    load_config,
    template_config
)

__all__ = [
    'ConfigParser',
    'ConfigParseResult',
    'ConfigurationError',
    'load_config',
    'template_config'
]
