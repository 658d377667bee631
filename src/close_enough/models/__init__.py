"""
Data models for close-enough.

This module contains the parsed query tokens and the configuration models.
"""

from .tokens import QueryToken, TokenKind, parse_token, parse_tokens
from .config import (
    AncestorOverflow,
    CloseEnoughConfig,
    HistoryConfig,
    ResolverConfig,
)

__all__ = [
    'QueryToken',
    'TokenKind',
    'parse_token',
    'parse_tokens',
    'AncestorOverflow',
    'CloseEnoughConfig',
    'HistoryConfig',
    'ResolverConfig',
]
