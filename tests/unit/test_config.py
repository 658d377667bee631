"""
Unit tests for the configuration models.
"""

import logging

import pytest
from pydantic import ValidationError

from close_enough.models.config import (
    AncestorOverflow,
    CloseEnoughConfig,
    HistoryConfig,
    ResolverConfig,
    validate_config_dict,
)


class TestResolverConfig:
    """Test cases for ResolverConfig."""

    def test_defaults(self):
        config = ResolverConfig()
        assert config.sort_listings is True
        assert config.ancestor_overflow is AncestorOverflow.SATURATE
        assert config.ignore == []
        assert config.follow_symlinks is False
        assert config.max_depth is None

    def test_overflow_from_string(self):
        assert ResolverConfig(ancestor_overflow="ERROR").ancestor_overflow is AncestorOverflow.ERROR

    def test_invalid_overflow(self):
        with pytest.raises(ValidationError, match="Invalid ancestor overflow policy"):
            ResolverConfig(ancestor_overflow="wrap")

    def test_max_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            ResolverConfig(max_depth=0)

    def test_ignore_patterns_cleaned(self):
        config = ResolverConfig(ignore=[" .git ", "", "# comment", "node_modules"])
        assert config.ignore == [".git", "node_modules"]

    def test_should_ignore(self):
        config = ResolverConfig(ignore=[".git", "build*"])
        assert config.should_ignore(".git")
        assert config.should_ignore("build-output")
        assert not config.should_ignore("src")
        assert not config.should_ignore("Build")

    def test_to_dict_uses_enum_values(self):
        assert ResolverConfig().to_dict()['ancestor_overflow'] == "saturate"


class TestHistoryConfig:
    """Test cases for HistoryConfig."""

    def test_path_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert HistoryConfig().path == str(tmp_path / ".cle_history")

    def test_max_entries_positive(self):
        with pytest.raises(ValidationError):
            HistoryConfig(max_entries=0)


class TestCloseEnoughConfig:
    """Test cases for CloseEnoughConfig."""

    def test_log_level_normalized(self):
        config = CloseEnoughConfig(log_level=" debug ")
        assert config.log_level == "DEBUG"
        assert config.get_log_level() == logging.DEBUG

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Invalid log level"):
            CloseEnoughConfig(log_level="chatty")

    def test_from_dict_nested(self):
        config = CloseEnoughConfig.from_dict({
            'resolver': {'sort_listings': False, 'ancestor_overflow': 'error'},
            'history': {'max_entries': 5},
        })
        assert config.resolver.sort_listings is False
        assert config.resolver.ancestor_overflow is AncestorOverflow.ERROR
        assert config.history.max_entries == 5

    def test_to_dict_round_trip(self, tmp_path):
        config = CloseEnoughConfig(history={'path': str(tmp_path / "h")}, resolver={'ignore': ['.git']})
        assert CloseEnoughConfig.from_dict(config.to_dict()) == config

    def test_warnings_for_missing_history_directory(self, tmp_path):
        config = CloseEnoughConfig(history={'path': str(tmp_path / "missing" / "history")})
        warnings = config.validate_configuration()
        assert any("History directory does not exist" in w for w in warnings)

    def test_warnings_for_path_like_ignore(self, tmp_path):
        config = CloseEnoughConfig(
            history={'path': str(tmp_path / "history")},
            resolver={'ignore': ['build/tmp']}
        )
        assert config.validate_configuration() == [
            "Ignore pattern 'build/tmp' contains '/' but only matches directory names"
        ]

    def test_no_warnings_for_sane_config(self, tmp_path):
        config = CloseEnoughConfig(history={'path': str(tmp_path / "history")})
        assert config.validate_configuration() == []

    def test_str(self):
        text = str(CloseEnoughConfig())
        assert "Ancestor overflow: saturate" in text
        assert "Log level: WARNING" in text


class TestValidateConfigDict:
    """Test cases for validate_config_dict()."""

    def test_empty_gives_defaults(self):
        assert validate_config_dict({}) == CloseEnoughConfig().to_dict()

    def test_empty_sections_allowed(self):
        assert validate_config_dict({'resolver': None})['resolver'] == ResolverConfig().to_dict()

    def test_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            validate_config_dict({'roots': ['.']})

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            validate_config_dict({'history': ['a']})

    def test_invalid_values(self):
        with pytest.raises(ValueError, match="Invalid configuration"):
            validate_config_dict({'resolver': {'max_depth': -1}})
