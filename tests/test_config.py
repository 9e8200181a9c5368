"""
Tests for configuration loading and validation.
"""

import pytest
import os
import sys

import yaml

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nestinglint.config import (
    Config, SpanRange, create_default_config, extract_section, find_config,
    load_config, load_lint_config,
)
from nestinglint.core.engine import create_analyzer
from nestinglint.exceptions import ConfigError


class TestConfig:
    """Tests for the Config model."""

    def test_defaults(self):
        """Test the documented defaults."""
        config = Config()

        assert config.max_depth == 3
        assert config.ignore_closures is True
        assert config.max_then_items == 20
        assert config.max_consec_if_else == 10
        assert config.ignore_macros == frozenset()
        assert config.debug is False
        assert config.debug_span_range is None

    def test_from_dict(self):
        """Test that given keys override the defaults."""
        config = Config.from_dict({"max_depth": 5, "ignore_macros": ["html", "view"]})

        assert config.max_depth == 5
        assert config.ignore_macros == frozenset({"html", "view"})
        assert config.max_then_items == 20

    def test_empty_payload(self):
        """Test that an empty or missing table gives the defaults."""
        assert Config.from_dict({}) == Config()
        assert Config.from_dict(None) == Config()

    @pytest.mark.parametrize("key", ["max_depth", "max_then_items", "max_consec_if_else"])
    def test_zero_threshold(self, key):
        """Test that a zero threshold is rejected naming the key."""
        with pytest.raises(ConfigError) as exc_info:
            Config.from_dict({key: 0})
        assert exc_info.value.key == key
        assert key in str(exc_info.value)

    def test_zero_threshold_direct(self):
        """Test that constructing a Config directly is validated too."""
        with pytest.raises(ConfigError):
            Config(max_depth=0)

    def test_unknown_key(self):
        """Test that misspelled keys are not silently ignored."""
        with pytest.raises(ConfigError) as exc_info:
            Config.from_dict({"max_dept": 4})
        assert exc_info.value.key == "max_dept"

    @pytest.mark.parametrize("data,key", [
        ({"max_depth": "3"}, "max_depth"),
        ({"max_depth": True}, "max_depth"),
        ({"max_then_items": 2.5}, "max_then_items"),
        ({"ignore_closures": "yes"}, "ignore_closures"),
        ({"debug": 1}, "debug"),
        ({"ignore_macros": "html"}, "ignore_macros"),
        ({"ignore_macros": ["html", 3]}, "ignore_macros"),
        ({"debug_span_range": [1, 2]}, "debug_span_range"),
    ])
    def test_wrong_types(self, data, key):
        """Test that values of the wrong type are rejected."""
        with pytest.raises(ConfigError) as exc_info:
            Config.from_dict(data)
        assert exc_info.value.key == key

    def test_span_range(self):
        """Test parsing a debug span range."""
        config = Config.from_dict({
            "debug": True,
            "debug_span_range": {"file": "src/lib.rs", "start_line": 10, "end_line": 20},
        })

        assert config.debug_span_range == SpanRange("src/lib.rs", 10, 20)
        assert config.debug_span_range.intersects("src/lib.rs", 18, 30)
        assert not config.debug_span_range.intersects("src/lib.rs", 21, 30)
        assert not config.debug_span_range.intersects("src/main.rs", 10, 20)

    def test_round_trip(self):
        """Test that to_dict output is accepted by from_dict."""
        config = Config(max_depth=4, ignore_macros={"html"},
                        debug_span_range=SpanRange("a.rs", 1, 5))
        assert Config.from_dict(config.to_dict()) == config


class TestConfigFiles:
    """Tests for reading configuration files."""

    def test_toml_section(self, tmp_path):
        """Test reading the lints.nesting_depth table of a TOML file."""
        path = tmp_path / "nestinglint.toml"
        path.write_text(
            "[lints.nesting_depth]\n"
            "max_depth = 5\n"
            "ignore_closures = false\n"
            'ignore_macros = ["html"]\n'
        )

        config = load_lint_config(str(path))

        assert config.max_depth == 5
        assert config.ignore_closures is False
        assert config.ignore_macros == frozenset({"html"})

    def test_yaml_top_level(self, tmp_path):
        """Test a YAML file without a lints table."""
        path = tmp_path / "lint.yaml"
        path.write_text("max_then_items: 8\nmax_consec_if_else: 4\n")

        config = load_lint_config(str(path))

        assert config.max_then_items == 8
        assert config.max_consec_if_else == 4

    def test_json(self, tmp_path):
        """Test a JSON file with the lints table."""
        path = tmp_path / "lint.json"
        path.write_text('{"lints": {"nesting_depth": {"max_depth": 2}}}')

        assert load_lint_config(str(path)).max_depth == 2

    def test_other_lints_ignored(self):
        """Test that tables for other lints are not read."""
        data = {"lints": {"other_lint": {"max_depth": "x"}}}
        assert extract_section(data) == {}

    def test_invalid_toml(self, tmp_path):
        """Test that an unparsable file is a ConfigError."""
        path = tmp_path / "broken.toml"
        path.write_text("[lints\nmax_depth = ")

        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_missing_file(self, tmp_path):
        """Test that an explicitly named file must exist."""
        with pytest.raises(FileNotFoundError):
            load_lint_config(str(tmp_path / "absent.toml"))

    def test_invalid_value_in_file(self, tmp_path):
        """Test that file values are validated like any other."""
        path = tmp_path / ".nestinglint.yaml"
        path.write_text("lints:\n  nesting_depth:\n    max_depth: 0\n")

        with pytest.raises(ConfigError, match="max_depth"):
            load_lint_config(str(path))

    def test_find_config(self, tmp_path):
        """Test searching parent directories for a config file."""
        (tmp_path / ".nestinglint.toml").write_text("[lints.nesting_depth]\nmax_depth = 6\n")
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)

        found = find_config(str(nested))

        assert found == str((tmp_path / ".nestinglint.toml").resolve())
        assert load_lint_config(start_dir=str(nested)).max_depth == 6

    def test_default_config_content(self):
        """Test that the generated file holds the defaults."""
        data = yaml.safe_load(create_default_config())
        assert Config.from_dict(extract_section(data)) == Config()

    def test_create_analyzer_overrides(self, tmp_path):
        """Test that keyword settings override the file."""
        path = tmp_path / "lint.yaml"
        path.write_text("max_depth: 5\n")

        analyzer = create_analyzer(str(path), max_then_items=3)

        assert analyzer.config.max_depth == 5
        assert analyzer.config.max_then_items == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
