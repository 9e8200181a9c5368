"""
Configuration system for the nesting lint.

Supports TOML, YAML and JSON configuration files. The lint settings live in
a ``[lints.nesting_depth]`` table, or at the top level of a file that has
no ``lints`` table.
"""

import json
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional, FrozenSet
from dataclasses import dataclass, field, fields

import yaml

from nestinglint.exceptions import ConfigError


# Default configuration file names to search for
CONFIG_FILE_NAMES = [
    ".nestinglint.toml",
    ".nestinglint.yaml",
    ".nestinglint.yml",
    ".nestinglint.json",
    "nestinglint.toml",
]

# Name of the lint's table under ``lints``
SECTION_NAME = "nesting_depth"

DEFAULT_MAX_DEPTH = 3
DEFAULT_MAX_THEN_ITEMS = 20
DEFAULT_MAX_CONSEC_IF_ELSE = 10

THRESHOLD_KEYS = ("max_depth", "max_then_items", "max_consec_if_else")
BOOLEAN_KEYS = ("ignore_closures", "debug")


@dataclass(frozen=True)
class SpanRange:
    """Lines of one file that the debug trace is restricted to."""
    file: str
    start_line: int
    end_line: int

    def intersects(self, file: str, start_line: int, end_line: int) -> bool:
        if self.file != file:
            return False
        return self.start_line <= end_line and start_line <= self.end_line


@dataclass(frozen=True)
class Config:
    """
    Thresholds and flags for one analysis run.

    Example TOML config:

    ```toml
    [lints.nesting_depth]
    max_depth = 3
    ignore_closures = true
    max_then_items = 20
    max_consec_if_else = 10
    ignore_macros = ["html"]
    debug = false
    ```

    A Config is immutable and safe to share between threads analyzing
    different units.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    ignore_closures: bool = True
    max_then_items: int = DEFAULT_MAX_THEN_ITEMS
    max_consec_if_else: int = DEFAULT_MAX_CONSEC_IF_ELSE
    ignore_macros: FrozenSet[str] = field(default_factory=frozenset)
    debug: bool = False
    debug_span_range: Optional[SpanRange] = None

    def __post_init__(self):
        for key in THRESHOLD_KEYS:
            _check_threshold(key, getattr(self, key))
        for key in BOOLEAN_KEYS:
            if not isinstance(getattr(self, key), bool):
                raise ConfigError("expected a boolean", key=key)
        if not isinstance(self.ignore_macros, frozenset):
            object.__setattr__(self, "ignore_macros", _parse_macro_names(self.ignore_macros))

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary."""
        data = {
            "max_depth": self.max_depth,
            "ignore_closures": self.ignore_closures,
            "max_then_items": self.max_then_items,
            "max_consec_if_else": self.max_consec_if_else,
            "ignore_macros": sorted(self.ignore_macros),
            "debug": self.debug,
        }
        if self.debug_span_range is not None:
            data["debug_span_range"] = {
                "file": self.debug_span_range.file,
                "start_line": self.debug_span_range.start_line,
                "end_line": self.debug_span_range.end_line,
            }
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Config":
        """
        Create config from a dictionary.

        Omitted keys take their defaults. Raises ConfigError naming the key
        for unknown keys, wrong types and non-positive thresholds.
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"expected a table of settings, got {type(data).__name__}")

        known_fields = {f.name for f in fields(cls)}
        for key in data:
            if key not in known_fields:
                raise ConfigError("unknown configuration key", key=key)

        values: Dict[str, Any] = {}
        for key in THRESHOLD_KEYS:
            if key in data:
                values[key] = _check_threshold(key, data[key])
        for key in BOOLEAN_KEYS:
            if key in data:
                if not isinstance(data[key], bool):
                    raise ConfigError("expected a boolean", key=key)
                values[key] = data[key]
        if "ignore_macros" in data:
            values["ignore_macros"] = _parse_macro_names(data["ignore_macros"])
        if data.get("debug_span_range") is not None:
            values["debug_span_range"] = _parse_span_range(data["debug_span_range"])

        return cls(**values)


def _check_threshold(key: str, value: Any) -> int:
    # bool is an int subclass; ``max_depth = true`` is still a type error
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"expected an integer, got {type(value).__name__}", key=key)
    if value < 1:
        raise ConfigError(f"must be at least 1, got {value}", key=key)
    return value


def _parse_macro_names(value: Any) -> FrozenSet[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError("expected a list of macro names", key="ignore_macros")
    for name in value:
        if not isinstance(name, str) or not name:
            raise ConfigError(f"macro names must be non-empty strings, got {name!r}", key="ignore_macros")
    return frozenset(value)


def _parse_span_range(value: Any) -> SpanRange:
    key = "debug_span_range"
    if not isinstance(value, dict):
        raise ConfigError("expected a table with file, start_line and end_line", key=key)
    unknown = set(value) - {"file", "start_line", "end_line"}
    if unknown:
        raise ConfigError(f"unknown field {sorted(unknown)[0]!r}", key=key)
    file = value.get("file")
    start_line = value.get("start_line")
    end_line = value.get("end_line")
    if not isinstance(file, str):
        raise ConfigError("file must be a string", key=key)
    for line in (start_line, end_line):
        if isinstance(line, bool) or not isinstance(line, int):
            raise ConfigError("start_line and end_line must be integers", key=key)
    return SpanRange(file=file, start_line=start_line, end_line=end_line)


def load_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a file.

    Supports TOML, YAML and JSON formats.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")

    try:
        if path.suffix == ".toml":
            return tomllib.loads(content)
        elif path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            return json.loads(content)
        # Try both
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            return yaml.safe_load(content) or {}
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e


def find_config(start_path: str = ".") -> Optional[str]:
    """
    Find a configuration file by searching up the directory tree.

    Returns the path to the first config file found, or None.
    """
    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent

    while True:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return str(config_path)
        if current == current.parent:
            return None
        current = current.parent


def extract_section(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the lint's settings out of a loaded configuration document."""
    if not isinstance(data, dict):
        raise ConfigError(f"expected a table of settings, got {type(data).__name__}")
    if "lints" not in data:
        return data
    lints = data["lints"]
    if not isinstance(lints, dict):
        raise ConfigError("expected a table", key="lints")
    return lints.get(SECTION_NAME) or {}


def load_lint_config(path: Optional[str] = None, start_dir: str = ".") -> Config:
    """
    Load a Config from a file or create a default one.

    If path is None, searches for a config file starting from start_dir.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return Config()

    return Config.from_dict(extract_section(load_config(path)))


def create_default_config() -> str:
    """
    Create a default configuration file content.
    """
    config = {
        "lints": {
            SECTION_NAME: Config().to_dict(),
        },
    }
    return yaml.dump(config, default_flow_style=False, sort_keys=False)
