from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from MN_Tool_Box.errors import ConfigError

CONFIG_SCHEMA_VERSION = 1


DEFAULT_CONFIG = {
    "meta": {
        "config_version": CONFIG_SCHEMA_VERSION,
    },
    "chain": {
        "base_denom": "uumee",
        "base_unit_exponent": 6,
        "native_prefix": "umee",
        "foreign_prefix": "cosmos",
        "address_length": 20,
    },
    "logging": {
        "level": "INFO",
        "json": False,
    },
}


@dataclass(frozen=True)
class ChainConfig:
    base_denom: str = "uumee"
    base_unit_exponent: int = 6
    native_prefix: str = "umee"
    foreign_prefix: str = "cosmos"
    address_length: int = 20

    def __post_init__(self):
        if not self.base_denom:
            raise ConfigError("chain.base_denom must not be empty")
        if not self.native_prefix or not self.foreign_prefix:
            raise ConfigError("chain address prefixes must not be empty")
        for name in ("base_unit_exponent", "address_length"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"chain.{name} must be an integer, got {value!r}")
        for name in ("base_denom", "native_prefix", "foreign_prefix"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"chain.{name} must be a string, got {getattr(self, name)!r}")
        if self.base_unit_exponent < 0:
            raise ConfigError(f"chain.base_unit_exponent must be >= 0, got {self.base_unit_exponent}")
        if self.address_length <= 0:
            raise ConfigError(f"chain.address_length must be > 0, got {self.address_length}")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = False


@dataclass
class ToolConfig:
    config_version: int = CONFIG_SCHEMA_VERSION
    chain: ChainConfig = field(default_factory=ChainConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _parse_min_yaml(text: str) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    current_section: str | None = None

    for raw in text.splitlines():
        line = raw.rstrip()
        if not line or line.strip().startswith("#"):
            continue
        if not line.startswith(" ") and line.endswith(":"):
            current_section = line[:-1].strip()
            result[current_section] = {}
            continue
        if current_section and line.startswith("  ") and ":" in line:
            key, val = line.strip().split(":", 1)
            value = val.strip()
            if value.startswith("[") and value.endswith("]"):
                parsed = json.loads(value)
            elif value.lower() in {"true", "false"}:
                parsed = value.lower() == "true"
            else:
                try:
                    parsed = int(value)
                except ValueError:
                    parsed = value.strip('"')
            result[current_section][key] = parsed
    return result


def _build_section(cls, section: str, values: Dict[str, Any]):
    try:
        return cls(**values)
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid '{section}' section: {e}") from e


def load_config(path: str | Path | None = None) -> ToolConfig:
    if path is None:
        return ToolConfig()
    config_path = Path(path)
    if not config_path.exists():
        return ToolConfig()

    text = config_path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = _parse_min_yaml(text)
    if not isinstance(data, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    merged = json.loads(json.dumps(DEFAULT_CONFIG))
    for section in ("meta", "chain", "logging"):
        if section in data and isinstance(data[section], dict):
            merged[section].update(data[section])

    return ToolConfig(
        config_version=int(merged["meta"].get("config_version", CONFIG_SCHEMA_VERSION)),
        chain=_build_section(ChainConfig, "chain", merged["chain"]),
        logging=_build_section(LoggingConfig, "logging", merged["logging"]),
    )
