import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import (
    AggregatorSettings,
    ConfigError,
    ExecutorSettings,
    LimitSettings,
    Settings,
    UnsupportedConfigFormatError,
)

_SECTIONS = {"executor", "limits", "aggregator"}


def load_settings(path: str | Path) -> Settings:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_settings(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")
    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
            # An empty YAML document means "all defaults".
            if raw_file is None:
                raw_file = {}
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed succesfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_settings(raw: Mapping[str, Any]) -> Settings:
    for section in raw:
        if section not in _SECTIONS:
            raise ConfigError(f"Unknown section: {section}")

    return Settings(
        executor=_build_executor(_section(raw, "executor")),
        limits=_build_limits(_section(raw, "limits")),
        aggregator=_build_aggregator(_section(raw, "aggregator")),
    )


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    fields = raw.get(name, {})
    if not isinstance(fields, Mapping):
        raise ConfigError(f"'{name}' must be a mapping, got {type(fields)}")
    return fields


def _check_keys(section: str, fields: Mapping[str, Any], keys: set[str]) -> None:
    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"{section}: Can't process: {field}")


def _number(section: str, key: str, value: Any, *, minimum: float) -> float:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{section}.{key}: should be a number, got {type(value)}")
    if value < minimum:
        raise ConfigError(f"{section}.{key}: must be >= {minimum}, got {value}")
    return value


def _integer(section: str, key: str, value: Any, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{section}.{key}: should be an integer, got {type(value)}")
    if value < minimum:
        raise ConfigError(f"{section}.{key}: must be >= {minimum}, got {value}")
    return value


def _build_executor(fields: Mapping[str, Any]) -> ExecutorSettings:
    _check_keys("executor", fields, {"unit_delay_ms", "pool_cap"})
    settings = ExecutorSettings()

    if "unit_delay_ms" in fields:
        settings.unit_delay_ms = _number(
            "executor", "unit_delay_ms", fields["unit_delay_ms"], minimum=0
        )

    if "pool_cap" in fields:
        settings.pool_cap = _integer(
            "executor", "pool_cap", fields["pool_cap"], minimum=1
        )

    return settings


def _build_limits(fields: Mapping[str, Any]) -> LimitSettings:
    keys = {"max_batch", "max_benchmark", "max_blocking_delay_ms"}
    _check_keys("limits", fields, keys)
    settings = LimitSettings()

    if "max_batch" in fields:
        settings.max_batch = _integer(
            "limits", "max_batch", fields["max_batch"], minimum=1
        )

    if "max_benchmark" in fields:
        settings.max_benchmark = _integer(
            "limits", "max_benchmark", fields["max_benchmark"], minimum=1
        )

    if "max_blocking_delay_ms" in fields:
        settings.max_blocking_delay_ms = _integer(
            "limits",
            "max_blocking_delay_ms",
            fields["max_blocking_delay_ms"],
            minimum=0,
        )

    return settings


def _build_aggregator(fields: Mapping[str, Any]) -> AggregatorSettings:
    _check_keys("aggregator", fields, {"source_delays_ms"})
    settings = AggregatorSettings()

    if "source_delays_ms" in fields:
        delays = fields["source_delays_ms"]
        if not isinstance(delays, list):
            raise ConfigError("aggregator.source_delays_ms: should be a list")

        if len(delays) != 3:
            raise ConfigError(
                f"aggregator.source_delays_ms: expected 3 delays, got {len(delays)}"
            )

        settings.source_delays_ms = tuple(
            _number("aggregator", "source_delays_ms", d, minimum=0) for d in delays
        )

    return settings
