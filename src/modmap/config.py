"""Run configuration: tool locations, counting, and visual encoding constants.

Settings are read from ``.modmap.toml`` in the analysed project (``[modmap]``
table), then tool paths may be overridden with ``MODMAP_GO``, ``MODMAP_SCC``
and ``MODMAP_DOT``.  All config objects are frozen so a single instance can be
handed to worker threads.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from modmap.errors import ConfigError
from modmap.model import NodeColor

CONFIG_FILENAME = ".modmap.toml"

_DEFAULT_AUTHOR_COLORS = {
    "aws": NodeColor("#FFBE5E", "#FF9900"),
    "golang.org": NodeColor("#A2EAEF", "#6AD6E3"),
    "stdlib": NodeColor("#CCCCCC", "#AAAAAA"),
}


@dataclass(frozen=True)
class ToolConfig:
    """Executables for the external collaborators."""

    go: str = "go"
    scc: str = "scc"
    dot: str = "dot"


@dataclass(frozen=True)
class CountConfig:
    """Line-count batching and parallelism."""

    language: str = "Go"
    batch_size: int = 300  # keeps scc under command-line length limits
    workers: int | None = None  # None -> os.cpu_count()

    @property
    def worker_count(self) -> int:
        return self.workers or os.cpu_count() or 1


@dataclass(frozen=True)
class EncoderConfig:
    """Constants for node size, labels, and colors."""

    base_size: float = 0.33
    font_scale: float = 6.0
    label_wrap_at: int = 15
    color_seed: int = 1
    color_squeeze: float = 0.33
    border_offset: int = -84
    known_hosts: tuple[str, ...] = ("github.com",)
    author_colors: Mapping[str, NodeColor] = field(
        default_factory=lambda: MappingProxyType(dict(_DEFAULT_AUTHOR_COLORS))
    )


@dataclass(frozen=True)
class Config:
    tools: ToolConfig = field(default_factory=ToolConfig)
    count: CountConfig = field(default_factory=CountConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    formats: tuple[str, ...] = ("svg", "png")


def load_config(project_dir: Path, config_path: Path | None = None) -> Config:
    """Load configuration for *project_dir*.

    An explicit *config_path* must exist; the default ``.modmap.toml`` is
    optional.
    """
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"config file not found: {config_path}")
        data = _read_toml(config_path)
    else:
        default_path = project_dir / CONFIG_FILENAME
        data = _read_toml(default_path) if default_path.is_file() else {}

    section = _as_table(data.get("modmap", {}), "modmap")
    config = Config(
        tools=_tool_config(_as_table(section.get("tools", {}), "modmap.tools")),
        count=_count_config(_as_table(section.get("count", {}), "modmap.count")),
        encoder=_encoder_config(
            _as_table(section.get("encoder", {}), "modmap.encoder"),
            _as_table(section.get("colors", {}), "modmap.colors"),
        ),
    )
    if "formats" in section:
        formats = section["formats"]
        if not isinstance(formats, list) or not all(
            isinstance(f, str) and f for f in formats
        ):
            raise ConfigError("modmap.formats must be a list of format names")
        config = replace(config, formats=tuple(formats))

    return replace(config, tools=_apply_env(config.tools, os.environ))


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"could not read {path}: {e}") from e


def _as_table(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _typed(table: dict[str, Any], key: str, kind: type | tuple[type, ...], name: str):
    value = table[key]
    # bool is an int subclass; never accept it for numeric settings
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ConfigError(f"{name}.{key} has the wrong type: {value!r}")
    return value


def _tool_config(table: dict[str, Any]) -> ToolConfig:
    kwargs = {
        key: _typed(table, key, str, "modmap.tools")
        for key in ("go", "scc", "dot")
        if key in table
    }
    return ToolConfig(**kwargs)


def _count_config(table: dict[str, Any]) -> CountConfig:
    kwargs: dict[str, Any] = {}
    if "language" in table:
        kwargs["language"] = _typed(table, "language", str, "modmap.count")
    for key in ("batch_size", "workers"):
        if key in table:
            value = _typed(table, key, int, "modmap.count")
            if value < 1:
                raise ConfigError(f"modmap.count.{key} must be positive")
            kwargs[key] = value
    return CountConfig(**kwargs)


def _encoder_config(table: dict[str, Any], colors: dict[str, Any]) -> EncoderConfig:
    kwargs: dict[str, Any] = {}
    for key in ("base_size", "font_scale", "color_squeeze"):
        if key in table:
            kwargs[key] = float(_typed(table, key, (int, float), "modmap.encoder"))
    for key in ("label_wrap_at", "color_seed", "border_offset"):
        if key in table:
            kwargs[key] = _typed(table, key, int, "modmap.encoder")
    # the seed is hashed as a single byte
    if not 0 <= kwargs.get("color_seed", 0) <= 255:
        raise ConfigError("modmap.encoder.color_seed must be between 0 and 255")
    if not 0.0 <= kwargs.get("color_squeeze", 0.0) <= 1.0:
        raise ConfigError("modmap.encoder.color_squeeze must be between 0 and 1")
    if "known_hosts" in table:
        hosts = table["known_hosts"]
        if not isinstance(hosts, list) or not all(isinstance(h, str) for h in hosts):
            raise ConfigError("modmap.encoder.known_hosts must be a list of strings")
        kwargs["known_hosts"] = tuple(hosts)
    if colors:
        merged = dict(_DEFAULT_AUTHOR_COLORS)
        for author, pair in colors.items():
            if (
                not isinstance(pair, list)
                or len(pair) != 2
                or not all(isinstance(c, str) for c in pair)
            ):
                raise ConfigError(
                    f"modmap.colors.{author} must be [fill, border] color strings"
                )
            merged[author] = NodeColor(pair[0], pair[1])
        kwargs["author_colors"] = MappingProxyType(merged)
    return EncoderConfig(**kwargs)


def _apply_env(tools: ToolConfig, environ: Mapping[str, str]) -> ToolConfig:
    overrides = {
        key: environ[var]
        for key, var in (("go", "MODMAP_GO"), ("scc", "MODMAP_SCC"), ("dot", "MODMAP_DOT"))
        if environ.get(var)
    }
    return replace(tools, **overrides)
