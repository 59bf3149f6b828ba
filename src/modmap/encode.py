"""Visual encoding of modules: node size, label, and colors."""

from __future__ import annotations

import math

from modmap.config import EncoderConfig
from modmap.errors import DataIntegrityError
from modmap.model import ModuleMetrics, NodeColor, VisualAttributes

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash of *data*."""
    h = _FNV32_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def node_size(lines: int, min_lines: int, base_size: float) -> float:
    """Scale so that node area grows linearly with code lines."""
    if lines <= 0:
        return base_size
    return base_size * math.sqrt(lines) / math.sqrt(min_lines)


def format_kloc(lines: int) -> str:
    kloc = lines / 1000
    if kloc >= 10:
        return str(int(math.floor(kloc + 0.5)))
    if kloc >= 0.1:
        return f"{kloc:.1f}"
    return f"{kloc:.3f}"


def wrap_label(module: str, wrap_at: int) -> str:
    """Break *module* after a ``/`` once a line reaches *wrap_at* characters."""
    out: list[str] = []
    length = 0
    for ch in module:
        out.append(ch)
        length += 1
        if length >= wrap_at and ch == "/":
            out.append("\n")
            length = 0
    return "".join(out)


def make_label(module: str, lines: int, wrap_at: int) -> str:
    return f"{wrap_label(module, wrap_at)}\n{format_kloc(lines)}K LOC"


def author_of(module: str, known_hosts: tuple[str, ...]) -> str:
    """Return the path element naming a module's author.

    For ``github.com/aws/aws-sdk-go`` that is ``aws``; for paths on other
    hosts it is the host itself (``golang.org``).
    """
    rest = module
    for host in known_hosts:
        if module.startswith(host + "/"):
            rest = module[len(host) + 1 :]
    return rest.split("/", 1)[0]


def hashed_color(author: str, config: EncoderConfig) -> NodeColor:
    """Derive a light fill and a darker border from a hash of *author*."""
    h = fnv1a_32(bytes([config.color_seed]) + author.encode("utf-8"))
    raw = (h & 0xFF, (h >> 8) & 0xFF, (h >> 16) & 0xFF)

    squeeze = config.color_squeeze
    fill_base = (1 - squeeze) * 255
    fill = [int(fill_base + squeeze * c) for c in raw]
    border = [min(255, max(0, c + config.border_offset)) for c in fill]
    return NodeColor(fill=_hex(fill), border=_hex(border))


def node_color(module: str, config: EncoderConfig) -> NodeColor:
    author = author_of(module, config.known_hosts)
    known = config.author_colors.get(author)
    if known is not None:
        return known
    return hashed_color(author, config)


def _hex(rgb: list[int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def encode(
    module: str, lines: int, min_lines: int, config: EncoderConfig | None = None
) -> VisualAttributes:
    """Return the visual attributes of one module node."""
    config = config or EncoderConfig()
    size = node_size(lines, min_lines, config.base_size)
    return VisualAttributes(
        size=size,
        font_size=size * config.font_scale,
        label=make_label(module, lines, config.label_wrap_at),
        color=node_color(module, config),
    )


def encode_all(
    modules: list[str], metrics: ModuleMetrics, config: EncoderConfig | None = None
) -> dict[str, VisualAttributes]:
    """Encode every module relative to the smallest counted module."""
    min_lines = metrics.min_lines
    if min_lines is None:
        raise DataIntegrityError("no code lines were counted for any module")
    return {
        module: encode(module, metrics.lines.get(module, 0), min_lines, config)
        for module in modules
    }
