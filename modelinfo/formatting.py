"""Value formatting for report fields."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, NamedTuple, Optional

NONE = "<none>"


class Vector3(NamedTuple):
    x: float
    y: float
    z: float


class Vector4(NamedTuple):
    x: float
    y: float
    z: float
    w: float


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    a: int = 255

    def __str__(self) -> str:
        return f"Color [A={self.a}, R={self.r}, G={self.g}, B={self.b}]"


def format_float(x: Optional[float]) -> str:
    """Trim float noise while keeping detail (6 significant digits)."""
    if x is None:
        return NONE
    s = f"{x:.6g}"
    if s == "-0":
        s = "0"
    return s


def format_vector(v: Iterable[float]) -> str:
    return "<" + ", ".join(format_float(c) for c in v) + ">"


def format_hex(value: Optional[int]) -> str:
    if value is None:
        return NONE
    return f"0x{int(value):X}"


def format_list(values: Optional[Iterable[Any]]) -> str:
    if values is None:
        return NONE
    return "[" + ",".join(format_value(v) for v in values) + "]"


def format_value(value: Any) -> str:
    if value is None:
        return NONE
    # bool before int; IntEnum/IntFlag before int
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, Enum):
        return value.name if value.name is not None else format_hex(value.value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, (Vector3, Vector4)):
        return format_vector(value)
    if isinstance(value, (list, tuple)):
        return format_list(value)
    return str(value)
