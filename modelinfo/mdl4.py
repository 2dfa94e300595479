"""
MDL4 and SMD4 (shadow mesh) records and their report schemas.

MDL4 material parameters carry a value whose payload kind depends on a type
tag. Parsers build them with ``param_value(tag, raw)``; the payload classes
form a closed union, and anything outside it fails the render.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Tuple, Union

from .flver import NODE_FIELDS, ORIGIN
from .formatting import Color, Vector3, format_float, format_hex, format_list
from .schema import Collection, Field, Nested, Schema, constant, register_schemas


class ParamType(Enum):
    Int = "Int"
    Float = "Float"
    Float4 = "Float4"
    String = "String"


class UnknownParamTypeError(ValueError):
    """A shader parameter whose type tag is outside the known set."""


@dataclass(frozen=True)
class IntParam:
    TYPE: ClassVar[ParamType] = ParamType.Int
    value: int


@dataclass(frozen=True)
class FloatParam:
    TYPE: ClassVar[ParamType] = ParamType.Float
    value: float


@dataclass(frozen=True)
class Float4Param:
    TYPE: ClassVar[ParamType] = ParamType.Float4
    value: Tuple[float, float, float, float]


@dataclass(frozen=True)
class StringParam:
    TYPE: ClassVar[ParamType] = ParamType.String
    value: str


ParamValue = Union[IntParam, FloatParam, Float4Param, StringParam]

_PARAM_CLASSES = {cls.TYPE: cls for cls in (IntParam, FloatParam, Float4Param, StringParam)}


class InvalidParamValueError(ValueError):
    """A shader parameter whose payload does not match its type tag."""


def _is_number(raw: Any) -> bool:
    return isinstance(raw, (int, float)) and not isinstance(raw, bool)


def _check_payload(tag: ParamType, raw: Any) -> Any:
    if tag is ParamType.Int and isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if tag is ParamType.Float and _is_number(raw):
        return float(raw)
    if tag is ParamType.Float4 and not isinstance(raw, (str, bytes)):
        try:
            values = tuple(raw)
        except TypeError:
            values = ()
        if len(values) == 4 and all(_is_number(v) for v in values):
            return tuple(float(v) for v in values)
    if tag is ParamType.String and isinstance(raw, str):
        return raw
    raise InvalidParamValueError(f"{tag.value} parameter cannot hold {raw!r}")


def param_value(type_tag: Any, raw: Any) -> ParamValue:
    """Build the union member for a parser's (type tag, payload) pair."""
    try:
        tag = type_tag if isinstance(type_tag, ParamType) else ParamType(type_tag)
    except ValueError:
        raise UnknownParamTypeError(f"Unknown ParamType: {type_tag!r}") from None
    return _PARAM_CLASSES[tag](_check_payload(tag, raw))


def _param_class(value: Any) -> type:
    cls = type(value)
    if cls not in _PARAM_CLASSES.values():
        raise UnknownParamTypeError(f"Unknown ParamType payload: {cls.__name__}")
    return cls


def param_type(value: ParamValue) -> ParamType:
    return _param_class(value).TYPE


def format_param_value(value: ParamValue) -> str:
    cls = _param_class(value)
    if cls is IntParam:
        return str(value.value)
    if cls is FloatParam:
        return format_float(value.value)
    if cls is Float4Param:
        return format_list(value.value)
    return value.value


@dataclass(frozen=True)
class MaterialParam:
    name: str
    value: ParamValue

    @property
    def type(self) -> ParamType:
        return param_type(self.value)


# -----------------------------
# MDL4
# -----------------------------

@dataclass(frozen=True)
class ModelHeader:
    """Header shared by MDL4 and SMD4."""

    version: int
    bounding_box_min: Vector3 = ORIGIN
    bounding_box_max: Vector3 = ORIGIN


@dataclass(frozen=True)
class Mdl4Material:
    name: str
    shader: str = ""
    unk3c: int = 0
    unk3d: int = 0
    unk3e: int = 0
    params: Tuple[MaterialParam, ...] = ()


@dataclass(frozen=True)
class Mdl4Dummy:
    position: Vector3 = ORIGIN
    forward: Vector3 = ORIGIN
    color: Color = Color(255, 255, 255)
    reference_id: int = -1
    parent_bone_index: int = -1
    attach_bone_index: int = -1
    unk22: int = 0


@dataclass(frozen=True)
class Mdl4Node:
    name: str
    translation: Vector3 = ORIGIN
    rotation: Vector3 = ORIGIN
    scale: Vector3 = Vector3(1.0, 1.0, 1.0)
    bounding_box_min: Vector3 = ORIGIN
    bounding_box_max: Vector3 = ORIGIN
    parent_index: int = -1
    previous_sibling_index: int = -1
    next_sibling_index: int = -1
    first_child_index: int = -1
    unk_indices: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Mdl4Mesh:
    material_index: int = 0
    vertex_format: int = 0
    unk02: int = 0
    unk03: int = 0
    unk08: int = 0
    bone_indices: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Mdl4Model:
    header: ModelHeader
    materials: Tuple[Mdl4Material, ...] = ()
    dummies: Tuple[Mdl4Dummy, ...] = ()
    nodes: Tuple[Mdl4Node, ...] = ()
    meshes: Tuple[Mdl4Mesh, ...] = ()


# -----------------------------
# SMD4
# -----------------------------

@dataclass(frozen=True)
class Smd4Node:
    name: str
    translation: Vector3 = ORIGIN
    rotation: Vector3 = ORIGIN
    scale: Vector3 = Vector3(1.0, 1.0, 1.0)
    bounding_box_min: Vector3 = ORIGIN
    bounding_box_max: Vector3 = ORIGIN
    parent_index: int = -1
    previous_sibling_index: int = -1
    next_sibling_index: int = -1
    first_child_index: int = -1
    unk64: int = 0
    unk68: int = 0
    unk6c: int = 0
    unk70: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Smd4Mesh:
    vertex_format: int = 0
    unk01: int = 0
    unk02: int = 0
    unk03: int = 0
    unk06: int = 0
    bone_indices: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Smd4Model:
    header: ModelHeader
    nodes: Tuple[Smd4Node, ...] = ()
    meshes: Tuple[Smd4Mesh, ...] = ()


register_schemas({
    ModelHeader: Schema("Header", fields=(
        Field("Version", "version", format_hex),
        Field("BoundingBoxMin", "bounding_box_min"),
        Field("BoundingBoxMax", "bounding_box_max"),
    )),
    MaterialParam: Schema("Parameter", label="name", fields=(
        Field("Type", "type"),
        Field("Value", "value", format_param_value),
    )),
    Mdl4Material: Schema("Material", label="name", fields=(
        Field("Shader", "shader"),
        Field("Unk3C", "unk3c"),
        Field("Unk3D", "unk3d"),
        Field("Unk3E", "unk3e"),
    ), sections=(
        Collection("Parameters", "params"),
    )),
    Mdl4Dummy: Schema("Dummy", fields=(
        Field("Position", "position"),
        Field("Forward", "forward"),
        Field("Color", "color"),
        Field("ReferenceID", "reference_id"),
        Field("ParentBoneIndex", "parent_bone_index"),
        Field("AttachBoneIndex", "attach_bone_index"),
        Field("Unk22", "unk22"),
    )),
    Mdl4Node: Schema("Bone", label="name", fields=NODE_FIELDS + (
        Field("UnkIndices", "unk_indices"),
    )),
    Mdl4Mesh: Schema("Mesh", fields=(
        Field("MaterialIndex", "material_index"),
        Field("VertexFormat", "vertex_format"),
        Field("Unk02", "unk02"),
        Field("Unk03", "unk03"),
        Field("Unk08", "unk08"),
        Field("BoneIndices", "bone_indices"),
    )),
    Mdl4Model: Schema("MDL4", version="header.version", fields=(
        Field("Type", constant("MDL4")),
    ), sections=(
        Nested("Header", "header"),
        Collection("Materials", "materials"),
        Collection("Dummies", "dummies"),
        Collection("Bones", "nodes"),
        Collection("Meshes", "meshes"),
    )),

    Smd4Node: Schema("Bone", label="name", fields=NODE_FIELDS + (
        Field("Unk64", "unk64"),
        Field("Unk68", "unk68"),
        Field("Unk6C", "unk6c"),
        Field("Unk70", "unk70"),
    )),
    Smd4Mesh: Schema("Mesh", fields=(
        Field("VertexFormat", "vertex_format"),
        Field("Unk01", "unk01"),
        Field("Unk02", "unk02"),
        Field("Unk03", "unk03"),
        Field("Unk06", "unk06"),
        Field("BoneIndices", "bone_indices"),
    )),
    Smd4Model: Schema("SMD4", version="header.version", fields=(
        Field("Type", constant("SMD4")),
        Field("Kind", constant("Shadow Mesh")),
    ), sections=(
        Nested("Header", "header"),
        Collection("Bones", "nodes"),
        Collection("Meshes", "meshes"),
    )),
})
