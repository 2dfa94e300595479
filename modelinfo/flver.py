"""
FLVER0 / FLVER2 records and their report schemas.

The records are immutable snapshots filled in by whatever parser produced
them; this module only describes how they are printed.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Optional, Tuple

from .formatting import Color, Vector3, format_hex
from .schema import INDEX, Collection, Field, Nested, Schema, constant, register_schemas

# FLVER2 bounding boxes carry an extra vector from this version on
BOUNDING_BOX_UNK_VERSION = 0x2001A

ORIGIN = Vector3(0.0, 0.0, 0.0)


class LayoutType(IntEnum):
    Float1 = 0x00
    Float2 = 0x01
    Float3 = 0x02
    Float4 = 0x03
    Byte4A = 0x10
    Byte4B = 0x11
    Short2toFloat2 = 0x12
    Byte4C = 0x13
    UV = 0x15
    UVPair = 0x16
    ShortBoneIndices = 0x18
    Short4toFloat4A = 0x1A
    Short4toFloat4B = 0x2E
    Byte4E = 0x2F
    EdgeCompressed = 0xF0


class LayoutSemantic(IntEnum):
    Position = 0
    BoneWeights = 1
    BoneIndices = 2
    Normal = 3
    UV = 5
    Tangent = 6
    Bitangent = 7
    VertexColor = 10


class NodeFlags(IntFlag):
    Disabled = 0x1
    Dummy = 0x2
    Mesh = 0x8


class FaceSetFlags(IntFlag):
    LodLevel1 = 0x01000000
    LodLevel2 = 0x02000000
    EdgeCompressed = 0x40000000
    MotionBlur = 0x80000000


# -----------------------------
# Shared records
# -----------------------------

@dataclass(frozen=True)
class Texture:
    type: str
    path: str


@dataclass(frozen=True)
class LayoutMember:
    group_index: int
    type: LayoutType
    semantic: LayoutSemantic
    index: int = 0
    size: int = 0


@dataclass(frozen=True)
class BufferLayout:
    members: Tuple[LayoutMember, ...] = ()

    @property
    def size(self) -> int:
        return sum(m.size for m in self.members)


@dataclass(frozen=True)
class Dummy:
    position: Vector3 = ORIGIN
    forward: Vector3 = ORIGIN
    upward: Vector3 = ORIGIN
    color: Color = Color(255, 255, 255)
    reference_id: int = -1
    parent_bone_index: int = -1
    attach_bone_index: int = -1
    flag1: bool = False
    use_upward_vector: bool = False
    unk30: int = 0
    unk34: int = 0


@dataclass(frozen=True)
class Node:
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
    flags: NodeFlags = NodeFlags(0)


# -----------------------------
# FLVER0
# -----------------------------

@dataclass(frozen=True)
class Flver0Header:
    version: int
    big_endian: bool = False
    bounding_box_min: Vector3 = ORIGIN
    bounding_box_max: Vector3 = ORIGIN
    vertex_index_size: int = 16
    unicode: bool = True
    unk4a: int = 0
    unk4b: int = 0
    unk4c: int = 0
    unk5c: int = 0


@dataclass(frozen=True)
class Flver0Material:
    name: str
    mtd: str = ""
    textures: Tuple[Texture, ...] = ()
    layouts: Tuple[BufferLayout, ...] = ()


@dataclass(frozen=True)
class Flver0Mesh:
    dynamic: int = 0
    material_index: int = 0
    cull_backfaces: bool = False
    triangle_strip: bool = False
    default_bone_index: int = -1
    bone_indices: Tuple[int, ...] = ()
    unk46: int = 0
    layout_index: int = 0


@dataclass(frozen=True)
class Flver0Model:
    header: Flver0Header
    materials: Tuple[Flver0Material, ...] = ()
    dummies: Tuple[Dummy, ...] = ()
    nodes: Tuple[Node, ...] = ()
    meshes: Tuple[Flver0Mesh, ...] = ()


# -----------------------------
# FLVER2
# -----------------------------

@dataclass(frozen=True)
class Flver2Header:
    version: int
    big_endian: bool = False
    bounding_box_min: Vector3 = ORIGIN
    bounding_box_max: Vector3 = ORIGIN
    unicode: bool = True
    unk4a: bool = False
    unk4b: int = 0
    unk4c: int = 0
    unk5c: int = 0


@dataclass(frozen=True)
class Flver2Material:
    name: str
    mtd: str = ""
    textures: Tuple[Texture, ...] = ()


@dataclass(frozen=True)
class FaceSet:
    flags: FaceSetFlags = FaceSetFlags(0)
    triangle_strip: bool = False
    cull_backfaces: bool = True
    unk06: int = 0


@dataclass(frozen=True)
class VertexBuffer:
    layout_index: int
    buffer_index: int = 0
    edge_compressed: bool = False


@dataclass(frozen=True)
class MeshBoundingBox:
    min: Vector3 = ORIGIN
    max: Vector3 = ORIGIN
    unk: Vector3 = ORIGIN


@dataclass(frozen=True)
class Flver2Mesh:
    dynamic: bool = False
    material_index: int = 0
    default_bone_index: int = -1
    bone_indices: Tuple[int, ...] = ()
    face_sets: Tuple[FaceSet, ...] = ()
    vertex_buffers: Tuple[VertexBuffer, ...] = ()
    bounding_box: Optional[MeshBoundingBox] = None


@dataclass(frozen=True)
class Flver2Model:
    header: Flver2Header
    materials: Tuple[Flver2Material, ...] = ()
    buffer_layouts: Tuple[BufferLayout, ...] = ()
    dummies: Tuple[Dummy, ...] = ()
    nodes: Tuple[Node, ...] = ()
    meshes: Tuple[Flver2Mesh, ...] = ()


# -----------------------------
# Schemas
# -----------------------------

# bone fields common to every family (FLVER, MDL4, SMD4)
NODE_FIELDS = (
    Field("Translation", "translation"),
    Field("Rotation", "rotation"),
    Field("Scale", "scale"),
    Field("BoundingBoxMin", "bounding_box_min"),
    Field("BoundingBoxMax", "bounding_box_max"),
    Field("Index", INDEX),
    Field("Parent Index", "parent_index"),
    Field("Previous Sibling Index", "previous_sibling_index"),
    Field("Next Sibling Index", "next_sibling_index"),
    Field("First Child Index", "first_child_index"),
)

TEXTURES = Collection("Textures", "textures")

MODEL_SECTIONS = (
    Collection("Dummies", "dummies"),
    Collection("Bones", "nodes"),
    Collection("Meshes", "meshes"),
)

register_schemas({
    Texture: Schema("Texture", fields=(
        Field("Type", "type"),
        Field("Path", "path"),
    )),
    LayoutMember: Schema("LayoutMember", fields=(
        Field("GroupIndex", "group_index"),
        Field("Type", "type"),
        Field("Semantic", "semantic"),
        Field("Index", "index"),
        Field("Size", "size"),
    )),
    BufferLayout: Schema("Layout", fields=(
        Field("Size", "size"),
    ), sections=(
        Collection("LayoutMembers", "members"),
    )),
    Dummy: Schema("Dummy", fields=(
        Field("Position", "position"),
        Field("Forward", "forward"),
        Field("Upward", "upward"),
        Field("Color", "color"),
        Field("ReferenceID", "reference_id"),
        Field("ParentBoneIndex", "parent_bone_index"),
        Field("AttachBoneIndex", "attach_bone_index"),
        Field("Flag1", "flag1"),
        Field("UseUpwardVector", "use_upward_vector"),
        Field("Unk30", "unk30"),
        Field("Unk34", "unk34"),
    )),
    Node: Schema("Bone", label="name", fields=NODE_FIELDS + (
        Field("Flags", "flags", format_hex),
    )),

    Flver0Header: Schema("Header", fields=(
        Field("BigEndian", "big_endian"),
        Field("Version", "version", format_hex),
        Field("BoundingBoxMin", "bounding_box_min"),
        Field("BoundingBoxMax", "bounding_box_max"),
        Field("VertexIndexSize", "vertex_index_size"),
        Field("Unicode", "unicode"),
        Field("Unk4A", "unk4a"),
        Field("Unk4B", "unk4b"),
        Field("Unk4C", "unk4c"),
        Field("Unk5C", "unk5c"),
    )),
    Flver0Material: Schema("Material", label="name", fields=(
        Field("MTD", "mtd"),
    ), sections=(
        TEXTURES,
        Collection("Layouts", "layouts"),
    )),
    Flver0Mesh: Schema("Mesh", fields=(
        Field("Dynamic", "dynamic"),
        Field("MaterialIndex", "material_index"),
        Field("CullBackfaces", "cull_backfaces"),
        Field("TriangleStrip", "triangle_strip"),
        Field("DefaultBoneIndex", "default_bone_index"),
        Field("BoneIndices", "bone_indices"),
        Field("Unk46", "unk46"),
        Field("LayoutIndex", "layout_index"),
    )),
    Flver0Model: Schema("FLVER0", version="header.version", fields=(
        Field("Type", constant("FLVER0")),
    ), sections=(
        Nested("Header", "header"),
        Collection("Materials", "materials"),
    ) + MODEL_SECTIONS),

    Flver2Header: Schema("Header", fields=(
        Field("BigEndian", "big_endian"),
        Field("Version", "version", format_hex),
        Field("BoundingBoxMin", "bounding_box_min"),
        Field("BoundingBoxMax", "bounding_box_max"),
        Field("Unicode", "unicode"),
        Field("Unk4A", "unk4a"),
        Field("Unk4B", "unk4b"),
        Field("Unk4C", "unk4c"),
        Field("Unk5C", "unk5c"),
    )),
    Flver2Material: Schema("Material", label="name", fields=(
        Field("MTD", "mtd"),
    ), sections=(
        TEXTURES,
    )),
    FaceSet: Schema("FaceSet", fields=(
        Field("Flags", "flags", format_hex),
        Field("TriangleStrip", "triangle_strip"),
        Field("CullBackfaces", "cull_backfaces"),
        Field("Unk06", "unk06"),
    )),
    VertexBuffer: Schema("VertexBuffer", fields=(
        Field("EdgeCompressed", "edge_compressed"),
        Field("BufferIndex", "buffer_index"),
        Field("LayoutIndex", "layout_index"),
    )),
    MeshBoundingBox: Schema("BoundingBox", fields=(
        Field("Min", "min"),
        Field("Max", "max"),
        Field("Unk", "unk", min_version=BOUNDING_BOX_UNK_VERSION),
    )),
    Flver2Mesh: Schema("Mesh", fields=(
        Field("Dynamic", "dynamic"),
        Field("MaterialIndex", "material_index"),
        Field("DefaultBoneIndex", "default_bone_index"),
        Field("BoneIndices", "bone_indices"),
    ), sections=(
        Collection("FaceSets", "face_sets"),
        Collection("VertexBuffers", "vertex_buffers"),
        Nested("BoundingBoxes", "bounding_box"),
    )),
    Flver2Model: Schema("FLVER2", version="header.version", fields=(
        Field("Type", constant("FLVER2")),
    ), sections=(
        Nested("Header", "header"),
        Collection("Materials", "materials"),
        Collection("Layouts", "buffer_layouts"),
    ) + MODEL_SECTIONS),
})
