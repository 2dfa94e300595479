"""
glTF 2.0 records
----------------

Reads a .glb or .gltf file with pygltflib and turns it into an immutable record
tree (header, materials and their texture slots, nodes, meshes and primitives,
skins, animations) rendered by the generic schema renderer.

Notes:
- Vertex/triangle counts come from accessor counts and primitive modes; they
  assume default glTF semantics.
- Animation durations are read from the input accessor's ``max`` when present.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pygltflib import GLTF2, Accessor, Material, Node

from .formatting import Vector3, Vector4
from .schema import INDEX, Collection, Field, Nested, Schema, constant, register_schemas

GLTF_SUFFIXES = (".glb", ".gltf")

PRIM_MODES = {
    0: "POINTS",
    1: "LINES",
    2: "LINE_LOOP",
    3: "LINE_STRIP",
    4: "TRIANGLES",
    5: "TRIANGLE_STRIP",
    6: "TRIANGLE_FAN",
}

# texture slots in the order they are listed under a material
TEXTURE_SLOTS = ("BaseColor", "MetallicRoughness", "Normal", "Occlusion", "Emissive")


@dataclass(frozen=True)
class GltfHeader:
    generator: Optional[str]
    version: Optional[str]
    min_version: Optional[str] = None
    copyright: Optional[str] = None
    extensions_used: Tuple[str, ...] = ()
    extensions_required: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GltfTexture:
    slot: str
    texture_index: int
    image_index: Optional[int] = None
    path: str = "<embedded>"
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class GltfMaterial:
    name: str
    alpha_mode: str = "OPAQUE"
    alpha_cutoff: Optional[float] = None
    double_sided: bool = False
    base_color_factor: Optional[Vector4] = None
    metallic_factor: Optional[float] = None
    roughness_factor: Optional[float] = None
    emissive_factor: Optional[Vector3] = None
    textures: Tuple[GltfTexture, ...] = ()


@dataclass(frozen=True)
class GltfNode:
    name: str
    translation: Vector3 = Vector3(0.0, 0.0, 0.0)
    rotation: Vector4 = Vector4(0.0, 0.0, 0.0, 1.0)
    scale: Vector3 = Vector3(1.0, 1.0, 1.0)
    parent_index: int = -1
    children: Tuple[int, ...] = ()
    mesh: Optional[int] = None
    skin: Optional[int] = None


@dataclass(frozen=True)
class GltfPrimitive:
    mode: str
    material_index: Optional[int] = None
    attributes: Tuple[str, ...] = ()
    vertex_count: Optional[int] = None
    triangle_count: Optional[int] = None
    morph_targets: int = 0


@dataclass(frozen=True)
class GltfMesh:
    name: str
    primitives: Tuple[GltfPrimitive, ...] = ()


@dataclass(frozen=True)
class GltfSkin:
    name: str
    skeleton: Optional[int] = None
    joints: Tuple[int, ...] = ()
    inverse_bind_matrices: Optional[int] = None


@dataclass(frozen=True)
class GltfChannel:
    target_node: str
    path: str
    interpolation: str = "LINEAR"
    keys: Optional[int] = None


@dataclass(frozen=True)
class GltfAnimation:
    name: str
    duration: Optional[float] = None
    channels: Tuple[GltfChannel, ...] = ()


@dataclass(frozen=True)
class GltfModel:
    header: GltfHeader
    materials: Tuple[GltfMaterial, ...] = ()
    nodes: Tuple[GltfNode, ...] = ()
    meshes: Tuple[GltfMesh, ...] = ()
    skins: Tuple[GltfSkin, ...] = ()
    animations: Tuple[GltfAnimation, ...] = ()


# -----------------------------
# pygltflib helpers
# -----------------------------

def idx_or_none(v):
    return None if v is None else int(v)


def safe_name(name: Optional[str], fallback: str) -> str:
    return name if (name and name.strip()) else fallback


def accessor(gltf: GLTF2, idx: Optional[int]) -> Optional[Accessor]:
    if idx is None:
        return None
    return gltf.accessors[idx]


def accessor_len(gltf: GLTF2, idx: Optional[int]) -> Optional[int]:
    acc = accessor(gltf, idx)
    return None if acc is None else int(acc.count)


def node_name_by_index(gltf: GLTF2, idx: Optional[int]) -> str:
    if idx is None:
        return "<none>"
    n = gltf.nodes[idx]
    return safe_name(n.name, f"node[{idx}]")


def primitive_vertex_count(gltf: GLTF2, prim) -> Optional[int]:
    # POSITION accessor count is the number of vertices in this primitive
    pos_idx = getattr(prim.attributes, "POSITION", None) if prim.attributes else None
    return accessor_len(gltf, idx_or_none(pos_idx))


def primitive_triangle_count(gltf: GLTF2, prim) -> Optional[int]:
    mode = PRIM_MODES.get(4 if prim.mode is None else prim.mode)
    indices_len = accessor_len(gltf, idx_or_none(prim.indices))
    if mode == "TRIANGLES":
        if indices_len is not None:
            return indices_len // 3
        verts = primitive_vertex_count(gltf, prim)
        return None if verts is None else verts // 3
    if mode in ("TRIANGLE_STRIP", "TRIANGLE_FAN"):
        n = indices_len if indices_len is not None else primitive_vertex_count(gltf, prim)
        return None if (n is None or n < 3) else n - 2
    return None


def sampler_input_max_time(gltf: GLTF2, accessor_index: Optional[int]) -> Optional[float]:
    acc = accessor(gltf, accessor_index)
    if acc is not None and acc.max:
        # for time inputs, max is a scalar [tmax]
        return float(acc.max[0])
    return None


def _vector(values, cls, default):
    if not values:
        return default
    return cls(*(float(v) for v in values))


# -----------------------------
# GLTF2 -> records
# -----------------------------

def _texture(gltf: GLTF2, slot: str, info) -> Optional[GltfTexture]:
    if info is None or info.index is None:
        return None
    tex = gltf.textures[info.index]
    source = idx_or_none(tex.source)
    if source is None:
        return GltfTexture(slot=slot, texture_index=info.index)
    img = gltf.images[source]
    if img.uri:
        path = img.uri if not img.uri.startswith("data:") else "<data uri>"
    elif img.bufferView is not None:
        path = f"bufferView[{img.bufferView}]"
    else:
        path = "<embedded>"
    return GltfTexture(slot=slot, texture_index=info.index, image_index=source, path=path, mime_type=img.mimeType)


def _material(gltf: GLTF2, index: int, m: Material) -> GltfMaterial:
    pbr = m.pbrMetallicRoughness
    slots = [
        getattr(pbr, "baseColorTexture", None),
        getattr(pbr, "metallicRoughnessTexture", None),
        m.normalTexture,
        m.occlusionTexture,
        m.emissiveTexture,
    ]
    textures = []
    for slot, info in zip(TEXTURE_SLOTS, slots):
        tex = _texture(gltf, slot, info)
        if tex is not None:
            textures.append(tex)

    return GltfMaterial(
        name=safe_name(m.name, f"material[{index}]"),
        alpha_mode=m.alphaMode or "OPAQUE",
        alpha_cutoff=m.alphaCutoff if m.alphaMode == "MASK" else None,
        double_sided=bool(m.doubleSided),
        base_color_factor=_vector(getattr(pbr, "baseColorFactor", None), Vector4, None),
        metallic_factor=getattr(pbr, "metallicFactor", None),
        roughness_factor=getattr(pbr, "roughnessFactor", None),
        emissive_factor=_vector(m.emissiveFactor, Vector3, None),
        textures=tuple(textures),
    )


def _nodes(gltf: GLTF2) -> List[GltfNode]:
    nodes: List[Node] = gltf.nodes or []
    parents = {}
    for i, n in enumerate(nodes):
        for c in (n.children or []):
            parents[c] = i
    return [
        GltfNode(
            name=safe_name(n.name, f"node[{i}]"),
            translation=_vector(n.translation, Vector3, Vector3(0.0, 0.0, 0.0)),
            rotation=_vector(n.rotation, Vector4, Vector4(0.0, 0.0, 0.0, 1.0)),
            scale=_vector(n.scale, Vector3, Vector3(1.0, 1.0, 1.0)),
            parent_index=parents.get(i, -1),
            children=tuple(n.children or ()),
            mesh=idx_or_none(n.mesh),
            skin=idx_or_none(n.skin),
        )
        for i, n in enumerate(nodes)
    ]


def _primitive(gltf: GLTF2, prim) -> GltfPrimitive:
    mode = getattr(prim, "mode", 4)
    if prim.attributes:
        # Attributes is a dataclass; unset semantics are None
        attrs = tuple(sorted(k for k, v in vars(prim.attributes).items() if v is not None))
    else:
        attrs = ()
    return GltfPrimitive(
        mode=PRIM_MODES.get(4 if mode is None else mode, f"UNKNOWN({mode})"),
        material_index=idx_or_none(prim.material),
        attributes=attrs,
        vertex_count=primitive_vertex_count(gltf, prim),
        triangle_count=primitive_triangle_count(gltf, prim),
        morph_targets=len(prim.targets) if prim.targets else 0,
    )


def _animation(gltf: GLTF2, index: int, a) -> GltfAnimation:
    samplers = a.samplers or []
    durations = [t for t in (sampler_input_max_time(gltf, idx_or_none(s.input)) for s in samplers) if t is not None]
    channels = []
    for ch in (a.channels or []):
        tgt = ch.target
        samp = samplers[ch.sampler] if ch.sampler is not None and ch.sampler < len(samplers) else None
        channels.append(GltfChannel(
            target_node=node_name_by_index(gltf, idx_or_none(tgt.node) if tgt else None),
            path=tgt.path if tgt and tgt.path else "?",
            interpolation=samp.interpolation if samp and samp.interpolation else "LINEAR",
            keys=accessor_len(gltf, idx_or_none(samp.input)) if samp else None,
        ))
    return GltfAnimation(
        name=safe_name(a.name, f"animation[{index}]"),
        duration=max(durations) if durations else None,
        channels=tuple(channels),
    )


def model_from_gltf(gltf: GLTF2) -> GltfModel:
    asset = gltf.asset
    header = GltfHeader(
        generator=getattr(asset, "generator", None),
        version=getattr(asset, "version", None),
        min_version=getattr(asset, "minVersion", None),
        copyright=getattr(asset, "copyright", None),
        extensions_used=tuple(gltf.extensionsUsed or ()),
        extensions_required=tuple(gltf.extensionsRequired or ()),
    )
    return GltfModel(
        header=header,
        materials=tuple(_material(gltf, i, m) for i, m in enumerate(gltf.materials or [])),
        nodes=tuple(_nodes(gltf)),
        meshes=tuple(
            GltfMesh(
                name=safe_name(m.name, f"mesh[{i}]"),
                primitives=tuple(_primitive(gltf, p) for p in (m.primitives or [])),
            )
            for i, m in enumerate(gltf.meshes or [])
        ),
        skins=tuple(
            GltfSkin(
                name=safe_name(s.name, f"skin[{i}]"),
                skeleton=idx_or_none(s.skeleton),
                joints=tuple(s.joints or ()),
                inverse_bind_matrices=accessor_len(gltf, idx_or_none(s.inverseBindMatrices)),
            )
            for i, s in enumerate(gltf.skins or [])
        ),
        animations=tuple(_animation(gltf, i, a) for i, a in enumerate(gltf.animations or [])),
    )


def load_gltf(path: Union[str, Path]) -> GltfModel:
    gltf = GLTF2().load(str(path))
    if gltf is None:
        raise ValueError(f"pygltflib could not load {path}")
    return model_from_gltf(gltf)


class GltfSource:
    """Model source for .glb/.gltf files."""

    name = "glTF"

    def read(self, path: Path) -> Optional[GltfModel]:
        if path.suffix.lower() not in GLTF_SUFFIXES:
            return None
        return load_gltf(path)


register_schemas({
    GltfHeader: Schema("Header", fields=(
        Field("Generator", "generator"),
        Field("Version", "version"),
        Field("MinVersion", "min_version"),
        Field("Copyright", "copyright"),
        Field("ExtensionsUsed", "extensions_used"),
        Field("ExtensionsRequired", "extensions_required"),
    )),
    GltfTexture: Schema("Texture", fields=(
        Field("Type", "slot"),
        Field("TextureIndex", "texture_index"),
        Field("ImageIndex", "image_index"),
        Field("Path", "path"),
        Field("MimeType", "mime_type"),
    )),
    GltfMaterial: Schema("Material", label="name", fields=(
        Field("AlphaMode", "alpha_mode"),
        Field("AlphaCutoff", "alpha_cutoff"),
        Field("DoubleSided", "double_sided"),
        Field("BaseColorFactor", "base_color_factor"),
        Field("MetallicFactor", "metallic_factor"),
        Field("RoughnessFactor", "roughness_factor"),
        Field("EmissiveFactor", "emissive_factor"),
    ), sections=(
        Collection("Textures", "textures"),
    )),
    GltfNode: Schema("Bone", label="name", fields=(
        Field("Index", INDEX),
        Field("Translation", "translation"),
        Field("Rotation", "rotation"),
        Field("Scale", "scale"),
        Field("Parent Index", "parent_index"),
        Field("Children", "children"),
        Field("Mesh", "mesh"),
        Field("Skin", "skin"),
    )),
    GltfPrimitive: Schema("Primitive", fields=(
        Field("Mode", "mode"),
        Field("MaterialIndex", "material_index"),
        Field("Attributes", "attributes"),
        Field("VertexCount", "vertex_count"),
        Field("TriangleCount", "triangle_count"),
        Field("MorphTargets", "morph_targets"),
    )),
    GltfMesh: Schema("Mesh", label="name", sections=(
        Collection("Primitives", "primitives"),
    )),
    GltfSkin: Schema("Skin", label="name", fields=(
        Field("Skeleton", "skeleton"),
        Field("Joints", "joints"),
        Field("InverseBindMatrices", "inverse_bind_matrices"),
    )),
    GltfChannel: Schema("Channel", fields=(
        Field("TargetNode", "target_node"),
        Field("Path", "path"),
        Field("Interpolation", "interpolation"),
        Field("Keys", "keys"),
    )),
    GltfAnimation: Schema("Animation", label="name", fields=(
        Field("Duration", "duration"),
    ), sections=(
        Collection("Channels", "channels"),
    )),
    GltfModel: Schema("glTF", fields=(
        Field("Type", constant("glTF")),
    ), sections=(
        Nested("Header", "header"),
        Collection("Materials", "materials"),
        Collection("Bones", "nodes"),
        Collection("Meshes", "meshes"),
        Collection("Skins", "skins"),
        Collection("Animations", "animations"),
    )),
})
