from dataclasses import dataclass
from typing import Tuple

import pytest

from modelinfo.render import render_to_string
from modelinfo.schema import (
    INDEX,
    Collection,
    Field,
    Nested,
    Schema,
    SCHEMAS,
    UnknownRecordError,
    constant,
    register_schemas,
    schema_for,
)
from modelinfo.flver import Flver2Header, Flver2Material, Flver2Model


@dataclass(frozen=True)
class Tex:
    type: str
    path: str


@dataclass(frozen=True)
class Mat:
    name: str
    textures: Tuple[Tex, ...] = ()


@dataclass(frozen=True)
class Box:
    lo: int
    extra: int


@dataclass(frozen=True)
class Doc:
    version: int
    materials: Tuple[Mat, ...] = ()
    box: object = None


def doc_registry():
    return {
        Tex: Schema("Texture", fields=(Field("Type", "type"), Field("Path", "path"))),
        Mat: Schema("Material", label="name", sections=(Collection(None, "textures"),)),
        Box: Schema("Box", fields=(Field("Lo", "lo"), Field("Extra", "extra", min_version=3))),
        Doc: Schema("Doc", version="version", sections=(
            Collection("Materials", "materials"),
            Nested("Box", "box"),
        )),
    }


def test_materials_group_end_to_end():
    doc = Doc(version=1, materials=(
        Mat("Mat_A", textures=(Tex("Diffuse", "a.tga"),)),
        Mat("Mat_B"),
    ))
    assert render_to_string(doc, doc_registry()) == (
        "Materials:\n"
        "  Material: Mat_A\n"
        "    Texture: 0\n"
        "      Type: Diffuse\n"
        "      Path: a.tga\n"
        "  Material: Mat_B\n"
    )


def test_absent_nested_structure_renders_nothing():
    text = render_to_string(Doc(version=5), doc_registry())
    assert text == ""


def test_version_gated_field():
    registry = doc_registry()
    assert render_to_string(Doc(version=2, box=Box(1, 9)), registry) == "Box:\n  Lo: 1\n"
    assert render_to_string(Doc(version=3, box=Box(1, 9)), registry) == "Box:\n  Lo: 1\n  Extra: 9\n"


def test_gated_fields_are_dropped_without_a_version():
    registry = doc_registry()
    registry[Doc] = Schema("Doc", sections=(Nested("Box", "box"),))
    assert render_to_string(Doc(version=99, box=Box(1, 9)), registry) == "Box:\n  Lo: 1\n"


def test_index_and_constant_sources():
    field = Field("Index", INDEX)
    assert field.render(object(), 4) == "Index: 4"
    assert Field("Kind", constant("Shadow Mesh")).render(object(), None) == "Kind: Shadow Mesh"
    assert Field("Len", len).render("abc", None) == "Len: 3"


def test_dotted_source():
    assert Field("V", "header.version").applies(None)
    model = Flver2Model(header=Flver2Header(version=0x20010))
    assert Field("V", "header.version", hex).render(model, None) == "V: 0x20010"


def test_unknown_kind_is_reported():
    with pytest.raises(UnknownRecordError):
        schema_for(object())
    with pytest.raises(UnknownRecordError):
        render_to_string(Doc(version=1, materials=("not a material",)), doc_registry())


def test_default_registry_knows_every_family():
    import modelinfo.gltf as gltf
    import modelinfo.mdl4 as mdl4

    assert schema_for(Flver2Material("m")).kind == "Material"
    assert schema_for(mdl4.Mdl4Model(header=mdl4.ModelHeader(1))).kind == "MDL4"
    assert gltf.GltfModel in SCHEMAS


def test_register_schemas_refuses_conflicts():
    registry = {}
    schema = Schema("Tex")
    register_schemas({Tex: schema}, registry)
    register_schemas({Tex: schema}, registry)
    with pytest.raises(ValueError):
        register_schemas({Tex: Schema("Other")}, registry)
