import io
from pathlib import Path

import pytest

from modelinfo.flver import (
    FaceSet,
    FaceSetFlags,
    Flver2Header,
    Flver2Material,
    Flver2Mesh,
    Flver2Model,
    MeshBoundingBox,
    Node,
    Texture,
    VertexBuffer,
)
from modelinfo.formatting import Vector3
from modelinfo.mdl4 import MaterialParam, Mdl4Material, Mdl4Model, ModelHeader
from modelinfo.writer import ScopeWriter


class RecordingStream(io.StringIO):
    """StringIO that keeps its text after close() and counts writes/closes."""

    def __init__(self):
        super().__init__()
        self.writes = 0
        self.close_calls = 0
        self.text = ""

    def write(self, s):
        self.writes += 1
        return super().write(s)

    def close(self):
        self.close_calls += 1
        if not self.closed:
            self.text = self.getvalue()
        super().close()


class TextSource:
    """Test source for ``*.mdl`` text files.

    The file's first line is a material name; ``broken`` fails while reading,
    ``badparam`` yields an MDL4 model whose render fails in Materials.
    """

    name = "test-mdl"

    def read(self, path: Path):
        if path.suffix != ".mdl":
            return None
        text = path.read_text(encoding="utf-8").strip()
        if text == "broken":
            raise ValueError("truncated header")
        if text == "badparam":
            return Mdl4Model(
                header=ModelHeader(version=0x40001),
                materials=(Mdl4Material("M", params=(MaterialParam("p", object()),)),),
            )
        return Flver2Model(header=Flver2Header(version=0x20014), materials=(Flver2Material(text, mtd="x.mtd"),))


@pytest.fixture
def stream():
    return RecordingStream()


@pytest.fixture
def writer(stream):
    return ScopeWriter(stream)


@pytest.fixture
def text_source():
    return TextSource()


def make_flver2(version=0x2001A):
    return Flver2Model(
        header=Flver2Header(version=version),
        materials=(
            Flver2Material("Body", mtd="P_Body.mtd", textures=(Texture("g_Diffuse", "body_a.tga"),)),
            Flver2Material("Empty", mtd="P_Empty.mtd"),
        ),
        nodes=(Node("Root"),),
        meshes=(
            Flver2Mesh(
                material_index=0,
                bone_indices=(0,),
                face_sets=(FaceSet(flags=FaceSetFlags.LodLevel1),),
                vertex_buffers=(VertexBuffer(layout_index=0),),
                bounding_box=MeshBoundingBox(Vector3(-1, -1, -1), Vector3(1, 1, 1), Vector3(0.5, 0, 0)),
            ),
        ),
    )


@pytest.fixture
def flver2_model():
    return make_flver2()


@pytest.fixture
def flver2_factory():
    return make_flver2
