from modelinfo.flver import FaceSetFlags, LayoutSemantic, LayoutType
from modelinfo.formatting import (
    Color,
    Vector3,
    Vector4,
    format_float,
    format_hex,
    format_list,
    format_value,
    format_vector,
)


def test_floats_drop_noise():
    assert format_float(1.0) == "1"
    assert format_float(0.5) == "0.5"
    assert format_float(-0.0) == "0"
    # float32 0.1 widened to double
    assert format_float(0.10000000149011612) == "0.1"


def test_vectors_use_angle_brackets():
    assert format_vector(Vector3(1.0, 2.5, -3.0)) == "<1, 2.5, -3>"
    assert format_value(Vector4(0.0, 0.0, 0.0, 1.0)) == "<0, 0, 0, 1>"


def test_hex_for_versions_and_flags():
    assert format_hex(0x2001A) == "0x2001A"
    assert format_hex(FaceSetFlags.MotionBlur) == "0x80000000"
    assert format_hex(0) == "0x0"


def test_sequences_are_comma_joined_brackets():
    assert format_list([1, 2, 3]) == "[1,2,3]"
    assert format_list(()) == "[]"
    assert format_value((0, -1)) == "[0,-1]"


def test_scalar_values():
    assert format_value(True) == "True"
    assert format_value(7) == "7"
    assert format_value("P_Body.mtd") == "P_Body.mtd"
    assert format_value(None) == "<none>"


def test_enums_render_by_name():
    assert format_value(LayoutType.Float3) == "Float3"
    assert format_value(LayoutSemantic.VertexColor) == "VertexColor"


def test_color():
    assert format_value(Color(10, 20, 30)) == "Color [A=255, R=10, G=20, B=30]"
