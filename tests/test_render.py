import io

import pytest

from modelinfo.mdl4 import MaterialParam, Mdl4Dummy, Mdl4Material, Mdl4Model, ModelHeader, param_value
from modelinfo import render
from modelinfo.render import render_model, render_to_string, write_report
from modelinfo.writer import ScopeWriter


def test_each_top_level_group_is_one_transaction(stream, flver2_model):
    writer = ScopeWriter(stream)
    render_model(writer, flver2_model)
    # Type+Header, Materials, Bones, Meshes; empty groups write nothing
    assert stream.writes == 4
    assert not writer.buffering
    assert writer.depth == 0


def test_failure_mid_group_keeps_earlier_groups_only():
    model = Mdl4Model(
        header=ModelHeader(0x40001),
        materials=(
            Mdl4Material("Good", params=(MaterialParam("a", param_value("Int", 1)),)),
            Mdl4Material("Bad", params=(MaterialParam("b", ["not", "a", "param"]),)),
        ),
        dummies=(Mdl4Dummy(),),
    )
    buf = io.StringIO()
    writer = ScopeWriter(buf)
    with pytest.raises(ValueError):
        render_model(writer, model)

    text = buf.getvalue()
    assert text.startswith("Type: MDL4\nHeader:\n  Version: 0x40001\n")
    assert "Materials:" not in text
    assert "Good" not in text
    assert "Dummies:" not in text
    assert not writer.buffering
    assert writer.depth == 0
    writer.close()


def test_rendering_is_deterministic(flver2_model):
    assert render_to_string(flver2_model) == render_to_string(flver2_model)


def test_write_report_twice_is_byte_identical(tmp_path, flver2_model):
    first = tmp_path / "a.flver.info.txt"
    second = tmp_path / "b.flver.info.txt"
    write_report(flver2_model, first)
    write_report(flver2_model, second)
    assert first.read_bytes() == second.read_bytes()
    assert first.read_text(encoding="utf-8") == render_to_string(flver2_model)


def test_write_report_overwrites(tmp_path, flver2_model):
    out = tmp_path / "m.info.txt"
    out.write_text("stale\n" * 1000, encoding="utf-8")
    write_report(flver2_model, out)
    assert out.read_text(encoding="utf-8") == render_to_string(flver2_model)


def test_custom_indent(flver2_model):
    text = render_to_string(flver2_model, indent="\t")
    assert "Header:\n\tBigEndian: False\n" in text


def test_render_to_string_releases_writer_on_failure(monkeypatch):
    closed = []

    class TrackingWriter(ScopeWriter):
        def close(self, check=True):
            closed.append(check)
            super().close(check)

    monkeypatch.setattr(render, "ScopeWriter", TrackingWriter)
    model = Mdl4Model(
        header=ModelHeader(0x40001),
        materials=(Mdl4Material("Bad", params=(MaterialParam("b", object()),)),),
    )
    with pytest.raises(ValueError):
        render_to_string(model)
    assert closed == [False]
