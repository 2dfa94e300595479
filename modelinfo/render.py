"""
Record renderer: walks a record tree through its schemas and writes it with a
ScopeWriter.

Each top-level section of a model is written in its own transaction, so a
failure inside one group never leaves half of it in the report, while groups
already flushed stay in place.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .schema import Nested, Schema, SchemaRegistry, Section, SCHEMAS, schema_for
from .writer import INDENT, ScopeWriter


@dataclass(frozen=True)
class RenderContext:
    registry: SchemaRegistry
    version: Optional[int] = None
    indent: str = INDENT


def write_fields(writer: ScopeWriter, schema: Schema, record: Any, index: Optional[int], ctx: RenderContext) -> None:
    for field in schema.fields:
        if field.applies(ctx.version):
            writer.write_line(field.render(record, index))


def write_body(writer: ScopeWriter, schema: Schema, record: Any, index: Optional[int], ctx: RenderContext) -> None:
    write_fields(writer, schema, record, index, ctx)
    for section in schema.sections:
        render_section(writer, section, record, ctx)


def render_record(writer: ScopeWriter, record: Any, index: int, ctx: RenderContext) -> None:
    """``Kind: label`` title, then the record's fields and sections one level deeper."""
    schema = schema_for(record, ctx.registry)
    with writer.section(schema.title(record, index), ctx.indent):
        write_body(writer, schema, record, index, ctx)


def render_section(writer: ScopeWriter, section: Section, owner: Any, ctx: RenderContext) -> None:
    value = section.value(owner)
    if isinstance(section, Nested):
        if value is None:
            return
        schema = schema_for(value, ctx.registry)
        with writer.section(f"{section.title}:", ctx.indent):
            write_body(writer, schema, value, None, ctx)
        return

    items = list(value or ())
    if not items:
        return
    if section.title is None:
        for i, item in enumerate(items):
            render_record(writer, item, i, ctx)
        return
    with writer.section(f"{section.title}:", ctx.indent):
        for i, item in enumerate(items):
            render_record(writer, item, i, ctx)


def render_model(
    writer: ScopeWriter,
    model: Any,
    registry: Optional[SchemaRegistry] = None,
    indent: str = INDENT,
) -> None:
    """Render a whole model; root fields share the first section's transaction."""
    registry = SCHEMAS if registry is None else registry
    schema = schema_for(model, registry)
    ctx = RenderContext(registry=registry, version=schema.version_of(model), indent=indent)

    sections = schema.sections
    with writer.transaction():
        write_fields(writer, schema, model, None, ctx)
        if sections:
            render_section(writer, sections[0], model, ctx)

    for section in sections[1:]:
        with writer.transaction():
            render_section(writer, section, model, ctx)


def render_to_string(model: Any, registry: Optional[SchemaRegistry] = None, indent: str = INDENT) -> str:
    buf = io.StringIO()
    with ScopeWriter(buf) as writer:
        render_model(writer, model, registry, indent)
        # closing the writer closes buf
        text = buf.getvalue()
    return text


def write_report(
    model: Any,
    path: Union[str, Path],
    registry: Optional[SchemaRegistry] = None,
    indent: str = INDENT,
) -> None:
    with ScopeWriter(open(path, "w", encoding="utf-8")) as writer:
        render_model(writer, model, registry, indent)
