"""
Model Info Dump
---------------

Writes indented, human-readable text reports for parsed 3D model containers
(FLVER0, FLVER2, MDL4, SMD4 and glTF record trees).
"""
from .writer import INDENT, ContractViolation, ScopeWriter
from .schema import SCHEMAS, UnknownRecordError, register_schemas, schema_for
from . import flver, gltf, mdl4  # noqa: F401  (register their schemas)
from .render import render_model, render_to_string, write_report
from .sources import SOURCES, read_model, register_source

__version__ = "0.1.0"

__all__ = [
    "INDENT",
    "ContractViolation",
    "ScopeWriter",
    "SCHEMAS",
    "UnknownRecordError",
    "register_schemas",
    "schema_for",
    "render_model",
    "render_to_string",
    "write_report",
    "SOURCES",
    "read_model",
    "register_source",
]
