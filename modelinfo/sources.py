"""
Model sources: format detection plus parsing, one object per container format.

A source answers ``read(path)`` with a record tree, or ``None`` when the file
is not in its format. Sources are tried in registration order.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence

from .gltf import GltfSource

logger = logging.getLogger(__name__)


class ModelSource(Protocol):
    name: str

    def read(self, path: Path) -> Optional[Any]:  # pragma: no cover - interface
        ...


SOURCES: List[ModelSource] = [GltfSource()]


def register_source(source: ModelSource) -> None:
    """Append a source (e.g. an adapter around an external FLVER/MDL4 reader)."""
    SOURCES.append(source)


def read_model(path: Path, sources: Optional[Sequence[ModelSource]] = None) -> Optional[Any]:
    for source in (SOURCES if sources is None else sources):
        model = source.read(path)
        if model is not None:
            logger.debug("%s recognized as %s", path, source.name)
            return model
    return None
