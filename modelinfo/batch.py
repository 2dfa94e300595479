"""
Batch processing: one report per recognized input file.

Each file owns its writer and output stream. A failure while reading or
rendering one file is reported as an error naming that file, and the batch
moves on; writer contract violations are defects and propagate.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from .diagnostics import Diagnostics
from .render import write_report
from .schema import SchemaRegistry
from .sources import ModelSource, read_model
from .writer import ContractViolation

logger = logging.getLogger(__name__)

REPORT_SUFFIX = ".info.txt"


def report_path(path: Path, suffix: str = REPORT_SUFFIX) -> Path:
    return path.with_name(path.name + suffix)


class BatchProcessor:
    def __init__(
        self,
        diagnostics: Optional[Diagnostics] = None,
        sources: Optional[Sequence[ModelSource]] = None,
        registry: Optional[SchemaRegistry] = None,
        suffix: str = REPORT_SUFFIX,
    ):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.sources = sources
        self.registry = registry
        self.suffix = suffix

    def process(self, arg: Union[str, Path]) -> None:
        """Process one command-line argument: a folder, a file, or neither."""
        path = Path(arg)
        if path.is_dir():
            self.process_folder(path)
        elif path.is_file():
            self._guarded(path, warn_unrecognized=True)
        else:
            self.diagnostics.error(f"Could not find file or folder named: {arg}")

    def process_folder(self, folder: Path) -> int:
        """Recursively process every file under ``folder``; returns the number recognized."""
        # list first: reports written during the scan must not be revisited
        files = sorted(p for p in folder.rglob("*") if p.is_file())
        recognized = 0
        for path in files:
            if self._guarded(path, warn_unrecognized=False):
                recognized += 1
        if not recognized:
            self.diagnostics.warn(f"No recognized files found in folder: {folder}")
        return recognized

    def _guarded(self, path: Path, warn_unrecognized: bool) -> bool:
        try:
            return self.process_file(path, warn_unrecognized)
        except ContractViolation:
            raise
        except Exception as exc:
            logger.debug("Traceback for %s", path, exc_info=True)
            self.diagnostics.error(
                f"A file failed processing due to an error:\nFile: {path}\nError:\n{type(exc).__name__}: {exc}"
            )
            return True

    def process_file(self, path: Path, warn_unrecognized: bool = True) -> bool:
        """Write the report for ``path``. Returns False when the file is not a known format."""
        model = read_model(path, self.sources)
        if model is None:
            if path.name.endswith(self.suffix):
                if warn_unrecognized:
                    self.diagnostics.warn(f"File appears to be a written info txt: {path}")
            elif warn_unrecognized:
                self.diagnostics.error(f"Unrecognized file type: {path}")
            return False

        out = report_path(path, self.suffix)
        write_report(model, out, self.registry)
        logger.info("Wrote %s", out)
        return True
