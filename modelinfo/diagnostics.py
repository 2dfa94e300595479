"""Console warnings/errors, remembered so the CLI can pause before exiting."""
from __future__ import annotations

import sys
from typing import Optional, TextIO


class Diagnostics:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_warnings = False
        self.had_errors = False

    def _print(self, line: str) -> None:
        print(line, file=self.stream if self.stream is not None else sys.stdout)

    def warn(self, message: str) -> None:
        self._print(f"Warning: {message}")
        self.had_warnings = True

    def error(self, message: str) -> None:
        self._print(f"Error: {message}")
        self.had_errors = True

    @property
    def should_pause(self) -> bool:
        return self.had_warnings or self.had_errors
