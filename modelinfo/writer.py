"""
Scoped Report Writer
--------------------

Line-oriented text writer with two independent mechanisms:

- scopes: a stack of indentation fragments; every line is prefixed by the
  concatenation of the fragments currently pushed.
- transactions: while buffering, output accumulates in memory and reaches the
  underlying stream in one write on ``end_transaction()``. If an exception
  escapes ``transaction()``, the buffered text is dropped.

Unmatched calls (nested transactions, popping an empty scope stack, closing
with open state) raise ``ContractViolation``. They are defects in the caller's
traversal, not runtime conditions.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, TextIO

INDENT = "  "


class ContractViolation(AssertionError):
    """Unbalanced transaction or scope calls on a ScopeWriter."""


class ScopeWriter:
    def __init__(self, stream: TextIO):
        self._stream = stream
        self._buffer: List[str] = []
        self._buffering = False
        self._scopes: List[str] = []
        self._prefix = ""
        self._closed = False

    @property
    def buffering(self) -> bool:
        return self._buffering

    @property
    def depth(self) -> int:
        return len(self._scopes)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def closed(self) -> bool:
        return self._closed

    # -----------------------------
    # Output
    # -----------------------------
    def _emit(self, text: str) -> None:
        if self._buffering:
            self._buffer.append(text)
        else:
            self._stream.write(text)

    def write(self, text: str) -> None:
        self._emit(self._prefix + text)

    def write_line(self, text: str = "") -> None:
        self._emit(self._prefix + text + "\n")

    # -----------------------------
    # Transactions
    # -----------------------------
    def start_transaction(self) -> None:
        if self._buffering:
            raise ContractViolation("Already buffering.")
        self._buffer.clear()
        self._buffering = True

    def end_transaction(self) -> None:
        if not self._buffering:
            raise ContractViolation("Not buffering yet.")
        self._buffering = False
        text = "".join(self._buffer)
        self._buffer.clear()
        if text:
            self._stream.write(text)

    def _discard_transaction(self) -> None:
        self._buffering = False
        self._buffer.clear()

    @contextmanager
    def transaction(self) -> Iterator["ScopeWriter"]:
        """Buffer everything written inside the block; flush only on success."""
        self.start_transaction()
        try:
            yield self
        except BaseException:
            self._discard_transaction()
            raise
        self.end_transaction()

    # -----------------------------
    # Scopes
    # -----------------------------
    def push_scope(self, fragment: str) -> None:
        self._scopes.append(self._prefix)
        self._prefix += fragment

    def pop_scope(self) -> None:
        if not self._scopes:
            raise ContractViolation("There are no scopes to pop.")
        self._prefix = self._scopes.pop()

    def titled_section(self, title: str, fragment: str = INDENT) -> None:
        """Write ``title`` at the current indentation, then push ``fragment``."""
        self.write_line(title)
        self.push_scope(fragment)

    @contextmanager
    def scope(self, fragment: str = INDENT) -> Iterator["ScopeWriter"]:
        self.push_scope(fragment)
        try:
            yield self
        finally:
            self.pop_scope()

    @contextmanager
    def section(self, title: str, fragment: str = INDENT) -> Iterator["ScopeWriter"]:
        self.titled_section(title, fragment)
        try:
            yield self
        finally:
            self.pop_scope()

    # -----------------------------
    # Release
    # -----------------------------
    def close(self, check: bool = True) -> None:
        """Release the stream (once). With ``check``, open state is a ContractViolation."""
        if self._closed:
            return
        self._closed = True
        buffering, depth = self._buffering, len(self._scopes)
        self._discard_transaction()
        self._scopes.clear()
        self._prefix = ""
        self._stream.close()
        if not check:
            return
        if buffering:
            raise ContractViolation("Never stopped buffering.")
        if depth:
            raise ContractViolation(f"Scope stack is not cleared ({depth} open).")

    def __enter__(self) -> "ScopeWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # don't mask an exception that is already propagating
        self.close(check=exc_type is None)
