from __future__ import annotations
from typing import Optional


class BootcodeError(Exception):
    """Base class for every failure raised by the bootcode machine."""


class ParseError(BootcodeError, ValueError):
    def __init__(self, message: str, *, lineno: Optional[int] = None, line: Optional[str] = None) -> None:
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
        self.lineno = lineno
        self.line = line


class MachineCorruptionError(BootcodeError, RuntimeError):
    """Program counter left [0, len(program)] without landing on the end."""

    def __init__(self, pc: int, length: int) -> None:
        super().__init__(f"Program counter {pc} outside program of length {length}")
        self.pc = pc
        self.length = length


class UnfixableError(BootcodeError, RuntimeError):
    def __init__(self, explored: int) -> None:
        super().__init__(f"No single jmp/nop swap makes the program halt ({explored} branches explored)")
        self.explored = explored


class SearchLimitError(BootcodeError, RuntimeError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Repair search exceeded {limit} explored branches")
        self.limit = limit
