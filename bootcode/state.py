from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class MachineState:
    accumulator: int = 0
    pc: int = 0

    def halted(self, length: int) -> bool:
        return self.pc == length

    def in_bounds(self, length: int) -> bool:
        return 0 <= self.pc <= length
