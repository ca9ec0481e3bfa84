from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Op(Enum):
    ACC = "acc"
    JMP = "jmp"
    NOP = "nop"


# Only these two are interchangeable during repair.
_FLIP = {Op.JMP: Op.NOP, Op.NOP: Op.JMP}


@dataclass(frozen=True)
class Instruction:
    """One decoded operation and its signed argument."""
    op: Op
    arg: int

    @property
    def flippable(self) -> bool:
        return self.op in _FLIP

    def flipped(self) -> "Instruction":
        if self.op not in _FLIP:
            raise ValueError(f"Cannot flip {self.op.value} instruction")
        return Instruction(_FLIP[self.op], self.arg)


Program = Tuple[Instruction, ...]


def ACC(arg: int) -> Instruction:
    return Instruction(Op.ACC, arg)

def JMP(arg: int) -> Instruction:
    return Instruction(Op.JMP, arg)

def NOP(arg: int = 0) -> Instruction:
    return Instruction(Op.NOP, arg)


def patch(program: Program, index: int) -> Program:
    """
    Return a new Program with the instruction at `index` flipped jmp<->nop.
    The input program is left untouched.
    """
    if not 0 <= index < len(program):
        raise IndexError(f"No instruction at index {index}")
    return program[:index] + (program[index].flipped(),) + program[index + 1:]


__all__ = ["Op", "Instruction", "Program", "ACC", "JMP", "NOP", "patch"]
