from __future__ import annotations
from dataclasses import replace

from bootcode.state import MachineState
from .ir import Instruction, Op


def step(state: MachineState, instruction: Instruction) -> MachineState:
    """
    Apply a single instruction and return the successor state.
    `state` is never modified; callers may keep it as a snapshot.
    """
    op = instruction.op
    if op is Op.ACC:
        return MachineState(state.accumulator + instruction.arg, state.pc + 1)
    if op is Op.JMP:
        return replace(state, pc=state.pc + instruction.arg)
    if op is Op.NOP:
        return replace(state, pc=state.pc + 1)
    raise ValueError(f"Unknown opcode: {op!r}")
