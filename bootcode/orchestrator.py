from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Set

from .core.engine import step
from .core.ir import Program
from .errors import MachineCorruptionError
from .state import MachineState

logger = logging.getLogger(__name__)

Trace = Callable[[str, Dict[str, Any]], None]


class Reason(Enum):
    HALTED = "halted"
    LOOP_DETECTED = "loop_detected"


@dataclass(frozen=True)
class RunResult:
    state: MachineState
    reason: Reason
    steps: int

    @property
    def halted(self) -> bool:
        return self.reason is Reason.HALTED


def run(program: Program, *, trace: Optional[Trace] = None) -> RunResult:
    """
    Execute `program` from pc 0 until it halts (pc == len(program)) or is
    about to execute an instruction for the second time.

    On a loop the returned state is the one *before* the repeated
    instruction runs again.
    """
    length = len(program)
    st = MachineState()
    seen: Set[int] = set()
    steps = 0

    while True:
        if st.pc == length:
            if trace:
                trace("halt", {"pc": st.pc, "acc": st.accumulator, "steps": steps})
            logger.debug("halted after %d steps, acc=%d", steps, st.accumulator)
            return RunResult(st, Reason.HALTED, steps)
        if not st.in_bounds(length):
            raise MachineCorruptionError(st.pc, length)
        if st.pc in seen:
            if trace:
                trace("loop", {"pc": st.pc, "acc": st.accumulator, "steps": steps})
            logger.debug("pc %d revisited after %d steps, acc=%d", st.pc, steps, st.accumulator)
            return RunResult(st, Reason.LOOP_DETECTED, steps)

        seen.add(st.pc)
        insn = program[st.pc]
        nxt = step(st, insn)
        steps += 1
        if trace:
            trace("step", {
                "pc": st.pc, "op": insn.op.value, "arg": insn.arg,
                "pc_after": nxt.pc, "acc": nxt.accumulator,
            })
        st = nxt
