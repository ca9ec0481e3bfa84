from __future__ import annotations
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, FrozenSet, Optional, Set, Tuple

from .core.engine import step
from .core.ir import Program
from .core.metrics import SearchMetrics
from .errors import SearchLimitError, UnfixableError
from .state import MachineState

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXPLORED = 1_000_000


class Transition(Enum):
    CONTINUE = "continue"
    BRANCH = "branch"
    DISCARD = "discard"
    ACCEPT = "accept"


@dataclass(frozen=True)
class SearchState:
    """
    One speculative branch of the repair search.

    `visited` is a frozenset, so successors always get their own value
    and no branch can observe another branch's history.
    """
    state: MachineState = field(default_factory=MachineState)
    visited: FrozenSet[int] = frozenset()
    mutation_used: bool = False
    flipped_at: Optional[int] = None

    def advance(self, program: Program) -> Tuple[Transition, Tuple["SearchState", ...]]:
        length = len(program)
        pc = self.state.pc
        if pc == length:
            return Transition.ACCEPT, ()
        if not self.state.in_bounds(length) or pc in self.visited:
            return Transition.DISCARD, ()

        visited = self.visited | {pc}
        insn = program[pc]
        if not insn.flippable or self.mutation_used:
            nxt = SearchState(step(self.state, insn), visited, self.mutation_used, self.flipped_at)
            return Transition.CONTINUE, (nxt,)

        kept = SearchState(step(self.state, insn), visited, False, None)
        flipped = SearchState(step(self.state, insn.flipped()), visited, True, pc)
        return Transition.BRANCH, (kept, flipped)


@dataclass(frozen=True)
class RepairResult:
    state: MachineState
    flipped_at: Optional[int]
    explored: int

    @property
    def accumulator(self) -> int:
        return self.state.accumulator


def repair(
    program: Program,
    *,
    max_explored: int = DEFAULT_MAX_EXPLORED,
    memoize: bool = False,
    metrics: Optional[SearchMetrics] = None,
) -> RepairResult:
    """
    Breadth-first search for the single jmp<->nop flip that makes `program`
    halt. Branches are expanded in FIFO order with the unflipped successor
    queued before the flipped one, so the first accepted branch is also the
    earliest in decision order.

    With `memoize`, a branch reaching a (pc, mutation_used) pair that some
    earlier branch already expanded is dropped.
    """
    m = metrics if metrics is not None else SearchMetrics()
    t0 = time.perf_counter()
    length = len(program)

    frontier: Deque[SearchState] = deque([SearchState()])
    expanded: Set[Tuple[int, bool]] = set()
    explored = 0

    try:
        while frontier:
            if explored >= max_explored:
                raise SearchLimitError(max_explored)
            branch = frontier.popleft()
            explored += 1
            m.inc_explored()

            if memoize and branch.state.pc != length and branch.state.in_bounds(length) \
                    and branch.state.pc not in branch.visited:
                key = (branch.state.pc, branch.mutation_used)
                if key in expanded:
                    m.discarded_memo += 1
                    continue
                expanded.add(key)

            transition, successors = branch.advance(program)

            if transition is Transition.ACCEPT:
                logger.info(
                    "repair accepted after %d branches: flipped_at=%s acc=%d",
                    explored, branch.flipped_at, branch.state.accumulator,
                )
                return RepairResult(branch.state, branch.flipped_at, explored)

            if transition is Transition.DISCARD:
                if branch.state.in_bounds(length):
                    m.discarded_loops += 1
                else:
                    m.discarded_out_of_range += 1
                    if logger.isEnabledFor(logging.DEBUG):
                        logger.debug(
                            "branch flipped_at=%s left the program at pc=%d",
                            branch.flipped_at, branch.state.pc,
                        )
                continue

            if transition is Transition.BRANCH:
                m.inc_fork()
                m.add_timeline_point(
                    explored=explored, pc=branch.state.pc, op=program[branch.state.pc].op.value,
                    frontier=len(frontier),
                )

            frontier.extend(successors)
            m.observe_frontier(len(frontier))

        raise UnfixableError(explored)
    finally:
        m.total_ms += (time.perf_counter() - t0) * 1000.0
