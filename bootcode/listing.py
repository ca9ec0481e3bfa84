from __future__ import annotations
from typing import Dict, List, Optional

from bootcode.core.ir import Instruction, Program


def format_instruction(insn: Instruction) -> str:
    """Canonical text form, accepted back by `bootcode.loader.parse`."""
    return f"{insn.op.value} {insn.arg:+d}"


def render_listing(program: Program, *, marks: Optional[Dict[int, str]] = None) -> List[str]:
    """
    Return one line per instruction, `index: mnemonic ±arg`, with an
    optional `# note` appended for indices present in `marks`.
    """
    marks = marks or {}
    width = len(str(max(len(program) - 1, 0)))
    out: List[str] = [f"# program: {len(program)} instructions"]
    for idx, insn in enumerate(program):
        line = f"{idx:>{width}}: {format_instruction(insn)}"
        note = marks.get(idx)
        if note:
            line = f"{line:<{width + 11}} # {note}"
        out.append(line)
    return out
