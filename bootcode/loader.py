from __future__ import annotations
import re
from typing import List

from bootcode.core.ir import Instruction, Op, Program
from bootcode.errors import ParseError

_LINE = re.compile(r"^(?P<mnemonic>\S+) (?P<arg>\S+)$")
_ARG = re.compile(r"^[+-][0-9]+$")
_MNEMONICS = {op.value: op for op in Op}


def parse_line(line: str, lineno: int = 1) -> Instruction:
    m = _LINE.match(line)
    if m is None:
        raise ParseError(f"malformed instruction {line!r}", lineno=lineno, line=line)
    mnemonic, arg = m.group("mnemonic"), m.group("arg")
    op = _MNEMONICS.get(mnemonic)
    if op is None:
        raise ParseError(f"unknown mnemonic {mnemonic!r}", lineno=lineno, line=line)
    if not _ARG.match(arg):
        raise ParseError(f"argument {arg!r} is not a signed integer", lineno=lineno, line=line)
    return Instruction(op, int(arg))


def parse(text: str) -> Program:
    """
    Decode program text, one `mnemonic +N` / `mnemonic -N` per line.
    Trailing blank lines are dropped; any other bad line raises ParseError.
    """
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    out: List[Instruction] = []
    for lineno, line in enumerate(lines, start=1):
        out.append(parse_line(line, lineno))
    return tuple(out)


def load(path: str) -> Program:
    with open(path, "r", encoding="utf-8") as f:
        return parse(f.read())
