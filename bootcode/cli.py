from __future__ import annotations

import argparse, json, logging
from typing import Any, Callable, Dict, List, Optional

from bootcode.core.metrics import SearchMetrics
from bootcode.errors import BootcodeError
from bootcode.listing import render_listing
from bootcode.loader import load
from bootcode.orchestrator import run
from bootcode.repair import DEFAULT_MAX_EXPLORED, repair


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="python -m bootcode.cli",
        description="Run an acc/jmp/nop program until it loops, then search for the jmp/nop swap that makes it halt.",
    )
    p.add_argument("file", help="Path to the program text.")
    p.add_argument("--max-explored", type=int, default=DEFAULT_MAX_EXPLORED,
                   help="Cap on search branches before giving up.")
    p.add_argument("--memoize", action="store_true",
                   help="Drop branches revisiting an already-expanded (pc, mutation) pair.")
    p.add_argument("--trace", action="store_true", help="Record diagnostic-run trace events.")
    p.add_argument("--json", action="store_true", help="Print JSON of both results + search metrics.")
    p.add_argument("--listing", action="store_true", help="Print the program with the repaired instruction marked.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging.")
    args = p.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        program = load(args.file)
    except FileNotFoundError:
        raise SystemExit(f"No such file: {args.file}")
    except OSError as e:
        raise SystemExit(f"Error reading file {args.file!r}: {e}")
    except BootcodeError as e:
        raise SystemExit(f"Could not parse {args.file!r}: {e}")

    trace_log: List[Dict[str, Any]] = []

    def tracer(tag: str, payload: Dict[str, Any]):
        rec: Dict[str, Any] = {"event": tag}
        rec.update(payload or {})
        trace_log.append(rec)

    trace_cb: Optional[Callable[[str, dict], None]] = tracer if args.trace else None
    metrics = SearchMetrics()

    try:
        diag = run(program, trace=trace_cb)
        fixed = repair(program, max_explored=args.max_explored, memoize=args.memoize, metrics=metrics)
    except BootcodeError as e:
        raise SystemExit(f"{type(e).__name__}: {e}")

    if args.json:
        out = {
            "length": len(program),
            "diagnostic": {
                "reason": diag.reason.value,
                "pc": diag.state.pc,
                "accumulator": diag.state.accumulator,
                "steps": diag.steps,
            },
            "repair": {
                "flipped_at": fixed.flipped_at,
                "accumulator": fixed.accumulator,
                "explored": fixed.explored,
            },
            "metrics": metrics.to_row(),
            "trace": trace_log if args.trace else None,
        }
        print(json.dumps(out, indent=2))
    else:
        if diag.halted:
            print(f"The program halts unmodified; accumulator is {diag.state.accumulator}")
        else:
            print(
                "The state of the accumulator before an instruction is executed twice "
                f"is {diag.state.accumulator}"
            )
        print(f"The state of the accumulator of the fixed program after termination is {fixed.accumulator}")
        if args.trace:
            print("\nTrace:")
            for e in trace_log:
                print(e)

    if args.listing:
        marks = {}
        if fixed.flipped_at is not None:
            flipped = program[fixed.flipped_at].flipped()
            marks[fixed.flipped_at] = f"flip -> {flipped.op.value}"
        if not diag.halted:
            marks.setdefault(diag.state.pc, "loop re-entered here")
        print("\n".join(render_listing(program, marks=marks)))

    return 0

if __name__ == "__main__":
    raise SystemExit(main())
