from __future__ import annotations

import argparse
import json
import random
import statistics
import sys
from time import perf_counter_ns
from typing import Dict, List

import psutil

from bootcode.core.ir import ACC, JMP, NOP, Program
from bootcode.core.metrics import SearchMetrics
from bootcode.orchestrator import run
from bootcode.repair import repair

def build_program(blocks: int, seed: int) -> Program:
    """
    Chain `blocks` acc/nop/jmp triples walking forward, then close the
    chain with a backwards jmp that a single flip to nop repairs.
    """
    rng = random.Random(seed)
    out = []
    for _ in range(blocks):
        out.append(ACC(rng.randint(-50, 50)))
        out.append(NOP(rng.randint(-5, 0)) if rng.random() < 0.5 else JMP(1))
        out.append(JMP(1))
    out.append(JMP(-len(out)))
    out.append(ACC(1))
    return tuple(out)

def p95(values: List[float]) -> float:
    if not values:
        return 0.0
    vs = sorted(values)
    idx = int(round(0.95 * (len(vs) - 1)))
    return vs[idx]

def time_case(program: Program, *, runs: int, memoize: bool) -> Dict[str, float]:
    """Warm up once, then time `runs` repair searches."""
    repair(program, memoize=memoize)

    times_us: List[float] = []
    m = SearchMetrics()
    for _ in range(runs):
        m = SearchMetrics()
        t0 = perf_counter_ns()
        repair(program, memoize=memoize, metrics=m)
        t1 = perf_counter_ns()
        times_us.append((t1 - t0) / 1000.0)

    return {
        "runs": runs,
        "mean_us": float(statistics.fmean(times_us)),
        "median_us": float(statistics.median(times_us)),
        "p95_us": float(p95(times_us)),
        "explored": m.explored,
        "peak_frontier": m.peak_frontier,
    }

def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Benchmark the jmp/nop repair search.")
    ap.add_argument("--runs", type=int, default=10, help="timed runs per case (default: 10)")
    ap.add_argument("--blocks", type=int, default=200,
                    help="acc/nop/jmp triples per program (default: 200)")
    ap.add_argument("--seed", type=int, default=8)
    ap.add_argument("--out", type=str, default="",
                    help="write JSON to this file (else prints to stdout)")
    args = ap.parse_args(argv)

    proc = psutil.Process()
    meta = {
        "platform": sys.platform,
        "python": ".".join(map(str, sys.version_info[:3])),
        "runs_per_case": args.runs,
        "blocks": args.blocks,
        "rss_bytes_start": int(proc.memory_info().rss),
    }

    program = build_program(args.blocks, args.seed)
    meta["length"] = len(program)
    meta["diagnostic_reason"] = run(program).reason.value

    results = {
        "plain": time_case(program, runs=args.runs, memoize=False),
        "memoized": time_case(program, runs=args.runs, memoize=True),
    }
    meta["rss_bytes_end"] = int(proc.memory_info().rss)

    text = json.dumps({"meta": meta, **results}, indent=2)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text, flush=True)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
