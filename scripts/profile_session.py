#!/usr/bin/env python3
"""Headless session profiler.

Usage:
    python scripts/profile_session.py --difficulty hard --seed 42
    python scripts/profile_session.py --sessions 20 --cprofile session.prof

Reports:
    - Per-step timing statistics (min, p50, p95, p99, max)
    - Token count over the session
    - Outcome totals across all sessions
    - Optional: cProfile dump
"""

from __future__ import annotations

import argparse
import cProfile
import io
import os
import pstats
import statistics
import sys
import time

# Ensure project root is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from docket_router.config import DIFFICULTIES, SessionConfig
from docket_router.engine.session_loop import build_session


def _run_session(cfg: SessionConfig, difficulty: str, seed: int, frame_delta: float) -> dict:
    """Step one session to completion, rotating a cell every few steps."""
    loop = build_session(cfg, difficulty, seed=seed)
    step_times: list[float] = []
    token_counts: list[int] = []

    i = 0
    while loop.running:
        if i % 9 == 0:
            loop.queue_rotation((i // 9) % cfg.grid_rows, (i // 27) % cfg.grid_cols)
        t0 = time.perf_counter()
        loop.step(frame_delta)
        step_times.append(time.perf_counter() - t0)
        token_counts.append(loop.state.token_count)
        i += 1

    return {
        "step_times": step_times,
        "token_counts": token_counts,
        "summary": loop.summary(),
    }


def _percentile(data: list[float], p: float) -> float:
    if not data:
        return 0.0
    ordered = sorted(data)
    k = (len(ordered) - 1) * (p / 100.0)
    f = int(k)
    c = f + 1
    if c >= len(ordered):
        return ordered[f]
    return ordered[f] + (k - f) * (ordered[c] - ordered[f])


def _print_report(runs: list[dict], wall_time: float) -> None:
    step_times = [t for run in runs for t in run["step_times"]]
    token_counts = [n for run in runs for n in run["token_counts"]]
    num_steps = len(step_times)
    if num_steps == 0:
        print("No steps executed.")
        return

    print("\n" + "=" * 60)
    print("  SESSION PERFORMANCE REPORT")
    print("=" * 60)

    print(f"\n  Sessions:          {len(runs)}")
    print(f"  Steps executed:    {num_steps}")
    print(f"  Wall clock time:   {wall_time:.3f}s")
    print(f"  Throughput:        {num_steps / wall_time:.1f} steps/sec")
    print(f"  Peak tokens:       {max(token_counts)}")
    print(f"  Mean tokens:       {statistics.mean(token_counts):.2f}")

    print(f"\n  {'Metric':<16} {'Time (us)':>10}")
    print(f"  {'-' * 16} {'-' * 10}")
    for label, value in [
        ("Min", min(step_times)),
        ("P50 (median)", _percentile(step_times, 50)),
        ("P95", _percentile(step_times, 95)),
        ("P99", _percentile(step_times, 99)),
        ("Max", max(step_times)),
    ]:
        print(f"  {label:<16} {value * 1e6:>10.1f}")

    print(f"\n  {'Seed':<8} {'Score':>6} {'OK':>4} {'Wrong':>6} {'Stuck':>6} {'Combo':>6}")
    for run in runs:
        s = run["summary"]
        print(f"  {run['seed']:<8} {s.score:>6} {s.correct:>4} {s.wrong:>6} {s.stuck:>6} {s.max_combo:>6}")

    print("\n" + "=" * 60)


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile the session engine")
    parser.add_argument("--difficulty", type=str, default="normal", choices=sorted(DIFFICULTIES))
    parser.add_argument("--seed", type=int, default=42, help="Seed of the first session")
    parser.add_argument("--sessions", type=int, default=5, help="Sessions to run (seed, seed+1, ...)")
    parser.add_argument("--fps", type=float, default=60.0)
    parser.add_argument("--cprofile", type=str, default=None, help="Save cProfile output to file")
    args = parser.parse_args()

    cfg = SessionConfig()
    print(f"Profiling: {args.sessions} {args.difficulty} sessions from seed={args.seed} at {args.fps} fps")

    profiler = None
    if args.cprofile:
        profiler = cProfile.Profile()
        profiler.enable()

    runs = []
    wall_start = time.perf_counter()
    for n in range(args.sessions):
        seed = args.seed + n
        run = _run_session(cfg, args.difficulty, seed, 1.0 / args.fps)
        run["seed"] = seed
        runs.append(run)
    wall_time = time.perf_counter() - wall_start

    if profiler:
        profiler.disable()

    _print_report(runs, wall_time)

    if profiler and args.cprofile:
        profiler.dump_stats(args.cprofile)
        print(f"\n  cProfile data saved to: {args.cprofile}")
        print(f"\n  Top 20 functions by cumulative time:")
        stream = io.StringIO()
        ps = pstats.Stats(profiler, stream=stream)
        ps.sort_stats("cumulative")
        ps.print_stats(20)
        print(stream.getvalue())


if __name__ == "__main__":
    main()
