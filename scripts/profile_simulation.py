#!/usr/bin/env python3
"""City simulation profiler.

Usage:
    python scripts/profile_simulation.py --ticks 500 --grid 64
    python scripts/profile_simulation.py --ticks 200 --grid 128 --cprofile profile.prof

Reports:
    - Per-tick timing statistics (min, p50, p95, max)
    - Land value recompute and corner-to-corner A* timings
    - Population and treasury at the end of the run
    - Optional: cProfile dump for flame graph generation
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

from citysim.ai.pathfinding import find_path
from citysim.config import SimulationConfig
from citysim.core.enums import BuildingKind
from citysim.core.models import Vector2
from citysim.engine.city_engine import CityEngine
from citysim.systems.land_value import compute_land_value


def _lay_out_city(engine: CityEngine) -> int:
    """Fill the grid with a repeating block pattern; returns buildings placed."""
    grid = engine.state.grid
    size = grid.size
    placed = 0
    for y in range(size):
        for x in range(size):
            if x % 4 == 3 or y % 4 == 3:
                kind = BuildingKind.ROAD
            elif x % 8 == 1 and y % 8 == 1:
                kind = BuildingKind.PARK
            elif (x + y) % 5 == 0:
                kind = BuildingKind.COMMERCIAL
            elif (x * y) % 7 == 0:
                kind = BuildingKind.INDUSTRIAL
            else:
                kind = BuildingKind.RESIDENTIAL
            # Direct grid writes: the profile targets ticks, not the treasury
            grid.set_building(x, y, kind)
            placed += 1
    return placed


def _time(fn) -> float:
    t0 = time.perf_counter()
    fn()
    return time.perf_counter() - t0


def _percentile(data: list[float], p: float) -> float:
    if not data:
        return 0.0
    ordered = sorted(data)
    k = (len(ordered) - 1) * (p / 100.0)
    f = int(k)
    c = min(f + 1, len(ordered) - 1)
    return ordered[f] + (k - f) * (ordered[c] - ordered[f])


def _run(cfg: SimulationConfig, num_ticks: int) -> dict:
    engine = CityEngine(cfg)
    placed = _lay_out_city(engine)

    tick_times = [_time(engine.tick) for _ in range(num_ticks)]

    grid = engine.state.grid
    bfs_times = [_time(lambda: compute_land_value(grid)) for _ in range(10)]
    corner = Vector2(grid.size - 1, grid.size - 1)
    path_times = [_time(lambda: find_path(Vector2(0, 3), corner, grid)) for _ in range(10)]

    return {
        "placed": placed,
        "tick_times": tick_times,
        "bfs_times": bfs_times,
        "path_times": path_times,
        "stats": engine.state.stats,
    }


def _print_report(data: dict, wall_time: float) -> None:
    tick_times = data["tick_times"]
    if not tick_times:
        print("No ticks executed.")
        return

    print("\n" + "=" * 60)
    print("  CITY SIMULATION PERFORMANCE REPORT")
    print("=" * 60)
    print(f"\n  Buildings placed:  {data['placed']}")
    print(f"  Ticks executed:    {len(tick_times)}")
    print(f"  Wall clock time:   {wall_time:.3f}s")
    print(f"  Throughput:        {len(tick_times) / sum(tick_times):.1f} ticks/sec")

    print(f"\n  {'Metric':<16} {'Tick (ms)':>10}")
    print(f"  {'-' * 16} {'-' * 10}")
    for label, value in [
        ("Min", min(tick_times)),
        ("P50 (median)", _percentile(tick_times, 50)),
        ("P95", _percentile(tick_times, 95)),
        ("Max", max(tick_times)),
    ]:
        print(f"  {label:<16} {value * 1000:>10.3f}")

    print(f"\n  Land value BFS:    {statistics.mean(data['bfs_times']) * 1000:.3f}ms avg")
    print(f"  A* corner path:    {statistics.mean(data['path_times']) * 1000:.3f}ms avg")

    stats = data["stats"]
    print(f"\n  Day {stats.day}: ${stats.money}, population {stats.population}")
    print("\n" + "=" * 60)


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile the city simulation")
    parser.add_argument("--ticks", type=int, default=500, help="Number of ticks to run")
    parser.add_argument("--seed", type=int, default=42, help="World seed")
    parser.add_argument("--grid", type=int, default=64, help="Grid size (NxN)")
    parser.add_argument("--cprofile", type=str, default=None, help="Save cProfile output to file")
    args = parser.parse_args()

    cfg = SimulationConfig(world_seed=args.seed, grid_size=args.grid)
    print(f"Profiling: {args.ticks} ticks, seed={args.seed}, grid={args.grid}x{args.grid}")

    profiler = None
    if args.cprofile:
        profiler = cProfile.Profile()
        profiler.enable()

    wall_start = time.perf_counter()
    data = _run(cfg, args.ticks)
    wall_time = time.perf_counter() - wall_start

    if profiler:
        profiler.disable()

    _print_report(data, wall_time)

    if profiler and args.cprofile:
        profiler.dump_stats(args.cprofile)
        print(f"\n  cProfile data saved to: {args.cprofile}")
        print(f"  View with: python -m pstats {args.cprofile}")

        print("\n  Top 20 functions by cumulative time:")
        stream = io.StringIO()
        ps = pstats.Stats(profiler, stream=stream)
        ps.sort_stats("cumulative")
        ps.print_stats(20)
        print(stream.getvalue())


if __name__ == "__main__":
    main()
