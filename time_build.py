"""Time each phase of a StraitBuilder build, including a day/night toggle."""

import logging
import time
import sys
import os

# Ensure the project root is on the path
sys.path.insert(0, os.path.dirname(__file__))

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

from straitbuilder.builder import StraitBuilder
from straitbuilder.models import Mode


def timed_build(seed: int, workers: int):
    builder = StraitBuilder(seed=seed, use_cache=False, max_workers=workers)
    timings = {}

    t0 = time.perf_counter()
    scene = builder.build(Mode.DAY)
    timings["1. Day build (cold)"] = time.perf_counter() - t0
    cold_rebuilds = builder.rebuild_count()

    t0 = time.perf_counter()
    builder.build(Mode.NIGHT)
    timings["2. Toggle to night"] = time.perf_counter() - t0
    night_rebuilds = builder.rebuild_count() - cold_rebuilds

    t0 = time.perf_counter()
    builder.build(Mode.DAY)
    timings["3. Toggle back to day"] = time.perf_counter() - t0
    day_rebuilds = builder.rebuild_count() - cold_rebuilds - night_rebuilds

    print("\n" + "=" * 60)
    print(f"BUILD COMPLETE: seed {seed}, {len(scene.entries)} entities")
    print("=" * 60)
    total = 0
    for label, dur in timings.items():
        print(f"  {label}: {dur:.2f}s")
        total += dur
    print(f"  TOTAL: {total:.2f}s")
    print(f"  Buffer rebuilds: cold {cold_rebuilds}, night {night_rebuilds}, day {day_rebuilds}")
    print("=" * 60)


if __name__ == "__main__":
    workers = 4 if "--parallel" in sys.argv else 1
    timed_build(1453, workers)
