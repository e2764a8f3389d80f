#!/usr/bin/env python3
"""Run a simulated chunk pipeline and print one timing report per chunk."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from stagetime.config.defaults import PolicyConfig, ReporterConfig
from stagetime.runtime import TimeReporter, configure

STAGES = ("recv", "header", "check", "pack", "write", "send")


def process_chunk(index: int, max_delay_s: float) -> int:
    with TimeReporter("Chunk Processor") as reporter:
        for stage in STAGES:
            time.sleep(random.uniform(0, max_delay_s))
            reporter.mark(stage)
    return index


def fan_out(workers: int, max_delay_s: float) -> None:
    """Record one labelled duration per sub-task into a shared parent reporter."""
    with TimeReporter("Fan Out") as reporter:

        def sub_task(position: int) -> None:
            time.sleep(random.uniform(0, max_delay_s))
            reporter.mark(f"task{position}")

        with ThreadPoolExecutor(max_workers=workers) as pool:
            list(pool.map(sub_task, range(workers)))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--chunks", type=int, default=8, help="Number of chunks to process.")
    parser.add_argument("--workers", type=int, default=4, help="Worker threads.")
    parser.add_argument("--max-delay", type=float, default=0.05, help="Upper bound of simulated stage work (s).")
    parser.add_argument(
        "--sample-every",
        type=int,
        default=1,
        help="Only report every Nth chunk (1 reports all of them).",
    )
    parser.add_argument("--backend", choices=("logging", "structlog"), default="logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    policy = PolicyConfig(kind="sample", every_n=args.sample_every) if args.sample_every > 1 else PolicyConfig()
    emitter = configure(ReporterConfig(backend=args.backend, policy=policy))

    with ThreadPoolExecutor(max_workers=args.workers) as pool:
        list(pool.map(lambda index: process_chunk(index, args.max_delay), range(args.chunks)))
    fan_out(args.workers, args.max_delay)

    stats = emitter.stats()
    print(f"emitted={stats.emitted} suppressed={stats.suppressed} dropped={stats.dropped}")


if __name__ == "__main__":
    main()
