"""
Run the collections benchmark.

Usage:
    python -m collections_bench --populate-size 10000 --timeout-ms 5000
    python -m collections_bench --only dynamic_array --only linked_list --output results.json
    python -m collections_bench --serve --port 8000
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import BenchmarkConfig
from .exceptions import InstantiationError
from .harness import BenchmarkHarness


def build_parser() -> argparse.ArgumentParser:
    defaults = BenchmarkConfig()
    parser = argparse.ArgumentParser(
        prog="collections_bench",
        description="Time and size container implementations on populated workloads.",
    )
    parser.add_argument("--populate-size", type=int, default=defaults.populate_size)
    parser.add_argument("--timeout-ms", type=int, default=defaults.timeout_millis)
    parser.add_argument("--batch-size", type=int, default=defaults.memory_batch_size)
    parser.add_argument("--gc-passes", type=int, default=defaults.gc_passes)
    parser.add_argument("--gc-pause", type=float, default=defaults.gc_pause_seconds, metavar="SECONDS")
    parser.add_argument(
        "--only",
        action="append",
        metavar="NAME",
        help="implementation to run (repeatable); default is every built-in one",
    )
    parser.add_argument("--skip-memory", action="store_true", help="skip the memory benchmark")
    parser.add_argument("--output", type=Path, help="write results as JSON to this path")
    parser.add_argument("--serve", action="store_true", help="serve results over HTTP when done")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = BenchmarkConfig(
            populate_size=args.populate_size,
            timeout_millis=args.timeout_ms,
            memory_batch_size=args.batch_size,
            gc_passes=args.gc_passes,
            gc_pause_seconds=args.gc_pause,
        )
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    harness = BenchmarkHarness(config)

    try:
        if args.only:
            descriptors = [harness.factory.descriptor(name) for name in args.only]
        else:
            descriptors = harness.factory.descriptors
    except InstantiationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    harness.run_all(descriptors)
    if not args.skip_memory:
        harness.run_memory_bench(descriptors)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(harness.store.to_json())
        logging.getLogger(__name__).info(f"Results written to {args.output}")

    if args.serve:
        import uvicorn

        from .reporting import create_app

        uvicorn.run(create_app(harness.store, config), host=args.host, port=args.port)

    return 0


if __name__ == "__main__":
    sys.exit(main())
