from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fanbench")

    parser.add_argument(
        "--config",
        default=None,
        help="Path to a settings file (.yaml/.yml, .toml, .json)",
    )
    parser.add_argument(
        "--format",
        choices=("json", "text"),
        default="json",
        help="Output format",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # execute
    execute = subparsers.add_parser("execute", help="Run a batch of concurrent tasks")
    execute.add_argument(
        "--tasks",
        type=int,
        default=10,
        help="Number of tasks to run",
    )
    execute.add_argument(
        "--strategy",
        choices=("lightweight", "pool"),
        default="lightweight",
        help="Concurrency strategy",
    )

    # benchmark
    benchmark = subparsers.add_parser(
        "benchmark", help="Compare lightweight tasks with a capped thread pool"
    )
    benchmark.add_argument(
        "--tasks",
        type=int,
        default=100,
        help="Number of tasks per run",
    )

    # simulate-io
    simulate = subparsers.add_parser(
        "simulate-io", help="Run a single simulated blocking operation"
    )
    simulate.add_argument(
        "--delay-ms",
        type=int,
        default=1000,
        help="Delay in milliseconds",
    )

    # aggregate
    subparsers.add_parser("aggregate", help="Fetch from three sources in parallel")

    # worker-info
    subparsers.add_parser("worker-info", help="Describe the worker handling the call")

    return parser
