from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from typing import Any

from loguru import logger

from fanbench.aggregate import AggregatedResult, ParallelAggregator, sources_from_delays
from fanbench.benchmark import Benchmark, BenchmarkResult
from fanbench.config import ConfigError, Settings, load_settings
from fanbench.executor import (
    BoundedPool,
    ExecutionAggregateError,
    InvalidArgument,
    TaskExecutor,
    TaskResult,
    describe_worker,
    strategy_for,
)

from .args import build_parser


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:HH:mm:ss} | {level: <8} | {message}",
        level="DEBUG" if verbose else "WARNING",
    )


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = _load(args.config)

        match args.command:
            case "execute":
                return cmd_execute(args, settings)
            case "benchmark":
                return cmd_benchmark(args, settings)
            case "simulate-io":
                return cmd_simulate_io(args, settings)
            case "aggregate":
                return cmd_aggregate(args, settings)
            case "worker-info":
                return cmd_worker_info(args, settings)
            case _:
                return 2

    except (ConfigError, InvalidArgument) as exc:
        print(str(exc), file=sys.stderr)
        if args.format == "json":
            _emit_json(_envelope(False, "Validation", str(exc), None))
        return 2

    except ExecutionAggregateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if args.format == "json":
            _emit_json(_envelope(False, "Execution", f"Error: {exc}", None))
        return 1

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_execute(args: argparse.Namespace, settings: Settings) -> int:
    _require_range("Number of tasks", args.tasks, 1, settings.limits.max_batch)

    executor = _executor(settings)
    strategy = strategy_for(args.strategy, pool_cap=settings.executor.pool_cap)
    results = executor.execute_batch(args.tasks, strategy)
    failed = [r for r in results if not r.succeeded]

    if args.format == "json":
        message = f"Executed {len(results)} tasks, {len(failed)} failed"
        _emit_json(
            _envelope(
                not failed,
                "Lightweight Concurrency",
                message,
                [r.to_dict() for r in results],
            )
        )
    else:
        for result in results:
            _print_task(result)

    return 1 if failed else 0


def cmd_benchmark(args: argparse.Namespace, settings: Settings) -> int:
    _require_range("Number of tasks", args.tasks, 1, settings.limits.max_benchmark)

    benchmark = Benchmark(
        _executor(settings), capped=BoundedPool(settings.executor.pool_cap)
    )
    result = benchmark.run(args.tasks)

    if args.format == "json":
        _emit_json(
            _envelope(
                True,
                "Lightweight Concurrency Benchmark",
                result.summary(),
                result.to_dict(),
            )
        )
    else:
        _print_benchmark(result)

    return 0


def cmd_simulate_io(args: argparse.Namespace, settings: Settings) -> int:
    _require_range(
        "Delay (ms)", args.delay_ms, 0, settings.limits.max_blocking_delay_ms
    )

    result = _executor(settings).simulate_blocking_io(args.delay_ms)

    if args.format == "json":
        _emit_json(
            _envelope(result.succeeded, "Blocking I/O", result.message, result.to_dict())
        )
    else:
        _print_task(result)

    return 0 if result.succeeded else 1


def cmd_aggregate(args: argparse.Namespace, settings: Settings) -> int:
    sources = sources_from_delays(settings.aggregator.source_delays_ms)
    result = ParallelAggregator(sources).fetch_all()

    if args.format == "json":
        _emit_json(
            _envelope(result.ok, "Parallel Fetch", result.status, result.to_dict())
        )
    else:
        _print_aggregate(result)

    return 0 if result.ok else 1


def cmd_worker_info(args: argparse.Namespace, settings: Settings) -> int:
    async def probe() -> dict[str, Any]:
        return describe_worker()

    info = asyncio.run(probe())

    if args.format == "json":
        _emit_json(_envelope(True, "Worker Info", "Success", info))
    else:
        for key, value in info.items():
            print(f"{key}: {value}")

    return 0


def _load(path: str | None) -> Settings:
    if path is None:
        return Settings()
    return load_settings(path)


def _executor(settings: Settings) -> TaskExecutor:
    return TaskExecutor(unit_delay_ms=settings.executor.unit_delay_ms)


def _require_range(what: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise InvalidArgument(f"{what} must be between {low} and {high}, got {value}")


def _envelope(success: bool, feature: str, message: str, data: Any) -> dict[str, Any]:
    return {
        "success": success,
        "feature": feature,
        "message": message,
        "data": data,
        "timestamp": datetime.now().isoformat(),
    }


def _emit_json(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _print_task(result: TaskResult) -> None:
    status = "OK" if result.succeeded else "FAIL"
    print(
        f"{status} {result.task_id}, {result.duration_ms:.3f}ms, "
        f"{result.worker}: {result.message}"
    )


def _print_benchmark(result: BenchmarkResult) -> None:
    print(result.summary())
    print(
        f"Completed: lightweight={result.lightweight_completed}, "
        f"capped pool={result.capped_pool_completed}"
    )


def _print_aggregate(result: AggregatedResult) -> None:
    print(result.source1_data)
    print(result.source2_data)
    print(result.source3_data)
    print(f"Status: {result.status}")
