from .aggregator import DEFAULT_SOURCES, ParallelAggregator, Source, sources_from_delays
from .types import ERROR_MARKER, SUCCESS, AggregatedResult

__all__ = [
    "ParallelAggregator",
    "Source",
    "DEFAULT_SOURCES",
    "sources_from_delays",
    "AggregatedResult",
    "SUCCESS",
    "ERROR_MARKER",
]
