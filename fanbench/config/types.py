from dataclasses import dataclass, field


@dataclass
class ExecutorSettings:
    unit_delay_ms: float = 100
    pool_cap: int = 200


@dataclass
class LimitSettings:
    max_batch: int = 10000
    max_benchmark: int = 5000
    max_blocking_delay_ms: int = 30000


@dataclass
class AggregatorSettings:
    source_delays_ms: tuple[float, float, float] = (100, 150, 120)


@dataclass
class Settings:
    executor: ExecutorSettings = field(default_factory=ExecutorSettings)
    limits: LimitSettings = field(default_factory=LimitSettings)
    aggregator: AggregatorSettings = field(default_factory=AggregatorSettings)


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
