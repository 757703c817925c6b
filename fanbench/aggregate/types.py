from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

SUCCESS = "Success"
ERROR_MARKER = "Error"


@dataclass(frozen=True)
class AggregatedResult:
    source1_data: str
    source2_data: str
    source3_data: str
    status: str

    @classmethod
    def failed(cls, reason: str) -> AggregatedResult:
        return cls(ERROR_MARKER, ERROR_MARKER, ERROR_MARKER, reason)

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
