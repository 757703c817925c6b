from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    # CLI tests point loguru at the captured stderr; drop it afterwards.
    yield
    logger.remove()
