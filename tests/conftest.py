from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    # configure_logging() binds the current sys.stdout, which under capsys is a
    # per-test capture stream closed at teardown; don't leak it into later tests.
    yield
    structlog.reset_defaults()
