from __future__ import annotations

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def reset_sqlbind_logger() -> Generator[None, None, None]:
    """Undo ``configure_logging`` calls made by a test (the CLI configures logging)."""
    logger = logging.getLogger("sqlbind")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def clear_strict_driver_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SQLBIND_STRICT_DRIVER", raising=False)
